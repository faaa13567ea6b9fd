"""Unit tests for interfaces/cli.py.

Tests verify:
1. CLI commands execute without errors
2. Output format is correct
3. Error handling works properly
"""

import pytest

from equity_analytics.interfaces.cli import main


class TestCliBasic:
    """Basic CLI tests."""

    def test_version(self, capsys):
        """--version should show version."""
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0

    def test_help(self, capsys):
        """No command should show help."""
        result = main([])
        assert result == 0

    def test_invalid_command(self):
        """Invalid command should fail."""
        with pytest.raises(SystemExit):
            main(["invalid_command"])

    def test_invalid_preset(self):
        with pytest.raises(SystemExit):
            main(["stats", "--preset", "7"])


class TestVerifyCommand:
    """Tests for verify command."""

    def test_verify_passes(self, data_root, capsys):
        result = main(["--root", str(data_root), "verify"])
        assert result == 0

        captured = capsys.readouterr()
        assert "Data verification" in captured.out
        assert "Entries: 2 (1 holding)" in captured.out
        assert "No closes for: MSFT" in captured.out
        assert "All checks passed" in captured.out

    def test_verify_missing_data(self, tmp_path, capsys):
        result = main(["--root", str(tmp_path), "verify"])
        assert result == 1

        captured = capsys.readouterr()
        assert "Missing" in captured.out


class TestCurveCommand:
    """Tests for curve command."""

    def test_curve(self, data_root, capsys):
        result = main([
            "--root", str(data_root),
            "curve", "--from", "2024-01-01", "--to", "2024-01-10",
        ])
        assert result == 0

        captured = capsys.readouterr()
        assert "Samples: 10" in captured.out
        assert "10,000.00 -> 13,000.00" in captured.out
        assert "2024-01-10" in captured.out
        assert "MSFT" in captured.out

    def test_curve_save(self, data_root, capsys):
        result = main([
            "--root", str(data_root),
            "curve", "--to", "2024-01-10", "--save", "--formats", "csv",
        ])
        assert result == 0
        assert (data_root / "data" / "derived" / "equity_curve.csv").exists()

    def test_curve_without_prices(self, data_root, capsys):
        result = main(["--root", str(data_root), "curve", "--no-prices"])
        assert result == 0
        assert "Samples: 1" in capsys.readouterr().out

    def test_curve_help(self):
        with pytest.raises(SystemExit) as exc:
            main(["curve", "--help"])
        assert exc.value.code == 0


class TestStatsCommand:
    """Tests for stats command."""

    def test_stats(self, data_root, capsys):
        result = main([
            "--root", str(data_root),
            "stats", "--from", "2024-01-01", "--to", "2024-01-10",
        ])
        assert result == 0

        captured = capsys.readouterr()
        assert "Jan 1, 2024 - Jan 10, 2024" in captured.out
        assert "+1,000.00" in captured.out
        assert "+30.00%" in captured.out
        assert "Account change:" in captured.out
        assert "+3,000.00" in captured.out
        assert "100.0%" in captured.out

    def test_stats_override_valuation(self, data_root, capsys):
        result = main([
            "--root", str(data_root),
            "--staleness-days", "1", "--lookback-days", "3",
            "stats", "--from", "2024-01-01", "--to", "2024-01-10",
        ])
        assert result == 0

    def test_reversed_range(self, data_root, capsys):
        result = main([
            "--root", str(data_root),
            "stats", "--from", "2024-02-01", "--to", "2024-01-01",
        ])
        assert result == 1
        assert "Error" in capsys.readouterr().out

    def test_preset_with_dates(self, data_root, capsys):
        result = main([
            "--root", str(data_root),
            "stats", "--preset", "ytd", "--from", "2024-01-01",
        ])
        assert result == 1
        assert "--preset cannot be combined" in capsys.readouterr().out

    def test_bad_date(self, data_root, capsys):
        result = main(["--root", str(data_root), "stats", "--from", "01/02/2024"])
        assert result == 1
        assert "YYYY-MM-DD" in capsys.readouterr().out

    def test_missing_journal(self, tmp_path, capsys):
        result = main(["--root", str(tmp_path), "stats"])
        assert result == 1
        assert "Journal not found" in capsys.readouterr().out
