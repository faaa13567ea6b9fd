"""Unit tests for application/services/report.py.

Tests verify:
1. The service wires repositories, resolver and services together
2. Curve export matches the curve samples
3. Valuation settings are picked up from settings.json
"""

import json

import polars as pl
import pytest

from equity_analytics.application import PerformanceReportService
from equity_analytics.domain.models import DateRangeFilter
from equity_analytics.infrastructure import DataPaths, RepositoryError, ValuationConfig

from conftest import NOW, day


@pytest.fixture
def service(data_root):
    return PerformanceReportService(paths=DataPaths(root=data_root), clock=lambda: NOW)


class TestSnapshot:
    """Tests for load_snapshot."""

    def test_load(self, service):
        snapshot = service.load_snapshot()

        assert len(snapshot.entries) == 2
        assert len(snapshot.cash_flows) == 1
        assert snapshot.settings.starting_account_size == 10_000.0
        assert snapshot.is_empty is False

    def test_missing_journal(self, tmp_path):
        service = PerformanceReportService(paths=DataPaths(root=tmp_path))
        with pytest.raises(RepositoryError):
            service.load_snapshot()


class TestCurve:
    """Tests for build_curve."""

    def test_build(self, service):
        samples = service.build_curve()

        assert len(samples) == 11
        day_ten = samples[9]
        assert day_ten.date.date() == day(10)
        # 10,000 + 500 realized + 2,000 deposit + 500 unrealized
        assert day_ten.balance == pytest.approx(13_000.0)
        assert samples[-1].is_live
        assert samples[-1].balance == pytest.approx(13_000.0)

    def test_range(self, service):
        samples = service.build_curve(DateRangeFilter(start=day(6), end=day(8)))

        assert [s.date.date() for s in samples] == [day(6), day(7), day(8)]
        assert samples[0].balance == pytest.approx(11_000.0)
        assert samples[-1].balance == pytest.approx(13_000.0)

    def test_without_prices(self, service):
        samples = service.build_curve(use_prices=False)

        assert len(samples) == 1
        assert samples[0].balance == pytest.approx(10_500.0)
        assert samples[0].tickers == ("MSFT",)


class TestStats:
    """Tests for compute_stats."""

    def test_range_stats(self, service):
        stats = service.compute_stats(DateRangeFilter(start=day(1), end=day(10)))

        assert stats.realized_pnl == pytest.approx(500.0)
        assert stats.total_pnl == pytest.approx(1_000.0)
        assert stats.net_cash_flow == pytest.approx(2_000.0)
        assert stats.total_growth == pytest.approx(30.0)
        assert stats.current_account == pytest.approx(13_000.0)


class TestValuationSettings:
    """Tests for valuation configuration."""

    def test_defaults(self, service):
        assert service.valuation == ValuationConfig()

    def test_from_settings_file(self, data_root):
        (data_root / "data" / "settings.json").write_text(json.dumps({
            "startingAccountSize": 10_000,
            "valuation": {"stalenessThresholdDays": 1, "lookbackDays": 0},
        }))
        service = PerformanceReportService(paths=DataPaths(root=data_root))

        resolver = service.make_resolver()
        assert resolver.staleness_threshold_days == 1
        assert resolver.lookback_days == 0

    def test_explicit_config_wins(self, data_root):
        config = ValuationConfig(staleness_threshold_days=5, lookback_days=10)
        service = PerformanceReportService(paths=DataPaths(root=data_root), valuation=config)
        assert service.make_resolver().lookback_days == 10


class TestExport:
    """Tests for curve export."""

    def test_curve_to_frame(self, service):
        samples = service.build_curve()
        df = service.curve_to_frame(samples)

        assert df.columns == PerformanceReportService.CURVE_COLUMNS
        assert len(df) == len(samples)
        assert df["tickers"].to_list()[-1] == "Now"
        assert df["is_live"].sum() == 1

    def test_empty_frame(self, service):
        df = service.curve_to_frame([])
        assert len(df) == 0
        assert df.columns == PerformanceReportService.CURVE_COLUMNS

    def test_save(self, service, tmp_path):
        samples = service.build_curve()
        saved = service.save_curve(samples, base_name=str(tmp_path / "out" / "curve"))

        assert [p.name for p in saved] == ["curve.csv", "curve.parquet"]
        assert all(p.exists() for p in saved)
        assert len(pl.read_parquet(saved[1])) == len(samples)
        assert len(pl.read_csv(saved[0])) == len(samples)

    def test_save_default_location(self, service, data_root):
        saved = service.save_curve(service.build_curve(), formats=("csv",))
        assert saved == [data_root / "data" / "derived" / "equity_curve.csv"]
        assert saved[0].exists()

    def test_unknown_format(self, service):
        with pytest.raises(ValueError, match="Unknown format"):
            service.save_curve(service.build_curve(), formats=("xlsx",))
