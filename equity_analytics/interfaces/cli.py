"""Command Line Interface for Equity Analytics.

Provides CLI access to analytics functions:
- curve: Reconstruct the daily equity curve
- stats: Show range-scoped statistics
- verify: Verify data integrity

Usage:
    python -m equity_analytics curve [--preset ytd] [--save]
    python -m equity_analytics stats [--from 2024-01-01] [--to 2024-03-31]
    python -m equity_analytics verify
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from equity_analytics import __version__
from equity_analytics.domain.dates import PRESET_NAMES, format_date, local_date, parse_date
from equity_analytics.domain.models import DateRangeFilter
from equity_analytics.infrastructure import (
    DataPaths,
    ValuationConfig,
    RepositoryError,
    JournalRepository,
    CashFlowRepository,
    SettingsRepository,
    PriceRepository,
)
from equity_analytics.application import PerformanceReportService

# Rows shown by `curve` unless --all is given
CURVE_TAIL = 15


def _date_range(args: argparse.Namespace) -> DateRangeFilter:
    """Build the window from --preset or --from/--to."""
    today = local_date(datetime.now())
    if args.preset:
        if args.start or args.end:
            raise ValueError("--preset cannot be combined with --from/--to")
        return DateRangeFilter.preset(args.preset, today)
    start = parse_date(args.start) if args.start else None
    end = parse_date(args.end) if args.end else None
    return DateRangeFilter.accept(start, end, today)


def _valuation(args: argparse.Namespace, paths: DataPaths) -> ValuationConfig | None:
    """Valuation config with command-line overrides (None = settings.json)."""
    if args.staleness_days is None and args.lookback_days is None:
        return None
    base = SettingsRepository(paths).get_valuation_config()
    return ValuationConfig(
        staleness_threshold_days=(
            args.staleness_days
            if args.staleness_days is not None
            else base.staleness_threshold_days
        ),
        lookback_days=(
            args.lookback_days if args.lookback_days is not None else base.lookback_days
        ),
    )


def _service(args: argparse.Namespace) -> PerformanceReportService:
    paths = DataPaths(root=Path(args.root))
    return PerformanceReportService(paths=paths, valuation=_valuation(args, paths))


def _fmt_pct(value: float | None) -> str:
    return "n/a" if value is None else f"{value:.1f}%"


def cmd_curve(args: argparse.Namespace) -> int:
    """Show the equity curve."""
    date_range = _date_range(args)
    service = _service(args)

    print(f"Equity Analytics v{__version__}")
    print("=" * 60)
    print(f"Range: {date_range.describe()}")

    samples = service.build_curve(date_range, use_prices=not args.no_prices)
    if not samples:
        print("No journal activity")
        return 0

    first, last = samples[0], samples[-1]
    print(f"Samples: {len(samples)}")
    print(f"Balance: {first.balance:,.2f} -> {last.balance:,.2f} "
          f"({last.balance - first.balance:+,.2f})")
    print()

    shown = samples if args.all else samples[-CURVE_TAIL:]
    print(f"{'Date':<17} {'Balance':>14} {'Realized':>12} {'Unrealized':>12} {'Cash':>10}  Tickers")
    print("-" * 80)
    for s in shown:
        when = "Now" if s.is_live else format_date(s.date)
        print(f"{when:<17} {s.balance:>14,.2f} {s.realized_pnl:>+12,.2f} "
              f"{s.unrealized_pnl:>+12,.2f} {s.cash_flow:>+10,.2f}  {s.label}")

    if args.save:
        print()
        saved = service.save_curve(
            samples,
            base_name=args.output,
            formats=tuple(args.formats.split(",")),
        )
        for path in saved:
            print(f"Saved: {path}")

    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    """Show range-scoped statistics."""
    date_range = _date_range(args)
    service = _service(args)
    stats = service.compute_stats(date_range)

    today = local_date(datetime.now())
    preset = date_range.matching_preset(today)
    label = date_range.describe()
    if preset is not None:
        label = f"{label} [{preset}]"

    print(f"[Stats] {label}")
    print("=" * 50)
    print()

    print("[Account]")
    print(f"  Starting account:     {stats.starting_account:>14,.2f}")
    print(f"  Account at start:     {stats.account_at_range_start:>14,.2f}")
    print(f"  Current account:      {stats.current_account:>14,.2f}")
    print(f"  Account change:       {stats.account_change:>+14,.2f}")
    print(f"  Net cash flow:        {stats.net_cash_flow:>+14,.2f}")
    print()

    print("[P&L]")
    print(f"  Realized P&L:         {stats.realized_pnl:>+14,.2f}")
    print(f"  Unrealized change:    {stats.unrealized_pnl_change:>+14,.2f}")
    print(f"  Total P&L:            {stats.total_pnl:>+14,.2f}")
    print(f"  Trading growth:       {stats.trading_growth:>+13.2f}%")
    print(f"  Total growth:         {stats.total_growth:>+13.2f}%")
    print()

    print("[Trades]")
    print(f"  Open positions:       {stats.open_positions:>14}")
    print(f"  Open risk:            {stats.open_risk_total:>14,.2f}")
    print(f"  Closed trades:        {stats.closed_trade_count:>14}")
    print(f"  Wins / losses:        {stats.wins:>8} / {stats.losses}")
    print(f"  Win rate:             {_fmt_pct(stats.win_rate):>14}")
    sharpe = "n/a" if stats.sharpe is None else f"{stats.sharpe:.2f}"
    print(f"  Sharpe:               {sharpe:>14}")

    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    """Verify data integrity."""
    paths = DataPaths(root=Path(args.root))

    print("[Data verification]")
    print("=" * 50)

    errors = []

    # 1. Check data files exist
    print("\n1. Checking data files...")
    missing = paths.validate()
    if missing:
        for m in missing:
            print(f"  x Missing: {m}")
            errors.append(f"Missing file: {m}")
    else:
        print("  ok Journal found")

    # 2. Journal
    print("\n2. Checking journal...")
    try:
        journal_repo = JournalRepository(paths)
        entries = journal_repo.get_all()
        holding = journal_repo.get_open()
        print(f"  Entries: {len(entries)} ({len(holding)} holding)")
        print(f"  Tickers: {len(journal_repo.list_tickers())}")
    except RepositoryError as e:
        print(f"  x Error: {e}")
        errors.append(str(e))
        entries = ()

    # 3. Cash flow and settings
    print("\n3. Checking cash flow and settings...")
    try:
        cash_repo = CashFlowRepository(paths)
        print(f"  Transactions: {len(cash_repo.get_all())} (net {cash_repo.get_net():+,.2f})")
        settings_repo = SettingsRepository(paths)
        settings = settings_repo.get_account_settings()
        valuation = settings_repo.get_valuation_config()
        print(f"  Starting account: {settings.starting_account_size:,.2f}")
        print(f"  Staleness threshold: {valuation.staleness_threshold_days} days, "
              f"lookback: {valuation.lookback_days} days")
    except RepositoryError as e:
        print(f"  x Error: {e}")
        errors.append(str(e))

    # 4. Price data
    print("\n4. Checking price data...")
    price_repo = PriceRepository(paths)
    if price_repo.has_historical_capability():
        try:
            df = price_repo.get_all()
            first, last = price_repo.get_date_range()
            print(f"  Price records: {len(df):,}")
            print(f"  Tickers: {len(price_repo.list_tickers())}")
            print(f"  Dates: {first} .. {last}")
            uncovered = sorted({e.ticker for e in entries} - set(price_repo.list_tickers()))
            if uncovered:
                print(f"  ! No closes for: {', '.join(uncovered)}")
        except RepositoryError as e:
            print(f"  x Error: {e}")
            errors.append(str(e))
    else:
        print("  ! No historical prices (live quotes only)")

    try:
        quotes = price_repo.get_live_quotes()
        print(f"  Live quotes: {len(quotes)}")
    except RepositoryError as e:
        print(f"  x Error: {e}")
        errors.append(str(e))

    # Summary
    print("\n" + "=" * 50)
    if errors:
        print(f"Found {len(errors)} problem(s)")
        return 1
    else:
        print("All checks passed")
        return 0


def _add_range_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--from", dest="start", help="First day (YYYY-MM-DD)")
    parser.add_argument("--to", dest="end", help="Last day (YYYY-MM-DD)")
    parser.add_argument(
        "--preset",
        choices=PRESET_NAMES,
        help="Named range (max, ytd, 30, 90, 365)",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        prog="equity_analytics",
        description="Equity Analytics - Equity Curve and Trading Statistics",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--root",
        default=".",
        help="Project root containing the data/ directory",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--staleness-days",
        type=int,
        help="Override the historical price staleness threshold",
    )
    parser.add_argument(
        "--lookback-days",
        type=int,
        help="Override the historical price lookback window",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # curve command
    curve_parser = subparsers.add_parser("curve", help="Show the equity curve")
    _add_range_args(curve_parser)
    curve_parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output filename (without extension)",
    )
    curve_parser.add_argument(
        "-f", "--formats",
        default="csv,parquet",
        help="Output formats (comma-separated)",
    )
    curve_parser.add_argument(
        "--save",
        action="store_true",
        help="Save output files",
    )
    curve_parser.add_argument(
        "--no-prices",
        action="store_true",
        help="Realized-only curve without price data",
    )
    curve_parser.add_argument(
        "--all",
        action="store_true",
        help="Show every sample instead of the tail",
    )

    # stats command
    stats_parser = subparsers.add_parser("stats", help="Show statistics")
    _add_range_args(stats_parser)

    # verify command
    subparsers.add_parser("verify", help="Verify data integrity")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "curve": cmd_curve,
        "stats": cmd_stats,
        "verify": cmd_verify,
    }

    try:
        return commands[args.command](args)
    except (RepositoryError, ValueError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
