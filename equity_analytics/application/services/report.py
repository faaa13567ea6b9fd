"""Report Service: Load an account snapshot and produce curve and stats.

Orchestrates the full reporting flow:
1. Load journal, cash flow, settings and prices via repositories
2. Build the equity curve and/or the stats snapshot
3. Export the curve to various formats (CSV, Parquet)

This service coordinates repositories and domain logic; the curve and
stats computations themselves stay pure functions of the loaded snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Sequence

import polars as pl

from equity_analytics.application.services.equity_curve import EquityCurveBuilder
from equity_analytics.application.services.stats import StatsCalculator
from equity_analytics.domain.dates import local_date
from equity_analytics.domain.models import (
    AccountSettings,
    CashFlowTransaction,
    DateRangeFilter,
    EquityCurveSample,
    JournalEntry,
    StatsSnapshot,
)
from equity_analytics.domain.pricing import PriceResolver
from equity_analytics.infrastructure import (
    DataPaths,
    DEFAULT_PATHS,
    ValuationConfig,
    JournalRepository,
    CashFlowRepository,
    SettingsRepository,
    PriceRepository,
)


# =============================================================================
# Snapshot
# =============================================================================

@dataclass(frozen=True, slots=True)
class AccountSnapshot:
    """Immutable view of everything one computation pass reads."""
    entries: tuple[JournalEntry, ...]
    cash_flows: tuple[CashFlowTransaction, ...]
    settings: AccountSettings

    @property
    def is_empty(self) -> bool:
        return not self.entries and not self.cash_flows


# =============================================================================
# Report Service
# =============================================================================

class PerformanceReportService:
    """Service for equity curve and statistics reports.

    Example:
        >>> service = PerformanceReportService()
        >>> samples = service.build_curve(DateRangeFilter.preset("ytd", date.today()))
        >>> service.save_curve(samples, formats=("csv",))
    """

    # Column order for curve output
    CURVE_COLUMNS = [
        "date",
        "balance",
        "realized_pnl",
        "cash_flow",
        "unrealized_pnl",
        "tickers",
        "is_live",
    ]

    def __init__(
        self,
        paths: DataPaths = DEFAULT_PATHS,
        valuation: ValuationConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize the service.

        Args:
            paths: Data paths configuration
            valuation: Valuation config (settings.json overrides when not provided)
            clock: Returns the current instant
        """
        self._paths = paths
        self._clock = clock

        # Initialize repositories
        self._journal_repo = JournalRepository(paths)
        self._cash_flow_repo = CashFlowRepository(paths)
        self._settings_repo = SettingsRepository(paths)
        self._price_repo = PriceRepository(paths)

        self._valuation = valuation

    @property
    def valuation(self) -> ValuationConfig:
        """Effective valuation config."""
        if self._valuation is None:
            self._valuation = self._settings_repo.get_valuation_config()
        return self._valuation

    def load_snapshot(self) -> AccountSnapshot:
        """Load a fresh snapshot of the account.

        Raises:
            RepositoryError: If any source cannot be read
        """
        self._journal_repo.clear_cache()
        self._cash_flow_repo.clear_cache()
        self._settings_repo.clear_cache()

        return AccountSnapshot(
            entries=self._journal_repo.get_all(),
            cash_flows=self._cash_flow_repo.get_all(),
            settings=self._settings_repo.get_account_settings(),
        )

    def make_resolver(self) -> PriceResolver:
        """Price resolver over the price repository with the valuation config."""
        config = self.valuation
        return PriceResolver(
            self._price_repo,
            staleness_threshold_days=config.staleness_threshold_days,
            lookback_days=config.lookback_days,
            clock=lambda: local_date(self._clock()),
        )

    def build_curve(
        self,
        date_range: DateRangeFilter | None = None,
        use_prices: bool = True,
        snapshot: AccountSnapshot | None = None,
    ) -> list[EquityCurveSample]:
        """Build the equity curve.

        Args:
            date_range: Displayed window
            use_prices: False builds the realized-only curve
            snapshot: Pre-loaded snapshot (loaded fresh if not provided)

        Returns:
            Curve samples in chronological order
        """
        snapshot = snapshot or self.load_snapshot()
        builder = EquityCurveBuilder(self.make_resolver(), clock=self._clock)
        starting = snapshot.settings.starting_account_size

        if not use_prices:
            return builder.build_realized_only(snapshot.entries, starting, date_range)
        return builder.build(snapshot.entries, snapshot.cash_flows, starting, date_range)

    def compute_stats(
        self,
        date_range: DateRangeFilter | None = None,
        snapshot: AccountSnapshot | None = None,
    ) -> StatsSnapshot:
        """Compute the stats snapshot for a window."""
        snapshot = snapshot or self.load_snapshot()
        calculator = StatsCalculator(self.make_resolver(), clock=self._clock)
        return calculator.compute(
            snapshot.entries, snapshot.cash_flows, snapshot.settings, date_range
        )

    def curve_to_frame(self, samples: Sequence[EquityCurveSample]) -> pl.DataFrame:
        """Convert curve samples to a DataFrame."""
        if not samples:
            return pl.DataFrame(
                schema={
                    "date": pl.Datetime,
                    "balance": pl.Float64,
                    "realized_pnl": pl.Float64,
                    "cash_flow": pl.Float64,
                    "unrealized_pnl": pl.Float64,
                    "tickers": pl.Utf8,
                    "is_live": pl.Boolean,
                }
            )
        df = pl.DataFrame([s.to_dict() for s in samples])
        return df.select(self.CURVE_COLUMNS)

    def save_curve(
        self,
        samples: Sequence[EquityCurveSample],
        base_name: str | None = None,
        formats: tuple[str, ...] = ("csv", "parquet"),
    ) -> list[Path]:
        """Save curve to specified formats.

        Args:
            samples: Curve samples
            base_name: Base filename without extension (defaults to
                data/derived/equity_curve)
            formats: Output formats ("csv", "parquet")

        Returns:
            List of saved file paths
        """
        df = self.curve_to_frame(samples)
        base = Path(base_name) if base_name else self._paths.equity_curve
        base.parent.mkdir(parents=True, exist_ok=True)
        saved = []

        for fmt in formats:
            path = base.parent / f"{base.name}.{fmt}"

            if fmt == "csv":
                df.write_csv(path)
            elif fmt == "parquet":
                df.write_parquet(path)
            else:
                raise ValueError(f"Unknown format: {fmt}")

            saved.append(path)

        return saved
