"""Configuration: Where the journal data lives and how prices are resolved.

- DataPaths: Locations of the journal, cash flow, settings and price files
- ValuationConfig: Staleness and lookback windows for PriceResolver

Directory Structure:
    data/
    ├── journal.json             # Trade journal entries
    ├── cash_flow.json           # Deposits and withdrawals
    ├── settings.json            # Starting account size, valuation overrides
    ├── price/
    │   ├── close_prices.parquet # Historical closes (ticker, date, close_price)
    │   └── live_quotes.json     # Current quotes {ticker: price}
    └── derived/                 # Exported results
        └── equity_curve.parquet
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DataPaths:
    """Locations of every file the repositories read or write.

    Attributes:
        root: Directory holding data/ (the project root by default)
    """

    root: Path = Path(".")

    # --- Directories ---

    @property
    def data_dir(self) -> Path:
        """Root of all journal data."""
        return self.root / "data"

    @property
    def price_dir(self) -> Path:
        """Close prices and live quotes."""
        return self.data_dir / "price"

    @property
    def derived_dir(self) -> Path:
        """Exported results."""
        return self.data_dir / "derived"

    # --- Files ---

    @property
    def journal(self) -> Path:
        """Trade journal entries (JSON)."""
        return self.data_dir / "journal.json"

    @property
    def cash_flow(self) -> Path:
        """Cash-flow transactions (JSON)."""
        return self.data_dir / "cash_flow.json"

    @property
    def settings(self) -> Path:
        """Account settings (JSON)."""
        return self.data_dir / "settings.json"

    @property
    def close_prices(self) -> Path:
        """Historical close prices for all tickers."""
        return self.price_dir / "close_prices.parquet"

    @property
    def live_quotes(self) -> Path:
        """Latest live quotes (JSON)."""
        return self.price_dir / "live_quotes.json"

    @property
    def equity_curve(self) -> Path:
        """Exported equity curve (base name, extension added on save)."""
        return self.derived_dir / "equity_curve"

    # --- Helper Methods ---

    def validate(self) -> list[str]:
        """List required paths that do not exist.

        Only the journal is required; cash flow, settings and prices
        are optional.

        Returns:
            Missing paths as strings (empty when the journal is present)
        """
        missing = []

        if not self.data_dir.exists():
            missing.append(str(self.data_dir))
        if not self.journal.exists():
            missing.append(str(self.journal))

        return missing

    def ensure_dirs(self) -> None:
        """Create data/, price/ and derived/ if absent."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.price_dir.mkdir(parents=True, exist_ok=True)
        self.derived_dir.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class ValuationConfig:
    """Configuration for price resolution.

    Attributes:
        staleness_threshold_days: Max age of a historical close that is
            trusted over a live quote
        lookback_days: Days searched backwards for a historical close
    """

    staleness_threshold_days: int = 2
    lookback_days: int = 7

    def __post_init__(self) -> None:
        if self.staleness_threshold_days < 0:
            raise ValueError(
                f"staleness_threshold_days must be non-negative, got: {self.staleness_threshold_days}"
            )
        if self.lookback_days < 0:
            raise ValueError(f"lookback_days must be non-negative, got: {self.lookback_days}")

    @classmethod
    def from_dict(cls, data: dict | None) -> ValuationConfig:
        """Build from a settings.json "valuation" block (camelCase keys)."""
        if not data:
            return cls()
        defaults = cls()
        return cls(
            staleness_threshold_days=int(
                data.get("stalenessThresholdDays", defaults.staleness_threshold_days)
            ),
            lookback_days=int(data.get("lookbackDays", defaults.lookback_days)),
        )


# Defaults (current working directory, stock thresholds)
DEFAULT_PATHS = DataPaths()
DEFAULT_VALUATION = ValuationConfig()
