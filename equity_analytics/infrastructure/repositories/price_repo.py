"""Price Repository: Access to close prices and live quotes.

Provides read access to:
- data/price/close_prices.parquet (ticker, date, close_price)
- data/price/live_quotes.json ({ticker: price} or {ticker: {"price": ...}})

Both implement the PriceSource interface used by PriceResolver. Historical
capability exists only when the close-price file exists.
"""

import logging
from datetime import date
from typing import Iterable

import polars as pl

from equity_analytics.domain.pricing import PriceSource, PriceSourceError
from equity_analytics.infrastructure.config import DataPaths, DEFAULT_PATHS
from equity_analytics.infrastructure.repositories.base import (
    Repository,
    RepositoryError,
    read_json,
)

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("ticker", "date", "close_price")


class PriceRepository(Repository[pl.DataFrame], PriceSource):
    """Repository for close prices and live quotes.

    Example:
        >>> repo = PriceRepository()
        >>> repo.prefetch(["AAPL", "MSFT"])
        >>> repo.get_historical_price("AAPL", date(2024, 3, 1))
        179.66
    """

    def __init__(self, paths: DataPaths = DEFAULT_PATHS):
        self._paths = paths
        self._cache: pl.DataFrame | None = None
        self._lookup_cache: dict[tuple[str, date], float] = {}
        self._loaded_tickers: set[str] = set()
        self._quote_cache: dict[str, float] | None = None

    # --- Historical closes ---

    def get_all(self) -> pl.DataFrame:
        """Load all close prices.

        Returns:
            DataFrame with columns: ticker, date (Date), close_price
            sorted by ticker, date

        Raises:
            RepositoryError: If file cannot be read
        """
        if self._cache is not None:
            return self._cache

        path = self._paths.close_prices
        if not path.exists():
            raise RepositoryError("Price file not found", str(path))

        try:
            df = pl.read_parquet(path)
        except Exception as e:
            raise RepositoryError(f"Failed to read prices: {e}", str(path))

        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise RepositoryError(f"Missing required columns: {missing}", str(path))

        date_type = df.schema["date"]
        if date_type == pl.Utf8:
            df = df.with_columns(pl.col("date").str.to_date("%Y-%m-%d"))
        elif date_type == pl.Datetime:
            df = df.with_columns(pl.col("date").dt.date())

        self._cache = (
            df.select(REQUIRED_COLUMNS)
            .drop_nulls("close_price")
            .sort(["ticker", "date"])
        )
        return self._cache

    def has_historical_capability(self) -> bool:
        """Historical closes are available when the price file exists."""
        return self._paths.close_prices.exists()

    def prefetch(self, tickers: Iterable[str]) -> None:
        """Build the (ticker, date) lookup for a batch of tickers.

        Raises:
            PriceSourceError: If the price file cannot be loaded
        """
        pending = [t for t in tickers if t not in self._loaded_tickers]
        if not pending:
            return

        try:
            df = self.get_all()
        except RepositoryError as e:
            raise PriceSourceError(str(e)) from e

        batch = df.filter(pl.col("ticker").is_in(pending))
        for row in batch.iter_rows(named=True):
            self._lookup_cache[(row["ticker"], row["date"])] = row["close_price"]
        self._loaded_tickers.update(pending)

        logger.debug("Loaded %d close prices for %d tickers", len(batch), len(pending))

    def get_historical_price(self, ticker: str, on: date) -> float | None:
        """Close price for a ticker on exactly this day.

        Tickers not prefetched are loaded on first access; a load failure
        is logged and treated as "no data".
        """
        if ticker not in self._loaded_tickers:
            try:
                self.prefetch([ticker])
            except PriceSourceError as e:
                logger.warning("No historical prices for %s: %s", ticker, e)
                self._loaded_tickers.add(ticker)
        return self._lookup_cache.get((ticker, on))

    def list_tickers(self) -> list[str]:
        """Get list of all tickers with price data."""
        return self.get_all()["ticker"].unique().sort().to_list()

    def get_date_range(self) -> tuple[date, date]:
        """Get min and max dates in price data.

        Returns:
            Tuple of (min_date, max_date)
        """
        df = self.get_all()
        return df["date"].min(), df["date"].max()

    # --- Live quotes ---

    def get_live_quotes(self) -> dict[str, float]:
        """Load live quotes.

        Returns:
            Dict mapping ticker to latest price (empty if no quote file)

        Raises:
            RepositoryError: If the quote file exists but cannot be parsed
        """
        if self._quote_cache is not None:
            return self._quote_cache

        path = self._paths.live_quotes
        if not path.exists():
            self._quote_cache = {}
            return self._quote_cache

        data = read_json(path, "Live quotes")
        if not isinstance(data, dict):
            raise RepositoryError("Live quotes must be a JSON object", str(path))

        quotes: dict[str, float] = {}
        for ticker, value in data.items():
            price = value.get("price") if isinstance(value, dict) else value
            if price is None:
                continue
            try:
                quotes[ticker] = float(price)
            except (TypeError, ValueError):
                raise RepositoryError(f"Invalid quote for {ticker}: {price!r}", str(path))

        self._quote_cache = quotes
        return self._quote_cache

    def get_current_price(self, ticker: str) -> float | None:
        """Latest live quote; an unreadable quote file counts as no quotes."""
        try:
            return self.get_live_quotes().get(ticker)
        except RepositoryError as e:
            logger.warning("Live quotes unavailable: %s", e)
            self._quote_cache = {}
            return None

    def clear_cache(self) -> None:
        """Clear cached data."""
        self._cache = None
        self._lookup_cache = {}
        self._loaded_tickers = set()
        self._quote_cache = None


class StaticPriceSource(PriceSource):
    """In-memory price source.

    Useful for tests and for callers that already hold prices.

    Example:
        >>> source = StaticPriceSource(
        ...     historical={("AAPL", date(2024, 3, 1)): 179.66},
        ...     current={"AAPL": 182.10},
        ... )
    """

    def __init__(
        self,
        historical: dict[tuple[str, date], float] | None = None,
        current: dict[str, float] | None = None,
        historical_enabled: bool | None = None,
    ):
        """Initialize the source.

        Args:
            historical: Close prices keyed by (ticker, date)
            current: Live quotes keyed by ticker
            historical_enabled: Override for has_historical_capability()
                (defaults to whether any historical prices were given)
        """
        self._historical = dict(historical or {})
        self._current = dict(current or {})
        if historical_enabled is None:
            historical_enabled = bool(self._historical)
        self._historical_enabled = historical_enabled
        self.prefetched: list[str] = []

    def get_current_price(self, ticker: str) -> float | None:
        return self._current.get(ticker)

    def get_historical_price(self, ticker: str, on: date) -> float | None:
        return self._historical.get((ticker, on))

    def has_historical_capability(self) -> bool:
        return self._historical_enabled

    def prefetch(self, tickers: Iterable[str]) -> None:
        self.prefetched.extend(tickers)
