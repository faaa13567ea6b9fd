"""Price Resolution: Tiered historical/live price lookup.

Resolution policy for resolve(ticker, on):

    1. Historical close on `on`, else the nearest earlier close within
       `lookback_days` (default 7).
    2. If that close is at most `staleness_threshold_days` old (default 2),
       it is authoritative.
    3. If it is older ("stale"), a live quote is preferred when one exists;
       otherwise the stale close is used.
    4. With no historical data at all, the live quote is used.
    5. Nothing found -> None. Callers exclude the position from valuation;
       a missing price is never treated as a zero price.

Live quotes describe the current moment only, so a fresh historical close
always wins over them for past days.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date, timedelta
from typing import Callable, Iterable

from equity_analytics.domain.models import PricePoint

logger = logging.getLogger(__name__)

DEFAULT_STALENESS_THRESHOLD_DAYS = 2
DEFAULT_LOOKBACK_DAYS = 7


class PriceSourceError(Exception):
    """Raised by a price source that cannot deliver historical data."""


class PriceSource(ABC):
    """Abstract provider of historical closes and live quotes."""

    @abstractmethod
    def get_current_price(self, ticker: str) -> float | None:
        """Latest live quote for a ticker, or None."""
        pass

    @abstractmethod
    def get_historical_price(self, ticker: str, on: date) -> float | None:
        """Close price for a ticker on exactly this day, or None."""
        pass

    @abstractmethod
    def has_historical_capability(self) -> bool:
        """Whether historical closes are available at all."""
        pass

    def prefetch(self, tickers: Iterable[str]) -> None:
        """Load historical data for these tickers in one batch.

        Raises:
            PriceSourceError: If the underlying data cannot be loaded
        """
        return None


class PriceResolver:
    """Resolves a price for (ticker, date) with historical/live fallback.

    Example:
        >>> resolver = PriceResolver(source)
        >>> point = resolver.resolve("AAPL", date(2024, 3, 1))
        >>> point.price if point else None
    """

    def __init__(
        self,
        source: PriceSource,
        staleness_threshold_days: int = DEFAULT_STALENESS_THRESHOLD_DAYS,
        lookback_days: int = DEFAULT_LOOKBACK_DAYS,
        clock: Callable[[], date] = date.today,
    ):
        """Initialize the resolver.

        Args:
            source: Price provider
            staleness_threshold_days: Max age (days) of a trusted historical close
            lookback_days: How many days before the request to search for a close
            clock: Returns today's date (stamped on live prices)
        """
        if staleness_threshold_days < 0:
            raise ValueError(
                f"staleness_threshold_days must be non-negative, got: {staleness_threshold_days}"
            )
        if lookback_days < 0:
            raise ValueError(f"lookback_days must be non-negative, got: {lookback_days}")

        self._source = source
        self._staleness_threshold_days = staleness_threshold_days
        self._lookback_days = lookback_days
        self._clock = clock
        self._historical_enabled = True

    @property
    def staleness_threshold_days(self) -> int:
        return self._staleness_threshold_days

    @property
    def lookback_days(self) -> int:
        return self._lookback_days

    @property
    def has_historical(self) -> bool:
        """Whether historical closes can be used by this resolver."""
        return self._historical_enabled and self._source.has_historical_capability()

    def prepare(self, tickers: Iterable[str]) -> None:
        """Batch-load historical prices before day-by-day valuation.

        A failing price source disables historical lookups until the next
        prepare() call; valuation in between runs on live quotes.
        """
        self._historical_enabled = True
        if not self.has_historical:
            return

        unique = sorted({t for t in tickers if t})
        if not unique:
            return

        try:
            self._source.prefetch(unique)
        except PriceSourceError as e:
            logger.warning("Historical price fetch failed, using live quotes only: %s", e)
            self._historical_enabled = False
            return
        logger.debug("Prefetched historical prices for %d tickers", len(unique))

    def find_historical(self, ticker: str, on: date) -> PricePoint | None:
        """Nearest historical close at or before `on` within the lookback window."""
        if not self.has_historical:
            return None

        for days_back in range(self._lookback_days + 1):
            source_date = on - timedelta(days=days_back)
            price = self._source.get_historical_price(ticker, source_date)
            if price:
                return PricePoint(price=price, source_date=source_date, source="historical")
        return None

    def live(self, ticker: str) -> PricePoint | None:
        """Current live quote as a PricePoint."""
        price = self._source.get_current_price(ticker)
        if not price:
            return None
        return PricePoint(price=price, source_date=self._clock(), source="live")

    def resolve(
        self,
        ticker: str,
        on: date,
        prefer_historical: bool = True,
    ) -> PricePoint | None:
        """Resolve a price for a ticker on a day.

        Args:
            ticker: Symbol
            on: Requested calendar day
            prefer_historical: False asks for the current valuation
                (live quote first, historical close as fallback)

        Returns:
            PricePoint, or None if no price can be found by any path
        """
        if not prefer_historical:
            point = self.live(ticker) or self.find_historical(ticker, on)
            if point is None:
                logger.debug("%s: no live or historical price", ticker)
            return point

        historical = self.find_historical(ticker, on)
        if historical is None:
            point = self.live(ticker)
            if point is None:
                logger.debug("%s %s: no price available", ticker, on)
            return point

        days_diff = historical.age_days(on)
        if days_diff <= self._staleness_threshold_days:
            return historical

        live = self.live(ticker)
        if live is not None:
            logger.debug(
                "%s %s: close from %s is %d days old, using live quote",
                ticker, on, historical.source_date, days_diff,
            )
            return live

        logger.debug(
            "%s %s: falling back to stale close from %s",
            ticker, on, historical.source_date,
        )
        return historical

    def resolve_price(
        self,
        ticker: str,
        on: date,
        prefer_historical: bool = True,
    ) -> float | None:
        """Like resolve(), returning only the price."""
        point = self.resolve(ticker, on, prefer_historical=prefer_historical)
        return point.price if point is not None else None
