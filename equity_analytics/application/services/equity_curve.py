"""Equity Curve Service: Day-by-day account balance reconstruction.

Walks every calendar day from the first day to the end day and emits one
sample per day:

    realized_balance[d] = opening_balance
                        + Σ realized P&L booked on days first..d
                        + Σ cash flow on days first..d
    balance[d]          = realized_balance[d] + unrealized P&L on d

With a range start, the opening balance is the balance before that day
(strictly-before accounting), so a narrowed window continues the true
account path instead of restarting at the starting balance.

Realized P&L, cash flow and open positions always come from the full ledger;
a date range only narrows the displayed window.

When the window reaches today, a final live-priced "now" sample is
appended for accounts that still hold positions.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Sequence

from equity_analytics.domain.dates import day_range, local_date, start_of_day
from equity_analytics.domain.ledger import (
    balance_before,
    cash_flow_by_day,
    filter_by_range,
    holding_entries,
    realized_pnl_by_day,
)
from equity_analytics.domain.models import (
    CashFlowTransaction,
    DateRangeFilter,
    EquityCurveSample,
    JournalEntry,
)
from equity_analytics.domain.pricing import PriceResolver
from equity_analytics.domain.valuation import live_unrealized_pnl, unrealized_pnl_at

logger = logging.getLogger(__name__)


class EquityCurveBuilder:
    """Builds the daily equity curve for an account.

    Each build() call works from its own local accumulators; abandoning a
    build leaves nothing behind that could affect the next one.

    Example:
        >>> builder = EquityCurveBuilder(PriceResolver(source))
        >>> samples = builder.build(entries, cash_flows, 10_000.0)
        >>> samples[-1].balance
    """

    def __init__(
        self,
        resolver: PriceResolver,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize the builder.

        Args:
            resolver: Price resolver for unrealized P&L
            clock: Returns the current instant ("today" and the "now" sample)
        """
        self._resolver = resolver
        self._clock = clock

    def build(
        self,
        entries: Sequence[JournalEntry],
        cash_flows: Sequence[CashFlowTransaction],
        starting_balance: float,
        date_range: DateRangeFilter | None = None,
    ) -> list[EquityCurveSample]:
        """Reconstruct the equity curve.

        Args:
            entries: Full (unfiltered) ledger snapshot
            cash_flows: Full cash-flow log
            starting_balance: Balance before any ledger activity
            date_range: Displayed window (None = first entry through today)

        Returns:
            Samples in chronological order, one per calendar day, plus an
            optional final "now" sample. Empty for an empty ledger.
        """
        entries = tuple(entries)
        cash_flows = tuple(cash_flows)
        date_range = date_range or DateRangeFilter.all_time()

        now = self._clock()
        today = local_date(now)

        first_date = self._first_date(entries, cash_flows, date_range)
        if first_date is None:
            return []
        end_date = date_range.end or today

        if date_range.start is not None:
            opening_balance = balance_before(
                first_date, entries, cash_flows, starting_balance
            )
        else:
            opening_balance = starting_balance
        realized_by_day = realized_pnl_by_day(entries)
        cash_by_day = cash_flow_by_day(cash_flows)

        self._resolver.prepare(e.ticker for e in entries)

        samples: list[EquityCurveSample] = []
        realized_balance = opening_balance

        for day in day_range(first_date, end_date):
            day_trades = realized_by_day.get(day, [])
            day_pnl = sum(t.realized_pnl for t in day_trades)
            day_cash = cash_by_day.get(day, 0.0)
            realized_balance += day_pnl + day_cash

            unrealized = unrealized_pnl_at(entries, day, self._resolver)

            samples.append(EquityCurveSample(
                date=start_of_day(day),
                balance=realized_balance + unrealized,
                realized_pnl=day_pnl,
                cash_flow=day_cash,
                unrealized_pnl=unrealized,
                tickers=tuple(t.ticker for t in day_trades),
            ))

        if end_date >= today:
            holding = holding_entries(entries)
            if holding:
                live = live_unrealized_pnl(holding, self._resolver, today)
                samples.append(EquityCurveSample(
                    date=now,
                    balance=realized_balance + live,
                    realized_pnl=0.0,
                    unrealized_pnl=live,
                    is_live=True,
                ))

        logger.info(
            "Built equity curve %s..%s: %d samples, opening balance %.2f",
            first_date, end_date, len(samples), opening_balance,
        )
        return samples

    def build_realized_only(
        self,
        entries: Sequence[JournalEntry],
        starting_balance: float,
        date_range: DateRangeFilter | None = None,
    ) -> list[EquityCurveSample]:
        """Realized-only curve, for use without any price data.

        One sample per day with realized activity among the entries opened
        inside the window; no unrealized P&L and no cash flow.

        Args:
            entries: Ledger snapshot
            starting_balance: Balance the curve starts from
            date_range: Entry filter (None = all entries)

        Returns:
            Samples in chronological order
        """
        filtered = filter_by_range(entries, date_range)
        by_day = realized_pnl_by_day(filtered)

        balance = starting_balance
        samples = []
        for day in sorted(by_day):
            day_trades = by_day[day]
            day_pnl = sum(t.realized_pnl for t in day_trades)
            balance += day_pnl
            samples.append(EquityCurveSample(
                date=start_of_day(day),
                balance=balance,
                realized_pnl=day_pnl,
                unrealized_pnl=0.0,
                tickers=tuple(t.ticker for t in day_trades),
            ))
        return samples

    @staticmethod
    def _first_date(
        entries: Sequence[JournalEntry],
        cash_flows: Sequence[CashFlowTransaction],
        date_range: DateRangeFilter,
    ) -> date | None:
        """Range start, else the earliest entry (earliest cash flow without entries)."""
        if not entries and not cash_flows:
            return None
        if date_range.start is not None:
            return date_range.start
        if entries:
            return min(e.opened_on for e in entries)
        return min(tx.day for tx in cash_flows)
