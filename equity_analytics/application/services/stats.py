"""Stats Service: Range-scoped account statistics.

Two kinds of figures are combined in one StatsSnapshot:

Account-wide (ignore the date range):
- current_account = starting + all realized + live unrealized + all cash flow
- open_risk_total over every open/trimmed position

Range-scoped (entries opened inside the range):
- realized P&L, closed trade count, wins/losses, win rate, Sharpe
- unrealized P&L change = unrealized(end) - unrealized(day before start)
- growth percentages against the balance before the range start
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Sequence

from equity_analytics.domain.dates import local_date
from equity_analytics.domain.ledger import (
    balance_before,
    filter_by_range,
    filter_cash_flows_by_range,
    holding_entries,
    net_cash_flow,
    realized_entries,
    total_realized_pnl,
)
from equity_analytics.domain.metrics import (
    calculate_sharpe,
    calculate_win_rate,
    count_wins_losses,
    growth_pct,
    open_risk_total,
)
from equity_analytics.domain.models import (
    AccountSettings,
    CashFlowTransaction,
    DateRangeFilter,
    JournalEntry,
    StatsSnapshot,
)
from equity_analytics.domain.pricing import PriceResolver
from equity_analytics.domain.valuation import live_unrealized_pnl, unrealized_pnl_at

logger = logging.getLogger(__name__)


class StatsCalculator:
    """Computes a StatsSnapshot for a ledger and date range.

    Example:
        >>> calc = StatsCalculator(PriceResolver(source))
        >>> snapshot = calc.compute(entries, cash_flows, AccountSettings(10_000))
        >>> snapshot.win_rate
    """

    def __init__(
        self,
        resolver: PriceResolver,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._resolver = resolver
        self._clock = clock

    def compute(
        self,
        entries: Sequence[JournalEntry],
        cash_flows: Sequence[CashFlowTransaction],
        settings: AccountSettings,
        date_range: DateRangeFilter | None = None,
    ) -> StatsSnapshot:
        """Compute statistics.

        Args:
            entries: Full (unfiltered) ledger snapshot
            cash_flows: Full cash-flow log
            settings: Account settings
            date_range: Statistics window (None = all time)

        Returns:
            StatsSnapshot; undefined ratios are None, never NaN
        """
        entries = tuple(entries)
        cash_flows = tuple(cash_flows)
        date_range = date_range or DateRangeFilter.all_time()
        today = local_date(self._clock())
        starting = settings.starting_account_size

        self._resolver.prepare(e.ticker for e in entries)

        # Account-wide figures
        holding = holding_entries(entries)
        live_unrealized = live_unrealized_pnl(holding, self._resolver, today)
        all_time_cash_flow = net_cash_flow(cash_flows)
        current_account = (
            starting
            + total_realized_pnl(entries)
            + live_unrealized
            + all_time_cash_flow
        )

        if date_range.start is not None:
            account_at_range_start = balance_before(
                date_range.start, entries, cash_flows, starting
            )
        else:
            account_at_range_start = starting

        # Range-scoped figures
        filtered = filter_by_range(entries, date_range)
        open_positions = sum(1 for e in filtered if e.status == "open")
        closed = realized_entries(filtered)
        realized_pnl = sum(t.realized_pnl for t in closed)

        if date_range.is_set:
            end = date_range.end or today
            unrealized_at_end = unrealized_pnl_at(entries, end, self._resolver)
            unrealized_at_start = 0.0
            if date_range.day_before_start is not None:
                unrealized_at_start = unrealized_pnl_at(
                    entries, date_range.day_before_start, self._resolver
                )
            unrealized_change = unrealized_at_end - unrealized_at_start
        else:
            unrealized_change = live_unrealized

        total_pnl = realized_pnl + unrealized_change

        wins, losses = count_wins_losses(closed)

        if date_range.is_set:
            range_cash_flow = net_cash_flow(filter_cash_flows_by_range(cash_flows, date_range))
        else:
            range_cash_flow = all_time_cash_flow

        snapshot = StatsSnapshot(
            open_positions=open_positions,
            open_risk_total=open_risk_total(entries),
            closed_trade_count=len(closed),
            realized_pnl=realized_pnl,
            unrealized_pnl_change=unrealized_change,
            total_pnl=total_pnl,
            wins=wins,
            losses=losses,
            win_rate=calculate_win_rate(wins, len(closed)),
            sharpe=calculate_sharpe(closed),
            starting_account=starting,
            current_account=current_account,
            account_at_range_start=account_at_range_start,
            trading_growth=growth_pct(total_pnl, account_at_range_start),
            total_growth=growth_pct(total_pnl + range_cash_flow, account_at_range_start),
            net_cash_flow=range_cash_flow,
        )

        logger.info(
            "Stats for %s: %d closed trades, total P&L %.2f",
            date_range.describe(), snapshot.closed_trade_count, snapshot.total_pnl,
        )
        return snapshot
