"""Ledger Filtering and Range Accounting.

LedgerFilter: select journal entries / cash-flow transactions whose local
calendar day falls inside a DateRangeFilter (inclusive, order-preserving).

RangeAccounting: account balance at the start of a day.

    balance_before(D) = starting_balance
                      + Σ realized P&L booked strictly before D
                      + Σ signed cash flow strictly before D

Events that land exactly on D belong to D's own delta, never to its opening
balance. The equity curve uses the same convention, so a window's opening
balance plus its daily deltas never double-counts a day.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Sequence

from equity_analytics.domain.models import (
    CashFlowTransaction,
    DateRangeFilter,
    JournalEntry,
)


# =============================================================================
# LedgerFilter
# =============================================================================

def filter_by_range(
    entries: Sequence[JournalEntry],
    date_range: DateRangeFilter | None,
) -> list[JournalEntry]:
    """Entries opened inside the window, in their original order."""
    if date_range is None or not date_range.is_set:
        return list(entries)
    return [e for e in entries if date_range.contains(e.opened_on)]


def filter_cash_flows_by_range(
    transactions: Sequence[CashFlowTransaction],
    date_range: DateRangeFilter | None,
) -> list[CashFlowTransaction]:
    """Cash-flow transactions inside the window, in their original order."""
    if date_range is None or not date_range.is_set:
        return list(transactions)
    return [tx for tx in transactions if date_range.contains(tx.day)]


def realized_entries(entries: Iterable[JournalEntry]) -> list[JournalEntry]:
    """Closed and trimmed entries (those with booked P&L)."""
    return [e for e in entries if e.has_realized]


def holding_entries(entries: Iterable[JournalEntry]) -> list[JournalEntry]:
    """Open and trimmed entries (those still holding shares)."""
    return [e for e in entries if e.is_holding]


# =============================================================================
# RangeAccounting
# =============================================================================

def net_cash_flow(transactions: Iterable[CashFlowTransaction]) -> float:
    """Signed sum of deposits and withdrawals."""
    return sum(tx.signed_amount for tx in transactions)


def total_realized_pnl(entries: Iterable[JournalEntry]) -> float:
    """Sum of realized P&L over closed and trimmed entries."""
    return sum(e.realized_pnl for e in entries if e.has_realized)


def realized_pnl_before(entries: Iterable[JournalEntry], on: date) -> float:
    """Realized P&L booked strictly before a day."""
    return sum(
        e.realized_pnl for e in entries
        if e.has_realized and e.realized_on < on
    )


def cash_flow_before(transactions: Iterable[CashFlowTransaction], on: date) -> float:
    """Signed cash flow strictly before a day."""
    return sum(tx.signed_amount for tx in transactions if tx.day < on)


def balance_before(
    on: date,
    entries: Iterable[JournalEntry],
    cash_flows: Iterable[CashFlowTransaction],
    starting_balance: float,
) -> float:
    """Account balance at the start of a day (realized and cash flow only).

    Args:
        on: Day whose opening balance is requested
        entries: Full ledger
        cash_flows: Full cash-flow log
        starting_balance: Balance before any ledger activity

    Returns:
        starting_balance + realized P&L and cash flow strictly before `on`
    """
    return (
        starting_balance
        + realized_pnl_before(entries, on)
        + cash_flow_before(cash_flows, on)
    )


def realized_pnl_by_day(entries: Iterable[JournalEntry]) -> dict[date, list[JournalEntry]]:
    """Closed and trimmed entries grouped by the day their P&L is booked.

    Within a day, entries keep ledger order.
    """
    by_day: dict[date, list[JournalEntry]] = defaultdict(list)
    for entry in entries:
        if entry.has_realized:
            by_day[entry.realized_on].append(entry)
    return dict(by_day)


def cash_flow_by_day(transactions: Iterable[CashFlowTransaction]) -> dict[date, float]:
    """Net signed cash flow per day."""
    by_day: dict[date, float] = defaultdict(float)
    for tx in transactions:
        by_day[tx.day] += tx.signed_amount
    return dict(by_day)
