"""Position Valuation: Shares held and unrealized P&L on a given day.

A position is open on day D when it was opened on or before D and either
has no close date or closes after D. The close day itself is excluded:
from the close day forward the P&L is realized, not unrealized.

Shares held on D account for every trim dated on or before D:

    shares_held_on(D) = shares - Σ(trim.shares where trim.day <= D)

Zero or negative share counts mean "no position" and contribute nothing.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable

from equity_analytics.domain.models import JournalEntry
from equity_analytics.domain.pricing import PriceResolver


def shares_held_on(entry: JournalEntry, on: date) -> float:
    """Shares still held on a day (not clamped; <= 0 means no position)."""
    trimmed = sum(trim.shares for trim in entry.trim_history if trim.day <= on)
    return entry.shares - trimmed


def is_open_on(entry: JournalEntry, on: date) -> bool:
    """Whether the position counts as open on a day."""
    if entry.opened_on > on:
        return False
    closed_on = entry.closed_on
    return closed_on is None or closed_on > on


def unrealized_pnl(
    entry: JournalEntry,
    on: date,
    resolver: PriceResolver,
) -> float:
    """Paper P&L of one entry on a day, using historical-first prices.

    Returns:
        (price - entry_price) * shares held, or 0.0 when no shares are held,
        the entry has no usable entry price, or no price resolves
    """
    if not entry.entry_price or not entry.shares:
        return 0.0

    shares = shares_held_on(entry, on)
    if shares <= 0:
        return 0.0

    price = resolver.resolve_price(entry.ticker, on)
    if price is None:
        return 0.0

    return (price - entry.entry_price) * shares


def open_entries_on(entries: Iterable[JournalEntry], on: date) -> list[JournalEntry]:
    """Entries open on a day, in ledger order."""
    return [e for e in entries if is_open_on(e, on)]


def unrealized_pnl_at(
    entries: Iterable[JournalEntry],
    on: date,
    resolver: PriceResolver,
) -> float:
    """Total unrealized P&L of every position open on a day."""
    return sum(unrealized_pnl(e, on, resolver) for e in open_entries_on(entries, on))


def live_unrealized_pnl(
    entries: Iterable[JournalEntry],
    resolver: PriceResolver,
    today: date,
) -> float:
    """Current unrealized P&L of open and trimmed positions.

    Uses the journal's remaining share count when present and prefers live
    quotes over historical closes.
    """
    total = 0.0
    for entry in entries:
        if not entry.is_holding or not entry.entry_price:
            continue

        if entry.remaining_shares is not None:
            shares = entry.remaining_shares
        else:
            shares = shares_held_on(entry, today)
        if shares <= 0:
            continue

        price = resolver.resolve_price(entry.ticker, today, prefer_historical=False)
        if price is None:
            continue

        total += (price - entry.entry_price) * shares
    return total
