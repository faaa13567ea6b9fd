"""Unit tests for domain/ledger.py.

Tests verify:
1. Range filtering is inclusive on local calendar days
2. balance_before uses strictly-before accounting
3. Per-day grouping of realized P&L and cash flow
"""

from datetime import date, datetime

import pytest

from equity_analytics.domain.ledger import (
    balance_before,
    cash_flow_by_day,
    filter_by_range,
    filter_cash_flows_by_range,
    holding_entries,
    net_cash_flow,
    realized_entries,
    realized_pnl_by_day,
    total_realized_pnl,
)
from equity_analytics.domain.models import (
    CashFlowTransaction,
    DateRangeFilter,
    JournalEntry,
    TrimEvent,
)


def day(n: int) -> date:
    return date(2024, 1, n)


def at(n: int, hour: int = 10) -> datetime:
    return datetime(2024, 1, n, hour, 0)


def closed(ticker: str, opened: int, closed_on: int, pnl: float) -> JournalEntry:
    return JournalEntry(
        ticker, 10.0, 9.0, 10, at(opened),
        status="closed", close_date=at(closed_on, 15), total_realized_pnl=pnl,
    )


@pytest.fixture
def entries():
    return [
        closed("A", 1, 3, 100.0),
        JournalEntry("B", 10.0, 9.0, 10, at(5, 23)),
        closed("C", 5, 8, -40.0),
        JournalEntry(
            "D", 10.0, 9.0, 10, at(6),
            status="trimmed", total_realized_pnl=25.0,
            trim_history=(TrimEvent(at(7), 5),),
        ),
    ]


@pytest.fixture
def cash_flows():
    return [
        CashFlowTransaction(at(2), "deposit", 1000.0),
        CashFlowTransaction(at(5), "withdrawal", 300.0),
        CashFlowTransaction(at(5, 18), "deposit", 50.0),
    ]


# =============================================================================
# LedgerFilter Tests
# =============================================================================

class TestFilterByRange:
    """Tests for filter_by_range."""

    def test_unset_returns_all(self, entries):
        result = filter_by_range(entries, DateRangeFilter())
        assert result == entries
        assert result is not entries

    def test_none_returns_all(self, entries):
        assert filter_by_range(entries, None) == entries

    def test_inclusive_bounds(self, entries):
        result = filter_by_range(entries, DateRangeFilter(start=day(5), end=day(6)))
        assert [e.ticker for e in result] == ["B", "C", "D"]

    def test_late_evening_entry_on_its_day(self, entries):
        result = filter_by_range(entries, DateRangeFilter(end=day(5)))
        assert [e.ticker for e in result] == ["A", "B", "C"]

    def test_open_start(self, entries):
        result = filter_by_range(entries, DateRangeFilter(start=day(6)))
        assert [e.ticker for e in result] == ["D"]

    def test_empty_window(self, entries):
        assert filter_by_range(entries, DateRangeFilter(start=day(20))) == []

    def test_cash_flows(self, cash_flows):
        result = filter_cash_flows_by_range(cash_flows, DateRangeFilter(start=day(5)))
        assert [tx.amount for tx in result] == [300.0, 50.0]
        assert filter_cash_flows_by_range(cash_flows, None) == cash_flows

    def test_status_selectors(self, entries):
        assert [e.ticker for e in realized_entries(entries)] == ["A", "C", "D"]
        assert [e.ticker for e in holding_entries(entries)] == ["B", "D"]


# =============================================================================
# RangeAccounting Tests
# =============================================================================

class TestBalanceBefore:
    """Tests for balance_before."""

    def test_nothing_before(self, entries, cash_flows):
        assert balance_before(day(1), entries, cash_flows, 10_000.0) == 10_000.0

    def test_strictly_before(self, entries, cash_flows):
        """Events on the day itself are excluded."""
        # deposit on Jan 2 excluded, A realized on Jan 3 excluded
        assert balance_before(day(2), entries, cash_flows, 10_000.0) == 10_000.0
        assert balance_before(day(3), entries, cash_flows, 10_000.0) == 11_000.0
        assert balance_before(day(4), entries, cash_flows, 10_000.0) == 11_100.0

    def test_trimmed_without_close_books_on_open_day(self, entries, cash_flows):
        # Jan 7: A +100, deposit 1000, withdrawal 300, deposit 50, D +25 (opened Jan 6)
        assert balance_before(day(7), entries, cash_flows, 10_000.0) == pytest.approx(10_875.0)

    def test_everything(self, entries, cash_flows):
        expected = 10_000.0 + total_realized_pnl(entries) + net_cash_flow(cash_flows)
        assert balance_before(day(31), entries, cash_flows, 10_000.0) == pytest.approx(expected)
        assert expected == pytest.approx(10_835.0)


class TestGrouping:
    """Tests for per-day grouping."""

    def test_realized_by_day(self, entries):
        by_day = realized_pnl_by_day(entries)
        assert set(by_day) == {day(3), day(6), day(8)}
        assert [e.ticker for e in by_day[day(3)]] == ["A"]
        assert by_day[day(8)][0].realized_pnl == -40.0

    def test_cash_flow_by_day(self, cash_flows):
        by_day = cash_flow_by_day(cash_flows)
        assert by_day == {day(2): 1000.0, day(5): -250.0}

    def test_empty(self):
        assert realized_pnl_by_day([]) == {}
        assert cash_flow_by_day([]) == {}
        assert net_cash_flow([]) == 0
