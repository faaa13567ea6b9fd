"""Unit tests for domain/valuation.py."""

from datetime import date, datetime

import pytest

from equity_analytics.domain.models import JournalEntry, TrimEvent
from equity_analytics.domain.pricing import PriceResolver
from equity_analytics.domain.valuation import (
    is_open_on,
    live_unrealized_pnl,
    open_entries_on,
    shares_held_on,
    unrealized_pnl,
    unrealized_pnl_at,
)
from equity_analytics.infrastructure.repositories import StaticPriceSource


def day(n: int) -> date:
    return date(2024, 1, n)


def at(n: int, hour: int = 10) -> datetime:
    return datetime(2024, 1, n, hour, 0)


@pytest.fixture
def trimmed_entry():
    """100 shares opened Jan 2, trimmed 30 on Jan 4 and 20 on Jan 6."""
    return JournalEntry(
        ticker="NVDA",
        entry_price=20.0,
        stop_price=18.0,
        shares=100,
        timestamp=at(2),
        status="trimmed",
        total_realized_pnl=150.0,
        trim_history=(
            TrimEvent(at(4, 14), 30),
            TrimEvent(at(6, 23), 20),
        ),
    )


@pytest.fixture
def flat_resolver():
    """NVDA closes at 25 every day of January."""
    source = StaticPriceSource(
        historical={("NVDA", day(n)): 25.0 for n in range(1, 32)},
        current={"NVDA": 30.0},
    )
    return PriceResolver(source, clock=lambda: day(10))


# =============================================================================
# Shares held
# =============================================================================

class TestSharesHeld:
    """Tests for shares_held_on."""

    def test_before_any_trim(self, trimmed_entry):
        assert shares_held_on(trimmed_entry, day(3)) == 100

    def test_trim_counts_on_its_own_day(self, trimmed_entry):
        assert shares_held_on(trimmed_entry, day(4)) == 70

    def test_late_evening_trim_stays_on_its_day(self, trimmed_entry):
        assert shares_held_on(trimmed_entry, day(5)) == 70
        assert shares_held_on(trimmed_entry, day(6)) == 50

    def test_monotonic(self, trimmed_entry):
        held = [shares_held_on(trimmed_entry, day(n)) for n in range(1, 15)]
        assert all(a >= b for a, b in zip(held, held[1:]))


class TestIsOpen:
    """Tests for is_open_on."""

    def test_open_day_included(self):
        entry = JournalEntry("AAPL", 50.0, 45.0, 100, at(3, 23))
        assert not is_open_on(entry, day(2))
        assert is_open_on(entry, day(3))
        assert is_open_on(entry, day(30))

    def test_close_day_excluded(self):
        entry = JournalEntry(
            "AAPL", 50.0, 45.0, 100, at(3),
            status="closed", close_date=at(5, 9), total_realized_pnl=10.0,
        )
        assert is_open_on(entry, day(4))
        assert not is_open_on(entry, day(5))

    def test_open_entries_on_preserves_order(self):
        a = JournalEntry("A", 1.0, 0.5, 1, at(1))
        b = JournalEntry("B", 1.0, 0.5, 1, at(2))
        c = JournalEntry("C", 1.0, 0.5, 1, at(9))
        assert open_entries_on([b, c, a], day(5)) == [b, a]


# =============================================================================
# Unrealized P&L
# =============================================================================

class TestUnrealizedPnl:
    """Tests for per-day unrealized P&L."""

    def test_uses_shares_held_that_day(self, trimmed_entry, flat_resolver):
        assert unrealized_pnl(trimmed_entry, day(3), flat_resolver) == pytest.approx(500.0)
        assert unrealized_pnl(trimmed_entry, day(4), flat_resolver) == pytest.approx(350.0)
        assert unrealized_pnl(trimmed_entry, day(7), flat_resolver) == pytest.approx(250.0)

    def test_fully_trimmed_contributes_nothing(self, flat_resolver):
        entry = JournalEntry(
            "NVDA", 20.0, 18.0, 50, at(2),
            status="trimmed", total_realized_pnl=100.0,
            trim_history=(TrimEvent(at(4), 50),),
        )
        assert unrealized_pnl(entry, day(5), flat_resolver) == 0.0

    def test_missing_price_contributes_zero(self, flat_resolver):
        entry = JournalEntry("TSLA", 200.0, 180.0, 10, at(2))
        assert unrealized_pnl(entry, day(5), flat_resolver) == 0.0

    def test_zero_entry_price_contributes_zero(self, flat_resolver):
        entry = JournalEntry("NVDA", 0.0, 0.0, 10, at(2))
        assert unrealized_pnl(entry, day(5), flat_resolver) == 0.0

    def test_unrealized_at_sums_open_entries(self, trimmed_entry, flat_resolver):
        later = JournalEntry("NVDA", 24.0, 22.0, 10, at(8))
        closed = JournalEntry(
            "NVDA", 10.0, 9.0, 10, at(1),
            status="closed", close_date=at(3), total_realized_pnl=50.0,
        )
        entries = [trimmed_entry, later, closed]

        assert unrealized_pnl_at(entries, day(7), flat_resolver) == pytest.approx(250.0)
        assert unrealized_pnl_at(entries, day(8), flat_resolver) == pytest.approx(260.0)
        assert unrealized_pnl_at(entries, day(2), flat_resolver) == pytest.approx(650.0)


class TestLiveUnrealizedPnl:
    """Tests for the current ("now") valuation."""

    def test_prefers_live_quote(self, trimmed_entry, flat_resolver):
        # 50 shares left after both trims, live quote 30
        assert live_unrealized_pnl([trimmed_entry], flat_resolver, day(10)) == pytest.approx(500.0)

    def test_uses_remaining_shares(self, flat_resolver):
        entry = JournalEntry(
            "NVDA", 20.0, 18.0, 100, at(2),
            status="trimmed", total_realized_pnl=10.0,
            trim_history=(TrimEvent(at(4), 30),),
            remaining_shares=40,
        )
        assert live_unrealized_pnl([entry], flat_resolver, day(10)) == pytest.approx(400.0)

    def test_skips_closed(self, flat_resolver):
        closed = JournalEntry(
            "NVDA", 10.0, 9.0, 10, at(1),
            status="closed", close_date=at(3), total_realized_pnl=50.0,
        )
        assert live_unrealized_pnl([closed], flat_resolver, day(10)) == 0.0

    def test_historical_fallback(self):
        source = StaticPriceSource(historical={("NVDA", day(9)): 22.0})
        resolver = PriceResolver(source, clock=lambda: day(10))
        entry = JournalEntry("NVDA", 20.0, 18.0, 10, at(2))

        assert live_unrealized_pnl([entry], resolver, day(10)) == pytest.approx(20.0)
