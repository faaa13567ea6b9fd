"""Shared fixtures: a small journal used across service tests.

Scenario (January 2024, clock on Jan 10 at 15:00):
- starting account 10,000
- MSFT opened Jan 1, closed Jan 5 with +500 realized
- AAPL opened Jan 3, 100 shares at 50, closes at 55 every day from Jan 3
"""

import json
from datetime import date, datetime

import polars as pl
import pytest

from equity_analytics.domain.models import JournalEntry
from equity_analytics.domain.pricing import PriceResolver, PriceSourceError
from equity_analytics.infrastructure.repositories import StaticPriceSource

NOW = datetime(2024, 1, 10, 15, 0)
TODAY = NOW.date()


def day(n: int) -> date:
    return date(2024, 1, n)


def at(n: int, hour: int = 10) -> datetime:
    return datetime(2024, 1, n, hour, 0)


class FlakySource(StaticPriceSource):
    """Source whose first batch prefetch fails and later ones succeed."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = 0

    def prefetch(self, tickers):
        self.calls += 1
        if self.calls == 1:
            raise PriceSourceError("price store unreachable")
        super().prefetch(tickers)


@pytest.fixture
def closed_trade():
    return JournalEntry(
        ticker="MSFT",
        entry_price=100.0,
        stop_price=90.0,
        shares=10,
        timestamp=at(1),
        status="closed",
        close_date=at(5, 15),
        total_realized_pnl=500.0,
    )


@pytest.fixture
def open_trade():
    return JournalEntry(
        ticker="AAPL",
        entry_price=50.0,
        stop_price=45.0,
        shares=100,
        timestamp=at(3),
    )


@pytest.fixture
def scenario_entries(closed_trade, open_trade):
    return (closed_trade, open_trade)


@pytest.fixture
def scenario_source():
    return StaticPriceSource(
        historical={("AAPL", day(n)): 55.0 for n in range(3, 11)},
    )


@pytest.fixture
def resolver(scenario_source):
    return PriceResolver(scenario_source, clock=lambda: TODAY)


JOURNAL = [
    {
        "ticker": "MSFT",
        "entry": 100,
        "stop": 90,
        "shares": 10,
        "timestamp": "2024-01-01T10:00:00",
        "status": "closed",
        "closeDate": "2024-01-05T15:00:00",
        "totalRealizedPnL": 500,
    },
    {
        "ticker": "AAPL",
        "entry": 50,
        "stop": 45,
        "shares": 100,
        "timestamp": "2024-01-03T10:00:00",
        "status": "open",
    },
]


@pytest.fixture
def data_root(tmp_path):
    """Project root with the scenario journal, settings and close prices."""
    data_dir = tmp_path / "data"
    price_dir = data_dir / "price"
    price_dir.mkdir(parents=True)

    (data_dir / "journal.json").write_text(json.dumps(JOURNAL))
    (data_dir / "settings.json").write_text(json.dumps({"startingAccountSize": 10_000}))
    (data_dir / "cash_flow.json").write_text(json.dumps({
        "transactions": [
            {"timestamp": "2024-01-07T09:00:00", "type": "deposit", "amount": 2000},
        ],
    }))

    days = [day(n) for n in range(3, 11)]
    pl.DataFrame({
        "ticker": ["AAPL"] * len(days),
        "date": days,
        "close_price": [55.0] * len(days),
    }).write_parquet(price_dir / "close_prices.parquet")

    return tmp_path
