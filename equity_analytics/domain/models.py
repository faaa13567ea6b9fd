"""Domain Models: Core data structures for equity analytics.

These models represent the fundamental business entities:
- JournalEntry: One trade lifecycle (open, partial trims, close)
- TrimEvent: A partial exit of an open position
- CashFlowTransaction: Deposit or withdrawal
- DateRangeFilter: Inclusive calendar-date window for statistics
- PricePoint: A resolved price and the day it came from
- EquityCurveSample: One point of the reconstructed equity curve
- StatsSnapshot: Range-scoped performance summary
- AccountSettings: Account-level settings (starting size)

Design Principles:
- Immutable (frozen dataclass, tuples for sequences)
- Validation in __post_init__
- Computed properties for derived values
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Literal

from equity_analytics.domain.dates import (
    DAY_PRESETS,
    days_between,
    display_date,
    local_date,
    preset_bounds,
)

logger = logging.getLogger(__name__)

TradeStatus = Literal["open", "trimmed", "closed"]
CashFlowType = Literal["deposit", "withdrawal"]
PriceOrigin = Literal["historical", "live"]

TRADE_STATUSES = ("open", "trimmed", "closed")
REALIZED_STATUSES = ("closed", "trimmed")
HOLDING_STATUSES = ("open", "trimmed")

# Float slack when trims add up to the full position
SHARE_TOLERANCE = 1e-9


def _validate_non_negative(value: int | float, field_name: str) -> None:
    """Validate that value is non-negative."""
    if value < 0:
        raise ValueError(f"{field_name} must be non-negative, got: {value}")


@dataclass(frozen=True, slots=True)
class TrimEvent:
    """A partial share reduction of an open position.

    Attributes:
        date: When the trim was executed
        shares: Number of shares sold (must be positive)
    """

    date: datetime
    shares: float

    def __post_init__(self) -> None:
        if self.shares <= 0:
            raise ValueError(f"trim shares must be positive, got: {self.shares}")

    @property
    def day(self) -> date:
        """Local calendar day of the trim."""
        return local_date(self.date)


@dataclass(frozen=True, slots=True)
class JournalEntry:
    """One trade lifecycle record.

    Attributes:
        ticker: Symbol traded
        entry_price: Price per share when opened
        stop_price: Protective stop price
        shares: Original position size
        timestamp: When the position was opened
        status: "open", "trimmed" or "closed"
        close_date: When the position was fully closed (None while open)
        total_realized_pnl: Profit/loss already banked (closes and trims)
        trim_history: Partial exits in chronological order
        remaining_shares: Current open size after trims
        position_size: Capital committed to the trade

    Example:
        >>> entry = JournalEntry(
        ...     ticker="AAPL", entry_price=50.0, stop_price=45.0, shares=100,
        ...     timestamp=datetime(2024, 1, 3, 10, 30),
        ... )
        >>> entry.cost_basis
        5000.0
    """

    ticker: str
    entry_price: float
    stop_price: float
    shares: float
    timestamp: datetime
    status: TradeStatus = "open"
    close_date: datetime | None = None
    total_realized_pnl: float | None = None
    trim_history: tuple[TrimEvent, ...] = ()
    remaining_shares: float | None = None
    position_size: float | None = None

    def __post_init__(self) -> None:
        """Validate all fields after initialization."""
        if not self.ticker:
            raise ValueError("ticker cannot be empty")
        if self.status not in TRADE_STATUSES:
            raise ValueError(
                f"status must be one of {', '.join(TRADE_STATUSES)}, got: {self.status}"
            )
        _validate_non_negative(self.entry_price, "entry_price")
        _validate_non_negative(self.stop_price, "stop_price")
        _validate_non_negative(self.shares, "shares")
        if self.status == "open" and self.close_date is not None:
            raise ValueError("open entry cannot have a close_date")
        if self.status in REALIZED_STATUSES and self.total_realized_pnl is None:
            raise ValueError(f"{self.status} entry requires total_realized_pnl")
        if self.trimmed_shares - self.shares > SHARE_TOLERANCE:
            raise ValueError(
                f"trimmed shares ({self.trimmed_shares}) exceed original shares ({self.shares})"
            )
        if self.remaining_shares is not None:
            _validate_non_negative(self.remaining_shares, "remaining_shares")

    @property
    def opened_on(self) -> date:
        """Local calendar day the position was opened."""
        return local_date(self.timestamp)

    @property
    def closed_on(self) -> date | None:
        """Local calendar day the position was closed, if any."""
        return local_date(self.close_date) if self.close_date is not None else None

    @property
    def realized_on(self) -> date:
        """Day the realized P&L is booked: close day, else open day."""
        return self.closed_on or self.opened_on

    @property
    def realized_pnl(self) -> float:
        """Realized P&L (0.0 when nothing has been banked)."""
        return self.total_realized_pnl or 0.0

    @property
    def trimmed_shares(self) -> float:
        """Total shares removed by partial exits."""
        return sum(trim.shares for trim in self.trim_history)

    @property
    def current_shares(self) -> float:
        """Shares currently held according to the journal."""
        if self.remaining_shares is not None:
            return self.remaining_shares
        return self.shares - self.trimmed_shares

    @property
    def cost_basis(self) -> float:
        """Capital committed; falls back to entry_price * shares."""
        if self.position_size:
            return self.position_size
        return self.entry_price * self.shares

    @property
    def has_realized(self) -> bool:
        """Whether the entry contributes realized P&L."""
        return self.status in REALIZED_STATUSES

    @property
    def is_holding(self) -> bool:
        """Whether shares are currently held (open or trimmed)."""
        return self.status in HOLDING_STATUSES

    @property
    def is_win(self) -> bool:
        return self.realized_pnl > 0

    @property
    def is_loss(self) -> bool:
        return self.realized_pnl < 0


@dataclass(frozen=True, slots=True)
class CashFlowTransaction:
    """A deposit into or withdrawal from the account.

    Attributes:
        timestamp: When the transaction happened
        type: "deposit" or "withdrawal"
        amount: Unsigned amount (must be non-negative)
    """

    timestamp: datetime
    type: CashFlowType
    amount: float

    def __post_init__(self) -> None:
        if self.type not in ("deposit", "withdrawal"):
            raise ValueError(f"type must be 'deposit' or 'withdrawal', got: {self.type}")
        _validate_non_negative(self.amount, "amount")

    @property
    def day(self) -> date:
        """Local calendar day of the transaction."""
        return local_date(self.timestamp)

    @property
    def signed_amount(self) -> float:
        """+amount for deposits, -amount for withdrawals."""
        return self.amount if self.type == "deposit" else -self.amount


@dataclass(frozen=True, slots=True)
class DateRangeFilter:
    """Inclusive calendar-date window.

    A missing bound means unbounded on that side. Bounds are plain dates,
    so no timezone shift can move a boundary by a day.

    Attributes:
        start: First day included (None = from the beginning)
        end: Last day included (None = through today)

    Example:
        >>> rng = DateRangeFilter(start=date(2024, 1, 1), end=date(2024, 3, 31))
        >>> rng.contains(date(2024, 2, 15))
        True
    """

    start: date | None = None
    end: date | None = None

    def __post_init__(self) -> None:
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError(
                f"range start ({self.start}) cannot be after range end ({self.end})"
            )

    @classmethod
    def all_time(cls) -> DateRangeFilter:
        return cls()

    @classmethod
    def preset(cls, name: str, today: date) -> DateRangeFilter:
        """Build a filter from a named preset ("max", "ytd", "30", "90", "365")."""
        start, end = preset_bounds(name, today)
        return cls(start=start, end=end)

    @classmethod
    def accept(
        cls,
        start: date | None,
        end: date | None,
        today: date,
    ) -> DateRangeFilter:
        """Validate user-supplied bounds.

        Future bounds are clamped to today.

        Raises:
            ValueError: If start is after end
        """
        if start is not None and end is not None and start > end:
            raise ValueError("Start date cannot be after end date")
        if start is not None and start > today:
            logger.warning("Range start %s is in the future, using %s", start, today)
            start = today
        if end is not None and end > today:
            logger.warning("Range end %s is in the future, using %s", end, today)
            end = today
        return cls(start=start, end=end)

    @property
    def is_set(self) -> bool:
        """Whether any bound is present."""
        return self.start is not None or self.end is not None

    @property
    def day_before_start(self) -> date | None:
        """Last day before the window (None when unbounded)."""
        if self.start is None:
            return None
        return self.start - timedelta(days=1)

    def contains(self, d: date) -> bool:
        """Check whether a calendar day falls in the window."""
        if self.start is not None and d < self.start:
            return False
        if self.end is not None and d > self.end:
            return False
        return True

    def matching_preset(self, today: date) -> str | None:
        """Name of the preset this window corresponds to, if any.

        Day-count presets tolerate one day of drift.
        """
        if not self.is_set:
            return "max"
        if self.start is None or self.end != today:
            return None
        if self.start == date(today.year, 1, 1):
            return "ytd"
        days_back = (today - self.start).days
        for name, days in DAY_PRESETS.items():
            if abs(days_back - days) <= 1:
                return name
        return None

    def describe(self) -> str:
        """Human-readable label for the window."""
        if self.start is not None and self.end is not None:
            return f"{display_date(self.start)} - {display_date(self.end)}"
        if self.start is not None:
            return f"Since {display_date(self.start)}"
        if self.end is not None:
            return f"Until {display_date(self.end)}"
        return "All time"


@dataclass(frozen=True, slots=True)
class PricePoint:
    """A resolved price for a (ticker, date) pair.

    Attributes:
        price: Price per share
        source_date: Day the price was observed (may precede the request)
        source: "historical" (close price) or "live" (current quote)
    """

    price: float
    source_date: date
    source: PriceOrigin = "historical"

    def age_days(self, on: date) -> int:
        """Days between the requested day and the observation."""
        return days_between(on, self.source_date)

    @property
    def is_live(self) -> bool:
        return self.source == "live"


@dataclass(frozen=True, slots=True)
class EquityCurveSample:
    """One point of the reconstructed equity curve.

    Attributes:
        date: Local midnight of the day (or the current instant for "now")
        balance: Realized balance plus unrealized P&L
        realized_pnl: P&L realized that day
        cash_flow: Net deposits/withdrawals that day
        unrealized_pnl: Paper P&L of positions open that day
        tickers: Tickers realized that day
        is_live: True for the final live-priced "now" sample
    """

    date: datetime
    balance: float
    realized_pnl: float
    unrealized_pnl: float
    cash_flow: float = 0.0
    tickers: tuple[str, ...] = ()
    is_live: bool = False

    @property
    def realized_balance(self) -> float:
        return self.balance - self.unrealized_pnl

    @property
    def label(self) -> str:
        """Ticker label for charts ("Now" for the live sample)."""
        if self.is_live:
            return "Now"
        return ", ".join(self.tickers)

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "balance": self.balance,
            "realized_pnl": self.realized_pnl,
            "cash_flow": self.cash_flow,
            "unrealized_pnl": self.unrealized_pnl,
            "tickers": self.label,
            "is_live": self.is_live,
        }


@dataclass(frozen=True, slots=True)
class StatsSnapshot:
    """Range-scoped performance summary.

    win_rate and sharpe are None when undefined (no closed trades,
    fewer than two closed trades, or zero variance).
    """

    # Positions
    open_positions: int
    open_risk_total: float

    # Trading performance
    closed_trade_count: int
    realized_pnl: float
    unrealized_pnl_change: float
    total_pnl: float
    wins: int
    losses: int
    win_rate: float | None
    sharpe: float | None

    # Account growth
    starting_account: float
    current_account: float
    account_at_range_start: float
    trading_growth: float
    total_growth: float
    net_cash_flow: float

    @property
    def account_change(self) -> float:
        """Current account minus starting account."""
        return self.current_account - self.starting_account

    def to_dict(self) -> dict:
        """Convert to dictionary for display or export."""
        return {
            "open_positions": self.open_positions,
            "open_risk_total": self.open_risk_total,
            "closed_trade_count": self.closed_trade_count,
            "realized_pnl": self.realized_pnl,
            "unrealized_pnl_change": self.unrealized_pnl_change,
            "total_pnl": self.total_pnl,
            "wins": self.wins,
            "losses": self.losses,
            "win_rate": self.win_rate,
            "sharpe": self.sharpe,
            "starting_account": self.starting_account,
            "current_account": self.current_account,
            "account_at_range_start": self.account_at_range_start,
            "trading_growth": self.trading_growth,
            "total_growth": self.total_growth,
            "net_cash_flow": self.net_cash_flow,
        }


@dataclass(frozen=True, slots=True)
class AccountSettings:
    """Account-level settings.

    Attributes:
        starting_account_size: Balance before the first journal entry
    """

    starting_account_size: float = 0.0

    def __post_init__(self) -> None:
        _validate_non_negative(self.starting_account_size, "starting_account_size")
