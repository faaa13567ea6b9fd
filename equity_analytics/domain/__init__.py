"""Domain Layer: Core business logic and entities.

This layer contains:
- models.py: Data structures (JournalEntry, CashFlowTransaction, ...)
- dates.py: Local calendar-date helpers and range presets
- pricing.py: PriceSource interface and PriceResolver
- valuation.py: Shares held and unrealized P&L per day
- ledger.py: Range filtering and balance-before accounting
- metrics/: Win rate, Sharpe, growth and open risk
"""

from equity_analytics.domain.models import (
    JournalEntry,
    TrimEvent,
    CashFlowTransaction,
    DateRangeFilter,
    PricePoint,
    EquityCurveSample,
    StatsSnapshot,
    AccountSettings,
    TradeStatus,
)
from equity_analytics.domain.pricing import (
    PriceSource,
    PriceSourceError,
    PriceResolver,
)
from equity_analytics.domain.valuation import (
    shares_held_on,
    is_open_on,
    unrealized_pnl,
    unrealized_pnl_at,
    live_unrealized_pnl,
)
from equity_analytics.domain.ledger import (
    filter_by_range,
    filter_cash_flows_by_range,
    balance_before,
)
from equity_analytics.domain.metrics import (
    calculate_win_rate,
    calculate_sharpe,
    growth_pct,
    open_risk_total,
)

__all__ = [
    # Models
    "JournalEntry",
    "TrimEvent",
    "CashFlowTransaction",
    "DateRangeFilter",
    "PricePoint",
    "EquityCurveSample",
    "StatsSnapshot",
    "AccountSettings",
    "TradeStatus",
    # Pricing
    "PriceSource",
    "PriceSourceError",
    "PriceResolver",
    # Valuation
    "shares_held_on",
    "is_open_on",
    "unrealized_pnl",
    "unrealized_pnl_at",
    "live_unrealized_pnl",
    # Ledger
    "filter_by_range",
    "filter_cash_flows_by_range",
    "balance_before",
    # Metrics
    "calculate_win_rate",
    "calculate_sharpe",
    "growth_pct",
    "open_risk_total",
]
