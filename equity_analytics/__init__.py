"""Equity Analytics: Equity curve reconstruction and trading statistics.

A modular system for analyzing a trade journal, including day-by-day
account balance reconstruction with date-accurate unrealized P&L and
range-scoped performance statistics.

Architecture:
- domain/: Core business logic (models, pricing, valuation, accounting)
- infrastructure/: I/O and external dependencies
- application/: Use cases and services
- interfaces/: CLI entry points
"""

__version__ = "0.3.0"

from equity_analytics.domain import (
    JournalEntry,
    TrimEvent,
    CashFlowTransaction,
    DateRangeFilter,
    EquityCurveSample,
    StatsSnapshot,
    AccountSettings,
    PriceResolver,
)
from equity_analytics.infrastructure import (
    DataPaths,
    ValuationConfig,
    DEFAULT_PATHS,
    RepositoryError,
)

__all__ = [
    # Version
    "__version__",
    # Domain models
    "JournalEntry",
    "TrimEvent",
    "CashFlowTransaction",
    "DateRangeFilter",
    "EquityCurveSample",
    "StatsSnapshot",
    "AccountSettings",
    "PriceResolver",
    # Infrastructure
    "DataPaths",
    "ValuationConfig",
    "DEFAULT_PATHS",
    "RepositoryError",
]
