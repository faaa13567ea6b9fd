"""Data repositories for Equity Analytics.

Provides abstracted data access through the Repository pattern:
- JournalRepository: Trade journal entries
- CashFlowRepository: Deposits and withdrawals
- SettingsRepository: Account settings and valuation overrides
- PriceRepository: Historical closes and live quotes
- StaticPriceSource: In-memory prices
"""

from equity_analytics.infrastructure.repositories.base import Repository, RepositoryError
from equity_analytics.infrastructure.repositories.journal_repo import (
    JournalRepository,
    CashFlowRepository,
    parse_entry,
    parse_cash_flow,
)
from equity_analytics.infrastructure.repositories.settings_repo import SettingsRepository
from equity_analytics.infrastructure.repositories.price_repo import (
    PriceRepository,
    StaticPriceSource,
)

__all__ = [
    "Repository",
    "RepositoryError",
    "JournalRepository",
    "CashFlowRepository",
    "parse_entry",
    "parse_cash_flow",
    "SettingsRepository",
    "PriceRepository",
    "StaticPriceSource",
]
