"""Infrastructure layer for Equity Analytics.

Contains:
- config: Data paths and valuation configuration
- repositories: Data access abstractions
"""

from equity_analytics.infrastructure.config import (
    DataPaths,
    ValuationConfig,
    DEFAULT_PATHS,
    DEFAULT_VALUATION,
)
from equity_analytics.infrastructure.repositories import (
    Repository,
    RepositoryError,
    JournalRepository,
    CashFlowRepository,
    SettingsRepository,
    PriceRepository,
    StaticPriceSource,
)

__all__ = [
    # Config
    "DataPaths",
    "ValuationConfig",
    "DEFAULT_PATHS",
    "DEFAULT_VALUATION",
    # Repositories
    "Repository",
    "RepositoryError",
    "JournalRepository",
    "CashFlowRepository",
    "SettingsRepository",
    "PriceRepository",
    "StaticPriceSource",
]
