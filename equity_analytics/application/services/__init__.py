"""Application Services for Equity Analytics.

Services orchestrate repository access and domain logic to implement use cases.

Available services:
- EquityCurveBuilder: Daily equity curve reconstruction
- StatsCalculator: Range-scoped statistics
- PerformanceReportService: Snapshot loading, reporting and export
"""

from equity_analytics.application.services.equity_curve import EquityCurveBuilder
from equity_analytics.application.services.stats import StatsCalculator
from equity_analytics.application.services.report import (
    AccountSnapshot,
    PerformanceReportService,
)

__all__ = [
    "EquityCurveBuilder",
    "StatsCalculator",
    "AccountSnapshot",
    "PerformanceReportService",
]
