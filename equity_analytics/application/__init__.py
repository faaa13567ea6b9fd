"""Application Layer: Use cases and service orchestration.

This layer contains:
- services/: Business logic orchestration
  - equity_curve.py: Daily equity curve reconstruction
  - stats.py: Range-scoped statistics
  - report.py: Snapshot loading, reporting and export
"""

from equity_analytics.application.services import (
    EquityCurveBuilder,
    StatsCalculator,
    AccountSnapshot,
    PerformanceReportService,
)

__all__ = [
    "EquityCurveBuilder",
    "StatsCalculator",
    "AccountSnapshot",
    "PerformanceReportService",
]
