"""Performance metrics for journal statistics.

This package provides metrics for evaluating account performance:

- Win/Loss: Win and loss counts, win rate
- Sharpe: Simplified per-trade Sharpe ratio
- Growth: Percentage change against a baseline balance
- Open Risk: Net dollar risk of held positions

Usage:
    from equity_analytics.domain.metrics import (
        calculate_win_rate,
        calculate_sharpe,
        growth_pct,
    )
"""

from equity_analytics.domain.metrics.performance import (
    MIN_TRADES_FOR_SHARPE,
    count_wins_losses,
    calculate_win_rate,
    trade_return_pct,
    sharpe_from_returns,
    calculate_sharpe,
    growth_pct,
    position_risk,
    open_risk_total,
)

__all__ = [
    "MIN_TRADES_FOR_SHARPE",
    # Win/Loss
    "count_wins_losses",
    "calculate_win_rate",
    # Sharpe
    "trade_return_pct",
    "sharpe_from_returns",
    "calculate_sharpe",
    # Growth
    "growth_pct",
    # Open Risk
    "position_risk",
    "open_risk_total",
]
