"""Performance Metrics: Win rate, Sharpe ratio, growth and open risk.

Degenerate inputs resolve to None or 0.0, never to NaN/inf:
- win rate is None with no closed trades
- Sharpe is None with fewer than 2 trades or zero variance
- growth is 0.0 against a non-positive baseline

Sharpe here is the simplified per-trade ratio (no risk-free rate):

    return_i = pnl_i / position_size_i * 100
    sharpe   = mean(returns) / std(returns)      # population std
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from equity_analytics.domain.models import JournalEntry

MIN_TRADES_FOR_SHARPE = 2

# Standard deviations below this are treated as zero variance
ZERO_VARIANCE_TOLERANCE = 1e-12


# =============================================================================
# Win / Loss
# =============================================================================

def count_wins_losses(trades: Sequence[JournalEntry]) -> tuple[int, int]:
    """Count winning (pnl > 0) and losing (pnl < 0) trades.

    Break-even trades count as neither.
    """
    wins = sum(1 for t in trades if t.is_win)
    losses = sum(1 for t in trades if t.is_loss)
    return wins, losses


def calculate_win_rate(wins: int, closed_count: int) -> float | None:
    """Win rate in percent, or None when there are no closed trades."""
    if closed_count <= 0:
        return None
    return wins / closed_count * 100


# =============================================================================
# Sharpe Ratio
# =============================================================================

def trade_return_pct(trade: JournalEntry) -> float:
    """Return of one trade in percent of its position size.

    Position size falls back to entry_price * shares, then to 1.
    """
    position_size = trade.cost_basis or 1.0
    return trade.realized_pnl / position_size * 100


def sharpe_from_returns(returns: Sequence[float]) -> float | None:
    """Mean over population standard deviation of a return series.

    Args:
        returns: Per-trade returns

    Returns:
        Sharpe ratio, or None with fewer than 2 returns or zero variance

    Example:
        >>> round(sharpe_from_returns([2.0, -1.0, 3.0]), 4)
        0.7845
    """
    if len(returns) < MIN_TRADES_FOR_SHARPE:
        return None

    arr = np.asarray(returns, dtype=float)
    if not np.all(np.isfinite(arr)):
        return None

    mean = float(arr.mean())
    std = float(arr.std())

    if math.isclose(std, 0.0, abs_tol=ZERO_VARIANCE_TOLERANCE):
        return None
    return mean / std


def calculate_sharpe(closed_trades: Sequence[JournalEntry]) -> float | None:
    """Per-trade Sharpe ratio over closed trades."""
    if len(closed_trades) < MIN_TRADES_FOR_SHARPE:
        return None
    return sharpe_from_returns([trade_return_pct(t) for t in closed_trades])


# =============================================================================
# Growth
# =============================================================================

def growth_pct(change: float, baseline: float) -> float:
    """Change as a percentage of baseline; 0.0 when baseline <= 0."""
    if baseline <= 0:
        return 0.0
    return change / baseline * 100


# =============================================================================
# Open Risk
# =============================================================================

def position_risk(entry: JournalEntry) -> float:
    """Net dollar risk of a held position.

    (entry - stop) * remaining shares, minus P&L already banked on trimmed
    positions, floored at 0.
    """
    gross = entry.current_shares * (entry.entry_price - entry.stop_price)
    if entry.status == "trimmed":
        gross -= entry.realized_pnl
    return max(0.0, gross)


def open_risk_total(entries: Sequence[JournalEntry]) -> float:
    """Total net risk over open and trimmed positions."""
    return sum(position_risk(e) for e in entries if e.is_holding)
