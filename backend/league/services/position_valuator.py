"""
Per-position valuation.

Turns one holding into current value, cost basis and unrealized P/L.
"""
from dataclasses import dataclass

from league.models.holding import Holding


@dataclass(frozen=True)
class PositionMetrics:
    """Valuation of a single holding at its last known price."""
    holding: Holding
    current_value: float
    cost_basis: float
    unrealized_pl: float
    unrealized_pl_percent: float


def compute_position_metrics(holding: Holding) -> PositionMetrics:
    """
    Value a holding.

    A zero cost basis (gifted or free position) yields a P/L percent of
    exactly 0 rather than an infinite or undefined ratio.
    """
    current_value = holding.quantity * holding.current_price
    cost_basis = holding.quantity * holding.avg_buy_price
    unrealized_pl = current_value - cost_basis
    unrealized_pl_percent = 0.0 if cost_basis == 0 else (unrealized_pl / cost_basis) * 100

    return PositionMetrics(
        holding=holding,
        current_value=current_value,
        cost_basis=cost_basis,
        unrealized_pl=unrealized_pl,
        unrealized_pl_percent=unrealized_pl_percent,
    )
