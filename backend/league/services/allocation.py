"""
Allocation views over group holdings.

Provides:
- Value per asset class, with cash as its own bucket
- Fund view: holdings merged by symbol across members
- Cash share of the group's value
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from league.core.config import settings
from league.models.group_state import GroupState
from league.models.holding import Holding

CASH_BUCKET = "CASH"


@dataclass
class AggregatedHolding:
    """One symbol summed over every member holding it."""
    symbol: str
    name: str
    asset_class: str
    current_price: float
    total_quantity: float = 0.0
    total_value: float = 0.0
    total_cost: float = 0.0
    holders: List[str] = field(default_factory=list)

    @property
    def unrealized_pl(self) -> float:
        return self.total_value - self.total_cost


def asset_class_breakdown(holdings: Sequence[Holding], cash: float = 0.0) -> Dict[str, float]:
    """Current value per asset class; cash is added when positive."""
    breakdown: Dict[str, float] = {}
    for h in holdings:
        breakdown[h.asset_class] = breakdown.get(h.asset_class, 0.0) + h.quantity * h.current_price
    if cash > 0:
        breakdown[CASH_BUCKET] = cash
    return breakdown


def aggregate_holdings_by_symbol(
    group: GroupState,
    limit: Optional[int] = settings.TOP_HOLDINGS_COUNT,
) -> List[AggregatedHolding]:
    """Merge holdings by symbol, largest value first."""
    names = {m.id: m.name for m in group.members}
    aggregated: Dict[str, AggregatedHolding] = {}

    for h in group.holdings:
        row = aggregated.get(h.symbol)
        if row is None:
            row = AggregatedHolding(
                symbol=h.symbol,
                name=h.name,
                asset_class=h.asset_class,
                current_price=h.current_price,
            )
            aggregated[h.symbol] = row
        row.total_quantity += h.quantity
        row.total_value += h.quantity * h.current_price
        row.total_cost += h.quantity * h.avg_buy_price
        holder = names.get(h.member_id)
        if holder and holder not in row.holders:
            row.holders.append(holder)

    rows = sorted(aggregated.values(), key=lambda r: r.total_value, reverse=True)
    return rows[:limit] if limit is not None else rows


def cash_ratio(total_cash: float, total_value: float) -> float:
    """Cash as a percent of total value (0 when the group holds nothing)."""
    if total_value <= 0:
        return 0.0
    return (total_cash / total_value) * 100
