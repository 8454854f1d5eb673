"""
Investor-level aggregation.

Provides:
- Portfolio value (cash + positions at current price)
- All-time baseline resolution
- All-time return, kept apart from holdings-only unrealized P/L
"""
import logging
from dataclasses import dataclass
from typing import List, Sequence

from league.models.holding import Holding
from league.models.member import Member
from league.services.position_valuator import PositionMetrics, compute_position_metrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvestorMetrics:
    """Current value breakdown and all-time return for one member."""
    member: Member
    positions: List[PositionMetrics]
    invested_value: float
    portfolio_value: float
    total_cost_basis: float

    # Holdings only, cash ignored
    unrealized_pl: float
    unrealized_pl_percent: float

    # Cash + holdings against the baseline
    baseline: float
    baseline_is_derived: bool
    total_return: float
    total_return_percent: float

    @property
    def cash_balance(self) -> float:
        return self.member.cash_balance


def resolve_baseline(member: Member, total_cost_basis: float) -> float:
    """
    All-time baseline for a member.

    Explicit initial capital wins. Otherwise assume no gain before tracking
    began: cash plus cost basis. That fallback understates the return of
    anyone who was already in profit when their profile was created.
    """
    if member.initial_capital is not None:
        return member.initial_capital
    return member.cash_balance + total_cost_basis


def compute_investor_metrics(member: Member, holdings: Sequence[Holding]) -> InvestorMetrics:
    """
    Aggregate a member's positions and cash.

    Args:
        member: The investor
        holdings: All holdings of the group; filtered to this member here

    Returns:
        InvestorMetrics for the member
    """
    positions = [compute_position_metrics(h) for h in holdings if h.member_id == member.id]

    invested_value = sum(p.current_value for p in positions)
    total_cost_basis = sum(p.cost_basis for p in positions)
    portfolio_value = member.cash_balance + invested_value

    baseline = resolve_baseline(member, total_cost_basis)
    total_return = portfolio_value - baseline
    total_return_percent = 0.0 if baseline == 0 else (total_return / baseline) * 100

    unrealized_pl = invested_value - total_cost_basis
    unrealized_pl_percent = 0.0 if total_cost_basis == 0 else (unrealized_pl / total_cost_basis) * 100

    logger.debug(
        f"Investor {member.id}: value={portfolio_value:.2f} baseline={baseline:.2f} "
        f"return={total_return_percent:.2f}%"
    )

    return InvestorMetrics(
        member=member,
        positions=positions,
        invested_value=invested_value,
        portfolio_value=portfolio_value,
        total_cost_basis=total_cost_basis,
        unrealized_pl=unrealized_pl,
        unrealized_pl_percent=unrealized_pl_percent,
        baseline=baseline,
        baseline_is_derived=member.initial_capital is None,
        total_return=total_return,
        total_return_percent=total_return_percent,
    )
