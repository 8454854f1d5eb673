"""
Metrics API endpoints.

Provides:
- Member metrics: positions, value breakdown, all-time and season returns
- Group metrics for a display mode, with allocation and fund holdings
"""
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import Field

from league.api.schemas import CamelModel, GroupStateIn
from league.services.allocation import aggregate_holdings_by_symbol, asset_class_breakdown, cash_ratio
from league.services.group_metrics import (
    MetricsMode,
    ModeMetrics,
    compute_group_metrics,
    get_metrics_for_mode,
    validate_group,
)
from league.services.position_valuator import PositionMetrics
from league.services.season_resolver import compute_season_metrics
from league.services.season_service import resolve_season


router = APIRouter()


# ============================================================================
# Pydantic Response Schemas
# ============================================================================

class PositionOut(CamelModel):
    """Single valued position."""
    id: str
    member_id: str
    symbol: str
    name: str
    asset_class: str
    quantity: float
    avg_buy_price: float
    current_price: float
    current_value: float
    cost_basis: float
    unrealized_pl: float = Field(alias="unrealizedPL")
    unrealized_pl_percent: float = Field(alias="unrealizedPLPercent")

    @classmethod
    def from_metrics(cls, p: PositionMetrics) -> "PositionOut":
        h = p.holding
        return cls(
            id=h.id,
            member_id=h.member_id,
            symbol=h.symbol,
            name=h.name,
            asset_class=h.asset_class,
            quantity=h.quantity,
            avg_buy_price=h.avg_buy_price,
            current_price=h.current_price,
            current_value=p.current_value,
            cost_basis=p.cost_basis,
            unrealized_pl=p.unrealized_pl,
            unrealized_pl_percent=p.unrealized_pl_percent,
        )


class ModeMetricsOut(CamelModel):
    """Value, baseline and return for the selected mode."""
    mode: MetricsMode
    mode_label: str
    current_value: float
    baseline: float
    pl_abs: float
    pl_pct: Optional[float]
    portfolio_value: float
    invested_value: float
    cash_balance: float

    @classmethod
    def from_metrics(cls, m: ModeMetrics) -> "ModeMetricsOut":
        return cls(
            mode=m.mode,
            mode_label=m.mode_label,
            current_value=m.current_value,
            baseline=m.baseline,
            pl_abs=m.pl_abs,
            pl_pct=m.pl_pct,
            portfolio_value=m.portfolio_value,
            invested_value=m.invested_value,
            cash_balance=m.cash_balance,
        )


class MemberMetricsOut(CamelModel):
    """Full metrics for one member."""
    id: str
    name: str
    cash_balance: float
    positions: List[PositionOut]
    invested_value: float
    portfolio_value: float
    total_cost_basis: float
    unrealized_pl: float = Field(alias="unrealizedPL")
    unrealized_pl_percent: float = Field(alias="unrealizedPLPercent")
    total_return: float
    total_return_percent: float
    start_capital: float
    start_capital_is_derived: bool

    season_initial_value: float
    season_current_value: float
    season_return: float
    season_return_percent: float
    has_season_data: bool
    is_late_joiner: bool

    display: ModeMetricsOut


class AllocationSlice(CamelModel):
    name: str
    value: float


class FundHoldingOut(CamelModel):
    symbol: str
    name: str
    asset_class: str
    total_quantity: float
    total_value: float
    total_cost: float
    current_price: float
    holders: List[str]


class GroupMetricsOut(CamelModel):
    """Group totals for a display mode."""
    mode: MetricsMode
    mode_label: str
    current_value: float
    baseline: float
    pl_abs: float
    pl_pct: float
    total_cash: float
    cash_ratio: float
    allocation: List[AllocationSlice]
    top_holdings: List[FundHoldingOut]
    members: List[ModeMetricsOut]


# ============================================================================
# Endpoints
# ============================================================================

@router.post("/members/{member_id}", response_model=MemberMetricsOut)
async def get_member_metrics(
    member_id: str,
    group: GroupStateIn,
    mode: MetricsMode = Query("allTime"),
    season_id: Optional[str] = None,
):
    """Metrics for one member, in both scopes plus the requested display mode."""
    state = group.to_model()
    validate_group(state.members, state.holdings)

    member = state.member_by_id().get(member_id)
    if member is None:
        raise HTTPException(status_code=404, detail=f"Member {member_id} not found")

    season = resolve_season(state, season_id)
    season_metrics = compute_season_metrics(member, state.holdings, season)
    investor = season_metrics.investor
    display = get_metrics_for_mode(member, state.holdings, season, mode)

    return MemberMetricsOut(
        id=member.id,
        name=member.name,
        cash_balance=member.cash_balance,
        positions=[PositionOut.from_metrics(p) for p in investor.positions],
        invested_value=investor.invested_value,
        portfolio_value=investor.portfolio_value,
        total_cost_basis=investor.total_cost_basis,
        unrealized_pl=investor.unrealized_pl,
        unrealized_pl_percent=investor.unrealized_pl_percent,
        total_return=investor.total_return,
        total_return_percent=investor.total_return_percent,
        start_capital=investor.baseline,
        start_capital_is_derived=investor.baseline_is_derived,
        season_initial_value=season_metrics.season_initial_value,
        season_current_value=season_metrics.season_current_value,
        season_return=season_metrics.season_pl_abs,
        season_return_percent=season_metrics.season_pl_percent,
        has_season_data=season_metrics.has_season_data,
        is_late_joiner=season_metrics.is_late_joiner,
        display=ModeMetricsOut.from_metrics(display),
    )


@router.post("/group", response_model=GroupMetricsOut)
async def get_group_metrics(
    group: GroupStateIn,
    mode: MetricsMode = Query("allTime"),
    season_id: Optional[str] = None,
):
    """Group totals, allocation and largest fund holdings."""
    state = group.to_model()
    season = resolve_season(state, season_id)
    metrics = compute_group_metrics(state.members, state.holdings, mode, season)

    total_cash = metrics.total_cash
    breakdown: Dict[str, float] = asset_class_breakdown(state.holdings, total_cash)
    allocation = sorted(breakdown.items(), key=lambda item: item[1], reverse=True)

    return GroupMetricsOut(
        mode=metrics.mode,
        mode_label=metrics.mode_label,
        current_value=metrics.current_value,
        baseline=metrics.baseline,
        pl_abs=metrics.pl_abs,
        pl_pct=metrics.pl_pct,
        total_cash=total_cash,
        cash_ratio=cash_ratio(total_cash, metrics.current_value),
        allocation=[AllocationSlice(name=name, value=value) for name, value in allocation],
        top_holdings=[
            FundHoldingOut(
                symbol=row.symbol,
                name=row.name,
                asset_class=row.asset_class,
                total_quantity=row.total_quantity,
                total_value=row.total_value,
                total_cost=row.total_cost,
                current_price=row.current_price,
                holders=row.holders,
            )
            for row in aggregate_holdings_by_symbol(state)
        ],
        members=[ModeMetricsOut.from_metrics(m) for m in metrics.members],
    )
