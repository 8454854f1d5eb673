"""
Performance API endpoints for charting.

Provides:
- Race chart: every member (optionally the group) as percent or value lines
- Value history for a single member or the group
"""
from datetime import datetime
from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, HTTPException, Query

from league.api.schemas import CamelModel, GroupStateIn
from league.core.config import settings
from league.services.group_metrics import MetricsMode, compute_group_metrics
from league.services.season_service import resolve_season
from league.services.time_series import (
    Timeframe,
    ValueKind,
    derive_group_history,
    group_series_spec,
    member_series_specs,
    time_series_synthesizer,
)


router = APIRouter()


# ============================================================================
# Pydantic Response Schemas
# ============================================================================

class ChartPointOut(CamelModel):
    """One x-axis position with a value per series."""
    timestamp: datetime
    label: str
    values: Dict[str, float]


class ChartOut(CamelModel):
    mode: MetricsMode
    timeframe: Timeframe
    value_kind: ValueKind
    series_labels: Dict[str, str]
    points: List[ChartPointOut]
    is_placeholder: bool


class ValuePointOut(CamelModel):
    timestamp: datetime
    value: float
    label: str


class ValueHistoryOut(CamelModel):
    timeframe: Timeframe
    points: List[ValuePointOut]
    pnl_value: float
    pnl_percent: float
    is_positive: bool
    data_points: int


# ============================================================================
# Endpoints
# ============================================================================

@router.post("/series", response_model=ChartOut)
async def get_performance_series(
    group: GroupStateIn,
    mode: MetricsMode = Query("allTime"),
    timeframe: Timeframe = Query(settings.DEFAULT_TIMEFRAME),
    value_kind: ValueKind = Query("percent"),
    include: Literal["members", "group", "both"] = Query("members"),
    season_id: Optional[str] = None,
    now: Optional[datetime] = None,
):
    """Aligned chart series for the leaderboard race or the group overview."""
    state = group.to_model()
    season = resolve_season(state, season_id)
    metrics = compute_group_metrics(state.members, state.holdings, mode, season)

    history = list(state.portfolio_history)
    series = []
    if include in ("members", "both"):
        series.extend(member_series_specs(metrics))
    if include in ("group", "both"):
        if not any(s.entity_id == state.id for s in history):
            history.extend(derive_group_history(history, state.id))
        series.append(group_series_spec(metrics, state.id, state.name or "Group"))

    chart = time_series_synthesizer.synthesize(
        history,
        series,
        timeframe=timeframe,
        mode=mode,
        now=now,
        value_kind=value_kind,
    )
    return ChartOut(
        mode=chart.mode,
        timeframe=chart.timeframe,
        value_kind=chart.value_kind,
        series_labels=chart.series_labels,
        points=[ChartPointOut(timestamp=p.timestamp, label=p.label, values=p.values) for p in chart.points],
        is_placeholder=chart.is_placeholder,
    )


@router.post("/history/{entity_id}", response_model=ValueHistoryOut)
async def get_value_history(
    entity_id: str,
    group: GroupStateIn,
    timeframe: Timeframe = Query("1W"),
    now: Optional[datetime] = None,
):
    """Absolute value history for a member, or for the group when entity_id is the group id."""
    state = group.to_model()
    metrics = compute_group_metrics(state.members, state.holdings)
    history = list(state.portfolio_history)

    if entity_id == state.id:
        if not any(s.entity_id == state.id for s in history):
            history = derive_group_history(history, state.id)
        current_value = metrics.current_value
        cost_basis = sum(m.investor.total_cost_basis for m in metrics.members)
    else:
        row = next((m for m in metrics.members if m.member_id == entity_id), None)
        if row is None:
            raise HTTPException(status_code=404, detail=f"Member {entity_id} not found")
        current_value = row.current_value
        cost_basis = row.investor.total_cost_basis

    result = time_series_synthesizer.value_history(
        history,
        entity_id,
        current_value=current_value,
        total_cost_basis=cost_basis,
        timeframe=timeframe,
        now=now,
    )
    return ValueHistoryOut(
        timeframe=result.timeframe,
        points=[ValuePointOut(timestamp=p.timestamp, value=p.value, label=p.label) for p in result.points],
        pnl_value=result.pnl_value,
        pnl_percent=result.pnl_percent,
        is_positive=result.is_positive,
        data_points=result.data_points,
    )
