"""
Season API endpoints.

Return the new or closed season; storing it is the caller's job.
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Query

from league.api.schemas import GroupStateIn, SeasonOut
from league.services.group_metrics import validate_group
from league.services.season_service import end_season, start_season


router = APIRouter()


@router.post("/start", response_model=SeasonOut)
async def start_group_season(
    group: GroupStateIn,
    requested_by: str = Query(...),
    now: Optional[datetime] = None,
):
    """Freeze every member's current value as their season baseline."""
    state = group.to_model()
    validate_group(state.members, state.holdings)
    return SeasonOut.from_model(start_season(state, requested_by, now))


@router.post("/end", response_model=SeasonOut)
async def end_group_season(
    group: GroupStateIn,
    requested_by: str = Query(...),
    now: Optional[datetime] = None,
):
    """Close the active season."""
    state = group.to_model()
    return SeasonOut.from_model(end_season(state, requested_by, now))
