"""
Season lifecycle.

Starting a season freezes every member's current portfolio value as their
season baseline. Members who join afterwards never get one for that season:
their season return stays 0 until a new season starts.

Functions return new Season values; persisting them is up to the caller.
"""
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from league.core.exceptions import (
    NoActiveSeasonError,
    NotGroupLeaderError,
    SeasonAlreadyActiveError,
    SeasonNotFoundError,
)
from league.models.group_state import GroupState
from league.models.season import Season
from league.services.investor_metrics import compute_investor_metrics

logger = logging.getLogger(__name__)


def is_group_leader(group: GroupState, member_id: str) -> bool:
    """Explicit leader if set, otherwise the first member."""
    if not group.leader_id and group.members:
        return group.members[0].id == member_id
    return group.leader_id == member_id


def resolve_season(group: GroupState, season_id: Optional[str] = None) -> Optional[Season]:
    """
    Season to measure against.

    Defaults to the group's active season; an ended season can be selected
    explicitly by id.

    Raises:
        SeasonNotFoundError: season_id is not one of the group's seasons
    """
    if season_id is None:
        return group.current_season
    for season in group.seasons:
        if season.id == season_id:
            return season
    raise SeasonNotFoundError(season_id)


def start_season(
    group: GroupState,
    requested_by: str,
    now: Optional[datetime] = None,
) -> Season:
    """
    Open a new season for the group.

    Raises:
        NotGroupLeaderError: caller is not the leader
        SeasonAlreadyActiveError: the group already has a running season
    """
    if not is_group_leader(group, requested_by):
        raise NotGroupLeaderError(requested_by)
    if group.current_season_id:
        raise SeasonAlreadyActiveError(group.current_season_id)

    now = now or datetime.now(timezone.utc)
    number = len(group.seasons) + 1

    member_snapshots = {
        member.id: compute_investor_metrics(member, group.holdings).portfolio_value
        for member in group.members
    }

    season = Season(
        id=f"season_{number}",
        name=f"Season {number}",
        start_time=now,
        member_snapshots=member_snapshots,
        leader_id=requested_by,
    )
    logger.info(f"{season.name} started in group {group.id} with {len(member_snapshots)} investors")
    return season


def end_season(
    group: GroupState,
    requested_by: str,
    now: Optional[datetime] = None,
) -> Season:
    """
    Close the group's active season.

    Raises:
        NoActiveSeasonError: nothing to end
        NotGroupLeaderError: caller is not the leader
    """
    season = group.current_season
    if season is None:
        raise NoActiveSeasonError()
    if not is_group_leader(group, requested_by):
        raise NotGroupLeaderError(requested_by)

    ended = replace(season, end_time=now or datetime.now(timezone.utc))
    logger.info(f"{season.name} ended in group {group.id}")
    return ended
