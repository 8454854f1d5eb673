"""
Season-scoped returns.

Season P/L is measured from the member's portfolio value recorded when the
season started, independent of the all-time baseline.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from league.models.holding import Holding
from league.models.member import Member
from league.models.season import Season
from league.services.investor_metrics import InvestorMetrics, compute_investor_metrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeasonMetrics:
    """Season view of one member."""
    investor: InvestorMetrics
    season_initial_value: float
    season_current_value: float
    season_pl_abs: float
    season_pl_percent: float
    has_season_data: bool
    # Member joined after the season started: no recorded start value
    is_late_joiner: bool = False


def compute_season_metrics(
    member: Member,
    holdings: Sequence[Holding],
    season: Optional[Season],
) -> SeasonMetrics:
    """
    Resolve a member's season baseline and return.

    With no season the result is a zero-return no-op so callers can always
    ask for season figures. A member missing from the season's snapshot map
    is measured against their current value, i.e. a season return of 0.
    """
    investor = compute_investor_metrics(member, holdings)
    current_value = investor.portfolio_value

    if season is None:
        return SeasonMetrics(
            investor=investor,
            season_initial_value=current_value,
            season_current_value=current_value,
            season_pl_abs=0.0,
            season_pl_percent=0.0,
            has_season_data=False,
        )

    is_late_joiner = member.id not in season.member_snapshots
    if is_late_joiner:
        logger.warning(
            f"Member {member.id} has no start value for {season.id}; season return pinned at 0"
        )
        initial_value = current_value
    else:
        initial_value = season.member_snapshots[member.id]

    season_pl_abs = current_value - initial_value
    season_pl_percent = 0.0 if initial_value == 0 else (season_pl_abs / initial_value) * 100

    return SeasonMetrics(
        investor=investor,
        season_initial_value=initial_value,
        season_current_value=current_value,
        season_pl_abs=season_pl_abs,
        season_pl_percent=season_pl_percent,
        has_season_data=True,
        is_late_joiner=is_late_joiner,
    )
