from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from league.models.holding import Holding
from league.models.member import Member
from league.models.portfolio_snapshot import PortfolioSnapshot
from league.models.season import Season


@dataclass(frozen=True)
class GroupState:
    """
    Everything the engine reads about one group.

    Holdings are a flat list keyed to members by member_id. The engine only
    reads this object; callers build a new one when anything changes.
    """
    id: str
    name: str
    members: Sequence[Member] = ()
    holdings: Sequence[Holding] = ()
    portfolio_history: Sequence[PortfolioSnapshot] = ()
    seasons: Sequence[Season] = ()
    current_season_id: Optional[str] = None
    leader_id: Optional[str] = None

    @property
    def current_season(self) -> Optional[Season]:
        if not self.current_season_id:
            return None
        for season in self.seasons:
            if season.id == self.current_season_id:
                return season
        return None

    def member_by_id(self) -> Dict[str, Member]:
        return {m.id: m for m in self.members}

    def holdings_for(self, member_id: str) -> List[Holding]:
        return [h for h in self.holdings if h.member_id == member_id]
