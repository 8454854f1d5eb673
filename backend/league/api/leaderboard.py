"""
Leaderboard API endpoint.
"""
from typing import List, Optional

from fastapi import APIRouter, Query

from league.api.schemas import CamelModel, GroupStateIn
from league.services.group_metrics import MetricsMode
from league.services.leaderboard import TradeEntry, leaderboard_builder
from league.services.season_service import resolve_season


router = APIRouter()

# ---------- Pydantic Schemas ----------

class RankingOut(CamelModel):
    rank: int
    member_id: str
    name: str
    color_hue: int
    total_value: float
    cost_basis: float
    baseline: float
    pnl: float
    pnl_percent: Optional[float]
    holding_count: int


class TradeOut(CamelModel):
    holding_id: str
    member_id: str
    member_name: str
    symbol: str
    name: str
    pnl: float
    pnl_percent: float

    @classmethod
    def from_entry(cls, t: TradeEntry) -> "TradeOut":
        h = t.position.holding
        return cls(
            holding_id=h.id,
            member_id=h.member_id,
            member_name=t.member_name,
            symbol=h.symbol,
            name=h.name,
            pnl=t.pnl,
            pnl_percent=t.pnl_percent,
        )


class LeaderboardOut(CamelModel):
    mode: MetricsMode
    mode_label: str
    season_id: Optional[str]
    rankings: List[RankingOut]
    total_group_value: float
    total_group_pnl: float
    avg_return: float
    group_pl_pct: float
    best_trades: List[TradeOut]
    worst_trades: List[TradeOut]


# ---------- Endpoints ----------

@router.post("", response_model=LeaderboardOut)
async def get_leaderboard(
    group: GroupStateIn,
    mode: MetricsMode = Query("allTime"),
    season_id: Optional[str] = None,
):
    """Members ranked by return percent with group statistics."""
    state = group.to_model()
    season = resolve_season(state, season_id)
    board = leaderboard_builder.build(state.members, state.holdings, mode, season)

    return LeaderboardOut(
        mode=board.mode,
        mode_label=board.mode_label,
        season_id=season.id if season and mode == "season" else None,
        rankings=[
            RankingOut(
                rank=e.rank,
                member_id=e.member.id,
                name=e.member.name,
                color_hue=e.member.color_hue,
                total_value=e.total_value,
                cost_basis=e.cost_basis,
                baseline=e.baseline,
                pnl=e.pnl,
                pnl_percent=e.pnl_percent,
                holding_count=e.holding_count,
            )
            for e in board.entries
        ],
        total_group_value=board.total_group_value,
        total_group_pnl=board.total_group_pnl,
        avg_return=board.average_return,
        group_pl_pct=board.group_pl_pct,
        best_trades=[TradeOut.from_entry(t) for t in board.best_trades],
        worst_trades=[TradeOut.from_entry(t) for t in board.worst_trades],
    )
