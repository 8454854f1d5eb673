"""
Leaderboard construction.

Provides:
- Members ranked by return percent for the active display mode
- Group statistics (total value, total P/L, average return)
- Best and worst open positions across the whole group

Ties keep the members' input order: ranking uses Python's stable sort and
no secondary key.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from league.core.config import settings
from league.models.holding import Holding
from league.models.member import Member
from league.models.season import Season
from league.services.group_metrics import (
    GroupModeMetrics,
    MetricsMode,
    ModeMetrics,
    compute_group_metrics,
)
from league.services.position_valuator import PositionMetrics, compute_position_metrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaderboardEntry:
    """A ranked member row."""
    rank: int
    member: Member
    total_value: float
    cost_basis: float
    baseline: float
    pnl: float
    pnl_percent: Optional[float]
    holding_count: int


@dataclass(frozen=True)
class TradeEntry:
    """An open position surfaced as a best or worst trade."""
    position: PositionMetrics
    member_name: str

    @property
    def pnl(self) -> float:
        return self.position.unrealized_pl

    @property
    def pnl_percent(self) -> float:
        return self.position.unrealized_pl_percent


@dataclass(frozen=True)
class Leaderboard:
    """Everything the leaderboard view renders."""
    mode: MetricsMode
    mode_label: str
    entries: List[LeaderboardEntry]
    total_group_value: float
    total_group_pnl: float
    # Mean of member percents; not the group P/L percent
    average_return: float
    group_pl_pct: float
    best_trades: List[TradeEntry]
    worst_trades: List[TradeEntry]


def _rank_key(row: ModeMetrics) -> float:
    # Unavailable percents rank as flat
    return row.pl_pct if row.pl_pct is not None else 0.0


class LeaderboardBuilder:
    """
    Build the leaderboard from group state.

    Pure: every call recomputes from the arguments it is given.
    """

    def __init__(self, trade_count: int = settings.LEADERBOARD_TRADE_COUNT):
        self.trade_count = trade_count

    def build(
        self,
        members: Sequence[Member],
        holdings: Sequence[Holding],
        mode: MetricsMode = "allTime",
        season: Optional[Season] = None,
    ) -> Leaderboard:
        """
        Rank members and collect group statistics.

        Args:
            members: Group members in their stored order (used for ties)
            holdings: All group holdings
            mode: Display mode ranking is based on
            season: Active season for "season" mode

        Returns:
            Leaderboard
        """
        group = compute_group_metrics(members, holdings, mode, season)
        entries = self.rank(group)

        total_group_value = sum(e.total_value for e in entries)
        total_group_pnl = sum(e.pnl for e in entries)
        average_return = self.average_return(group.members)

        best, worst = self.best_and_worst_trades(members, holdings)

        logger.debug(
            f"Leaderboard ({mode}): {len(entries)} members, avg return {average_return:.2f}%"
        )

        return Leaderboard(
            mode=mode,
            mode_label=group.mode_label,
            entries=entries,
            total_group_value=total_group_value,
            total_group_pnl=total_group_pnl,
            average_return=average_return,
            group_pl_pct=group.pl_pct,
            best_trades=best,
            worst_trades=worst,
        )

    def rank(self, group: GroupModeMetrics) -> List[LeaderboardEntry]:
        """Order member rows by return percent, highest first."""
        ordered = sorted(group.members, key=_rank_key, reverse=True)
        return [
            LeaderboardEntry(
                rank=i + 1,
                member=row.investor.member,
                total_value=row.current_value,
                cost_basis=row.investor.total_cost_basis,
                baseline=row.baseline,
                pnl=row.pl_abs,
                pnl_percent=row.pl_pct,
                holding_count=len(row.investor.positions),
            )
            for i, row in enumerate(ordered)
        ]

    def average_return(self, rows: Sequence[ModeMetrics]) -> float:
        """Unweighted mean of member return percents (0 for an empty group)."""
        if not rows:
            return 0.0
        return sum(_rank_key(r) for r in rows) / len(rows)

    def best_and_worst_trades(
        self,
        members: Sequence[Member],
        holdings: Sequence[Holding],
    ) -> tuple[List[TradeEntry], List[TradeEntry]]:
        """
        Pick the best and worst open positions.

        Both lists come from one descending sort by P/L percent. Best takes
        the head of the winners. Worst takes the tail of the losers and
        reverses it, so the biggest loser comes first.
        """
        names = {m.id: m.name for m in members}
        trades = sorted(
            (TradeEntry(compute_position_metrics(h), names[h.member_id]) for h in holdings),
            key=lambda t: t.pnl_percent,
            reverse=True,
        )

        n = self.trade_count
        winners = [t for t in trades if t.pnl_percent > 0]
        losers = [t for t in trades if t.pnl_percent < 0]

        best = winners[:n]
        worst = list(reversed(losers[-n:])) if n > 0 else []
        return best, worst


# Singleton instance for convenience
leaderboard_builder = LeaderboardBuilder()
