"""
Mode-aware metrics for members and whole groups.

Provides:
- Per-member metrics for the selected display mode (all-time or season)
- Group totals built by summing member values and baselines
- Structural validation of a group's members and holdings

Group P/L percent is always derived from summed values and summed
baselines. The mean of member percents is a different statistic and lives
in the leaderboard as "average return".
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Sequence

from league.core.exceptions import DuplicateInvestorError, UnknownInvestorError
from league.models.holding import Holding
from league.models.member import Member
from league.models.season import Season
from league.services.investor_metrics import InvestorMetrics, compute_investor_metrics
from league.services.season_resolver import compute_season_metrics

logger = logging.getLogger(__name__)

MetricsMode = Literal["allTime", "season"]

MODE_LABELS: Dict[str, str] = {
    "allTime": "All Time",
    "season": "Season",
}


@dataclass(frozen=True)
class ModeMetrics:
    """One member's value, baseline and return for a display mode."""
    mode: MetricsMode
    mode_label: str
    investor: InvestorMetrics
    current_value: float
    baseline: float
    pl_abs: float
    # None when the baseline is not positive; rendered as a placeholder
    pl_pct: Optional[float]

    @property
    def member_id(self) -> str:
        return self.investor.member.id

    @property
    def portfolio_value(self) -> float:
        return self.investor.portfolio_value

    @property
    def invested_value(self) -> float:
        return self.investor.invested_value

    @property
    def cash_balance(self) -> float:
        return self.investor.member.cash_balance


@dataclass(frozen=True)
class GroupModeMetrics:
    """Group totals for a display mode plus the member rows behind them."""
    mode: MetricsMode
    mode_label: str
    current_value: float
    baseline: float
    pl_abs: float
    pl_pct: float
    members: List[ModeMetrics]

    @property
    def total_cash(self) -> float:
        return sum(m.cash_balance for m in self.members)


def percent_or_none(change: float, base: float) -> Optional[float]:
    """Percent change, or None when the base cannot carry a ratio."""
    if base <= 0:
        return None
    return (change / base) * 100


def validate_group(members: Sequence[Member], holdings: Sequence[Holding]) -> None:
    """
    Fail loudly on structurally broken input.

    Raises:
        DuplicateInvestorError: a member id occurs twice
        UnknownInvestorError: a holding points at a member not in the group
    """
    seen = set()
    for member in members:
        if member.id in seen:
            raise DuplicateInvestorError(member.id)
        seen.add(member.id)

    for holding in holdings:
        if holding.member_id not in seen:
            raise UnknownInvestorError(holding.id, holding.member_id)


def get_metrics_for_mode(
    member: Member,
    holdings: Sequence[Holding],
    season: Optional[Season],
    mode: MetricsMode,
) -> ModeMetrics:
    """
    Metrics for one member in the requested mode.

    Season mode without a season falls back to the season no-op contract
    (baseline = current value, zero return).
    """
    if mode == "season":
        season_metrics = compute_season_metrics(member, holdings, season)
        investor = season_metrics.investor
        current_value = season_metrics.season_current_value
        baseline = season_metrics.season_initial_value
    else:
        investor = compute_investor_metrics(member, holdings)
        current_value = investor.portfolio_value
        baseline = investor.baseline

    pl_abs = current_value - baseline

    return ModeMetrics(
        mode=mode,
        mode_label=MODE_LABELS[mode],
        investor=investor,
        current_value=current_value,
        baseline=baseline,
        pl_abs=pl_abs,
        pl_pct=percent_or_none(pl_abs, baseline),
    )


def compute_group_metrics(
    members: Sequence[Member],
    holdings: Sequence[Holding],
    mode: MetricsMode = "allTime",
    season: Optional[Season] = None,
) -> GroupModeMetrics:
    """
    Sum member metrics into group totals for a mode.

    Args:
        members: All members of the group, in display order
        holdings: All holdings of the group
        mode: "allTime" or "season"
        season: Season used when mode is "season"

    Returns:
        GroupModeMetrics with one row per member, in input order
    """
    validate_group(members, holdings)

    rows = [get_metrics_for_mode(m, holdings, season, mode) for m in members]

    current_value = sum(r.current_value for r in rows)
    baseline = sum(r.baseline for r in rows)
    pl_abs = current_value - baseline
    pl_pct = 0.0 if baseline == 0 else (pl_abs / baseline) * 100

    logger.debug(
        f"Group totals ({mode}): members={len(rows)} value={current_value:.2f} "
        f"baseline={baseline:.2f} pl={pl_pct:.2f}%"
    )

    return GroupModeMetrics(
        mode=mode,
        mode_label=MODE_LABELS[mode],
        current_value=current_value,
        baseline=baseline,
        pl_abs=pl_abs,
        pl_pct=pl_pct,
        members=rows,
    )
