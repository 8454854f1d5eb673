"""
Snapshot recording and history maintenance.

Provides:
- An append-only snapshot repository interface and in-memory implementation
- Throttled recording of member and group snapshots after a price refresh
- Downsampling per timeframe and age-based pruning (both return copies)

The engine only reads history through SnapshotRepository; nothing here
rewrites or deletes a recorded snapshot.
"""
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from league.core.config import settings
from league.models.group_state import GroupState
from league.models.portfolio_snapshot import PortfolioSnapshot
from league.services.investor_metrics import compute_investor_metrics
from league.services.time_series import Timeframe, as_utc, timeframe_cutoff

logger = logging.getLogger(__name__)

MAX_POINTS: Dict[str, int] = {
    "1D": 96,   # every 15 minutes
    "1W": 42,   # every 4 hours
    "1M": 30,   # daily
    "1Y": 52,   # weekly
    "YTD": 52,
    "ALL": 100,
}


class SnapshotRepository(Protocol):
    """Read/append access to the snapshot log."""

    def list_snapshots(self, entity_id: Optional[str] = None) -> List[PortfolioSnapshot]:
        ...

    def append(self, snapshot: PortfolioSnapshot) -> None:
        ...


class InMemorySnapshotRepository:
    """Append-only snapshot log held in process memory."""

    def __init__(self, snapshots: Iterable[PortfolioSnapshot] = ()):
        self._snapshots: List[PortfolioSnapshot] = list(snapshots)

    def list_snapshots(self, entity_id: Optional[str] = None) -> List[PortfolioSnapshot]:
        if entity_id is None:
            return list(self._snapshots)
        return [s for s in self._snapshots if s.entity_id == entity_id]

    def append(self, snapshot: PortfolioSnapshot) -> None:
        self._snapshots.append(snapshot)

    def __len__(self) -> int:
        return len(self._snapshots)


def should_record_snapshot(
    last: Optional[PortfolioSnapshot],
    now: datetime,
    min_interval: timedelta = timedelta(minutes=settings.SNAPSHOT_MIN_INTERVAL_MINUTES),
) -> bool:
    """True when no snapshot exists yet or the last one is old enough."""
    if last is None:
        return True
    return as_utc(now) - as_utc(last.timestamp) >= min_interval


def build_member_snapshots(group: GroupState, now: datetime) -> List[PortfolioSnapshot]:
    """Current value and cost basis of every member, stamped with now."""
    snapshots = []
    for member in group.members:
        metrics = compute_investor_metrics(member, group.holdings)
        snapshots.append(
            PortfolioSnapshot(
                timestamp=now,
                entity_id=member.id,
                total_value=metrics.portfolio_value,
                cost_basis=metrics.total_cost_basis,
                scope="member",
            )
        )
    return snapshots


def build_group_snapshot(group: GroupState, now: datetime) -> PortfolioSnapshot:
    members = build_member_snapshots(group, now)
    return PortfolioSnapshot(
        timestamp=now,
        entity_id=group.id,
        total_value=sum(s.total_value for s in members),
        cost_basis=sum(s.cost_basis for s in members),
        scope="group",
    )


def record_group_snapshots(
    repository: SnapshotRepository,
    group: GroupState,
    now: Optional[datetime] = None,
    member_interval: timedelta = timedelta(minutes=settings.SNAPSHOT_MIN_INTERVAL_MINUTES),
    group_interval: timedelta = timedelta(seconds=settings.GROUP_SNAPSHOT_MIN_INTERVAL_SECONDS),
) -> List[PortfolioSnapshot]:
    """
    Append snapshots for every member and for the group after a refresh.

    Each scope is throttled independently against its own last snapshot.

    Returns:
        The snapshots that were appended
    """
    if not group.members:
        return []

    now = now or datetime.now(timezone.utc)
    recorded = []

    for snapshot in build_member_snapshots(group, now):
        history = repository.list_snapshots(snapshot.entity_id)
        if should_record_snapshot(history[-1] if history else None, now, member_interval):
            repository.append(snapshot)
            recorded.append(snapshot)

    group_history = repository.list_snapshots(group.id)
    if should_record_snapshot(group_history[-1] if group_history else None, now, group_interval):
        snapshot = build_group_snapshot(group, now)
        repository.append(snapshot)
        recorded.append(snapshot)

    logger.info(f"Recorded {len(recorded)} snapshots for group {group.id}")
    return recorded


def downsample_snapshots(
    snapshots: Sequence[PortfolioSnapshot],
    timeframe: Timeframe,
    now: datetime,
    entity_id: Optional[str] = None,
) -> List[PortfolioSnapshot]:
    """
    Window, sort and thin out snapshots for display.

    Keeps evenly spaced points up to the timeframe's cap, always including
    the latest one.
    """
    selected = [s for s in snapshots if entity_id is None or s.entity_id == entity_id]
    if not selected:
        return []

    cutoff = timeframe_cutoff(timeframe, now)
    if cutoff is not None:
        cutoff_ts = as_utc(cutoff)
        selected = [s for s in selected if as_utc(s.timestamp) >= cutoff_ts]
    selected.sort(key=lambda s: as_utc(s.timestamp))

    max_points = MAX_POINTS[timeframe]
    if len(selected) <= max_points:
        return selected

    step = len(selected) / max_points
    result = [selected[math.floor(i * step)] for i in range(max_points)]
    if result[-1] is not selected[-1]:
        result.append(selected[-1])
    return result


def prune_expired(
    snapshots: Iterable[PortfolioSnapshot],
    now: datetime,
    max_age: timedelta = timedelta(days=settings.SNAPSHOT_RETENTION_DAYS),
) -> List[PortfolioSnapshot]:
    """Snapshots no older than max_age, as a new list."""
    cutoff = as_utc(now - max_age)
    return [s for s in snapshots if as_utc(s.timestamp) >= cutoff]
