"""
Chart series synthesis from the snapshot log.

Provides:
- Timeframe cutoffs (1D, 1W, 1M, 1Y, YTD, ALL)
- Multi-series percent/absolute chart data aligned on a shared time axis
- Group history derived from member snapshots (per-minute buckets)
- Single-scope value history with range P/L

Snapshots are sparse and irregular. Each series is forward-filled onto the
union of all timestamps; nothing is interpolated.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Literal, Optional, Sequence

import pandas as pd

from league.core.config import settings
from league.models.portfolio_snapshot import PortfolioSnapshot
from league.services.group_metrics import GroupModeMetrics, MetricsMode

logger = logging.getLogger(__name__)

Timeframe = Literal["1D", "1W", "1M", "1Y", "YTD", "ALL"]
ValueKind = Literal["percent", "absolute"]

TIMEFRAME_WINDOWS: Dict[str, timedelta] = {
    "1D": timedelta(days=1),
    "1W": timedelta(days=7),
    "1M": timedelta(days=30),
    "1Y": timedelta(days=365),
}

SINGLE_POINT_OFFSET = pd.Timedelta(milliseconds=1)


@dataclass(frozen=True)
class SeriesSpec:
    """One line on the chart and the figures needed to anchor it."""
    key: str
    entity_id: str
    baseline: float
    current_value: float
    current_return_pct: float = 0.0
    label: Optional[str] = None


@dataclass(frozen=True)
class ChartPoint:
    timestamp: datetime
    label: str
    values: Dict[str, float]


@dataclass(frozen=True)
class ChartData:
    """Aligned multi-series chart output."""
    mode: MetricsMode
    timeframe: Timeframe
    value_kind: ValueKind
    series_labels: Dict[str, str]
    points: List[ChartPoint] = field(default_factory=list)
    # True when no series had data in the window and a flat stub was drawn
    is_placeholder: bool = False


@dataclass(frozen=True)
class ValuePoint:
    timestamp: datetime
    value: float
    label: str = ""


@dataclass(frozen=True)
class ValueHistory:
    """Absolute value history for one scope with the P/L over the range."""
    timeframe: Timeframe
    points: List[ValuePoint]
    pnl_value: float
    pnl_percent: float
    is_positive: bool
    data_points: int


def as_utc(value: datetime) -> pd.Timestamp:
    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def timeframe_cutoff(timeframe: Timeframe, now: datetime) -> Optional[datetime]:
    """
    Earliest timestamp inside a timeframe, or None for unbounded.

    YTD starts at midnight on January 1st in now's timezone.
    """
    if timeframe == "ALL":
        return None
    if timeframe == "YTD":
        return now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    return now - TIMEFRAME_WINDOWS[timeframe]


def format_axis_label(ts: datetime, timeframe: Timeframe) -> str:
    if timeframe == "1D":
        return f"{ts:%H:%M}"
    return f"{ts:%b} {ts.day}"


def snapshots_to_frame(snapshots: Iterable[PortfolioSnapshot]) -> pd.DataFrame:
    """Tabulate snapshots; timestamps normalised to UTC, input order kept."""
    frame = pd.DataFrame.from_records(
        [
            (s.timestamp, s.entity_id, s.scope, float(s.total_value), float(s.cost_basis))
            for s in snapshots
        ],
        columns=["timestamp", "entity_id", "scope", "total_value", "cost_basis"],
    )
    if not frame.empty:
        frame["timestamp"] = pd.to_datetime(frame["timestamp"], utc=True)
    return frame


def member_series_specs(group_metrics: GroupModeMetrics) -> List[SeriesSpec]:
    """One series per member, anchored on the member's mode baseline."""
    return [
        SeriesSpec(
            key=row.member_id,
            entity_id=row.member_id,
            baseline=row.baseline,
            current_value=row.current_value,
            current_return_pct=row.pl_pct if row.pl_pct is not None else 0.0,
            label=row.investor.member.name,
        )
        for row in group_metrics.members
    ]


def group_series_spec(group_metrics: GroupModeMetrics, group_id: str, label: str = "Group") -> SeriesSpec:
    return SeriesSpec(
        key=group_id,
        entity_id=group_id,
        baseline=group_metrics.baseline,
        current_value=group_metrics.current_value,
        current_return_pct=group_metrics.pl_pct,
        label=label,
    )


def derive_group_history(
    snapshots: Iterable[PortfolioSnapshot],
    group_id: str,
    bucket_seconds: int = settings.GROUP_BUCKET_SECONDS,
) -> List[PortfolioSnapshot]:
    """
    Build group-scope snapshots by summing member snapshots per time bucket.

    Only members with a snapshot inside a bucket contribute to that bucket.
    """
    frame = snapshots_to_frame(snapshots)
    if frame.empty:
        return []
    frame = frame[frame["scope"] == "member"]
    if frame.empty:
        return []

    buckets = frame["timestamp"].dt.floor(f"{bucket_seconds}s")
    summed = frame.groupby(buckets)[["total_value", "cost_basis"]].sum().sort_index()

    return [
        PortfolioSnapshot(
            timestamp=ts.to_pydatetime(),
            entity_id=group_id,
            total_value=float(row.total_value),
            cost_basis=float(row.cost_basis),
            scope="group",
        )
        for ts, row in summed.iterrows()
    ]


class TimeSeriesSynthesizer:
    """
    Turn the snapshot log into aligned chart series.

    Stateless: output depends only on the arguments of each call.
    """

    def synthesize(
        self,
        snapshots: Iterable[PortfolioSnapshot],
        series: Sequence[SeriesSpec],
        timeframe: Timeframe = "ALL",
        mode: MetricsMode = "allTime",
        now: Optional[datetime] = None,
        value_kind: ValueKind = "percent",
    ) -> ChartData:
        """
        Align every series on the union of their snapshot timestamps.

        Args:
            snapshots: Snapshot log, any mix of scopes
            series: Lines to draw, in legend order
            timeframe: Window the chart covers
            mode: "season" anchors percent on the season start value,
                "allTime" on the first value in the window
            now: Reference time for the window and for stub points
            value_kind: "percent" of base or "absolute" value

        Returns:
            ChartData with one point per distinct timestamp
        """
        now = now or datetime.now(timezone.utc)
        now_ts = as_utc(now)
        cutoff = timeframe_cutoff(timeframe, now)
        cutoff_ts = as_utc(cutoff) if cutoff is not None else None

        labels = {spec.key: spec.label or spec.key for spec in series}
        chart = ChartData(mode=mode, timeframe=timeframe, value_kind=value_kind, series_labels=labels)
        if not series:
            return chart

        frame = snapshots_to_frame(snapshots)

        prepared = []
        for spec in series:
            raw = self._window(frame, spec.entity_id, cutoff_ts)
            prepared.append((spec, self._prepare(spec, raw, mode, now_ts, value_kind)))

        if all(p["stub"] for _, p in prepared):
            return self._placeholder(chart, series, now_ts, value_kind)

        axis = pd.DatetimeIndex([], tz="UTC")
        for _, p in prepared:
            axis = axis.union(p["values"].index)

        columns = {}
        for spec, p in prepared:
            aligned = p["values"].reindex(axis).ffill().fillna(p["leading"])
            if value_kind == "percent" and not p["stub"]:
                aligned = (aligned - p["base"]) / p["base"] * 100
            columns[spec.key] = aligned

        table = pd.DataFrame(columns, index=axis)
        points = [
            ChartPoint(
                timestamp=ts.to_pydatetime(),
                label=format_axis_label(ts, timeframe),
                values={key: float(row[key]) for key in table.columns},
            )
            for ts, row in table.iterrows()
        ]

        logger.debug(
            f"Synthesized {len(points)} points for {len(series)} series ({mode}, {timeframe})"
        )
        return ChartData(
            mode=mode,
            timeframe=timeframe,
            value_kind=value_kind,
            series_labels=labels,
            points=points,
        )

    def _window(
        self,
        frame: pd.DataFrame,
        entity_id: str,
        cutoff_ts: Optional[pd.Timestamp],
    ) -> pd.Series:
        if frame.empty:
            return pd.Series([], index=pd.DatetimeIndex([], tz="UTC"), dtype=float)
        rows = frame[frame["entity_id"] == entity_id]
        if cutoff_ts is not None:
            rows = rows[rows["timestamp"] >= cutoff_ts]
        rows = rows.sort_values("timestamp", kind="stable")
        return pd.Series(
            rows["total_value"].to_numpy(dtype=float),
            index=pd.DatetimeIndex(rows["timestamp"]),
        )

    def _prepare(
        self,
        spec: SeriesSpec,
        raw: pd.Series,
        mode: MetricsMode,
        now_ts: pd.Timestamp,
        value_kind: ValueKind,
    ) -> dict:
        """Resolve base, leading fill and the de-duplicated points of a series."""
        if raw.empty:
            return self._stub(spec, now_ts, value_kind)

        values = raw[~raw.index.duplicated(keep="last")]
        if len(values) == 1:
            values = pd.concat([
                values,
                pd.Series([values.iloc[0]], index=pd.DatetimeIndex([values.index[0] + SINGLE_POINT_OFFSET])),
            ])

        first_value = float(values.iloc[0])
        base_candidate = spec.baseline if mode == "season" else first_value
        base = self.resolve_base(base_candidate, first_value, spec.key)
        leading = spec.baseline if mode == "season" else first_value

        return {"stub": False, "values": values, "base": base, "leading": leading}

    def _stub(self, spec: SeriesSpec, now_ts: pd.Timestamp, value_kind: ValueKind) -> dict:
        """
        A series with no data in the window joins the chart at now.

        In percent mode it is drawn from 0 to its current return directly,
        so a non-positive baseline never reaches the percent conversion.
        """
        index = pd.DatetimeIndex([now_ts])
        if value_kind == "percent":
            return {"stub": True, "values": pd.Series([spec.current_return_pct], index=index), "leading": 0.0}
        return {"stub": True, "values": pd.Series([spec.current_value], index=index), "leading": spec.baseline}

    @staticmethod
    def resolve_base(candidate: Optional[float], first_value: float, key: str = "") -> float:
        """
        Base for percent conversion; never zero or negative.

        Falls back to the first data point, then to 1.
        """
        if candidate is not None and candidate > 0:
            return candidate
        logger.warning(f"Series {key}: non-positive chart base {candidate}, falling back")
        if first_value > 0:
            return first_value
        return 1.0

    def _placeholder(
        self,
        chart: ChartData,
        series: Sequence[SeriesSpec],
        now_ts: pd.Timestamp,
        value_kind: ValueKind,
    ) -> ChartData:
        now = now_ts.to_pydatetime()
        if value_kind == "percent":
            start = {s.key: 0.0 for s in series}
            today = {s.key: s.current_return_pct for s in series}
        else:
            start = {s.key: s.baseline for s in series}
            today = {s.key: s.current_value for s in series}

        return ChartData(
            mode=chart.mode,
            timeframe=chart.timeframe,
            value_kind=value_kind,
            series_labels=chart.series_labels,
            points=[
                ChartPoint(timestamp=now, label="Start", values=start),
                ChartPoint(timestamp=now, label="Today", values=today),
            ],
            is_placeholder=True,
        )

    def value_history(
        self,
        snapshots: Iterable[PortfolioSnapshot],
        entity_id: str,
        current_value: float,
        total_cost_basis: float,
        timeframe: Timeframe = "1W",
        now: Optional[datetime] = None,
    ) -> ValueHistory:
        """
        Absolute value line for one scope, ending with a "Now" point.

        P/L over the range compares the current value with the first point
        in the window. With no history it falls back to unrealized P/L
        against cost basis.
        """
        now = now or datetime.now(timezone.utc)
        cutoff = timeframe_cutoff(timeframe, now)
        cutoff_ts = as_utc(cutoff) if cutoff is not None else None

        raw = self._window(snapshots_to_frame(snapshots), entity_id, cutoff_ts)
        points = [
            ValuePoint(
                timestamp=ts.to_pydatetime(),
                value=float(value),
                label=format_axis_label(ts, timeframe) if i == 0 else "",
            )
            for i, (ts, value) in enumerate(raw.items())
        ]
        points.append(ValuePoint(timestamp=now, value=current_value, label="Now"))

        if len(points) <= 1:
            pnl_value = current_value - total_cost_basis
            pnl_percent = (pnl_value / total_cost_basis) * 100 if total_cost_basis > 0 else 0.0
        else:
            start_value = points[0].value
            pnl_value = current_value - start_value
            pnl_percent = (pnl_value / start_value) * 100 if start_value > 0 else 0.0

        return ValueHistory(
            timeframe=timeframe,
            points=points,
            pnl_value=pnl_value,
            pnl_percent=pnl_percent,
            is_positive=pnl_value >= 0,
            data_points=len(raw),
        )


# Singleton instance for convenience
time_series_synthesizer = TimeSeriesSynthesizer()
