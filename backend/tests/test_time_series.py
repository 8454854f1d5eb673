from datetime import datetime, timedelta, timezone

import pytest

from conftest import NOW, make_member, make_snapshot
from league.models import PortfolioSnapshot
from league.services.group_metrics import compute_group_metrics
from league.services.time_series import (
    SeriesSpec,
    TimeSeriesSynthesizer,
    derive_group_history,
    member_series_specs,
    timeframe_cutoff,
    time_series_synthesizer,
)

ALICE = SeriesSpec(key="alice", entity_id="alice", baseline=1000.0, current_value=1100.0, current_return_pct=10.0)
BOB = SeriesSpec(key="bob", entity_id="bob", baseline=500.0, current_value=400.0, current_return_pct=-20.0)


@pytest.fixture
def race_history():
    return [
        make_snapshot("alice", 60, 1000.0),
        make_snapshot("bob", 45, 500.0),
        make_snapshot("alice", 30, 1100.0),
        make_snapshot("bob", 10, 400.0),
        make_snapshot("g1", 20, 9999.0, scope="group"),
    ]


def _column(chart, key):
    return [p.values[key] for p in chart.points]


def test_union_axis_with_forward_fill(race_history):
    chart = time_series_synthesizer.synthesize(race_history, [ALICE, BOB], timeframe="ALL", now=NOW)

    assert [p.timestamp for p in chart.points] == [
        NOW - timedelta(minutes=m) for m in (60, 45, 30, 10)
    ]
    assert _column(chart, "alice") == [0.0, 0.0, pytest.approx(10.0), pytest.approx(10.0)]
    assert _column(chart, "bob") == [0.0, 0.0, 0.0, pytest.approx(-20.0)]
    assert chart.is_placeholder is False


def test_idempotent(race_history):
    first = time_series_synthesizer.synthesize(race_history, [ALICE, BOB], timeframe="1M", now=NOW)
    second = time_series_synthesizer.synthesize(race_history, [ALICE, BOB], timeframe="1M", now=NOW)
    assert first == second


def test_input_order_of_snapshots_does_not_matter(race_history):
    forward = time_series_synthesizer.synthesize(race_history, [ALICE, BOB], now=NOW)
    backward = time_series_synthesizer.synthesize(list(reversed(race_history)), [ALICE, BOB], now=NOW)
    assert forward == backward


def test_season_mode_uses_season_start_value(race_history):
    spec = SeriesSpec(key="alice", entity_id="alice", baseline=800.0, current_value=1100.0)

    chart = time_series_synthesizer.synthesize(race_history, [spec, BOB], mode="season", now=NOW)

    assert _column(chart, "alice") == [
        pytest.approx(25.0), pytest.approx(25.0), pytest.approx(37.5), pytest.approx(37.5)
    ]
    # bob's leading gap is filled with his season start value
    assert _column(chart, "bob")[0] == 0.0


def test_absolute_values(race_history):
    chart = time_series_synthesizer.synthesize(race_history, [ALICE, BOB], value_kind="absolute", now=NOW)

    assert _column(chart, "alice") == [1000.0, 1000.0, 1100.0, 1100.0]
    assert _column(chart, "bob") == [500.0, 500.0, 500.0, 400.0]


def test_timeframe_window_excludes_old_snapshots():
    history = [
        make_snapshot("alice", 60 * 48, 900.0),
        make_snapshot("alice", 60, 1000.0),
        make_snapshot("alice", 30, 1050.0),
    ]

    chart = time_series_synthesizer.synthesize(history, [ALICE], timeframe="1D", now=NOW)

    assert len(chart.points) == 2
    # all-time base is the first value inside the window
    assert _column(chart, "alice") == [0.0, pytest.approx(5.0)]


def test_single_point_is_duplicated_one_millisecond_later():
    history = [make_snapshot("alice", 5, 1200.0)]

    chart = time_series_synthesizer.synthesize(history, [ALICE], now=NOW)

    assert len(chart.points) == 2
    t0, t1 = (p.timestamp for p in chart.points)
    assert t1 - t0 == timedelta(milliseconds=1)
    assert _column(chart, "alice") == [0.0, 0.0]


def test_no_data_draws_placeholder():
    chart = time_series_synthesizer.synthesize([], [ALICE, BOB], now=NOW)

    assert chart.is_placeholder is True
    assert [p.label for p in chart.points] == ["Start", "Today"]
    assert [p.timestamp for p in chart.points] == [NOW, NOW]
    assert chart.points[0].values == {"alice": 0.0, "bob": 0.0}
    assert chart.points[1].values == {"alice": 10.0, "bob": -20.0}


def test_series_without_data_joins_at_now(race_history):
    carol = SeriesSpec(key="carol", entity_id="carol", baseline=200.0, current_value=250.0, current_return_pct=25.0)

    chart = time_series_synthesizer.synthesize(race_history, [ALICE, carol], now=NOW)

    assert chart.points[-1].timestamp == NOW
    assert _column(chart, "carol")[:-1] == [0.0, 0.0]
    assert chart.points[-1].values["carol"] == pytest.approx(25.0)
    assert chart.points[-1].values["alice"] == pytest.approx(10.0)


def test_no_series_gives_empty_chart(race_history):
    chart = time_series_synthesizer.synthesize(race_history, [], now=NOW)
    assert chart.points == []


def test_duplicate_timestamps_keep_latest_append():
    history = [
        make_snapshot("alice", 30, 1000.0),
        make_snapshot("alice", 10, 1100.0),
        make_snapshot("alice", 10, 1200.0),
    ]

    chart = time_series_synthesizer.synthesize(history, [ALICE], value_kind="absolute", now=NOW)

    assert _column(chart, "alice") == [1000.0, 1200.0]


def test_duplicate_timestamps_collapsing_to_one_point_still_get_a_twin():
    history = [make_snapshot("alice", 10, 1100.0), make_snapshot("alice", 10, 1200.0)]

    chart = time_series_synthesizer.synthesize(history, [ALICE], now=NOW)

    assert len(chart.points) == 2
    t0, t1 = (p.timestamp for p in chart.points)
    assert t1 - t0 == timedelta(milliseconds=1)
    # base is the surviving value, not the overwritten one
    assert _column(chart, "alice") == [0.0, 0.0]


def test_series_without_data_and_zero_baseline_reads_its_current_return(race_history):
    empty = SeriesSpec(key="zero", entity_id="zero", baseline=0.0, current_value=100.0, current_return_pct=0.0)

    chart = time_series_synthesizer.synthesize(race_history, [ALICE, empty], now=NOW)

    assert _column(chart, "zero") == [0.0, 0.0, 0.0]
    assert chart.points[-1].timestamp == NOW


def test_series_without_data_in_absolute_mode(race_history):
    carol = SeriesSpec(key="carol", entity_id="carol", baseline=200.0, current_value=250.0)

    chart = time_series_synthesizer.synthesize(race_history, [ALICE, carol], value_kind="absolute", now=NOW)

    assert _column(chart, "carol") == [200.0, 200.0, 250.0]


def test_placeholder_timestamps_are_utc_for_naive_now():
    naive_now = NOW.replace(tzinfo=None)

    chart = time_series_synthesizer.synthesize([], [ALICE], now=naive_now)

    assert all(p.timestamp.tzinfo is not None for p in chart.points)
    assert [p.timestamp for p in chart.points] == [NOW, NOW]


@pytest.mark.parametrize(
    "candidate, first_value, expected",
    [
        (1000.0, 5.0, 1000.0),
        (0.0, 50.0, 50.0),
        (-10.0, 50.0, 50.0),
        (0.0, 0.0, 1.0),
        (None, -3.0, 1.0),
    ],
)
def test_resolve_base(candidate, first_value, expected):
    assert TimeSeriesSynthesizer.resolve_base(candidate, first_value) == expected


def test_non_positive_season_baseline_falls_back_to_first_point():
    history = [make_snapshot("alice", 20, 100.0), make_snapshot("alice", 10, 150.0)]
    spec = SeriesSpec(key="alice", entity_id="alice", baseline=0.0, current_value=150.0)

    chart = time_series_synthesizer.synthesize(history, [spec], mode="season", now=NOW)

    assert _column(chart, "alice") == [0.0, pytest.approx(50.0)]


def test_timeframe_cutoffs():
    assert timeframe_cutoff("ALL", NOW) is None
    assert timeframe_cutoff("1W", NOW) == NOW - timedelta(days=7)
    assert timeframe_cutoff("1M", NOW) == NOW - timedelta(days=30)
    assert timeframe_cutoff("YTD", NOW) == datetime(2026, 1, 1, tzinfo=timezone.utc)


def test_member_series_specs_follow_group_metrics():
    members = [
        make_member("alice", cash_balance=1100.0, initial_capital=1000.0),
        make_member("bob", cash_balance=0.0),
    ]
    specs = member_series_specs(compute_group_metrics(members, []))

    assert [s.key for s in specs] == ["alice", "bob"]
    assert specs[0].label == "Alice"
    assert specs[0].current_return_pct == pytest.approx(10.0)
    # unavailable percent is drawn as flat
    assert specs[1].current_return_pct == 0.0


def test_derive_group_history_buckets_by_minute():
    base = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)
    history = [
        PortfolioSnapshot(timestamp=base + timedelta(seconds=10), entity_id="alice", total_value=100.0, cost_basis=90.0),
        PortfolioSnapshot(timestamp=base + timedelta(seconds=40), entity_id="bob", total_value=200.0, cost_basis=150.0),
        PortfolioSnapshot(timestamp=base + timedelta(seconds=65), entity_id="alice", total_value=110.0, cost_basis=90.0),
        PortfolioSnapshot(timestamp=base, entity_id="g1", total_value=5.0, scope="group"),
    ]

    derived = derive_group_history(history, "g1")

    assert [s.timestamp for s in derived] == [base, base + timedelta(minutes=1)]
    assert [s.total_value for s in derived] == [300.0, 110.0]
    assert [s.cost_basis for s in derived] == [240.0, 90.0]
    assert all(s.scope == "group" and s.entity_id == "g1" for s in derived)


def test_derive_group_history_empty():
    assert derive_group_history([], "g1") == []


def test_value_history_against_first_point():
    history = [make_snapshot("alice", 120, 1000.0), make_snapshot("alice", 60, 1050.0)]

    result = time_series_synthesizer.value_history(
        history, "alice", current_value=1100.0, total_cost_basis=900.0, timeframe="1D", now=NOW
    )

    assert [p.value for p in result.points] == [1000.0, 1050.0, 1100.0]
    assert result.points[-1].label == "Now"
    assert result.pnl_value == 100.0
    assert result.pnl_percent == pytest.approx(10.0)
    assert result.is_positive
    assert result.data_points == 2


def test_value_history_without_snapshots_uses_cost_basis():
    result = time_series_synthesizer.value_history(
        [], "alice", current_value=900.0, total_cost_basis=1000.0, timeframe="1W", now=NOW
    )

    assert len(result.points) == 1
    assert result.pnl_value == -100.0
    assert result.pnl_percent == pytest.approx(-10.0)
    assert result.is_positive is False
    assert result.data_points == 0
