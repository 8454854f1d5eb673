from dataclasses import replace

import pytest

from conftest import make_holding, make_member
from league.services.season_resolver import compute_season_metrics


def test_no_season_is_a_noop(season):
    member = make_member("alice", cash_balance=1200.0)

    s = compute_season_metrics(member, [], None)

    assert s.season_initial_value == 1200
    assert s.season_current_value == 1200
    assert s.season_pl_abs == 0
    assert s.season_pl_percent == 0
    assert s.has_season_data is False


def test_return_from_season_start(season):
    member = make_member("alice", cash_balance=200.0)
    holdings = [make_holding("alice", quantity=10, avg_buy_price=80, current_price=100)]

    s = compute_season_metrics(member, holdings, season)

    assert s.season_initial_value == 1000
    assert s.season_current_value == 1200
    assert s.season_pl_abs == 200
    assert s.season_pl_percent == pytest.approx(20.0)
    assert s.has_season_data is True
    assert s.is_late_joiner is False


def test_late_joiner_falls_back_to_current_value(season):
    member = make_member("dave", cash_balance=900.0)

    s = compute_season_metrics(member, [], season)

    assert s.season_initial_value == 900
    assert s.season_pl_abs == 0
    assert s.season_pl_percent == 0
    assert s.has_season_data is True
    assert s.is_late_joiner is True


def test_season_is_independent_of_all_time(season):
    member = make_member("alice", cash_balance=1100.0, initial_capital=500.0)

    s = compute_season_metrics(member, [], season)

    assert s.investor.total_return_percent == pytest.approx(120.0)
    assert s.season_pl_percent == pytest.approx(10.0)


def test_zero_season_start_value(season):
    zero_start = replace(season, member_snapshots={"alice": 0.0})
    s = compute_season_metrics(make_member("alice", cash_balance=50.0), [], zero_start)

    assert s.season_pl_abs == 50
    assert s.season_pl_percent == 0
