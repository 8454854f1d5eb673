import math

import pytest

from conftest import make_holding
from league.services.position_valuator import compute_position_metrics


def test_position_with_gain():
    p = compute_position_metrics(make_holding("alice", quantity=10, avg_buy_price=100, current_price=150))
    assert p.current_value == 1500
    assert p.cost_basis == 1000
    assert p.unrealized_pl == 500
    assert p.unrealized_pl_percent == 50


def test_zero_cost_basis_reports_zero_percent():
    p = compute_position_metrics(make_holding("alice", quantity=5, avg_buy_price=0, current_price=20))
    assert p.unrealized_pl == 100
    assert p.unrealized_pl_percent == 0
    assert not math.isnan(p.unrealized_pl_percent)
    assert not math.isinf(p.unrealized_pl_percent)


def test_zero_quantity_is_flat():
    p = compute_position_metrics(make_holding("alice", quantity=0, avg_buy_price=10, current_price=12))
    assert p.current_value == 0
    assert p.unrealized_pl_percent == 0


def test_loss_percent():
    p = compute_position_metrics(make_holding("alice", quantity=2, avg_buy_price=50, current_price=40))
    assert p.unrealized_pl == -20
    assert p.unrealized_pl_percent == pytest.approx(-20.0)
