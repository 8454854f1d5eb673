"""Test configuration and fixtures.

Factories build frozen domain objects with sensible defaults so each test
only spells out the numbers it cares about.
"""

import itertools
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from league.api.main import app
from league.models import GroupState, Holding, Member, PortfolioSnapshot, Season

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)

_ids = itertools.count(1)


def make_member(member_id: str, **overrides) -> Member:
    fields = {"id": member_id, "name": member_id.title(), "cash_balance": 0.0}
    fields.update(overrides)
    return Member(**fields)


def make_holding(member_id: str, quantity: float, avg_buy_price: float, current_price: float, **overrides) -> Holding:
    n = next(_ids)
    fields = {
        "id": f"h{n}",
        "member_id": member_id,
        "symbol": f"SYM{n}",
        "name": f"Security {n}",
        "asset_class": "STOCK",
        "quantity": quantity,
        "avg_buy_price": avg_buy_price,
        "current_price": current_price,
    }
    fields.update(overrides)
    return Holding(**fields)


def make_snapshot(entity_id: str, minutes_ago: float, total_value: float, scope: str = "member", now: datetime = NOW) -> PortfolioSnapshot:
    return PortfolioSnapshot(
        timestamp=now - timedelta(minutes=minutes_ago),
        entity_id=entity_id,
        total_value=total_value,
        scope=scope,
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def three_member_group() -> GroupState:
    """Returns of +10%, -5% and +20% on a 1000 baseline each."""
    members = (
        make_member("alice", cash_balance=1100.0, initial_capital=1000.0),
        make_member("bob", cash_balance=950.0, initial_capital=1000.0),
        make_member("carol", cash_balance=1200.0, initial_capital=1000.0),
    )
    return GroupState(id="g1", name="Club", members=members)


@pytest.fixture
def season(now) -> Season:
    return Season(
        id="season_1",
        name="Season 1",
        start_time=now - timedelta(days=10),
        member_snapshots={"alice": 1000.0},
    )


@pytest.fixture(scope="session")
def client() -> TestClient:
    return TestClient(app)
