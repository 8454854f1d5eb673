"""
Request schemas shared by the API routers.

Every endpoint receives the full group state in the body, so responses are
computed from exactly what the caller sent. Field names are camelCase on
the wire.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from league.models import AssetClass, GroupState, Holding, Member, PortfolioSnapshot, Season, SnapshotScope


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HoldingIn(CamelModel):
    id: str
    member_id: str
    symbol: str
    name: str = ""
    asset_class: AssetClass = "OTHER"
    quantity: float = Field(ge=0)
    avg_buy_price: float = Field(ge=0)
    current_price: float = Field(ge=0)
    last_price_update: Optional[datetime] = None
    crypto_id: Optional[str] = None

    def to_model(self) -> Holding:
        return Holding(**self.model_dump())


class MemberIn(CamelModel):
    id: str
    name: str
    cash_balance: float = 0.0
    initial_capital: Optional[float] = None
    total_realized_pnl: float = 0.0
    color_hue: int = 0
    created_at: Optional[datetime] = None

    def to_model(self) -> Member:
        return Member(**self.model_dump())


class SeasonIn(CamelModel):
    id: str
    name: str
    start_time: datetime
    member_snapshots: Dict[str, float] = Field(default_factory=dict)
    end_time: Optional[datetime] = None
    leader_id: Optional[str] = None

    def to_model(self) -> Season:
        return Season(**self.model_dump())


class SnapshotIn(CamelModel):
    timestamp: datetime
    entity_id: str
    total_value: float
    cost_basis: float = 0.0
    scope: SnapshotScope = "member"

    def to_model(self) -> PortfolioSnapshot:
        return PortfolioSnapshot(**self.model_dump())


class GroupStateIn(CamelModel):
    id: str
    name: str = ""
    members: List[MemberIn] = Field(default_factory=list)
    holdings: List[HoldingIn] = Field(default_factory=list)
    portfolio_history: List[SnapshotIn] = Field(default_factory=list)
    seasons: List[SeasonIn] = Field(default_factory=list)
    current_season_id: Optional[str] = None
    leader_id: Optional[str] = None

    def to_model(self) -> GroupState:
        return GroupState(
            id=self.id,
            name=self.name,
            members=tuple(m.to_model() for m in self.members),
            holdings=tuple(h.to_model() for h in self.holdings),
            portfolio_history=tuple(s.to_model() for s in self.portfolio_history),
            seasons=tuple(s.to_model() for s in self.seasons),
            current_season_id=self.current_season_id,
            leader_id=self.leader_id,
        )


class SeasonOut(CamelModel):
    id: str
    name: str
    start_time: datetime
    member_snapshots: Dict[str, float]
    end_time: Optional[datetime] = None
    leader_id: Optional[str] = None
    is_active: bool

    @classmethod
    def from_model(cls, season: Season) -> "SeasonOut":
        return cls(
            id=season.id,
            name=season.name,
            start_time=season.start_time,
            member_snapshots=dict(season.member_snapshots),
            end_time=season.end_time,
            leader_id=season.leader_id,
            is_active=season.is_active,
        )
