"""
Point-in-time portfolio values, appended whenever prices refresh.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

SnapshotScope = Literal["member", "group"]


@dataclass(frozen=True)
class PortfolioSnapshot:
    """Immutable record of a scope's total value at a moment."""
    timestamp: datetime
    entity_id: str
    total_value: float
    cost_basis: float = 0.0
    scope: SnapshotScope = "member"
