from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Member:
    """
    An investor inside a group.

    initial_capital is the explicit all-time baseline; when it is missing the
    baseline is derived from cash plus cost basis.
    """
    id: str
    name: str
    cash_balance: float = 0.0
    initial_capital: Optional[float] = None
    total_realized_pnl: float = 0.0
    color_hue: int = 0
    created_at: Optional[datetime] = None
