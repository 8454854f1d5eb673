from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Optional


@dataclass(frozen=True)
class Season:
    """
    A bounded competition window.

    member_snapshots maps member id -> portfolio value at start_time.
    """
    id: str
    name: str
    start_time: datetime
    member_snapshots: Mapping[str, float] = field(default_factory=dict)
    end_time: Optional[datetime] = None
    leader_id: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.end_time is None
