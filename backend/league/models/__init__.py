# Portfolio
from league.models.holding import Holding, AssetClass, ASSET_CLASSES
from league.models.member import Member

# Competition
from league.models.season import Season
from league.models.group_state import GroupState

# History
from league.models.portfolio_snapshot import PortfolioSnapshot, SnapshotScope

__all__ = [
    "Holding",
    "AssetClass",
    "ASSET_CLASSES",
    "Member",
    "Season",
    "GroupState",
    "PortfolioSnapshot",
    "SnapshotScope",
]
