"""
Exception hierarchy for the league engine.

Financial edge cases (zero cost basis, zero baseline, missing season
snapshot) never raise; they resolve to 0 or None. Only broken inputs and
season lifecycle misuse end up here.
"""


class LeagueError(Exception):
    """Base class for all league errors."""


class ContractViolationError(LeagueError, AssertionError):
    """Inputs break a structural contract (e.g. a holding owned by nobody)."""


class UnknownInvestorError(ContractViolationError):
    def __init__(self, holding_id: str, member_id: str):
        super().__init__(f"Holding {holding_id} references unknown investor {member_id}")
        self.holding_id = holding_id
        self.member_id = member_id


class DuplicateInvestorError(ContractViolationError):
    def __init__(self, member_id: str):
        super().__init__(f"Investor {member_id} appears more than once in the group")
        self.member_id = member_id


class SeasonError(LeagueError):
    """Season lifecycle request that cannot be honoured."""


class SeasonAlreadyActiveError(SeasonError):
    def __init__(self, season_id: str):
        super().__init__(f"Season {season_id} is still active; end it first")
        self.season_id = season_id


class NoActiveSeasonError(SeasonError):
    def __init__(self):
        super().__init__("No active season to end")


class NotGroupLeaderError(SeasonError):
    def __init__(self, member_id: str):
        super().__init__(f"Only the group leader can manage seasons (caller: {member_id})")
        self.member_id = member_id


class SeasonNotFoundError(SeasonError):
    def __init__(self, season_id: str):
        super().__init__(f"Season {season_id} not found")
        self.season_id = season_id
