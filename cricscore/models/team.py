from dataclasses import dataclass

from cricscore.errors import InvalidTeam
from cricscore.models.player import Player
from cricscore.validators.team_validator import TeamValidator


@dataclass(frozen=True)
class Team:
    name: str
    short_name: str  # e.g., "AUS", "IND"
    roster: tuple  # batting order as loaded
    captain: Player
    keeper: Player

    def __post_init__(self):
        # Accept any sequence but store an immutable one
        object.__setattr__(self, "roster", tuple(self.roster))
        report = TeamValidator.validate(list(self.roster), self.captain, self.keeper)
        if not report["valid"]:
            raise InvalidTeam(report["errors"])

    @property
    def max_wickets(self) -> int:
        return len(self.roster) - 1

    def matches(self, name: str) -> bool:
        return name in (self.name, self.short_name)

    def __str__(self):
        return self.name
