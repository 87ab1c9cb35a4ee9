import enum
from dataclasses import dataclass
from typing import Union

from cricscore.models.team import Team


class VictoryMethod(enum.Enum):
    RUNS = "runs"
    WICKETS = "wickets"
    INNINGS = "innings"


@dataclass(frozen=True)
class Tie:
    def __str__(self):
        return "Match tied"


@dataclass(frozen=True)
class Draw:
    def __str__(self):
        return "Match drawn"


@dataclass(frozen=True)
class Victory:
    winner: Team
    loser: Team
    margin: int
    method: VictoryMethod

    @property
    def margin_display(self) -> str:
        suffix = "" if self.margin == 1 else "s"
        if self.method == VictoryMethod.RUNS:
            return f"{self.margin} run{suffix}"
        if self.method == VictoryMethod.WICKETS:
            return f"{self.margin} wicket{suffix}"
        return f"an innings and {self.margin} run{suffix}"

    def __str__(self):
        return f"{self.winner} beat {self.loser} by {self.margin_display}"


Result = Union[Tie, Draw, Victory]
