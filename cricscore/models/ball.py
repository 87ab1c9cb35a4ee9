"""
Delivery, dismissal and over value types.

Ball, Dismissal and HowOut are closed unions of frozen dataclasses. Code that
consumes them dispatches with isinstance and ends with an InvariantViolation
so that a new variant cannot slip through unhandled.
"""
import enum
from dataclasses import dataclass
from typing import Union

from cricscore.config import BALLS_PER_OVER
from cricscore.errors import InvariantViolation
from cricscore.models.player import Player


@dataclass(frozen=True, order=True)
class Over:
    """Completed overs plus legal balls into the current one"""
    number: int = 0
    balls: int = 0

    @classmethod
    def from_balls(cls, legal_balls: int) -> "Over":
        return cls(legal_balls // BALLS_PER_OVER, legal_balls % BALLS_PER_OVER)

    @property
    def total_balls(self) -> int:
        return self.number * BALLS_PER_OVER + self.balls

    @property
    def decimal(self) -> float:
        return self.number + self.balls / BALLS_PER_OVER

    def __add__(self, other: "Over") -> "Over":
        return Over.from_balls(self.total_balls + other.total_balls)

    def __str__(self):
        return f"{self.number}.{self.balls}"


class ExtraType(enum.Enum):
    NO_BALL = "nb"
    WIDE = "w"
    BYE = "b"
    LEG_BYE = "lb"


# Scoring deliveries

@dataclass(frozen=True)
class Runs:
    runs: int = 0


@dataclass(frozen=True)
class Extras:
    kind: ExtraType
    runs: int


ScoringBall = Union[Runs, Extras]


# How a batter stands

@dataclass(frozen=True)
class NotOut:
    def __str__(self):
        return "not out"


@dataclass(frozen=True)
class RetiredHurt:
    def __str__(self):
        return "retired hurt"


# Dismissals

@dataclass(frozen=True)
class Bowled:
    bowler: Player

    def __str__(self):
        return f"b {self.bowler}"


@dataclass(frozen=True)
class LBW:
    bowler: Player

    def __str__(self):
        return f"lbw b {self.bowler}"


@dataclass(frozen=True)
class HitWicket:
    bowler: Player

    def __str__(self):
        return f"hit wicket b {self.bowler}"


@dataclass(frozen=True)
class Caught:
    fielder: Player
    bowler: Player

    def __str__(self):
        if self.fielder == self.bowler:
            return f"c & b {self.bowler}"
        return f"c {self.fielder} b {self.bowler}"


@dataclass(frozen=True)
class Stumped:
    keeper: Player
    bowler: Player

    def __str__(self):
        return f"st {self.keeper} b {self.bowler}"


@dataclass(frozen=True)
class RunOut:
    def __str__(self):
        return "run out"


@dataclass(frozen=True)
class Obstructing:
    def __str__(self):
        return "obstructing the field"


@dataclass(frozen=True)
class RetiredOut:
    def __str__(self):
        return "retired out"


Dismissal = Union[Bowled, LBW, HitWicket, Caught, Stumped, RunOut, Obstructing, RetiredOut]
DISMISSAL_TYPES = (Bowled, LBW, HitWicket, Caught, Stumped, RunOut, Obstructing, RetiredOut)
BOWLER_CREDITED = (Bowled, LBW, HitWicket, Caught, Stumped)

HowOut = Union[NotOut, RetiredHurt, Dismissal]

NOT_OUT = NotOut()
RETIRED_HURT = RetiredHurt()


@dataclass(frozen=True)
class Wicket:
    dismissal: Dismissal
    scoring: ScoringBall = Runs(0)  # usually the striker is out with no runs scored
    striker_out: bool = True
    new_batter_on_strike: bool = True


Ball = Union[Runs, Extras, Wicket]


def scoring_of(ball: Ball) -> ScoringBall:
    """The runs/extras part of a delivery"""
    if isinstance(ball, Wicket):
        return ball.scoring
    if isinstance(ball, (Runs, Extras)):
        return ball
    raise InvariantViolation(f"unhandled delivery {ball!r}")


def is_legal(ball: Ball) -> bool:
    """Whether the delivery counts towards the six balls of an over"""
    scoring = scoring_of(ball)
    if isinstance(scoring, Runs):
        return True
    return scoring.kind in (ExtraType.BYE, ExtraType.LEG_BYE)


def is_dismissal(how_out: HowOut) -> bool:
    return isinstance(how_out, DISMISSAL_TYPES)


def credited_to_bowler(dismissal: Dismissal) -> bool:
    return isinstance(dismissal, BOWLER_CREDITED)


def bowler_runs(ball: Ball) -> int:
    """Runs conceded by the bowler (byes and leg byes are not)"""
    scoring = scoring_of(ball)
    if isinstance(scoring, Runs):
        return scoring.runs
    if scoring.kind in (ExtraType.NO_BALL, ExtraType.WIDE):
        return scoring.runs
    return 0


def batter_runs(ball: Ball) -> int:
    """Runs credited to the striker"""
    scoring = scoring_of(ball)
    if isinstance(scoring, Runs):
        return scoring.runs
    if scoring.kind == ExtraType.NO_BALL:
        return scoring.runs - 1  # the penalty run is an extra
    return 0


def is_four(ball: Ball) -> bool:
    scoring = scoring_of(ball)
    if isinstance(scoring, Runs):
        return scoring.runs == 4
    return scoring.kind == ExtraType.NO_BALL and scoring.runs == 5


def is_six(ball: Ball) -> bool:
    scoring = scoring_of(ball)
    if isinstance(scoring, Runs):
        return scoring.runs == 6
    return scoring.kind == ExtraType.NO_BALL and scoring.runs == 7


def is_dot(ball: Ball) -> bool:
    scoring = scoring_of(ball)
    return isinstance(scoring, Runs) and scoring.runs == 0


def is_wide(ball: Ball) -> bool:
    scoring = scoring_of(ball)
    return isinstance(scoring, Extras) and scoring.kind == ExtraType.WIDE
