from cricscore.models.player import Player
from cricscore.models.team import Team
from cricscore.models.ball import (
    Over, ExtraType, Runs, Extras, Wicket,
    NotOut, RetiredHurt, NOT_OUT, RETIRED_HURT,
    Bowled, LBW, HitWicket, Caught, Stumped, RunOut, Obstructing, RetiredOut,
)
from cricscore.models.result import Tie, Draw, Victory, VictoryMethod

__all__ = [
    "Player",
    "Team",
    "Over",
    "ExtraType",
    "Runs",
    "Extras",
    "Wicket",
    "NotOut",
    "RetiredHurt",
    "NOT_OUT",
    "RETIRED_HURT",
    "Bowled",
    "LBW",
    "HitWicket",
    "Caught",
    "Stumped",
    "RunOut",
    "Obstructing",
    "RetiredOut",
    "Tie",
    "Draw",
    "Victory",
    "VictoryMethod",
]
