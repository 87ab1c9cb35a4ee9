"""
Pydantic schemas for read-only scorecard snapshots
"""
from pydantic import BaseModel
from typing import Optional


class BatterLine(BaseModel):
    name: str
    how_out: str
    runs: int
    balls: int
    minutes: int
    fours: int
    sixes: int
    strike_rate: Optional[float] = None
    is_out: bool
    on_strike: bool = False


class BowlerLine(BaseModel):
    name: str
    overs: str
    maidens: int
    runs: int
    wickets: int
    economy: Optional[float] = None
    dots: int
    fours: int
    sixes: int
    wides: int
    no_balls: int


class ExtrasBreakdown(BaseModel):
    no_balls: int
    wides: int
    byes: int
    leg_byes: int

    @property
    def total(self) -> int:
        return self.no_balls + self.wides + self.byes + self.leg_byes


class FallOfWicketLine(BaseModel):
    wicket: int
    runs: int
    player: str
    over: str


class InningsSnapshot(BaseModel):
    team: str
    short_name: str
    number: int
    batting: list[BatterLine]
    bowling: list[BowlerLine]
    extras: ExtrasBreakdown
    runs: int
    wickets: int
    overs: str
    run_rate: Optional[float] = None
    minutes: int
    all_out: bool
    declared: bool
    complete: bool
    target: Optional[int] = None
    did_not_bat: list[str]
    fall_of_wickets: list[FallOfWicketLine]

    @property
    def score_display(self) -> str:
        if self.all_out:
            return f"{self.runs}"
        if self.declared:
            return f"{self.runs}/{self.wickets} d"
        return f"{self.runs}/{self.wickets}"


class MatchSnapshot(BaseModel):
    teams: list[str]
    overs_per_innings: int
    innings_per_side: int
    innings: list[InningsSnapshot]
    complete: bool
    result: Optional[str] = None

    @property
    def title(self) -> str:
        return " v ".join(self.teams)
