"""
Match Engine - sequences innings for one fixture and decides the result
"""
import logging
from typing import Optional

from cricscore.config import INNINGS_PER_SIDE_OPTIONS
from cricscore.engine.innings import Innings, wall_clock
from cricscore.errors import IllegalTransition, MatchConfigError, RosterNotFound
from cricscore.models.result import Result, Tie, Draw, Victory, VictoryMethod
from cricscore.models.team import Team
from cricscore.schemas import MatchSnapshot

logger = logging.getLogger(__name__)


class MatchEngine:
    """
    A fixture between two teams.

    overs_per_innings == 0 means unlimited overs. Two innings per side are
    only played with unlimited overs.
    """

    def __init__(self, teams: tuple, overs_per_innings: int = 0, innings_per_side: int = 1, clock=wall_clock):
        first, second = teams
        if first.name == second.name:
            raise MatchConfigError("A team cannot play itself")
        if innings_per_side not in INNINGS_PER_SIDE_OPTIONS:
            raise MatchConfigError(f"Innings per side must be one of {INNINGS_PER_SIDE_OPTIONS}")
        if overs_per_innings < 0:
            raise MatchConfigError("Overs per innings cannot be negative")
        if innings_per_side == 2 and overs_per_innings != 0:
            raise MatchConfigError("Two-innings matches have unlimited overs")

        self.teams = (first, second)
        self.overs_per_innings = overs_per_innings
        self.innings_per_side = innings_per_side
        self.clock = clock
        self.innings: list[Innings] = []

    def team(self, name: str) -> Team:
        """Look up a side by name or short code"""
        for team in self.teams:
            if team.matches(name):
                return team
        raise RosterNotFound(name)

    def opponent(self, team: Team) -> Team:
        return self.teams[1] if team == self.teams[0] else self.teams[0]

    def innings_of(self, team: Team) -> list:
        return [i for i in self.innings if i.team == team]

    def runs_of(self, team: Team) -> int:
        return sum(i.runs for i in self.innings_of(team))

    @property
    def current_innings(self) -> Optional[Innings]:
        if self.innings and not self.innings[-1].is_complete:
            return self.innings[-1]
        return None

    @property
    def max_innings(self) -> int:
        return 2 * self.innings_per_side

    def is_chasing(self, innings_number: int) -> bool:
        """The last innings of the match chases a target"""
        return innings_number == self.max_innings

    def target_for(self, team: Team) -> int:
        """
        Runs `team` must exceed in the next innings: the opposition's runs so
        far less their own. 0 when the next innings is not a chase.
        """
        if not self.is_chasing(len(self.innings) + 1):
            return 0
        return self.runs_of(self.opponent(team)) - self.runs_of(team)

    @property
    def is_complete(self) -> bool:
        if not self.innings or not self.innings[-1].is_complete:
            return False
        first, second = (len(self.innings_of(t)) for t in self.teams)
        if self.innings_per_side == 1:
            return first == 1 and second == 1
        if first == 2 and second == 2:
            return True
        # beaten by an innings: two innings still short of the opponent's one
        if first == 2 and second == 1:
            return self.runs_of(self.teams[1]) > self.runs_of(self.teams[0])
        if second == 2 and first == 1:
            return self.runs_of(self.teams[0]) > self.runs_of(self.teams[1])
        return False

    def start_innings(self, batting) -> Innings:
        """Start the next innings with `batting` (a Team, name or short code)"""
        team = batting if isinstance(batting, Team) else self.team(batting)
        if team not in self.teams:
            raise RosterNotFound(str(team))
        if self.is_complete:
            raise IllegalTransition("Match is complete")
        if self.current_innings is not None:
            raise IllegalTransition(f"{self.current_innings.team} are still batting")
        if len(self.innings_of(team)) >= self.innings_per_side:
            raise IllegalTransition(f"{team} have batted {self.innings_per_side} time(s) already")
        if len(self.innings) == 1 and self.innings[0].team == team:
            raise IllegalTransition("Both sides must bat once before either bats again")

        number = len(self.innings) + 1
        target = self.target_for(team) if self.is_chasing(number) else None
        innings = Innings(
            team,
            self.opponent(team),
            overs_limit=self.overs_per_innings,
            target=target,
            number=number,
            clock=self.clock,
        )
        self.innings.append(innings)
        logger.info("Innings %d: %s batting%s", number, team,
                    f", {target + 1} to win" if target is not None else "")
        return innings

    def delete_last_innings(self) -> Innings:
        if not self.innings:
            raise IllegalTransition("No innings to delete")
        removed = self.innings.pop()
        logger.info("Deleted innings %d (%s)", removed.number, removed.team)
        return removed

    def result(self) -> Optional[Result]:
        """The result once the match is complete, otherwise None"""
        if not self.is_complete:
            return None
        if self.innings_per_side == 1:
            return self._limited_result()
        return self._two_innings_result()

    def _limited_result(self) -> Result:
        first, second = self.innings
        if first.runs > second.runs:
            return Victory(first.team, second.team, first.runs - second.runs, VictoryMethod.RUNS)
        if second.runs > first.runs:
            return Victory(second.team, first.team, second.max_wickets - second.wickets, VictoryMethod.WICKETS)
        return Tie()

    def _two_innings_result(self) -> Result:
        if len(self.innings) == self.max_innings:
            last = self.innings[-1]
            batting_last, fielding_last = last.team, last.fielding_team
            bat_runs = self.runs_of(batting_last)
            field_runs = self.runs_of(fielding_last)
            if field_runs > bat_runs:
                return Victory(fielding_last, batting_last, field_runs - bat_runs, VictoryMethod.RUNS)
            if bat_runs > field_runs:
                return Victory(batting_last, fielding_last, last.max_wickets - last.wickets, VictoryMethod.WICKETS)
            if last.all_out:
                return Tie()
            return Draw()

        # one side never needed its second innings
        twice = next(t for t in self.teams if len(self.innings_of(t)) == 2)
        once = self.opponent(twice)
        margin = self.runs_of(once) - self.runs_of(twice)
        return Victory(once, twice, margin, VictoryMethod.INNINGS)

    def snapshot(self) -> MatchSnapshot:
        now = self.clock()
        result = self.result()
        return MatchSnapshot(
            teams=[t.name for t in self.teams],
            overs_per_innings=self.overs_per_innings,
            innings_per_side=self.innings_per_side,
            innings=[i.snapshot(now) for i in self.innings],
            complete=self.is_complete,
            result=str(result) if result is not None else None,
        )

    def __repr__(self):
        return f"<Match {self.teams[0].short_name} v {self.teams[1].short_name}>"
