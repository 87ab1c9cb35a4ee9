"""
Interactive scoring session.

The command loop is a flat state machine: `mode` says which commands are
accepted and `handle` performs one transition per input line. Nothing here
reads input itself, so a session can be driven line by line from a file, a
terminal or a test.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Optional

from rich.console import Console
from rich.markup import escape

from cricscore.engine.deliveries import search_roster, parse_name
from cricscore.engine.innings import Innings, wall_clock
from cricscore.engine.match_engine import MatchEngine
from cricscore.errors import ScoringError, MatchConfigError, IllegalTransition
from cricscore.loaders.team_loader import TeamLoader
from cricscore.models.ball import Ball, Over
from cricscore.models.player import Player
from cricscore.models.team import Team
from cricscore.scorecard import match_card, save_match_card, innings_summary

logger = logging.getLogger(__name__)


class Mode(enum.Enum):
    TOP = "top"
    MATCH = "match"
    OPENER = "opener"
    INNINGS = "innings"
    BALL = "ball"
    NEXT_BATTER = "next_batter"
    EXAMINE = "examine"
    DONE = "done"


HELP = {
    Mode.TOP: [
        "Top-level mode",
        "| help - print this list",
        "| team <file> - load a team from <file>",
        "| teams - list loaded teams",
        "| match <team1> <team2> <overs> <innings> - start a match with <overs> overs per innings "
        "(0 = unlimited) and <innings> innings per side, and enter match mode",
        "| quit - exit the program",
    ],
    Mode.MATCH: [
        "Match mode",
        "| help - print this list",
        "| bat <team> - start <team>'s batting innings and enter innings mode",
        "| resume - return to the innings in progress",
        "| delete - delete most recent innings",
        "| examine - enter examine mode",
        "| end - exit to top level, all unsaved data is lost",
    ],
    Mode.INNINGS: [
        "Innings mode",
        "| help - print this list",
        "| over <last> [first] - start an over by that bowler and enter ball-by-ball mode",
        "| resume - resume an unfinished over",
        "| revert - erase the last ball of the over just finished",
        "| declare - end the innings (unlimited-overs matches only)",
        "| exit - pause the innings and return to match mode",
    ],
    Mode.BALL: [
        "Ball-by-ball mode",
        "| help - print this list",
        "| <result> - enter the next delivery, e.g. '.', '4', '2lb', '1w', 'W b', 'W c Waugh', 'W 1 run-out ns'",
        "| revert - erase the most recent ball",
        "| hurt <last> [first] - retire a batter hurt",
        "| exit - pause the current over and return to innings mode",
    ],
    Mode.EXAMINE: [
        "Examine mode",
        "| help - print this list",
        "| print - print the scorecard",
        "| save <file> - save the scorecard to <file>",
        "| exit - leave examine mode",
    ],
}


@dataclass
class PendingBatter:
    """A command waiting for a batter to be named"""
    reason: str  # "opener", "wicket" or "retire"
    ball: Optional[Ball] = None
    retiring: Optional[Player] = None
    first_opener: Optional[Player] = None


class ScoringSession:
    def __init__(self, console: Optional[Console] = None, clock=wall_clock):
        self.console = console or Console()
        self.clock = clock
        self.teams: dict = {}  # short name -> Team
        self.mode = Mode.TOP
        self.match: Optional[MatchEngine] = None
        self.pending: Optional[PendingBatter] = None
        self._examine_return = Mode.MATCH

    # ------------------------------------------------------------------

    @property
    def finished(self) -> bool:
        return self.mode == Mode.DONE

    @property
    def innings(self) -> Optional[Innings]:
        return self.match.current_innings if self.match else None

    @property
    def prompt(self) -> str:
        if self.mode == Mode.MATCH:
            return f"{self._title()}> "
        if self.mode == Mode.EXAMINE:
            return f"Examining {self._title()}> "
        if self.mode == Mode.OPENER:
            which = "Second" if self.pending.first_opener else "First"
            return f"{which} batter for {self.innings.team}: "
        if self.mode == Mode.NEXT_BATTER:
            return f"Next batter for {self.innings.team}: "
        if self.mode == Mode.INNINGS:
            inns = self.innings
            return f"{inns.team} {inns.runs}/{inns.wickets} ({inns.over} ov)> "
        if self.mode == Mode.BALL:
            inns = self.innings
            next_ball = Over(inns.over.number, inns.over.balls + 1)
            return f"{next_ball} ov, {inns.current_over.bowler} to {inns.striker.player}> "
        return "cricscore> "

    def add_team(self, team: Team) -> None:
        self.teams[team.short_name] = team
        self._say(f"{team} loaded")

    def handle(self, line: str) -> None:
        """Process one input line in the current mode"""
        handlers = {
            Mode.TOP: self._top,
            Mode.MATCH: self._match,
            Mode.OPENER: self._opener,
            Mode.INNINGS: self._innings,
            Mode.BALL: self._ball,
            Mode.NEXT_BATTER: self._next_batter,
            Mode.EXAMINE: self._examine,
        }
        handler = handlers.get(self.mode)
        if handler is None:
            return
        try:
            handler(line.strip())
        except ScoringError as exc:
            self._say(f"[red]{escape(str(exc))}[/red]")

    def run(self, lines) -> None:
        """Feed lines until the session quits or input runs out"""
        for line in lines:
            if self.finished:
                break
            self.handle(line)

    # ------------------------------------------------------------------
    # Mode handlers
    # ------------------------------------------------------------------

    def _top(self, line: str) -> None:
        words = line.split()
        if not words:
            return
        cmd = words[0]
        if cmd == "help":
            self._help()
        elif cmd == "team" and len(words) >= 2:
            self.add_team(TeamLoader.load(words[1]))
        elif cmd == "teams":
            for team in self.teams.values():
                self._say(f"{team.short_name} - {team.name} ({len(team.roster)} players)")
        elif cmd == "match" and len(words) >= 5:
            self._start_match(words[1:5])
        elif cmd == "quit":
            self.mode = Mode.DONE
        else:
            self._unknown(line)

    def _start_match(self, args: list) -> None:
        first, second = (self._loaded_team(name) for name in args[:2])
        try:
            overs, innings_per_side = int(args[2]), int(args[3])
        except ValueError:
            raise IllegalTransition("Overs and innings must be whole numbers")
        try:
            self.match = MatchEngine((first, second), overs, innings_per_side, clock=self.clock)
        except MatchConfigError as exc:
            raise IllegalTransition(str(exc)) from exc
        self.mode = Mode.MATCH
        logger.info("Match started: %s", self._title())

    def _match(self, line: str) -> None:
        words = line.split()
        if not words:
            return
        cmd = words[0]
        if cmd == "help":
            self._help()
        elif cmd == "bat" and len(words) >= 2:
            self.match.start_innings(line.split(None, 1)[1].strip())
            self.pending = PendingBatter("opener")
            self.mode = Mode.OPENER
        elif cmd == "resume":
            if self.innings is None:
                raise IllegalTransition("No innings in progress")
            self.mode = Mode.INNINGS if self.innings.is_started else Mode.OPENER
            if self.mode == Mode.OPENER:
                self.pending = PendingBatter("opener")
        elif cmd == "delete":
            removed = self.match.delete_last_innings()
            self._say(f"Deleted {removed.team} innings {removed.number}")
        elif cmd == "examine":
            self._enter_examine(Mode.MATCH)
        elif cmd == "end":
            self.match = None
            self.mode = Mode.TOP
        else:
            self._unknown(line)

    def _opener(self, line: str) -> None:
        if line == "end":
            self.match.delete_last_innings()
            self.pending = None
            self.mode = Mode.MATCH
            return
        player = self._batter_named(line)
        if self.pending.first_opener is None:
            self.pending.first_opener = player
            return
        self.innings.open_innings(self.pending.first_opener, player)
        self.pending = None
        self.mode = Mode.INNINGS

    def _innings(self, line: str) -> None:
        words = line.split()
        if not words:
            return
        cmd = words[0]
        innings = self.innings
        if cmd == "help":
            self._help()
        elif cmd == "over" and len(words) >= 2:
            first_name = words[2] if len(words) > 2 else None
            bowler = search_roster(innings.fielding_team.roster, words[1], first_name)
            innings.new_over(bowler)
            self.mode = Mode.BALL
        elif cmd == "resume":
            innings.resume_over()
            self.mode = Mode.BALL
        elif cmd == "revert":
            # reopens the over that just finished
            innings.undo()
            self.mode = Mode.BALL
            self._say("OK")
        elif cmd == "declare":
            innings.declare()
            self._innings_closed(innings)
        elif cmd == "exit":
            self.mode = Mode.MATCH
        else:
            self._unknown(line)

    def _ball(self, line: str) -> None:
        words = line.split()
        if not words:
            return
        cmd = words[0]
        innings = self.innings
        if cmd == "help":
            self._help()
        elif cmd == "exit":
            self.mode = Mode.INNINGS
        elif cmd == "revert":
            innings.undo()
            self._say("OK")
        elif cmd == "hurt" and len(words) >= 2:
            first_name = words[2] if len(words) > 2 else None
            batting = [b.player for b in innings.not_out]
            player = search_roster(batting, words[1], first_name)
            self._ask_next_batter(PendingBatter("retire", retiring=player))
        else:
            ball = innings.parse(line)
            if innings.needs_new_batter(ball):
                self._ask_next_batter(PendingBatter("wicket", ball=ball))
                return
            innings.apply(ball)
            self._after_ball(innings)

    def _next_batter(self, line: str) -> None:
        if line == "end":
            self.pending = None
            self.mode = Mode.BALL
            self._say("Cancelled")
            return
        innings = self.innings
        player = self._batter_named(line)
        if self.pending.reason == "wicket":
            innings.apply(self.pending.ball, player)
            self.pending = None
            self.mode = Mode.BALL
            self._after_ball(innings)
        else:
            innings.retire(self.pending.retiring, player)
            self.pending = None
            self.mode = Mode.BALL
            self._say("OK")

    def _examine(self, line: str) -> None:
        words = line.split()
        if not words:
            return
        cmd = words[0]
        if cmd == "help":
            self._help()
        elif cmd == "print":
            self.console.print(match_card(self.match.snapshot()))
        elif cmd == "save" and len(words) >= 2:
            save_match_card(self.match.snapshot(), words[1])
            self._say(f"Scorecard saved to {words[1]}")
        elif cmd == "exit":
            self.mode = self._examine_return
            if self.mode == Mode.TOP:
                self.match = None
        else:
            self._unknown(line)

    # ------------------------------------------------------------------

    def _after_ball(self, innings: Innings) -> None:
        self._say("OK")
        if innings.is_complete:
            self._innings_closed(innings)
        elif innings.current_over is None:
            self._say(f"End of over {innings.over.number}")
            self.mode = Mode.INNINGS

    def _innings_closed(self, innings: Innings) -> None:
        self._say(innings_summary(innings.snapshot()))
        if self.match.is_complete:
            result = self.match.result()
            logger.info("Result: %s", result)
            self._say(f"[bold green]{escape(str(result))}[/bold green]")
            self._say("Match is complete, entering examine mode")
            self._enter_examine(Mode.TOP)
        else:
            self.mode = Mode.MATCH

    def _ask_next_batter(self, pending: PendingBatter) -> None:
        self.pending = pending
        self.mode = Mode.NEXT_BATTER
        available = [str(p) for p in self.innings.available_batters()]
        self._say(f"Available: {escape(', '.join(available))}")

    def _enter_examine(self, return_to: Mode) -> None:
        self._examine_return = return_to
        self.mode = Mode.EXAMINE

    def _batter_named(self, text: str) -> Player:
        last_name, first_name = parse_name(text)
        return search_roster(self.innings.team.roster, last_name, first_name)

    def _loaded_team(self, name: str) -> Team:
        for team in self.teams.values():
            if team.matches(name):
                return team
        raise IllegalTransition(f"No team {name} loaded")

    def _title(self) -> str:
        first, second = self.match.teams
        return f"{first.name} v {second.name}"

    def _help(self) -> None:
        for line in HELP.get(self.mode, []):
            self.console.print(line, markup=False)

    def _unknown(self, line: str) -> None:
        self._say(f"Unknown command {escape(line)!r}, try 'help'")

    def _say(self, message: str) -> None:
        self.console.print(message)
