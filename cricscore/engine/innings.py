"""
Innings Engine - applies deliveries to one side's batting innings and reverts them
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from cricscore.config import BALLS_PER_OVER
from cricscore.engine.deliveries import interpret
from cricscore.errors import (
    IllegalTransition, BatterRequired, BatterUnavailable, RosterNotFound, InvariantViolation,
)
from cricscore.models.ball import (
    Ball, Over, ExtraType, Runs, Extras, Wicket, HowOut, NOT_OUT, RETIRED_HURT,
    scoring_of, is_legal, is_dismissal, credited_to_bowler, bowler_runs,
    is_four, is_six, is_dot, is_wide,
)
from cricscore.models.player import Player
from cricscore.models.team import Team
from cricscore.schemas import (
    InningsSnapshot, BatterLine, BowlerLine, ExtrasBreakdown, FallOfWicketLine,
)

logger = logging.getLogger(__name__)


def wall_clock() -> datetime:
    return datetime.now().replace(second=0, microsecond=0)


def minutes_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)


@dataclass
class BatterInnings:
    """Tracks a batter's innings"""
    player: Player
    time_in: datetime
    over_in: Over
    time_out: Optional[datetime] = None
    over_out: Optional[Over] = None
    balls: list = field(default_factory=list)  # every delivery faced, wides included
    runs: int = 0
    how_out: HowOut = NOT_OUT

    @property
    def is_batting(self) -> bool:
        return self.how_out == NOT_OUT

    @property
    def is_out(self) -> bool:
        return is_dismissal(self.how_out)

    @property
    def balls_faced(self) -> int:
        return sum(1 for b in self.balls if not is_wide(b))

    @property
    def fours(self) -> int:
        return sum(1 for b in self.balls if is_four(b))

    @property
    def sixes(self) -> int:
        return sum(1 for b in self.balls if is_six(b))

    @property
    def strike_rate(self) -> Optional[float]:
        if self.balls_faced == 0:
            return None
        return (self.runs / self.balls_faced) * 100

    def minutes(self, now: datetime) -> int:
        end = now if self.is_batting or self.time_out is None else self.time_out
        return minutes_between(self.time_in, end)


@dataclass
class BowlerSpell:
    """Tracks a bowler's figures; overs are indexes into the innings' over list"""
    player: Player
    over_indexes: list = field(default_factory=list)
    maidens: int = 0
    runs: int = 0
    wickets: int = 0
    wides: int = 0
    no_balls: int = 0


@dataclass(frozen=True)
class DeliveryRecord:
    """A delivery as it was applied, with what is needed to revert it"""
    ball: Ball
    batter: Player  # on strike when it was bowled
    incoming: Optional[Player] = None
    returning: bool = False  # incoming batter had retired hurt


@dataclass
class OverRecord:
    bowler: Player
    deliveries: list = field(default_factory=list)
    legal_balls: int = 0

    @property
    def balls(self) -> list:
        return [d.ball for d in self.deliveries]

    @property
    def is_complete(self) -> bool:
        return self.legal_balls >= BALLS_PER_OVER

    @property
    def runs_conceded(self) -> int:
        return sum(bowler_runs(d.ball) for d in self.deliveries)


@dataclass(frozen=True)
class FallOfWicket:
    player: Player
    wicket: int
    runs: int
    over: Over

    def __str__(self):
        return f"{self.wicket}-{self.runs} ({self.player}, {self.over} ov)"


class Innings:
    """
    One side's batting innings.

    Every mutating operation validates first and then commits in full, so a
    raised ScoringError always leaves the innings untouched. `undo` is the
    exact inverse of `apply` for the most recent ball of the current over.
    """

    def __init__(
        self,
        team: Team,
        fielding_team: Team,
        overs_limit: int = 0,
        target: Optional[int] = None,
        number: int = 1,
        clock=wall_clock,
    ):
        self.team = team
        self.fielding_team = fielding_team
        self.overs_limit = overs_limit  # 0 = unlimited
        self.target = target  # runs to exceed, None when not chasing
        self.number = number
        self.clock = clock

        self.batting: list[BatterInnings] = []
        self.bowling: list[BowlerSpell] = []
        self.runs = 0
        self.wickets = 0
        self.extras = {kind: 0 for kind in ExtraType}
        self.fall_of_wickets: list[FallOfWicket] = []
        self.overs: list[OverRecord] = []
        self.start_time = clock()
        self.end_time: Optional[datetime] = None
        self.declared = False

        # Index of the striker in the not-out list. Value is always 0 or 1.
        self.striker_index = 0
        self._retirement_mark = None  # (overs, deliveries) when a batter last retired

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def max_wickets(self) -> int:
        return self.team.max_wickets

    @property
    def legal_balls(self) -> int:
        return sum(o.legal_balls for o in self.overs)

    @property
    def over(self) -> Over:
        return Over.from_balls(self.legal_balls)

    @property
    def extras_total(self) -> int:
        return sum(self.extras.values())

    @property
    def not_out(self) -> list:
        return [b for b in self.batting if b.is_batting]

    @property
    def striker(self) -> Optional[BatterInnings]:
        not_out = self.not_out
        if len(not_out) < 2:
            return None
        return not_out[self.striker_index]

    @property
    def non_striker(self) -> Optional[BatterInnings]:
        not_out = self.not_out
        if len(not_out) < 2:
            return None
        return not_out[1 - self.striker_index]

    @property
    def current_over(self) -> Optional[OverRecord]:
        if self.overs and not self.overs[-1].is_complete:
            return self.overs[-1]
        return None

    @property
    def is_started(self) -> bool:
        return len(self.batting) >= 2

    @property
    def all_out(self) -> bool:
        return self.wickets >= self.max_wickets

    @property
    def is_complete(self) -> bool:
        return self.declared or self._would_end(self.runs, self.wickets, self.legal_balls)

    @property
    def run_rate(self) -> Optional[float]:
        if self.legal_balls == 0:
            return None
        return self.runs / self.over.decimal

    def _would_end(self, runs: int, wickets: int, legal_balls: int) -> bool:
        if wickets >= self.max_wickets:
            return True
        if self.overs_limit > 0 and legal_balls >= self.overs_limit * BALLS_PER_OVER:
            return True
        return self.target is not None and runs > self.target

    def needs_new_batter(self, ball: Ball) -> bool:
        """Whether applying `ball` would need an incoming batter"""
        if not isinstance(ball, Wicket):
            return False
        return not self._would_end(
            self.runs + ball.scoring.runs,
            self.wickets + 1,
            self.legal_balls + (1 if is_legal(ball) else 0),
        )

    def available_batters(self) -> list:
        """Roster players who may come in next"""
        batted = {b.player: b for b in self.batting}
        return [
            p for p in self.team.roster
            if p not in batted or batted[p].how_out == RETIRED_HURT
        ]

    def find_batter(self, player: Player) -> Optional[BatterInnings]:
        return next((b for b in self.batting if b.player == player), None)

    def find_bowler(self, player: Player) -> Optional[BowlerSpell]:
        return next((s for s in self.bowling if s.player == player), None)

    def bowler_overs(self, spell: BowlerSpell) -> list:
        return [self.overs[i] for i in spell.over_indexes]

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def open_innings(self, first: Player, second: Player) -> None:
        """Send in the openers; `first` takes strike"""
        if self.batting:
            raise IllegalTransition("Openers are already in")
        if first == second:
            raise BatterUnavailable(f"{first} cannot open at both ends")
        for player in (first, second):
            if player not in self.team.roster:
                raise BatterUnavailable(f"{player} is not in the {self.team} roster")

        now = self.clock()
        self.batting.append(BatterInnings(first, now, Over()))
        self.batting.append(BatterInnings(second, now, Over()))
        self.striker_index = 0
        logger.info("%s innings %d opened by %s and %s", self.team, self.number, first, second)

    def new_over(self, bowler: Player) -> OverRecord:
        self._require_open()
        if self.current_over is not None:
            raise IllegalTransition("Over in progress")
        if bowler not in self.fielding_team.roster:
            raise RosterNotFound(bowler.last_name, bowler.first_name)

        spell = self.find_bowler(bowler)
        if spell is None:
            spell = BowlerSpell(player=bowler)
            self.bowling.append(spell)
        record = OverRecord(bowler=bowler)
        self.overs.append(record)
        spell.over_indexes.append(len(self.overs) - 1)
        logger.debug("Over %d: %s to bowl", len(self.overs), bowler)
        return record

    def resume_over(self) -> OverRecord:
        self._require_open()
        over = self.current_over
        if over is None:
            raise IllegalTransition("No unfinished over")
        return over

    def parse(self, notation: str) -> Ball:
        """Read delivery notation against the current bowler and fielding side"""
        over = self._require_over()
        return interpret(notation, over.bowler, self.fielding_team.roster)

    def apply_delivery(self, notation: str, next_batter: Optional[Player] = None) -> DeliveryRecord:
        return self.apply(self.parse(notation), next_batter)

    def apply(self, ball: Ball, next_batter: Optional[Player] = None) -> DeliveryRecord:
        """
        Apply one delivery. A wicket that leaves the innings open needs
        `next_batter`; without one BatterRequired is raised and nothing changes.
        """
        over = self._require_over()
        incoming, returning = None, False
        if self.needs_new_batter(ball):
            if next_batter is None:
                raise BatterRequired(f"Next batter for {self.team} needed")
            returning = self._check_available(next_batter)
            incoming = next_batter

        striker = self.striker
        spell = self.find_bowler(over.bowler)
        if striker is None or spell is None:
            raise InvariantViolation("over in progress without striker or bowler")
        record = DeliveryRecord(ball, striker.player, incoming, returning)

        striker.balls.append(ball)
        over.deliveries.append(record)
        self._apply_scoring(scoring_of(ball), over, spell, striker)
        if isinstance(ball, Wicket):
            self._apply_wicket(ball, spell, incoming)
        if over.is_complete:
            self._flip_strike()  # ends change over
            if over.runs_conceded == 0:
                spell.maidens += 1

        logger.debug("%s: %r -> %d/%d (%s)", self.team, ball, self.runs, self.wickets, self.over)
        if self.is_complete:
            self.end_time = self.clock()
            logger.info("%s innings closed at %d/%d (%s ov)", self.team, self.runs, self.wickets, self.over)
        return record

    def undo(self) -> DeliveryRecord:
        """Revert the most recent ball of the current over"""
        if self._retirement_mark == self._position():
            raise IllegalTransition("Cannot revert past a retirement")
        if not self.overs or not self.overs[-1].deliveries:
            raise IllegalTransition("No ball to revert in this over")

        over = self.overs[-1]
        spell = self.find_bowler(over.bowler)
        record = over.deliveries[-1]
        ball = record.ball
        batter = self.find_batter(record.batter)
        if spell is None or batter is None:
            raise InvariantViolation("delivery without bowler or batter record")

        if over.is_complete:
            if over.runs_conceded == 0:
                spell.maidens -= 1
            self._flip_strike()
        if isinstance(ball, Wicket):
            self._revert_wicket(ball, spell, record)
        self._revert_scoring(scoring_of(ball), over, spell, batter)
        over.deliveries.pop()
        if batter.balls.pop() != ball:
            raise InvariantViolation(f"{batter.player} did not face the reverted ball")

        self.end_time = None
        logger.debug("%s: reverted %r -> %d/%d (%s)", self.team, ball, self.runs, self.wickets, self.over)
        return record

    def retire(self, player: Player, next_batter: Player) -> None:
        """Retire a not-out batter hurt; the replacement takes their end"""
        self._require_open()
        retiring = next((b for b in self.not_out if b.player == player), None)
        if retiring is None:
            raise BatterUnavailable(f"{player} is not batting")
        returning = self._check_available(next_batter)

        was_striker = retiring is self.striker
        retiring.how_out = RETIRED_HURT
        retiring.time_out = self.clock()
        retiring.over_out = self.over
        self._bring_in(next_batter, on_strike=was_striker)
        self._retirement_mark = self._position()
        logger.info(
            "%s retired hurt, %s %s",
            player, next_batter, "returns" if returning else "comes in",
        )

    def declare(self) -> None:
        if self.overs_limit > 0:
            raise IllegalTransition("Declarations are only allowed in unlimited-overs matches")
        self._require_open()
        self.declared = True
        self.end_time = self.clock()
        logger.info("%s declared at %d/%d", self.team, self.runs, self.wickets)

    # ------------------------------------------------------------------
    # Apply / revert internals
    # ------------------------------------------------------------------

    def _require_open(self) -> None:
        if not self.is_started:
            raise IllegalTransition("Openers have not been chosen")
        if self.is_complete:
            raise IllegalTransition("Innings is complete")

    def _require_over(self) -> OverRecord:
        self._require_open()
        over = self.current_over
        if over is None:
            raise IllegalTransition("No over in progress")
        return over

    def _check_available(self, player: Player) -> bool:
        """Raise unless `player` can bat next; True if returning from retirement"""
        if player not in self.team.roster:
            raise BatterUnavailable(f"{player} is not in the {self.team} roster")
        existing = self.find_batter(player)
        if existing is None:
            return False
        if existing.how_out == RETIRED_HURT:
            return True
        if existing.is_batting:
            raise BatterUnavailable(f"{player} is already batting")
        raise BatterUnavailable(f"{player} is out")

    def _position(self) -> tuple:
        return len(self.overs), len(self.overs[-1].deliveries) if self.overs else 0

    def _flip_strike(self) -> None:
        self.striker_index = 1 - self.striker_index

    def _bring_in(self, player: Player, on_strike: bool) -> None:
        existing = self.find_batter(player)
        if existing is not None:
            existing.how_out = NOT_OUT
        else:
            self.batting.append(BatterInnings(player, self.clock(), self.over))
        not_out = [b.player for b in self.not_out]
        if len(not_out) != 2:
            raise InvariantViolation(f"{len(not_out)} batters not out after {player} came in")
        position = not_out.index(player)
        self.striker_index = position if on_strike else 1 - position

    def _apply_scoring(self, scoring, over: OverRecord, spell: BowlerSpell, striker: BatterInnings) -> None:
        r = scoring.runs
        if isinstance(scoring, Runs):
            self.runs += r
            striker.runs += r
            spell.runs += r
            over.legal_balls += 1
            if r % 2 == 1:
                self._flip_strike()
        elif isinstance(scoring, Extras):
            self.runs += r
            if scoring.kind == ExtraType.NO_BALL:
                spell.no_balls += 1
                spell.runs += r
                self.extras[scoring.kind] += 1
                striker.runs += r - 1
                if r % 2 == 0:  # accounting for the penalty
                    self._flip_strike()
            elif scoring.kind == ExtraType.WIDE:
                spell.wides += 1
                spell.runs += r
                self.extras[scoring.kind] += r
                if r % 2 == 0:  # accounting for the penalty
                    self._flip_strike()
            else:
                self.extras[scoring.kind] += r
                over.legal_balls += 1
                if r % 2 == 1:
                    self._flip_strike()
        else:
            raise InvariantViolation(f"unhandled scoring {scoring!r}")

    def _revert_scoring(self, scoring, over: OverRecord, spell: BowlerSpell, batter: BatterInnings) -> None:
        r = scoring.runs
        if isinstance(scoring, Runs):
            if r % 2 == 1:
                self._flip_strike()
            over.legal_balls -= 1
            spell.runs -= r
            batter.runs -= r
            self.runs -= r
        elif isinstance(scoring, Extras):
            if scoring.kind == ExtraType.NO_BALL:
                if r % 2 == 0:
                    self._flip_strike()
                batter.runs -= r - 1
                self.extras[scoring.kind] -= 1
                spell.runs -= r
                spell.no_balls -= 1
            elif scoring.kind == ExtraType.WIDE:
                if r % 2 == 0:
                    self._flip_strike()
                self.extras[scoring.kind] -= r
                spell.runs -= r
                spell.wides -= 1
            else:
                if r % 2 == 1:
                    self._flip_strike()
                over.legal_balls -= 1
                self.extras[scoring.kind] -= r
            self.runs -= r
        else:
            raise InvariantViolation(f"unhandled scoring {scoring!r}")

    def _apply_wicket(self, ball: Wicket, spell: BowlerSpell, incoming: Optional[Player]) -> None:
        out = self.striker if ball.striker_out else self.non_striker
        if out is None or self.wickets >= self.max_wickets:
            raise InvariantViolation(f"wicket with {self.wickets} down and {len(self.not_out)} batting")

        self.wickets += 1
        if credited_to_bowler(ball.dismissal):
            spell.wickets += 1
        out.how_out = ball.dismissal
        out.over_out = self.over
        out.time_out = self.clock()
        self.fall_of_wickets.append(FallOfWicket(out.player, self.wickets, self.runs, self.over))
        logger.info("Wicket: %s %s, %d/%d", out.player, ball.dismissal, self.runs, self.wickets)

        if incoming is None:
            self.striker_index = 0
        else:
            self._bring_in(incoming, on_strike=ball.new_batter_on_strike)

    def _revert_wicket(self, ball: Wicket, spell: BowlerSpell, record: DeliveryRecord) -> None:
        fall = self.fall_of_wickets.pop()
        if record.incoming is not None:
            incoming = self.find_batter(record.incoming)
            if record.returning:
                incoming.how_out = RETIRED_HURT
            else:
                self.batting.remove(incoming)

        out = self.find_batter(fall.player)
        out.how_out = NOT_OUT
        out.over_out = None
        out.time_out = None
        self.wickets -= 1
        if credited_to_bowler(ball.dismissal):
            spell.wickets -= 1

        # the striker once the wicket's runs had been taken
        not_out = self.not_out
        if len(not_out) != 2:
            raise InvariantViolation(f"{len(not_out)} batters not out after reverting a wicket")
        survivor = not_out[0] if not_out[1] is out else not_out[1]
        on_strike = out if ball.striker_out else survivor
        self.striker_index = 0 if not_out[0] is on_strike else 1

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def snapshot(self, now: Optional[datetime] = None) -> InningsSnapshot:
        now = now or self.clock()
        striker = self.striker
        batting = [
            BatterLine(
                name=str(b.player),
                how_out=str(b.how_out),
                runs=b.runs,
                balls=b.balls_faced,
                minutes=b.minutes(now),
                fours=b.fours,
                sixes=b.sixes,
                strike_rate=round(b.strike_rate, 2) if b.strike_rate is not None else None,
                is_out=b.is_out,
                on_strike=b is striker,
            )
            for b in self.batting
        ]

        bowling = []
        for spell in self.bowling:
            overs = self.bowler_overs(spell)
            balls = [ball for o in overs for ball in o.balls]
            bowled = Over.from_balls(sum(o.legal_balls for o in overs))
            bowling.append(BowlerLine(
                name=str(spell.player),
                overs=str(bowled),
                maidens=spell.maidens,
                runs=spell.runs,
                wickets=spell.wickets,
                economy=round(spell.runs / bowled.decimal, 2) if bowled.total_balls else None,
                dots=sum(1 for b in balls if is_dot(b)),
                fours=sum(1 for b in balls if is_four(b)),
                sixes=sum(1 for b in balls if is_six(b)),
                wides=spell.wides,
                no_balls=spell.no_balls,
            ))

        batted = {b.player for b in self.batting}
        run_rate = self.run_rate
        return InningsSnapshot(
            team=self.team.name,
            short_name=self.team.short_name,
            number=self.number,
            batting=batting,
            bowling=bowling,
            extras=ExtrasBreakdown(
                no_balls=self.extras[ExtraType.NO_BALL],
                wides=self.extras[ExtraType.WIDE],
                byes=self.extras[ExtraType.BYE],
                leg_byes=self.extras[ExtraType.LEG_BYE],
            ),
            runs=self.runs,
            wickets=self.wickets,
            overs=str(self.over),
            run_rate=round(run_rate, 2) if run_rate is not None else None,
            minutes=minutes_between(self.start_time, self.end_time or now),
            all_out=self.all_out,
            declared=self.declared,
            complete=self.is_complete,
            target=self.target,
            did_not_bat=[str(p) for p in self.team.roster if p not in batted],
            fall_of_wickets=[
                FallOfWicketLine(wicket=f.wicket, runs=f.runs, player=str(f.player), over=str(f.over))
                for f in self.fall_of_wickets
            ],
        )

    def __repr__(self):
        return f"<Innings {self.number} {self.team.short_name}: {self.runs}/{self.wickets} ({self.over})>"
