"""
Delivery notation parser.

A delivery is written as whitespace separated tokens:

    "."              dot ball
    "4"              4 runs off the bat
    "5w"             5 wides (suffixes: nb, w, b, lb)
    "W b"            bowled
    "W c Waugh SR"   caught SR Waugh
    "W cross c Pant" caught Pant, batters crossed
    "W st Healy"     stumped Healy ("W 1w st Healy" keeps the wide)
    "W 1 run-out ns" run out after 1 run, non-striker out

Other wicket keywords: lbw, hit-wicket, run-out, obstructing, ret (retired
out). Run outs, obstructing and retired out take the modifiers `ns`
(non-striker out) and `cross` (batters crossed), in either order.
"""
import re
from typing import Optional

from cricscore.errors import ParseFailure, RosterLookupError, RosterAmbiguous, RosterNotFound
from cricscore.models.ball import (
    Ball, ScoringBall, Runs, Extras, ExtraType, Wicket,
    Bowled, LBW, HitWicket, Caught, Stumped, RunOut, Obstructing, RetiredOut,
)
from cricscore.models.player import Player

EXTRA_SUFFIXES = {extra.value: extra for extra in ExtraType}

_EXTRAS_PATTERN = re.compile(r"^(\d+)([a-z]+)$", re.ASCII)

# keyword -> dismissal factory (called with the bowler)
BOWLER_DISMISSALS = {
    "b": Bowled,
    "lbw": LBW,
    "hit-wicket": HitWicket,
}

UNCREDITED_DISMISSALS = {
    "run-out": RunOut,
    "obstructing": Obstructing,
    "ret": RetiredOut,
}

# (striker out, new batter on strike) by modifier set
MODIFIERS = {
    frozenset(): (True, True),
    frozenset({"ns"}): (False, True),
    frozenset({"cross"}): (True, False),
    frozenset({"ns", "cross"}): (False, True),
}

STUMPING_WIDE = Extras(ExtraType.WIDE, 1)


def search_roster(roster, last_name: str, first_name: Optional[str] = None) -> Player:
    """
    Find a player by last name, using the first name only when the last name
    is shared. Raises RosterNotFound or RosterAmbiguous.
    """
    matches = [p for p in roster if p.last_name == last_name]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise RosterNotFound(last_name, first_name)
    if first_name is None:
        raise RosterAmbiguous(last_name)
    for player in matches:
        if player.first_name == first_name:
            return player
    raise RosterNotFound(last_name, first_name)


def parse_name(text: str) -> tuple:
    """Split "Last, First" (or "Last") into (last, first-or-None)"""
    names = [part.strip() for part in text.split(",")]
    last = names[0]
    first = names[1] if len(names) > 1 and names[1] else None
    return last, first


def interpret_scoring(token: str) -> Optional[ScoringBall]:
    """Parse a runs/extras token, or return None"""
    if token == ".":
        return Runs(0)
    if token.isascii() and token.isdigit():
        return Runs(int(token))
    match = _EXTRAS_PATTERN.match(token)
    if match is None:
        return None
    kind = EXTRA_SUFFIXES.get(match.group(2))
    runs = int(match.group(1))
    if kind is None or runs < 1:
        return None
    return Extras(kind, runs)


def interpret(notation: str, bowler: Player, fielding_roster) -> Ball:
    """Parse one delivery. Raises ParseFailure, never changes anything."""
    tokens = notation.split()
    if not tokens:
        raise ParseFailure(notation, "empty delivery")

    if tokens[0].startswith("W"):
        return _interpret_wicket(notation, tokens[1:], bowler, fielding_roster)

    if len(tokens) > 1:
        raise ParseFailure(notation)
    scoring = interpret_scoring(tokens[0])
    if scoring is None:
        raise ParseFailure(notation)
    return scoring


def _interpret_wicket(notation, words, bowler, fielding_roster) -> Wicket:
    if not words:
        raise ParseFailure(notation, "wicket needs a mode of dismissal")

    leading = interpret_scoring(words[0])

    catch_index = [i for i, word in enumerate(words) if word in ("c", "st")]
    if len(catch_index) > 1:
        raise ParseFailure(notation, "more than one catch or stumping")
    if catch_index:
        return _interpret_catch(notation, words, catch_index[0], leading, bowler, fielding_roster)

    index = 0 if leading is None else 1
    if index >= len(words):
        raise ParseFailure(notation, "wicket needs a mode of dismissal")
    scoring = leading if leading is not None else Runs(0)
    keyword = words[index]
    modifiers = _modifiers(notation, words[index + 1:])

    if keyword in BOWLER_DISMISSALS:
        if modifiers:
            raise ParseFailure(notation, f"'{keyword}' takes no modifiers")
        return Wicket(BOWLER_DISMISSALS[keyword](bowler), scoring)

    if keyword in UNCREDITED_DISMISSALS:
        striker_out, new_on_strike = MODIFIERS[modifiers]
        return Wicket(UNCREDITED_DISMISSALS[keyword](), scoring, striker_out, new_on_strike)

    raise ParseFailure(notation, f"unknown dismissal '{keyword}'")


def _modifiers(notation, words) -> frozenset:
    found = set()
    for word in words:
        for part in word.split(","):
            if part not in ("ns", "cross") or part in found:
                raise ParseFailure(notation, f"unknown modifier '{word}'")
            found.add(part)
    return frozenset(found)


def _interpret_catch(notation, words, index, leading, bowler, fielding_roster) -> Wicket:
    last_name = words[index + 1] if index + 1 < len(words) else None
    if last_name is None:
        raise ParseFailure(notation, "fielder not named")
    first_name = words[index + 2] if index + 2 < len(words) else None
    try:
        fielder = search_roster(fielding_roster, last_name, first_name)
    except RosterLookupError as exc:
        raise ParseFailure(notation, str(exc)) from exc

    if words[index] == "c":
        crossed = index > 0 and words[index - 1] == "cross"
        return Wicket(Caught(fielder, bowler), Runs(0), True, crossed)

    # stumped: only a single wide survives, other extras cannot be stumped off
    if leading == STUMPING_WIDE:
        scoring = leading
    elif leading is None or isinstance(leading, Runs):
        scoring = Runs(0)
    else:
        raise ParseFailure(notation, "cannot be stumped off that delivery")
    return Wicket(Stumped(fielder, bowler), scoring)
