"""
Team Loader - reads a team roster from a text file.

Format:

    Australia
    AUS
    Warner, David
    (c) Smith, Steve
    (wk) Carey, Alex
    ...

Line 1 is the team name, line 2 the short code, then one player per line as
`Last, First`. `(c)` marks the captain and `(wk)` the keeper; a player may
carry both. Malformed player lines are skipped.
"""
import logging
import os
from typing import Optional

from cricscore.config import settings
from cricscore.errors import InvalidTeam, RosterLoadError
from cricscore.models.player import Player
from cricscore.models.team import Team

logger = logging.getLogger(__name__)

MARKERS = ("(c)", "(wk)")


class TeamLoader:
    """Builds Team objects from roster text"""

    @staticmethod
    def resolve_path(file_name: str) -> str:
        if os.path.isabs(file_name) or os.path.isfile(file_name):
            return file_name
        return os.path.join(settings.ROSTER_DIR, file_name)

    @classmethod
    def load(cls, file_name: str) -> Team:
        path = cls.resolve_path(file_name)
        if not os.path.isfile(path):
            raise RosterLoadError(f"No roster file at {path}")
        with open(path, encoding="utf-8") as f:
            return cls.parse(f.read(), source=path)

    @classmethod
    def parse(cls, text: str, source: str = "<roster>") -> Team:
        lines = [line.strip() for line in text.splitlines()]
        lines = [line for line in lines if line]
        if len(lines) < 2:
            raise RosterLoadError(f"{source}: needs a team name and a short code")

        name, short_name = lines[0], lines[1]
        players = []
        captain: Optional[Player] = None
        keeper: Optional[Player] = None

        for number, line in enumerate(lines[2:], start=3):
            markers, player = cls.parse_player_line(line)
            if player is None:
                logger.warning("%s line %d: could not read player %r, skipped", source, number, line)
                continue
            if "(c)" in markers:
                captain = player
            if "(wk)" in markers:
                keeper = player
            players.append(player)

        if captain is None:
            raise RosterLoadError(f"{source}: no captain marked with (c)")
        if keeper is None:
            raise RosterLoadError(f"{source}: no keeper marked with (wk)")

        try:
            team = Team(name, short_name, players, captain, keeper)
        except InvalidTeam as exc:
            raise RosterLoadError(f"{source}: {exc}") from exc
        logger.info("Loaded %s (%s) with %d players", team.name, team.short_name, len(players))
        return team

    @staticmethod
    def parse_player_line(line: str) -> tuple:
        """Return (markers, Player or None) for one roster line"""
        markers = set()
        words = line.split()
        while words and words[0] in MARKERS:
            markers.add(words.pop(0))
        names = [part.strip() for part in " ".join(words).split(",")]
        if len(names) != 2 or not names[0] or not names[1]:
            return markers, None
        return markers, Player(names[0], names[1])
