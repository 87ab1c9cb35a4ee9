"""
Tests for reading team rosters from text files.
"""
import logging

import pytest

from cricscore.config import settings
from cricscore.errors import RosterLoadError
from cricscore.loaders import TeamLoader
from cricscore.models import Player

ROSTER = """\
Australia
AUS
Warner, David
Khawaja, Usman
(c) Cummins, Pat
(wk) Carey, Alex
Lyon, Nathan
"""


def write_roster(directory, text: str = ROSTER, name: str = "aus.txt") -> str:
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestParse:
    def test_team(self):
        team = TeamLoader.parse(ROSTER)
        assert team.name == "Australia"
        assert team.short_name == "AUS"
        assert len(team.roster) == 5
        assert team.roster[0] == Player("Warner", "David")
        assert team.captain == Player("Cummins", "Pat")
        assert team.keeper == Player("Carey", "Alex")

    def test_captain_keeper(self):
        text = "Minnows\nMIN\n(c) (wk) Smith, Steve\nHead, Travis\n"
        team = TeamLoader.parse(text)
        assert team.captain == team.keeper == Player("Smith", "Steve")

    def test_blank_lines_ignored(self):
        text = "\n" + ROSTER.replace("Khawaja", "\nKhawaja") + "\n\n"
        assert len(TeamLoader.parse(text).roster) == 5

    def test_malformed_line_skipped(self, caplog):
        text = ROSTER + "Marsh\nSmith, Steve, Jr\n"
        with caplog.at_level(logging.WARNING):
            team = TeamLoader.parse(text)
        assert len(team.roster) == 5
        assert "Marsh" in caplog.text

    @pytest.mark.parametrize("text", [
        "",
        "Australia\n",
        "Australia\nAUS\nWarner, David\n(wk) Carey, Alex\n",
        "Australia\nAUS\n(c) Warner, David\nCarey, Alex\n",
        "Australia\nAUS\n(c) (wk) Warner, David\n",
        "Australia\nAUS\n(c) Warner, David\n(wk) Warner, David\n",
    ])
    def test_rejected(self, text):
        with pytest.raises(RosterLoadError):
            TeamLoader.parse(text)

    @pytest.mark.parametrize("line,markers,player", [
        ("Lyon, Nathan", set(), Player("Lyon", "Nathan")),
        ("(wk) Carey, Alex", {"(wk)"}, Player("Carey", "Alex")),
        ("(c) (wk) Carey ,Alex", {"(c)", "(wk)"}, Player("Carey", "Alex")),
        ("Lyon", set(), None),
        ("Lyon,", set(), None),
    ])
    def test_player_line(self, line, markers, player):
        assert TeamLoader.parse_player_line(line) == (markers, player)


class TestLoad:
    def test_load_file(self, tmp_path):
        team = TeamLoader.load(write_roster(tmp_path))
        assert team.short_name == "AUS"

    def test_missing_file(self, tmp_path):
        with pytest.raises(RosterLoadError):
            TeamLoader.load(str(tmp_path / "nowhere.txt"))

    def test_relative_to_roster_dir(self, tmp_path, monkeypatch):
        write_roster(tmp_path, name="australia.team")
        monkeypatch.setattr(settings, "ROSTER_DIR", str(tmp_path))
        assert TeamLoader.load("australia.team").name == "Australia"
