"""
Tests for rendering and saving scorecards.
"""
import io

import pytest
from rich.console import Console

from cricscore.engine.match_engine import MatchEngine
from cricscore.models import Player
from cricscore.scorecard import match_card, innings_summary, save_match_card


def render(renderable) -> str:
    console = Console(file=io.StringIO(), width=160, no_color=True)
    console.print(renderable)
    return console.file.getvalue()


@pytest.fixture
def match(australia, india, clock) -> MatchEngine:
    """Australia 8/1 after one over of a 20-over match"""
    match = MatchEngine((australia, india), 20, clock=clock)
    innings = match.start_innings("AUS")
    innings.open_innings(Player("Warner", "David"), Player("Khawaja", "Usman"))
    innings.new_over(Player("Siraj", "Mohammed"))
    for notation in ("4", "1w", "1", "2lb", ".", "."):
        innings.apply_delivery(notation)
    innings.apply_delivery("W c Kohli", Player("Labuschagne", "Marnus"))
    return match


class TestMatchCard:
    def test_batting_and_bowling(self, match):
        text = render(match_card(match.snapshot()))
        assert "Australia v India" in text
        assert "Australia innings" in text
        assert "David Warner" in text
        assert "c Virat Kohli b Mohammed Siraj" in text
        assert "Marnus Labuschagne" in text
        assert "Mohammed Siraj" in text
        assert "(nb 0, w 1, b 0, lb 2)" in text
        assert "Match in progress" in text

    def test_did_not_bat_and_fall_of_wickets(self, match):
        text = render(match_card(match.snapshot()))
        assert "Did not bat: Steve Smith" in text
        assert "Fall of wickets: 1-8 (Usman Khawaja, 1.0 ov)" in text

    def test_summary(self, match):
        snapshot = match.snapshot().innings[0]
        assert innings_summary(snapshot) == "Australia: 8/1 in 1.0 overs"

    def test_declared_and_all_out_scores(self, match):
        snapshot = match.snapshot().innings[0]
        assert snapshot.score_display == "8/1"
        assert snapshot.model_copy(update={"declared": True}).score_display == "8/1 d"
        assert snapshot.model_copy(update={"all_out": True}).score_display == "8"


class TestSave:
    def test_save_plain_text(self, match, tmp_path):
        path = tmp_path / "card.txt"
        save_match_card(match.snapshot(), str(path))
        text = path.read_text(encoding="utf-8")
        assert "Australia innings" in text
        assert "\x1b[" not in text
