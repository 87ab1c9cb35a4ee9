"""
Tests for the delivery notation parser.

Run with: pytest tests/test_deliveries.py -v
"""
import pytest

from cricscore.engine.deliveries import interpret, interpret_scoring, search_roster, parse_name
from cricscore.errors import ParseFailure, RosterNotFound, RosterAmbiguous
from cricscore.models import (
    Player, Runs, Extras, ExtraType, Wicket,
    Bowled, LBW, HitWicket, Caught, Stumped, RunOut, Obstructing, RetiredOut,
)

CUMMINS = Player("Cummins", "Pat")
KOHLI = Player("Kohli", "Virat")
BHARAT = Player("Bharat", "Srikar")
ROHIT = Player("Sharma", "Rohit")
ISHANT = Player("Sharma", "Ishant")

FIELDERS = [ROHIT, KOHLI, BHARAT, ISHANT]


def parse(notation: str):
    return interpret(notation, CUMMINS, FIELDERS)


class TestScoringTokens:
    """Plain runs and extras"""

    @pytest.mark.parametrize("notation,expected", [
        (".", Runs(0)),
        ("0", Runs(0)),
        ("1", Runs(1)),
        ("4", Runs(4)),
        ("6", Runs(6)),
        ("5w", Extras(ExtraType.WIDE, 5)),
        ("1nb", Extras(ExtraType.NO_BALL, 1)),
        ("2b", Extras(ExtraType.BYE, 2)),
        ("3lb", Extras(ExtraType.LEG_BYE, 3)),
        ("  4  ", Runs(4)),
    ])
    def test_scoring(self, notation, expected):
        assert parse(notation) == expected

    @pytest.mark.parametrize("notation", ["", "   ", "x", "0w", "0nb", "3q", "4 4", "-1", "w", "1 w"])
    def test_rejected(self, notation):
        with pytest.raises(ParseFailure):
            parse(notation)

    @pytest.mark.parametrize("notation", ["²", "1²", "٣", "٣w", "²nb"])
    def test_non_ascii_digits_rejected(self, notation):
        with pytest.raises(ParseFailure):
            parse(notation)

    def test_interpret_scoring_returns_none_for_words(self):
        assert interpret_scoring("run-out") is None
        assert interpret_scoring("lbw") is None
        assert interpret_scoring("b") is None


class TestWickets:
    """Dismissals that do not name a fielder"""

    def test_bowled(self):
        assert parse("W b") == Wicket(Bowled(CUMMINS), Runs(0), True, True)

    def test_lbw_and_hit_wicket(self):
        assert parse("W lbw").dismissal == LBW(CUMMINS)
        assert parse("W hit-wicket").dismissal == HitWicket(CUMMINS)

    def test_bowled_off_a_no_ball_keeps_scoring_token(self):
        ball = parse("W 1nb b")
        assert ball.scoring == Extras(ExtraType.NO_BALL, 1)

    def test_bowler_dismissal_rejects_modifiers(self):
        with pytest.raises(ParseFailure):
            parse("W b ns")
        with pytest.raises(ParseFailure):
            parse("W lbw cross")

    def test_run_out_defaults_to_striker(self):
        assert parse("W 1 run-out") == Wicket(RunOut(), Runs(1), True, True)

    def test_run_out_non_striker(self):
        assert parse("W 1 run-out ns") == Wicket(RunOut(), Runs(1), False, True)

    def test_run_out_crossed(self):
        assert parse("W run-out cross") == Wicket(RunOut(), Runs(0), True, False)

    @pytest.mark.parametrize("notation", ["W 2 run-out ns cross", "W 2 run-out cross ns", "W 2 run-out ns,cross"])
    def test_run_out_non_striker_crossed(self, notation):
        assert parse(notation) == Wicket(RunOut(), Runs(2), False, True)

    def test_run_out_off_a_wide(self):
        assert parse("W 2w run-out").scoring == Extras(ExtraType.WIDE, 2)

    def test_obstructing_and_retired_out(self):
        assert parse("W obstructing ns").dismissal == Obstructing()
        assert parse("W ret") == Wicket(RetiredOut(), Runs(0), True, True)

    @pytest.mark.parametrize("notation", [
        "W",
        "W 1",
        "W stumped",
        "W run-out ns ns",
        "W run-out sideways",
        "W 0w run-out",
        "W \u00b2 run-out",
    ])
    def test_rejected(self, notation):
        with pytest.raises(ParseFailure):
            parse(notation)


class TestCatchesAndStumpings:
    """Dismissals that name a fielder from the fielding side"""

    def test_caught(self):
        assert parse("W c Kohli") == Wicket(Caught(KOHLI, CUMMINS), Runs(0), True, False)

    def test_caught_after_crossing(self):
        ball = parse("W cross c Kohli")
        assert ball.dismissal == Caught(KOHLI, CUMMINS)
        assert ball.striker_out is True
        assert ball.new_batter_on_strike is True

    def test_shared_last_name_needs_first_name(self):
        with pytest.raises(ParseFailure):
            parse("W c Sharma")
        assert parse("W c Sharma Ishant").dismissal == Caught(ISHANT, CUMMINS)

    def test_unknown_fielder(self):
        with pytest.raises(ParseFailure):
            parse("W c Tendulkar")

    def test_fielder_missing(self):
        with pytest.raises(ParseFailure):
            parse("W c")

    def test_catch_and_stumping_together(self):
        with pytest.raises(ParseFailure):
            parse("W c Kohli st Bharat")

    def test_stumped(self):
        assert parse("W st Bharat") == Wicket(Stumped(BHARAT, CUMMINS), Runs(0), True, True)

    def test_stumped_off_a_wide(self):
        assert parse("W 1w st Bharat").scoring == Extras(ExtraType.WIDE, 1)

    def test_stumped_drops_runs(self):
        assert parse("W 2 st Bharat").scoring == Runs(0)

    @pytest.mark.parametrize("notation", ["W 1nb st Bharat", "W 2w st Bharat", "W 1b st Bharat"])
    def test_stumped_off_other_extras(self, notation):
        with pytest.raises(ParseFailure):
            parse(notation)


class TestRosterSearch:
    def test_unique_last_name(self):
        assert search_roster(FIELDERS, "Kohli") == KOHLI

    def test_first_name_ignored_when_last_name_unique(self):
        assert search_roster(FIELDERS, "Kohli", "Someone") == KOHLI

    def test_ambiguous(self):
        with pytest.raises(RosterAmbiguous):
            search_roster(FIELDERS, "Sharma")

    def test_disambiguated(self):
        assert search_roster(FIELDERS, "Sharma", "Rohit") == ROHIT

    def test_not_found(self):
        with pytest.raises(RosterNotFound):
            search_roster(FIELDERS, "Dravid")
        with pytest.raises(RosterNotFound):
            search_roster(FIELDERS, "Sharma", "Karn")

    @pytest.mark.parametrize("text,expected", [
        ("Kohli", ("Kohli", None)),
        ("Sharma, Rohit", ("Sharma", "Rohit")),
        ("Sharma,", ("Sharma", None)),
        ("  Sharma ,  Ishant ", ("Sharma", "Ishant")),
    ])
    def test_parse_name(self, text, expected):
        assert parse_name(text) == expected
