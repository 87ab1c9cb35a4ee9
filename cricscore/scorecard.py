"""
Scorecard rendering with rich tables
"""
from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from cricscore.config import settings
from cricscore.schemas import InningsSnapshot, MatchSnapshot


def _number(value, digits: int = 2) -> str:
    return "-" if value is None else f"{value:.{digits}f}"


def batting_table(innings: InningsSnapshot) -> Table:
    table = Table(title=f"{innings.team} innings", title_justify="left")
    table.add_column("Batting", style="cyan")
    table.add_column("")
    table.add_column("R", justify="right")
    table.add_column("B", justify="right")
    table.add_column("Mins", justify="right")
    table.add_column("4s", justify="right")
    table.add_column("6s", justify="right")
    table.add_column("SR", justify="right")

    for line in innings.batting:
        name = f"{line.name}*" if line.on_strike else line.name
        table.add_row(
            name,
            line.how_out,
            str(line.runs),
            str(line.balls),
            str(line.minutes),
            str(line.fours),
            str(line.sixes),
            _number(line.strike_rate),
        )

    extras = innings.extras
    table.add_row(
        "Extras",
        f"(nb {extras.no_balls}, w {extras.wides}, b {extras.byes}, lb {extras.leg_byes})",
        str(extras.total),
    )
    table.add_row(
        Text("TOTAL", style="bold"),
        f"({innings.overs} ov, RR: {_number(innings.run_rate)}, {innings.minutes} Mts)",
        Text(innings.score_display, style="bold"),
    )
    return table


def bowling_table(innings: InningsSnapshot) -> Table:
    table = Table()
    table.add_column("Bowling", style="magenta")
    for heading in ("O", "M", "R", "W", "Econ", "0s", "4s", "6s", "Wd", "NB"):
        table.add_column(heading, justify="right")

    for line in innings.bowling:
        table.add_row(
            line.name,
            line.overs,
            str(line.maidens),
            str(line.runs),
            str(line.wickets),
            _number(line.economy),
            str(line.dots),
            str(line.fours),
            str(line.sixes),
            str(line.wides),
            str(line.no_balls),
        )
    return table


def innings_card(innings: InningsSnapshot) -> Group:
    parts = [batting_table(innings)]
    if innings.did_not_bat:
        parts.append(Text(f"Did not bat: {', '.join(innings.did_not_bat)}"))
    if innings.fall_of_wickets:
        falls = ", ".join(f"{f.wicket}-{f.runs} ({f.player}, {f.over} ov)" for f in innings.fall_of_wickets)
        parts.append(Text(f"Fall of wickets: {falls}"))
    parts.append(bowling_table(innings))
    return Group(*parts)


def innings_summary(innings: InningsSnapshot) -> str:
    return f"{innings.team}: {innings.score_display} in {innings.overs} overs"


def match_card(match: MatchSnapshot) -> Group:
    parts = [Text(match.title, style="bold")]
    for innings in match.innings:
        parts.append(innings_card(innings))
        parts.append(Text(""))
    parts.append(Text(match.result or "Match in progress", style="bold green"))
    return Group(*parts)


def save_match_card(match: MatchSnapshot, file_name: str) -> None:
    """Write the scorecard as plain text"""
    with open(file_name, "w", encoding="utf-8") as f:
        console = Console(file=f, width=settings.SCORECARD_WIDTH, no_color=True, highlight=False)
        console.print(match_card(match))
