#!/usr/bin/env python3
"""
CLI for cricscore ball-by-ball scorekeeping
"""
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from cricscore.config import settings
from cricscore.errors import RosterLoadError
from cricscore.loaders import TeamLoader
from cricscore.session import ScoringSession

console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


@click.group()
@click.option("--log-level", default=None, help="Override CRICSCORE_LOG_LEVEL")
def cli(log_level):
    """cricscore - score a cricket match ball by ball"""
    configure_logging((log_level or settings.LOG_LEVEL).upper())


@cli.command()
@click.option("--input", "input_file", type=click.File("r"), default="-", help="Read commands from a file")
@click.option("--output", "output_file", type=click.File("w"), default=None, help="Write the session to a file")
@click.argument("rosters", nargs=-1)
def score(input_file, output_file, rosters):
    """Run a scoring session, preloading any ROSTERS files"""
    out = Console(file=output_file, highlight=False) if output_file else console
    session = ScoringSession(console=out)

    for roster in rosters:
        try:
            session.add_team(TeamLoader.load(roster))
        except RosterLoadError as exc:
            out.print(f"[red]{exc}[/red]")

    # a terminal echoes typed input itself
    echo = output_file is not None or not input_file.isatty()
    while not session.finished:
        out.print(session.prompt, end="", markup=False)
        line = input_file.readline()
        if not line:
            out.print()
            break
        line = line.rstrip("\n")
        if echo:
            out.print(line, markup=False)
        session.handle(line)


@cli.command()
@click.argument("roster")
def show_team(roster: str):
    """Show the players in a roster file"""
    try:
        team = TeamLoader.load(roster)
    except RosterLoadError as exc:
        console.print(f"[red]{exc}[/red]")
        sys.exit(1)

    table = Table(title=f"{team.name} ({team.short_name})")
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Role", style="magenta")

    for number, player in enumerate(team.roster, start=1):
        roles = []
        if player == team.captain:
            roles.append("captain")
        if player == team.keeper:
            roles.append("wicket-keeper")
        table.add_row(str(number), str(player), ", ".join(roles))

    console.print(table)


if __name__ == "__main__":
    cli()
