"""
Shared fixtures: two full test-match sides and a controllable clock.
"""
from datetime import datetime, timedelta

import pytest

from cricscore.models import Player, Team

AUSTRALIA_XI = [
    ("Warner", "David"),
    ("Khawaja", "Usman"),
    ("Labuschagne", "Marnus"),
    ("Smith", "Steve"),
    ("Head", "Travis"),
    ("Green", "Cameron"),
    ("Carey", "Alex"),
    ("Cummins", "Pat"),
    ("Starc", "Mitchell"),
    ("Lyon", "Nathan"),
    ("Hazlewood", "Josh"),
]

INDIA_XI = [
    ("Sharma", "Rohit"),
    ("Gill", "Shubman"),
    ("Pujara", "Cheteshwar"),
    ("Kohli", "Virat"),
    ("Rahane", "Ajinkya"),
    ("Jadeja", "Ravindra"),
    ("Bharat", "Srikar"),
    ("Ashwin", "Ravichandran"),
    ("Shami", "Mohammed"),
    ("Siraj", "Mohammed"),
    ("Sharma", "Ishant"),
]


def make_team(name: str, short_name: str, names: list, captain: int = 0, keeper: int = 1) -> Team:
    roster = [Player(last, first) for last, first in names]
    return Team(name, short_name, roster, roster[captain], roster[keeper])


class Clock:
    """A clock that only moves when told to"""

    def __init__(self, start: datetime = datetime(2024, 1, 3, 10, 30)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: int) -> None:
        self.now += timedelta(minutes=minutes)


@pytest.fixture
def australia() -> Team:
    return make_team("Australia", "AUS", AUSTRALIA_XI, captain=7, keeper=6)


@pytest.fixture
def india() -> Team:
    return make_team("India", "IND", INDIA_XI, captain=0, keeper=6)


@pytest.fixture
def clock() -> Clock:
    return Clock()
