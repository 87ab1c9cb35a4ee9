from cricscore.engine.deliveries import interpret, search_roster
from cricscore.engine.innings import Innings
from cricscore.engine.match_engine import MatchEngine

__all__ = ["interpret", "search_roster", "Innings", "MatchEngine"]
