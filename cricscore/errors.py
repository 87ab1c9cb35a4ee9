"""
Exceptions raised by the scoring engine and its collaborators
"""


class ScoringError(Exception):
    """Base class for every recoverable scoring error"""


class ParseFailure(ScoringError):
    """Delivery notation could not be parsed"""

    def __init__(self, notation: str, reason: str = "could not parse"):
        self.notation = notation
        self.reason = reason
        super().__init__(f"{reason}: {notation!r}")


class RosterLookupError(ScoringError):
    """A player name could not be resolved against a roster"""

    def __init__(self, last_name: str, first_name=None):
        self.last_name = last_name
        self.first_name = first_name
        name = f"{last_name}, {first_name}" if first_name else last_name
        super().__init__(self.message(name))

    def message(self, name: str) -> str:
        return f"no player named {name}"


class RosterNotFound(RosterLookupError):
    pass


class RosterAmbiguous(RosterLookupError):
    def message(self, name: str) -> str:
        return f"more than one player matches {name}, give a first name"


class IllegalTransition(ScoringError):
    """Command not allowed in the current state; nothing was changed"""


class BatterRequired(IllegalTransition):
    """A wicket needs the incoming batter to be named"""


class BatterUnavailable(IllegalTransition):
    """The named batter cannot come in"""


class InvalidTeam(ValueError):
    def __init__(self, errors: list):
        self.errors = errors
        super().__init__("; ".join(errors))


class RosterLoadError(ScoringError):
    pass


class MatchConfigError(ValueError):
    pass


class InvariantViolation(AssertionError):
    """Internal state is inconsistent; this is a bug, not a user error"""
