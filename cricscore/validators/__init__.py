from cricscore.validators.team_validator import TeamValidator

__all__ = ["TeamValidator"]
