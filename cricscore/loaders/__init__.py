from cricscore.loaders.team_loader import TeamLoader

__all__ = ["TeamLoader"]
