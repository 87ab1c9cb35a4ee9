"""
Scorer configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()

BALLS_PER_OVER = 6
INNINGS_PER_SIDE_OPTIONS = (1, 2)


class ScorerSettings:
    """Settings from environment variables"""

    LOG_LEVEL: str = os.getenv("CRICSCORE_LOG_LEVEL", "WARNING").upper()

    # Relative roster file names are resolved against this directory
    ROSTER_DIR: str = os.getenv("CRICSCORE_ROSTER_DIR", ".")

    # Width of scorecards written to files
    SCORECARD_WIDTH: int = int(os.getenv("CRICSCORE_SCORECARD_WIDTH", "120"))


settings = ScorerSettings()
