"""
cricscore - ball-by-ball cricket scorekeeping
"""

__version__ = "0.1.0"
