"""Single-owner work timer client for the practice management backend"""

__version__ = "0.1.0"
