"""minigit: a small Git hosting server."""

__version__ = "1.0.0"
