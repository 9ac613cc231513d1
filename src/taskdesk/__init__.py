"""Personal task tracker: SQLite task store, console commands and a terminal counter shell."""

__version__ = "0.1.0"
