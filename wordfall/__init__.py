"""Wordfall: a falling-words typing game."""

__version__ = "0.1.0"
