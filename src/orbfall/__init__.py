"""Headless match-3 puzzle core with a turn-based combat layer."""

__version__ = "0.1.0"
