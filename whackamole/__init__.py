"""Timed whack-a-mole session engine."""

__version__ = "0.1.0"
