"""Rescue Match - candidate matching and ranking for rescue animals."""

__version__ = "0.1.0"
