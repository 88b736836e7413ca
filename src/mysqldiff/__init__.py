"""Structural diffs of MySQL schema dumps."""

__version__ = "0.1.0"
