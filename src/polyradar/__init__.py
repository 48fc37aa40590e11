"""Polyradar - prediction market scanner."""

__version__ = "0.1.0"
