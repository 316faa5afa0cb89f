"""Triage GitHub notifications from the terminal."""

__version__ = "1.0.0"
