"""Pestilence — rules engine for a turn-based grid tactics game."""

__version__ = "0.1.0"
