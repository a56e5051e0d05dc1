"""Logging setup, event feed and replay recording."""
