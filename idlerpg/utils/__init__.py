"""Logging setup and the game event feed."""
