"""Exceptions for programmer errors.

Player-facing validation failures are reported as ``CommandResult`` values,
never raised. These cover calls that should not have been made at all.
"""

from __future__ import annotations


class GameError(Exception):
    """Base class for engine errors."""


class UnknownMonsterError(GameError, LookupError):
    def __init__(self, monster_id: str) -> None:
        super().__init__(f"Unknown monster: {monster_id}")
        self.monster_id = monster_id


class NoCharacterError(GameError):
    """A command that needs a character ran before one was created."""
