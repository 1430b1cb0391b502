"""Seeded combat dice backed by xxhash.

A roll is keyed by (session seed, domain, encounter, tick): replaying a
fight with the same seed reproduces every hit, gold drop and material
drop, and the player's swing never shares a stream with the monster's.
"""

from __future__ import annotations

import struct
import time

import xxhash

from idlerpg.core.enums import Domain

_U64 = (1 << 64) - 1
_SEED_MASK = (1 << 63) - 1
# Spreads domains across the xxh64 seed space
_DOMAIN_STRIDE = 0x9E3779B97F4A7C15


def seed_from_clock() -> int:
    """A fresh seed for sessions that did not configure one."""
    return time.time_ns() & _SEED_MASK


class CombatDice:
    """Stateless roller shared by the scheduler thread and request handlers."""

    __slots__ = ("_seed",)

    def __init__(self, seed: int) -> None:
        self._seed = seed & _SEED_MASK

    @property
    def seed(self) -> int:
        return self._seed

    def roll(self, domain: Domain, encounter_id: int, tick: int) -> float:
        """Uniform float in [0.0, 1.0)."""
        stream = (self._seed + (domain.value + 1) * _DOMAIN_STRIDE) & _U64
        digest = xxhash.xxh64_intdigest(struct.pack("<qq", encounter_id, tick), seed=stream)
        return digest / (_U64 + 1)

    def swing(self, attacker: Domain, encounter_id: int, tick: int) -> float:
        """Damage variance roll for one strike."""
        if attacker not in (Domain.PLAYER_HIT, Domain.MONSTER_HIT):
            raise ValueError(f"{attacker!r} is not a strike domain")
        return self.roll(attacker, encounter_id, tick)

    def gold_drop(self, encounter_id: int, tick: int, drop: tuple[int, int]) -> int:
        """Gold from a ``(low, high)`` drop range, both ends inclusive."""
        low, high = min(drop), max(drop)
        return low + int(self.roll(Domain.GOLD, encounter_id, tick) * (high - low + 1))

    def material_drops(self, encounter_id: int, tick: int, rate: float) -> bool:
        return self.roll(Domain.MATERIAL, encounter_id, tick) < rate
