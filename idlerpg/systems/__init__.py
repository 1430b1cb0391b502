"""Engine systems: deterministic RNG."""

from idlerpg.systems.rng import CombatDice

__all__ = ["CombatDice"]
