"""Engine layer: tick scheduler, combat engine, game session."""

from idlerpg.engine.combat import CombatEngine
from idlerpg.engine.scheduler import ManualScheduler, ThreadScheduler
from idlerpg.engine.session import GameSession

__all__ = ["CombatEngine", "GameSession", "ManualScheduler", "ThreadScheduler"]
