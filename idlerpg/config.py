"""Game configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GameConfig:
    """Immutable configuration for a game session."""

    # Progression
    death_exp_penalty: float = 0.05        # Fraction of a level lost on defeat
    pt_base_gain: float = 0.02             # Proficiency progress per qualifying hit

    # Combat timing (milliseconds)
    base_tick_ms: float = 1000.0
    min_tick_ms: float = 200.0
    base_attack_speed: float = 10.0
    continuous_restart_delay_ms: float = 1000.0

    # Combat
    damage_variance: float = 0.2           # +/- 20% uniform
    battle_log_size: int = 10

    # RNG (None = derive from wall clock at session start)
    rng_seed: int | None = None

    # Persistence
    save_path: str = "savegame.json"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Logging
    log_level: str = "INFO"
