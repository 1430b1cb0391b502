"""Progression math — experience curve, proficiency growth, death penalty, CP.

Experience is stored as a fraction of the current level (0.0 to 1.0).
Proficiency tracks store an integer point value plus fractional progress
toward the next point. Every function here is pure; the one helper that
touches a Character (``apply_proficiency_gain``) only combines them.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from idlerpg.core.enums import ProficiencyTrack
    from idlerpg.core.models import AbilityInfo, Character, StatusInfo

logger = logging.getLogger(__name__)

MAX_LEVEL = 55
MIN_PT = 2
MAX_PT = 99

# Largest float strictly below 1.0, the experience ceiling at max level
_EXP_CEILING = math.nextafter(1.0, 0.0)

DEFAULT_PT_BASE_GAIN = 0.02

# (max level inclusive, multiplier), victory experience only
EXPERIENCE_MULTIPLIER_STEPS: tuple[tuple[int, float], ...] = (
    (5, 2.0),
    (10, 1.5),
    (20, 1.25),
)


# ---------------------------------------------------------------------------
# Experience
# ---------------------------------------------------------------------------

def calculate_exp_and_level(level: int, exp_fraction: float, gain: float) -> tuple[int, float]:
    """Add *gain* to the experience fraction, carrying whole levels over.

    Supports several level-ups in one call. At MAX_LEVEL the fraction is
    clamped below 1.0 and the level no longer moves.
    """
    if gain < 0:
        logger.warning("Negative experience gain %.4f ignored", gain)
        gain = 0.0

    new_level = level
    new_exp = exp_fraction + gain
    while new_exp >= 1.0 and new_level < MAX_LEVEL:
        new_exp -= 1.0
        new_level += 1

    if new_level >= MAX_LEVEL:
        new_exp = min(new_exp, _EXP_CEILING)
    return new_level, max(new_exp, 0.0)


def clamp_fraction(value: float) -> float:
    """Pin a stored progress fraction (experience or PT progress) into [0, 1)."""
    return max(0.0, min(value, _EXP_CEILING))


def calculate_death_penalty(exp_fraction: float, penalty_rate: float) -> tuple[float, float]:
    """Return ``(actual_penalty, new_exp_fraction)``; never goes below zero."""
    actual = max(0.0, min(penalty_rate, exp_fraction))
    return actual, exp_fraction - actual


def get_experience_multiplier(level: int) -> float:
    """Early-game boost applied to victory experience."""
    for max_level, mult in EXPERIENCE_MULTIPLIER_STEPS:
        if level <= max_level:
            return mult
    return 1.0


# ---------------------------------------------------------------------------
# Proficiency (PT)
# ---------------------------------------------------------------------------

def get_max_pt_for_level(level: int) -> int:
    """PT cap: linear from 2 at level 1 to 99 at level 55, floored."""
    clamped = max(1, min(level, MAX_LEVEL))
    return MIN_PT + (clamped - 1) * (MAX_PT - MIN_PT) // (MAX_LEVEL - 1)


def calculate_pt_exp_gain(
    current_pt: int,
    char_level: int,
    monster_level: int,
    base_gain: float = DEFAULT_PT_BASE_GAIN,
) -> float:
    """Fractional PT progress for one qualifying action.

    Tougher monsters teach more, weaker ones less; higher PT slows growth.
    Always strictly positive.
    """
    delta = monster_level - char_level
    level_scale = max(0.25, min(1.0 + 0.1 * delta, 2.0))
    return base_gain * level_scale / (1.0 + max(current_pt, 0) / 20.0)


def calculate_pt_and_exp(current_pt: int, current_pt_exp: float, gain: float, max_pt: int) -> tuple[int, float]:
    """Carry PT progress into points, capped at *max_pt*.

    Progress beyond the cap is discarded, not banked.
    """
    if current_pt >= max_pt:
        return current_pt, 0.0

    new_pt = current_pt
    new_exp = current_pt_exp + max(gain, 0.0)
    while new_exp >= 1.0 and new_pt < max_pt:
        new_exp -= 1.0
        new_pt += 1

    if new_pt >= max_pt:
        return max_pt, 0.0
    return new_pt, new_exp


def apply_proficiency_gain(
    character: Character,
    track: ProficiencyTrack,
    monster_level: int,
    base_gain: float = DEFAULT_PT_BASE_GAIN,
) -> bool:
    """Train one PT track on *character* in place. Returns True on a point-up."""
    prof = character.ability_info.track(track)
    gain = calculate_pt_exp_gain(prof.pt, character.level, monster_level, base_gain)
    max_pt = get_max_pt_for_level(character.level)
    new_pt, new_exp = calculate_pt_and_exp(prof.pt, prof.pt_exp, gain, max_pt)
    leveled = new_pt > prof.pt
    prof.pt = new_pt
    prof.pt_exp = new_exp
    return leveled


# ---------------------------------------------------------------------------
# Combat power
# ---------------------------------------------------------------------------

def calculate_cp(status: StatusInfo, ability: AbilityInfo) -> int:
    """Display-only strength score. Monotonic in every input."""
    offense = status.gen_attack * 2.0 + status.force_attack * 2.0
    defense = status.avg_def_pwr * 1.5 + status.avg_def_rate * 0.5
    speed = status.attack_speed + status.accuracy * 0.5 + status.dodge * 0.5
    vitals = status.max_hp / 10.0
    proficiency = ability.total_pt() * 3.0
    return int(offense + defense + speed + vitals + proficiency)
