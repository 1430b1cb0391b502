"""Macro auto-use: drink the assigned potion when HP drops below a threshold.

HP is always the trigger. The potion in the slot decides what gets
restored, so an FP or SP potion there refills that pool instead.
"""

from __future__ import annotations

from dataclasses import dataclass

from idlerpg.core.enums import CharacterRace
from idlerpg.core.inventory import Grid, GridCoord, get_item_at, use_item
from idlerpg.core.items import get_item, is_race_compatible, restore_effect

DEFAULT_HP_THRESHOLD = 50


@dataclass(frozen=True, slots=True)
class MacroState:
    enabled: bool = False
    potion_slot: GridCoord | None = None
    hp_threshold: int = DEFAULT_HP_THRESHOLD


@dataclass(frozen=True, slots=True)
class MacroOutcome:
    """What one macro check did. ``used`` is False for every no-op."""

    grid: Grid
    hp: int
    used: bool = False
    message: str = ""
    slot_exhausted: bool = False
    fp: int = 0
    sp: int = 0


def evaluate_macro(
    macro: MacroState,
    grid: Grid,
    hp: int,
    max_hp: int,
    level: int,
    race: CharacterRace | None = None,
    *,
    fp: int = 0,
    max_fp: int = 0,
    sp: int = 0,
    max_sp: int = 0,
) -> MacroOutcome:
    """Run one macro check against *hp*.

    Any mismatch (disabled, no slot, slot emptied or holding the wrong
    thing, level too low, target pool already full) leaves everything
    untouched.
    """
    idle = MacroOutcome(grid, hp, fp=fp, sp=sp)
    if not macro.enabled or macro.potion_slot is None:
        return idle
    if hp >= min(macro.hp_threshold, max_hp):
        return idle

    ref = get_item_at(grid, macro.potion_slot)
    if ref is None:
        return idle
    template = get_item(ref.item_id)
    if restore_effect(template) is None:
        return idle
    if level < template.level_requirement or not is_race_compatible(template.race, race):
        return idle

    result = use_item(
        grid, macro.potion_slot, hp, max_hp, level, race,
        fp=fp, max_fp=max_fp, sp=sp, max_sp=max_sp,
    )
    if not result.success:
        return idle
    return MacroOutcome(
        grid=result.grid,
        hp=result.hp,
        used=True,
        message=f"Macro: {result.message}",
        slot_exhausted=get_item_at(result.grid, macro.potion_slot) is None,
        fp=result.fp,
        sp=result.sp,
    )
