"""Save-file schema, forward migration and GameState conversion.

Save versions:
  0: legacy flat character ``{name, level, experience, hp, maxHp, attack,
     defense, gold, class}`` and a flat ``inventory`` list of item ids.
  1: full character aggregate, but no inventory grid, no macro and
     materials counted in a separate ``materials`` dict.
  2: current. Everything in ``SaveFile``.

``migrate_blob`` lifts any older blob to version 2; pydantic defaults fill
whatever a blob still lacks.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field

from idlerpg.core.catalog import get_quest
from idlerpg.core.enums import CharacterClass, CharacterRace, EquipSlot
from idlerpg.core.inventory import (
    INVENTORY_COLS,
    INVENTORY_ROWS,
    EquippedItems,
    Grid,
    GridCoord,
    ItemRef,
    add_item_with_quantity,
    create_starter_inventory_grid,
    empty_grid,
    refresh_equipment_stats,
)
from idlerpg.core.items import get_item
from idlerpg.core.macro import DEFAULT_HP_THRESHOLD, MacroState
from idlerpg.core.models import (
    AbilityInfo,
    Character,
    ElementResistInfo,
    GeneralInfo,
    Proficiency,
    StatusInfo,
    create_character,
)
from idlerpg.core.progression import MAX_LEVEL, clamp_fraction, get_max_pt_for_level
from idlerpg.core.quests import ActiveQuest
from idlerpg.core.state import GameState

logger = logging.getLogger(__name__)

CURRENT_VERSION = 2


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class ItemRefModel(BaseModel):
    item_id: str
    quantity: int = Field(1, ge=1)


class CoordModel(BaseModel):
    row: int
    col: int


class GeneralInfoModel(BaseModel):
    name: str = "Hero"
    char_class: CharacterClass = CharacterClass.WARRIOR
    race: CharacterRace = CharacterRace.BELLATO


class StatusInfoModel(BaseModel):
    hp: int = 100
    max_hp: int = 100
    fp: int = 50
    max_fp: int = 50
    sp: int = 50
    max_sp: int = 50
    def_gauge: int = 100
    max_def_gauge: int = 100
    exp_points: float = 0.0
    gen_attack: int = 10
    force_attack: int = 0
    avg_def_pwr: int = 5
    avg_def_range: int = 0
    avg_def_rate: int = 0
    attack_speed: int = 10
    accuracy: int = 10
    dodge: int = 5


class ProficiencyModel(BaseModel):
    pt: int = 0
    pt_exp: float = 0.0


class AbilityInfoModel(BaseModel):
    melee: ProficiencyModel = Field(default_factory=ProficiencyModel)
    range: ProficiencyModel = Field(default_factory=ProficiencyModel)
    unit: ProficiencyModel = Field(default_factory=ProficiencyModel)
    force: ProficiencyModel = Field(default_factory=ProficiencyModel)
    shield: ProficiencyModel = Field(default_factory=ProficiencyModel)
    defense: ProficiencyModel = Field(default_factory=ProficiencyModel)


class ElementResistModel(BaseModel):
    fire: int = 0
    water: int = 0
    earth: int = 0
    wind: int = 0


class CharacterModel(BaseModel):
    general_info: GeneralInfoModel = Field(default_factory=GeneralInfoModel)
    level: int = 1
    gold: int = 0
    status_info: StatusInfoModel = Field(default_factory=StatusInfoModel)
    ability_info: AbilityInfoModel = Field(default_factory=AbilityInfoModel)
    element_resist_info: ElementResistModel = Field(default_factory=ElementResistModel)


class MacroModel(BaseModel):
    enabled: bool = False
    potion_slot: CoordModel | None = None
    hp_threshold: int = DEFAULT_HP_THRESHOLD


class ActiveQuestModel(BaseModel):
    quest_id: str
    progress: int = 0
    is_complete: bool = False


class SaveFile(BaseModel):
    version: int = CURRENT_VERSION
    character: CharacterModel | None = None
    inventory_grid: list[list[ItemRefModel | None]] | None = None
    equipped_items: dict[EquipSlot, ItemRefModel | None] = Field(default_factory=dict)
    macro_state: MacroModel = Field(default_factory=MacroModel)
    active_quest: ActiveQuestModel | None = None
    completed_quest_ids: list[str] = Field(default_factory=list)
    current_zone: str | None = None
    continuous_combat: bool = False
    has_started_game: bool = False


# ---------------------------------------------------------------------------
# Migration
# ---------------------------------------------------------------------------

def detect_version(blob: dict[str, Any]) -> int:
    version = blob.get("version")
    if isinstance(version, int):
        return version
    character = blob.get("character")
    if isinstance(character, dict) and "general_info" not in character and (
        "maxHp" in character or "experience" in character
    ):
        return 0
    return 1


def _parse_class(raw: Any) -> CharacterClass:
    try:
        return CharacterClass(str(raw).strip().lower())
    except ValueError:
        return CharacterClass.WARRIOR


def _migrate_v0(blob: dict[str, Any]) -> dict[str, Any]:
    """Flat placeholder character -> full aggregate with a list inventory."""
    legacy = blob.get("character") or {}
    character = create_character(str(legacy.get("name") or "Hero"), _parse_class(legacy.get("class")))
    character.level = max(1, min(int(legacy.get("level", 1)), MAX_LEVEL))
    character.gold = max(0, int(legacy.get("gold", 0)))
    # Raw experience had no curve; only a value that already reads as a fraction survives
    experience = float(legacy.get("experience", 0.0))
    character.status_info.exp_points = experience if 0.0 <= experience < 1.0 else 0.0
    max_hp = int(legacy.get("maxHp", character.status_info.max_hp))
    character.status_info.max_hp = max(1, max_hp)
    character.status_info.hp = max(0, min(int(legacy.get("hp", max_hp)), character.status_info.max_hp))

    materials: dict[str, int] = {}
    for item_id in blob.get("inventory") or []:
        materials[item_id] = materials.get(item_id, 0) + 1

    return {
        "version": 1,
        "character": state_to_blob(GameState(character=character))["character"],
        "materials": materials,
        "current_zone": blob.get("currentZone", blob.get("current_zone")),
        "has_started_game": True,
    }


def _migrate_v1(blob: dict[str, Any]) -> dict[str, Any]:
    """Build the inventory grid, folding the old materials counter into it."""
    out = {k: v for k, v in blob.items() if k != "materials"}
    out["version"] = 2

    if out.get("inventory_grid") is None:
        character = SaveFile.model_validate({"character": blob.get("character")}).character
        if character is not None:
            grid = create_starter_inventory_grid(character.general_info.race, character.general_info.char_class)
        else:
            grid = empty_grid()
        for item_id, count in (blob.get("materials") or {}).items():
            if get_item(item_id) is None or int(count) <= 0:
                continue
            result = add_item_with_quantity(grid, item_id, int(count))
            grid = result.grid
            if not result.success:
                logger.warning("Migration: only %d/%d %s fit in the grid", result.added, count, item_id)
        out["inventory_grid"] = _grid_to_rows(grid)
    return out


def migrate_blob(blob: dict[str, Any]) -> dict[str, Any]:
    """Upgrade *blob* to CURRENT_VERSION. Unknown future versions pass through."""
    version = detect_version(blob)
    if version > CURRENT_VERSION:
        logger.warning("Save version %d is newer than supported %d", version, CURRENT_VERSION)
        return blob
    if version == 0:
        logger.info("Migrating legacy save (v0)")
        blob = _migrate_v0(blob)
        version = 1
    if version == 1:
        logger.info("Migrating save v1 -> v2")
        blob = _migrate_v1(blob)
    return blob


# ---------------------------------------------------------------------------
# GameState <-> blob
# ---------------------------------------------------------------------------

def _grid_to_rows(grid: Grid) -> list[list[dict[str, Any] | None]]:
    return [
        [{"item_id": ref.item_id, "quantity": ref.quantity} if ref else None for ref in row]
        for row in grid
    ]


def _rows_to_grid(rows: list[list[ItemRefModel | None]]) -> Grid:
    """Rebuild a 5x8 grid, dropping unknown items and clamping stacks."""
    out: list[tuple[ItemRef | None, ...]] = []
    for r in range(INVENTORY_ROWS):
        src = rows[r] if r < len(rows) else []
        row: list[ItemRef | None] = []
        for c in range(INVENTORY_COLS):
            cell = src[c] if c < len(src) else None
            if cell is None:
                row.append(None)
                continue
            template = get_item(cell.item_id)
            if template is None:
                logger.warning("Dropping unknown item %r from saved grid", cell.item_id)
                row.append(None)
                continue
            row.append(ItemRef(cell.item_id, min(cell.quantity, template.stack_limit)))
        out.append(tuple(row))
    return tuple(out)


def _clamp(label: str, value: int, low: int, high: int) -> int:
    clamped = max(low, min(value, high))
    if clamped != value:
        logger.warning("Save field %s=%s out of range, clamped to %s", label, value, clamped)
    return clamped


def _clamp_fraction(label: str, value: float) -> float:
    clamped = clamp_fraction(value)
    if clamped != value:
        logger.warning("Save field %s=%s out of range, clamped to %s", label, value, clamped)
    return clamped


def _status_from_model(m: StatusInfoModel) -> StatusInfo:
    """Rebuild vitals with every pool inside ``[0, max]`` and a max of at least 1."""
    status = StatusInfo(**m.model_dump())
    for pool in ("hp", "fp", "sp", "def_gauge"):
        cap_name = f"max_{pool}"
        cap = _clamp(cap_name, getattr(status, cap_name), 1, 1 << 31)
        setattr(status, cap_name, cap)
        setattr(status, pool, _clamp(pool, getattr(status, pool), 0, cap))
    status.exp_points = _clamp_fraction("exp_points", status.exp_points)
    return status


def _ability_from_model(m: AbilityInfoModel, level: int) -> AbilityInfo:
    """PT tracks capped for *level*; a capped track banks no progress."""
    max_pt = get_max_pt_for_level(level)
    tracks: dict[str, Proficiency] = {}
    for name, track in m:
        pt = _clamp(f"{name}.pt", track.pt, 0, max_pt)
        pt_exp = 0.0 if pt >= max_pt else _clamp_fraction(f"{name}.pt_exp", track.pt_exp)
        tracks[name] = Proficiency(pt=pt, pt_exp=pt_exp)
    return AbilityInfo(**tracks)


def _character_from_model(m: CharacterModel) -> Character:
    level = _clamp("level", m.level, 1, MAX_LEVEL)
    return Character(
        general_info=GeneralInfo(**m.general_info.model_dump()),
        level=level,
        gold=max(0, m.gold),
        status_info=_status_from_model(m.status_info),
        ability_info=_ability_from_model(m.ability_info, level),
        element_resist_info=ElementResistInfo(**m.element_resist_info.model_dump()),
    )


def _character_to_dict(character: Character) -> dict[str, Any]:
    g = character.general_info
    s = character.status_info
    a = character.ability_info
    e = character.element_resist_info
    return {
        "general_info": {"name": g.name, "char_class": g.char_class.value, "race": g.race.value},
        "level": character.level,
        "gold": character.gold,
        "status_info": {name: getattr(s, name) for name in StatusInfoModel.model_fields},
        "ability_info": {
            name: {"pt": getattr(a, name).pt, "pt_exp": getattr(a, name).pt_exp}
            for name in AbilityInfoModel.model_fields
        },
        "element_resist_info": {"fire": e.fire, "water": e.water, "earth": e.earth, "wind": e.wind},
    }


def state_to_blob(state: GameState) -> dict[str, Any]:
    """Serialize a GameState to a JSON-ready dict at CURRENT_VERSION."""
    macro = state.macro_state
    active = state.active_quest
    return {
        "version": CURRENT_VERSION,
        "character": _character_to_dict(state.character) if state.character else None,
        "inventory_grid": _grid_to_rows(state.inventory_grid),
        "equipped_items": {
            slot.value: {"item_id": ref.item_id, "quantity": ref.quantity}
            for slot, ref in state.equipped_items.items()
        },
        "macro_state": {
            "enabled": macro.enabled,
            "potion_slot": {"row": macro.potion_slot.row, "col": macro.potion_slot.col} if macro.potion_slot else None,
            "hp_threshold": macro.hp_threshold,
        },
        "active_quest": {
            "quest_id": active.quest.quest_id,
            "progress": active.progress,
            "is_complete": active.is_complete,
        } if active else None,
        "completed_quest_ids": list(state.completed_quest_ids),
        "current_zone": state.current_zone,
        "continuous_combat": state.continuous_combat,
        "has_started_game": state.has_started_game,
    }


def state_from_blob(blob: dict[str, Any]) -> GameState:
    """Migrate and validate *blob*, then build a GameState.

    Raises ``pydantic.ValidationError`` when the blob cannot be read.
    """
    save = SaveFile.model_validate(migrate_blob(blob))
    character = _character_from_model(save.character) if save.character else None

    if save.inventory_grid is None:
        if character is not None:
            grid = create_starter_inventory_grid(character.general_info.race, character.general_info.char_class)
        else:
            grid = empty_grid()
    else:
        grid = _rows_to_grid(save.inventory_grid)

    equipped = EquippedItems()
    for slot, ref in save.equipped_items.items():
        template = get_item(ref.item_id) if ref else None
        if ref is None or template is None or template.equip_slot != slot:
            if ref is not None:
                logger.warning("Dropping invalid equipment %r in slot %s", ref.item_id, slot.value)
            continue
        equipped = equipped.with_slot(slot, ItemRef(ref.item_id, 1))

    slot = save.macro_state.potion_slot
    potion_slot = GridCoord(slot.row, slot.col) if slot else None
    if potion_slot is not None and not potion_slot.in_bounds:
        logger.warning("Dropping out-of-grid macro slot %s", potion_slot)
        potion_slot = None
    threshold = save.macro_state.hp_threshold
    if threshold < 0:
        logger.warning("Negative macro threshold %d reset to %d", threshold, DEFAULT_HP_THRESHOLD)
        threshold = DEFAULT_HP_THRESHOLD
    macro = MacroState(
        enabled=save.macro_state.enabled,
        potion_slot=potion_slot,
        hp_threshold=threshold,
    )

    active = None
    if save.active_quest is not None:
        quest = get_quest(save.active_quest.quest_id)
        if quest is None:
            logger.warning("Dropping unknown active quest %r", save.active_quest.quest_id)
        else:
            progress = max(0, min(save.active_quest.progress, quest.target_amount))
            active = ActiveQuest(quest=quest, progress=progress, is_complete=progress >= quest.target_amount)

    if character is not None:
        refresh_equipment_stats(character, equipped)

    return GameState(
        character=character,
        inventory_grid=grid,
        equipped_items=equipped,
        macro_state=macro,
        active_quest=active,
        completed_quest_ids=list(dict.fromkeys(save.completed_quest_ids)),
        current_zone=save.current_zone,
        continuous_combat=save.continuous_combat,
        has_started_game=save.has_started_game or character is not None,
    )
