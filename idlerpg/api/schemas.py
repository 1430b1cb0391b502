"""Pydantic request and response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from idlerpg.core.enums import CharacterClass, CharacterRace, EquipSlot


# --- Shared ---

class CoordSchema(BaseModel):
    row: int = Field(..., ge=0)
    col: int = Field(..., ge=0)


class ItemRefSchema(BaseModel):
    item_id: str
    quantity: int = 1


class CommandResponse(BaseModel):
    success: bool
    message: str = ""


# --- Character ---

class GeneralInfoSchema(BaseModel):
    name: str
    char_class: CharacterClass
    race: CharacterRace


class StatusInfoSchema(BaseModel):
    hp: int
    max_hp: int
    fp: int
    max_fp: int
    sp: int
    max_sp: int
    def_gauge: int
    max_def_gauge: int
    exp_points: float
    gen_attack: int
    force_attack: int
    avg_def_pwr: int
    avg_def_range: int
    avg_def_rate: int
    attack_speed: int
    accuracy: int
    dodge: int


class ProficiencySchema(BaseModel):
    pt: int
    pt_exp: float
    max_pt: int


class CharacterSchema(BaseModel):
    general_info: GeneralInfoSchema
    level: int
    gold: int
    cp: int
    status_info: StatusInfoSchema
    ability_info: dict[str, ProficiencySchema]
    element_resist_info: dict[str, int]


# --- Quests ---

class QuestSchema(BaseModel):
    quest_id: str
    quest_type: str
    title: str
    description: str = ""
    level: int
    target_monster: str = ""
    target_material: str | None = None
    target_amount: int
    gold_reward: int = 0
    exp_reward: float = 0.0
    item_reward: str | None = None


class ActiveQuestSchema(BaseModel):
    quest: QuestSchema
    progress: int
    is_complete: bool


class QuestCompletionResponse(CommandResponse):
    gold: int = 0
    exp: float = 0.0
    item_added: int = 0
    levels_gained: int = 0


# --- Combat ---

class VictoryRewardsSchema(BaseModel):
    exp: float
    gold: int
    material_id: str | None = None
    material_lost: bool = False
    levels_gained: int = 0


class EncounterSchema(BaseModel):
    encounter_id: int
    monster_id: str
    monster_name: str
    monster_hp: int
    monster_max_hp: int
    player_hp: int
    player_max_hp: int
    phase: str
    interval_ms: float
    tick: int
    log: list[str]
    rewards: VictoryRewardsSchema | None = None
    exp_lost: float | None = None


class EventSchema(BaseModel):
    seq: int
    category: str
    message: str


# --- State ---

class MacroSchema(BaseModel):
    enabled: bool
    potion_slot: CoordSchema | None = None
    hp_threshold: int


class GameStateResponse(BaseModel):
    has_started_game: bool
    character: CharacterSchema | None = None
    inventory_grid: list[list[ItemRefSchema | None]]
    equipped_items: dict[str, ItemRefSchema | None]
    macro_state: MacroSchema
    active_quest: ActiveQuestSchema | None = None
    completed_quest_ids: list[str] = Field(default_factory=list)
    current_zone: str | None = None
    continuous_combat: bool = False
    encounter: EncounterSchema | None = None
    events: list[EventSchema] = Field(default_factory=list)


# --- Requests ---

class CreateCharacterRequest(BaseModel):
    name: str
    char_class: CharacterClass = CharacterClass.WARRIOR
    race: CharacterRace = CharacterRace.BELLATO


class StartCombatRequest(BaseModel):
    monster_id: str


class ContinuousRequest(BaseModel):
    enabled: bool


class ZoneRequest(BaseModel):
    zone_id: str


class AcceptQuestRequest(BaseModel):
    quest_id: str


class SwapRequest(BaseModel):
    a: CoordSchema
    b: CoordSchema


class UseItemRequest(BaseModel):
    coord: CoordSchema


class EquipRequest(BaseModel):
    slot: EquipSlot
    coord: CoordSchema


class UnequipRequest(BaseModel):
    slot: EquipSlot


class MacroPatch(BaseModel):
    """Partial update. ``potion_slot: null`` clears the slot; omitting it keeps it."""

    enabled: bool | None = None
    potion_slot: CoordSchema | None = None
    hp_threshold: int | None = Field(None, ge=0)


class PurchaseRequest(BaseModel):
    item_id: str
    quantity: int = 1


# --- Metadata ---

class ItemEntry(BaseModel):
    item_id: str
    name: str
    item_type: str
    description: str = ""
    level_requirement: int = 0
    race: str | None = None
    stack_limit: int = 1
    equip_slot: str | None = None
    attack: int | None = None
    weapon_type: str | None = None
    defense: int | None = None
    heal_amount: int | None = None
    potion_type: str | None = None
    price: int | None = None


class MonsterEntry(BaseModel):
    monster_id: str
    name: str
    hp: int
    attack: int
    defense: int
    exp_reward: float
    exp_per_hit: float
    gold_drop: tuple[int, int]
    level_range: tuple[int, int]
    material_drop_id: str | None = None
    material_drop_rate: float = 0.0


class ZoneEntry(BaseModel):
    zone_id: str
    name: str
    level_requirement: int
    monsters: list[str]
