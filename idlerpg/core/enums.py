"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import Enum, IntEnum, unique


@unique
class ItemType(str, Enum):
    """Item categories."""

    WEAPON = "weapon"
    ARMOR = "armor"
    CONSUMABLE = "consumable"
    MATERIAL = "material"
    ACCESSORY = "accessory"


@unique
class EquipSlot(str, Enum):
    """Equipment slots on the character doll."""

    HELMET = "helmet"
    UPPER_BODY = "upper_body"
    LOWER_BODY = "lower_body"
    GLOVES = "gloves"
    SHOES = "shoes"
    CAPE = "cape"
    WEAPON = "weapon"


ARMOR_SLOTS: tuple[EquipSlot, ...] = (
    EquipSlot.HELMET,
    EquipSlot.UPPER_BODY,
    EquipSlot.LOWER_BODY,
    EquipSlot.GLOVES,
    EquipSlot.SHOES,
    EquipSlot.CAPE,
)


@unique
class WeaponType(str, Enum):
    """Weapon families — decides which proficiency track trains on hit."""

    MELEE = "melee"
    RANGED = "ranged"


@unique
class PotionType(str, Enum):
    HP = "HP"
    FP = "FP"
    SP = "SP"


@unique
class CharacterClass(str, Enum):
    WARRIOR = "warrior"
    RANGER = "ranger"
    SPIRITUALIST = "spiritualist"
    SPECIALIST = "specialist"


@unique
class CharacterRace(str, Enum):
    BELLATO = "bellato"
    CORA = "cora"
    ACCRETIA = "accretia"


@unique
class ProficiencyTrack(str, Enum):
    """The six proficiency (PT) tracks."""

    MELEE = "melee"
    RANGE = "range"
    UNIT = "unit"
    FORCE = "force"
    SHIELD = "shield"
    DEFENSE = "defense"


@unique
class QuestType(str, Enum):
    SLAY = "slay"
    COLLECT = "collect"


@unique
class CombatPhase(IntEnum):
    """Encounter state machine."""

    IDLE = 0
    ENGAGING = 1
    VICTORY = 2
    DEFEAT = 3


@unique
class Domain(IntEnum):
    """RNG domains for randomness isolation."""

    PLAYER_HIT = 0
    MONSTER_HIT = 1
    GOLD = 2
    MATERIAL = 3
