"""Core data models: character, items, inventory, quests and the game state."""

from idlerpg.core.enums import CharacterClass, CharacterRace, CombatPhase, EquipSlot, ItemType
from idlerpg.core.errors import GameError, NoCharacterError, UnknownMonsterError
from idlerpg.core.inventory import EquippedItems, GridCoord, ItemRef
from idlerpg.core.models import Character, create_character
from idlerpg.core.state import CommandResult, GameState

__all__ = [
    "Character",
    "CharacterClass",
    "CharacterRace",
    "CombatPhase",
    "CommandResult",
    "EquipSlot",
    "EquippedItems",
    "GameError",
    "GameState",
    "GridCoord",
    "ItemRef",
    "ItemType",
    "NoCharacterError",
    "UnknownMonsterError",
    "create_character",
]
