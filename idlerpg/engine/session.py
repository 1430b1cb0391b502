"""GameSession — the single owner of GameState and its only mutation path.

Every UI command and every scheduler tick enters through one re-entrant
lock, runs its transform against the state, and persists the result.
Commands answer with a ``CommandResult``; readers take a copy via
``snapshot()``.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from idlerpg.core import quests as quest_tracker
from idlerpg.core import shop
from idlerpg.core.catalog import QUESTS, get_monster, get_quest, get_zone
from idlerpg.core.enums import CharacterClass, CharacterRace, CombatPhase, EquipSlot
from idlerpg.core.errors import NoCharacterError, UnknownMonsterError
from idlerpg.core.inventory import (
    EquippedItems,
    Grid,
    GridCoord,
    create_starter_inventory_grid,
    equip_item,
    refresh_equipment_stats,
    swap_items,
    unequip_item,
    use_item,
)
from idlerpg.core.macro import MacroState
from idlerpg.core.models import Character, create_character, validate_character_name
from idlerpg.core.quests import Quest, QuestCompletion
from idlerpg.core.state import CommandResult, GameState
from idlerpg.engine.combat import CombatEngine, EncounterView
from idlerpg.persistence.schema import state_from_blob, state_to_blob
from idlerpg.systems.rng import CombatDice, seed_from_clock
from idlerpg.utils.event_log import EventLog

if TYPE_CHECKING:
    from idlerpg.config import GameConfig
    from idlerpg.engine.scheduler import Scheduler
    from idlerpg.persistence.store import StateStore

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class GameSession:
    """Owns the game state, the combat engine and the save store."""

    def __init__(
        self,
        config: GameConfig,
        scheduler: Scheduler,
        store: StateStore,
        events: EventLog | None = None,
    ) -> None:
        self.config = config
        self._scheduler = scheduler
        self._store = store
        self._lock = threading.RLock()
        self._events = events if events is not None else EventLog()
        self._closed = False

        seed = config.rng_seed if config.rng_seed is not None else seed_from_clock()
        self._dice = CombatDice(seed)
        self._combat = CombatEngine(config, scheduler, self._dice, self._events)
        self._combat.tick_handler = self._on_tick
        self._combat.restart_handler = self._on_restart

        self._state = self._load()
        logger.info("Session ready (seed=%d, character=%s)", self._dice.seed,
                    self._state.character.name if self._state.character else None)

    # -- read access --

    @property
    def events(self) -> EventLog:
        return self._events

    @property
    def combat_phase(self) -> CombatPhase:
        with self._lock:
            return self._combat.phase

    def snapshot(self) -> GameState:
        """A detached copy of the current state."""
        with self._lock:
            return self._state.copy()

    def encounter_view(self) -> EncounterView | None:
        with self._lock:
            return self._combat.view(self._state.character)

    def available_quest(self) -> Quest | None:
        with self._lock:
            character = self._state.character
            if character is None:
                return None
            return quest_tracker.select_available_quest(QUESTS, character.level, self._state.completed_quest_ids)

    # -- character --

    def create_character(
        self,
        name: str,
        char_class: CharacterClass,
        race: CharacterRace = CharacterRace.BELLATO,
    ) -> CommandResult:
        valid, error = validate_character_name(name)
        if not valid:
            return CommandResult.fail(error or "Invalid name")
        with self._lock:
            if self._state.character is not None:
                return CommandResult.fail("A character already exists")
            character = create_character(name, char_class, race)
            self._state = GameState(
                character=character,
                inventory_grid=create_starter_inventory_grid(race, char_class),
                has_started_game=True,
            )
            refresh_equipment_stats(character, self._state.equipped_items)
            self._persist()
        logger.info("Created %s %s %s", race.value, char_class.value, character.name)
        self._events.append("character", f"{character.name} begins their journey")
        return CommandResult.ok(f"Welcome, {character.name}")

    def reset_game(self) -> CommandResult:
        with self._lock:
            self._combat.close()
            self._state = GameState()
            try:
                self._store.clear()
            except OSError:
                logger.warning("Could not delete save data", exc_info=True)
            self._events.clear()
        logger.info("Game reset")
        return CommandResult.ok("Game reset")

    # -- combat --

    def start_encounter(self, monster_id: str) -> CommandResult:
        monster = get_monster(monster_id)
        if monster is None:
            raise UnknownMonsterError(monster_id)
        with self._lock:
            self._require_character()
            if self._combat.phase == CombatPhase.ENGAGING:
                return CommandResult.fail("Already in combat")
            zone = get_zone(self._state.current_zone) if self._state.current_zone else None
            if zone is not None and monster_id not in zone.monsters:
                return CommandResult.fail(f"{monster.name} does not roam {zone.name}")
            self._combat.start(self._state, monster)
        return CommandResult.ok(f"Engaging {monster.name}")

    def flee(self) -> CommandResult:
        with self._lock:
            if not self._combat.flee():
                return CommandResult.fail("Not in combat")
            self._persist()
        return CommandResult.ok("You fled the battle")

    def close_encounter(self) -> CommandResult:
        with self._lock:
            if not self._combat.close():
                return CommandResult.fail("No encounter to close")
        return CommandResult.ok("Encounter closed")

    def fight_again(self) -> CommandResult:
        with self._lock:
            self._require_character()
            encounter = self._combat.encounter
            if encounter is None or encounter.phase not in (CombatPhase.VICTORY, CombatPhase.DEFEAT):
                return CommandResult.fail("No finished encounter to repeat")
            monster = encounter.monster
            self._combat.start(self._state, monster)
        return CommandResult.ok(f"Engaging {monster.name}")

    def set_continuous_combat(self, enabled: bool) -> CommandResult:
        with self._lock:
            self._state.continuous_combat = enabled
            encounter = self._combat.encounter
            if enabled and encounter is not None and encounter.phase == CombatPhase.VICTORY:
                self._combat.schedule_restart(encounter.encounter_id)
            self._persist()
        return CommandResult.ok(f"Continuous combat {'enabled' if enabled else 'disabled'}")

    def select_zone(self, zone_id: str) -> CommandResult:
        zone = get_zone(zone_id)
        if zone is None:
            return CommandResult.fail(f"Unknown zone: {zone_id}")
        with self._lock:
            character = self._require_character()
            if character.level < zone.level_requirement:
                return CommandResult.fail(f"Requires level {zone.level_requirement}")
            self._state.current_zone = zone.zone_id
            self._persist()
        return CommandResult.ok(f"Entered {zone.name}")

    # -- quests --

    def accept_quest(self, quest_id: str) -> CommandResult:
        quest = get_quest(quest_id)
        if quest is None:
            return CommandResult.fail(f"Unknown quest: {quest_id}")
        with self._lock:
            self._require_character()
            result = quest_tracker.accept_quest(self._state, quest)
            if result.success:
                self._persist()
        return result

    def complete_quest(self) -> QuestCompletion:
        with self._lock:
            self._require_character()
            result = quest_tracker.complete_quest(self._state)
            if result.success:
                self._persist()
                self._events.append("quest", result.message)
        return result

    # -- inventory & equipment --

    def equip(self, slot: EquipSlot, coord: GridCoord) -> CommandResult:
        with self._lock:
            character = self._require_character()
            result = equip_item(self._state.inventory_grid, self._state.equipped_items, slot, coord)
            if result.success:
                self._apply_equipment(character, result.grid, result.equipped)
        return CommandResult(result.success, result.message)

    def unequip(self, slot: EquipSlot) -> CommandResult:
        with self._lock:
            character = self._require_character()
            result = unequip_item(self._state.inventory_grid, self._state.equipped_items, slot)
            if result.success:
                self._apply_equipment(character, result.grid, result.equipped)
        return CommandResult(result.success, result.message)

    def use_item(self, coord: GridCoord) -> CommandResult:
        with self._lock:
            character = self._require_character()
            status = character.status_info
            result = use_item(
                self._state.inventory_grid, coord, status.hp, status.max_hp,
                character.level, character.general_info.race,
                fp=status.fp, max_fp=status.max_fp, sp=status.sp, max_sp=status.max_sp,
            )
            if result.success:
                self._state.inventory_grid = result.grid
                status.hp, status.fp, status.sp = result.hp, result.fp, result.sp
                self._persist()
        return CommandResult(result.success, result.message)

    def swap(self, a: GridCoord, b: GridCoord) -> CommandResult:
        if not (a.in_bounds and b.in_bounds):
            return CommandResult.fail("Invalid inventory slot")
        with self._lock:
            self._state.inventory_grid = swap_items(self._state.inventory_grid, a, b)
            self._persist()
        return CommandResult.ok()

    def update_macro(
        self,
        enabled: bool | None = None,
        potion_slot: GridCoord | None = _UNSET,
        hp_threshold: int | None = None,
    ) -> CommandResult:
        """Patch the macro settings; omitted arguments keep their value."""
        if potion_slot is not _UNSET and potion_slot is not None and not potion_slot.in_bounds:
            return CommandResult.fail("Invalid inventory slot")
        if hp_threshold is not None and hp_threshold < 0:
            return CommandResult.fail("Threshold must not be negative")
        with self._lock:
            macro: MacroState = self._state.macro_state
            changes: dict[str, Any] = {}
            if enabled is not None:
                changes["enabled"] = enabled
            if potion_slot is not _UNSET:
                changes["potion_slot"] = potion_slot
            if hp_threshold is not None:
                changes["hp_threshold"] = hp_threshold
            self._state.macro_state = replace(macro, **changes)
            self._persist()
        return CommandResult.ok("Macro updated")

    # -- shop --

    def purchase_potion(self, potion_id: str, quantity: int) -> CommandResult:
        with self._lock:
            self._require_character()
            result = shop.purchase_potion(self._state, potion_id, quantity)
            if result.success:
                self._persist()
        return result

    def purchase_equipment(self, item_id: str, quantity: int = 1) -> CommandResult:
        with self._lock:
            self._require_character()
            result = shop.purchase_equipment(self._state, item_id, quantity)
            if result.success:
                self._persist()
        return result

    # -- lifecycle --

    def shutdown(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._combat.shutdown()
            self._persist()
        self._scheduler.shutdown()
        logger.info("Session shut down")

    # -- scheduler entry points --

    def _on_tick(self, encounter_id: int) -> None:
        with self._lock:
            if self._closed:
                return
            result = self._combat.tick(self._state, encounter_id)
            if result is None or result.phase == CombatPhase.ENGAGING:
                return
            self._persist()
            if result.phase == CombatPhase.VICTORY and self._state.continuous_combat:
                self._combat.schedule_restart(encounter_id)

    def _on_restart(self, encounter_id: int) -> None:
        with self._lock:
            if self._closed or not self._state.continuous_combat:
                return
            self._combat.restart(self._state, encounter_id)

    # -- internals --

    def _require_character(self) -> Character:
        character = self._state.character
        if character is None:
            raise NoCharacterError("Create a character first")
        return character

    def _apply_equipment(self, character: Character, grid: Grid, equipped: EquippedItems) -> None:
        self._state.inventory_grid = grid
        self._state.equipped_items = equipped
        refresh_equipment_stats(character, equipped)
        self._persist()

    def _persist(self) -> None:
        try:
            self._store.save(state_to_blob(self._state))
        except (OSError, TypeError, ValueError):
            logger.warning("Failed to save game state", exc_info=True)

    def _load(self) -> GameState:
        try:
            blob = self._store.load()
        except (OSError, ValueError):
            logger.warning("Could not read save data; starting fresh", exc_info=True)
            return GameState()
        if blob is None:
            return GameState()
        try:
            return state_from_blob(blob)
        except (ValidationError, ValueError, TypeError, KeyError):
            logger.warning("Save data is invalid; starting fresh", exc_info=True)
            return GameState()
