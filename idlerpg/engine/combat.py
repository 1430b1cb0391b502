"""Combat tick engine — one encounter at a time, driven by scheduler ticks.

Phase machine::

    IDLE -> ENGAGING -> VICTORY | DEFEAT -> IDLE
                    \\-> IDLE (flee)
    VICTORY -> ENGAGING  (continuous mode, after a short delay)

Each tick is one exchange: the player swings, and if the monster survives
it swings back, the player earns the on-hit trickles and the macro gets a
chance to heal. HP lives on the Character the whole time; the encounter
only tracks the monster's side.

Scheduled callbacks carry the encounter id they were armed for. A tick
whose id is not the current encounter, or which arrives after the
encounter resolved, does nothing.
"""

from __future__ import annotations

import itertools
import logging
import math
from collections import deque
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable

from idlerpg.core.enums import CombatPhase, Domain, ProficiencyTrack, WeaponType
from idlerpg.core.errors import NoCharacterError
from idlerpg.core.inventory import add_item_with_quantity, equipped_weapon_type, has_armor_equipped
from idlerpg.core.macro import evaluate_macro
from idlerpg.core.progression import (
    apply_proficiency_gain,
    calculate_death_penalty,
    calculate_exp_and_level,
    get_experience_multiplier,
)
from idlerpg.core.quests import KillEvent, record_kill

if TYPE_CHECKING:
    from idlerpg.config import GameConfig
    from idlerpg.core.catalog import MonsterTemplate
    from idlerpg.core.models import Character
    from idlerpg.core.state import GameState
    from idlerpg.engine.scheduler import Scheduler, TimerHandle
    from idlerpg.systems.rng import CombatDice
    from idlerpg.utils.event_log import EventLog

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Formulas
# ---------------------------------------------------------------------------

def calculate_damage(attack: int, defense: int, roll: float, variance: float = 0.2) -> int:
    """Damage for one hit. *roll* in [0, 1) maps to a +/- *variance* swing.

    Both the pre-variance base and the result are floored at 1.
    """
    base = max(1, attack - defense)
    multiplier = 1.0 + (roll * 2.0 - 1.0) * variance
    return max(1, math.floor(base * multiplier))


def calculate_tick_interval(attack_speed: float, config: GameConfig) -> float:
    """Milliseconds between exchanges; faster attackers tick sooner."""
    modifier = max(1.0, attack_speed / config.base_attack_speed)
    return max(config.min_tick_ms, config.base_tick_ms / modifier)


# ---------------------------------------------------------------------------
# Encounter records
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class VictoryRewards:
    exp: float
    gold: int
    material_id: str | None = None
    material_lost: bool = False       # Dropped, but the inventory was full
    levels_gained: int = 0


@dataclass(slots=True)
class Encounter:
    encounter_id: int
    monster: MonsterTemplate
    monster_hp: int
    interval_ms: float
    log: deque[str]
    phase: CombatPhase = CombatPhase.ENGAGING
    tick: int = 0
    resolved: bool = False
    rewards: VictoryRewards | None = None
    exp_lost: float | None = None

    def add_log(self, line: str) -> None:
        self.log.append(line)


@dataclass(frozen=True, slots=True)
class EncounterView:
    """Read-only snapshot of an encounter for the UI."""

    encounter_id: int
    monster_id: str
    monster_name: str
    monster_hp: int
    monster_max_hp: int
    player_hp: int
    player_max_hp: int
    phase: CombatPhase
    interval_ms: float
    tick: int
    log: tuple[str, ...]
    rewards: VictoryRewards | None = None
    exp_lost: float | None = None


@dataclass(frozen=True, slots=True)
class TickResult:
    """What one exchange did."""

    phase: CombatPhase
    player_damage: int
    monster_damage: int = 0
    macro_message: str = ""
    kill_event: KillEvent | None = None


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class CombatEngine:
    """Owns the current encounter and its timers.

    The engine never calls back into its owner directly from a timer. It
    calls whatever ``tick_handler`` / ``restart_handler`` currently point
    at, and the owner routes the call back into ``tick`` / ``restart`` with
    its own state and locking.
    """

    def __init__(
        self,
        config: GameConfig,
        scheduler: Scheduler,
        dice: CombatDice,
        events: EventLog | None = None,
    ) -> None:
        self._config = config
        self._scheduler = scheduler
        self._dice = dice
        self._events = events
        self._ids = itertools.count(1)
        self._encounter: Encounter | None = None
        self._timer: TimerHandle | None = None
        self._restart_timer: TimerHandle | None = None

        self.tick_handler: Callable[[int], None] | None = None
        self.restart_handler: Callable[[int], None] | None = None

    # -- queries --

    @property
    def encounter(self) -> Encounter | None:
        return self._encounter

    @property
    def phase(self) -> CombatPhase:
        return self._encounter.phase if self._encounter else CombatPhase.IDLE

    @property
    def ticking(self) -> bool:
        return self._timer is not None and not self._timer.cancelled

    def view(self, character: Character | None) -> EncounterView | None:
        enc = self._encounter
        if enc is None:
            return None
        status = character.status_info if character else None
        return EncounterView(
            encounter_id=enc.encounter_id,
            monster_id=enc.monster.monster_id,
            monster_name=enc.monster.name,
            monster_hp=enc.monster_hp,
            monster_max_hp=enc.monster.hp,
            player_hp=status.hp if status else 0,
            player_max_hp=status.max_hp if status else 0,
            phase=enc.phase,
            interval_ms=enc.interval_ms,
            tick=enc.tick,
            log=tuple(enc.log),
            rewards=enc.rewards,
            exp_lost=enc.exp_lost,
        )

    # -- lifecycle --

    def start(self, state: GameState, monster: MonsterTemplate) -> Encounter:
        """Begin a fresh encounter, tearing down any previous one first."""
        character = state.character
        if character is None:
            raise NoCharacterError("Cannot start combat without a character")
        self.cancel_timers()

        encounter_id = next(self._ids)
        interval = calculate_tick_interval(character.status_info.attack_speed, self._config)
        encounter = Encounter(
            encounter_id=encounter_id,
            monster=monster,
            monster_hp=monster.hp,
            interval_ms=interval,
            log=deque(maxlen=self._config.battle_log_size),
        )
        encounter.add_log(f"A wild {monster.name} appears!")
        self._encounter = encounter
        self._timer = self._scheduler.call_every(
            interval,
            lambda: self._dispatch_tick(encounter_id),
            name=f"encounter-{encounter_id}",
        )
        logger.info(
            "Encounter %d: %s vs %s (interval %.0fms)",
            encounter_id, character.name, monster.monster_id, interval,
        )
        return encounter

    def flee(self) -> bool:
        """Abandon an engaging fight. No reward, no penalty."""
        enc = self._encounter
        if enc is None or enc.phase != CombatPhase.ENGAGING:
            return False
        self.cancel_timers()
        enc.resolved = True
        enc.phase = CombatPhase.IDLE
        self._encounter = None
        logger.info("Encounter %d: fled from %s", enc.encounter_id, enc.monster.monster_id)
        return True

    def close(self) -> bool:
        """Dismiss the encounter in any phase."""
        enc = self._encounter
        self.cancel_timers()
        if enc is None:
            return False
        enc.resolved = True
        self._encounter = None
        logger.debug("Encounter %d closed in phase %s", enc.encounter_id, enc.phase.name)
        return True

    def shutdown(self) -> None:
        self.close()
        self.tick_handler = None
        self.restart_handler = None

    def cancel_timers(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._restart_timer is not None:
            self._restart_timer.cancel()
            self._restart_timer = None

    def schedule_restart(self, encounter_id: int) -> bool:
        """Arm the continuous-mode restart after a victory."""
        enc = self._encounter
        if enc is None or enc.encounter_id != encounter_id or enc.phase != CombatPhase.VICTORY:
            return False
        if self._restart_timer is not None:
            self._restart_timer.cancel()
        self._restart_timer = self._scheduler.call_later(
            self._config.continuous_restart_delay_ms,
            lambda: self._dispatch_restart(encounter_id),
            name=f"restart-{encounter_id}",
        )
        return True

    def restart(self, state: GameState, encounter_id: int) -> Encounter | None:
        """Start the next fight against the same monster, if still relevant."""
        enc = self._encounter
        if enc is None or enc.encounter_id != encounter_id or enc.phase != CombatPhase.VICTORY:
            return None
        self._restart_timer = None
        return self.start(state, enc.monster)

    # -- dispatch --

    def _dispatch_tick(self, encounter_id: int) -> None:
        handler = self.tick_handler
        if handler is not None:
            handler(encounter_id)

    def _dispatch_restart(self, encounter_id: int) -> None:
        handler = self.restart_handler
        if handler is not None:
            handler(encounter_id)

    # -- exchange --

    def tick(self, state: GameState, encounter_id: int) -> TickResult | None:
        """Resolve one exchange. Returns None for stale or late ticks."""
        enc = self._encounter
        if enc is None or enc.encounter_id != encounter_id:
            logger.debug("Ignoring stale tick for encounter %d", encounter_id)
            return None
        if enc.resolved or enc.phase != CombatPhase.ENGAGING:
            logger.debug("Ignoring tick after resolution of encounter %d", encounter_id)
            return None
        character = state.character
        if character is None:
            raise NoCharacterError("Combat tick without a character")

        cfg = self._config
        status = character.status_info
        monster = enc.monster
        enc.tick += 1
        tick = enc.tick

        # 1. Player strikes
        roll = self._dice.swing(Domain.PLAYER_HIT, encounter_id, tick)
        player_damage = calculate_damage(status.gen_attack, monster.defense, roll, cfg.damage_variance)
        enc.monster_hp = max(0, enc.monster_hp - player_damage)
        enc.add_log(f"{character.name} hits {monster.name} for {player_damage} damage!")

        # 2. Monster down
        if enc.monster_hp <= 0:
            kill = self._resolve_victory(state, enc)
            return TickResult(CombatPhase.VICTORY, player_damage, kill_event=kill)

        # 3. Monster strikes back, player earns trickles
        roll = self._dice.swing(Domain.MONSTER_HIT, encounter_id, tick)
        monster_damage = calculate_damage(monster.attack, status.avg_def_pwr, roll, cfg.damage_variance)
        status.hp = max(0, status.hp - monster_damage)
        enc.add_log(f"{monster.name} hits {character.name} for {monster_damage} damage!")

        old_level = character.level
        character.level, status.exp_points = calculate_exp_and_level(
            character.level, status.exp_points, monster.exp_per_hit,
        )
        self._note_level_up(character, old_level)
        self._train_proficiency(state, character, monster.level)

        # 4. Macro
        macro_message = self._run_macro(state, character)
        if macro_message:
            enc.add_log(macro_message)

        # 5. Player down
        if not status.alive:
            self._resolve_defeat(character, enc)
            return TickResult(CombatPhase.DEFEAT, player_damage, monster_damage, macro_message)

        logger.debug(
            "Encounter %d tick %d: dealt %d, took %d (monster %d/%d, player %d/%d)",
            encounter_id, tick, player_damage, monster_damage,
            enc.monster_hp, monster.hp, status.hp, status.max_hp,
        )
        return TickResult(CombatPhase.ENGAGING, player_damage, monster_damage, macro_message)

    # -- internals --

    def _train_proficiency(self, state: GameState, character: Character, monster_level: int) -> None:
        weapon_type = equipped_weapon_type(state.equipped_items)
        track = ProficiencyTrack.RANGE if weapon_type == WeaponType.RANGED else ProficiencyTrack.MELEE
        gain = self._config.pt_base_gain
        if apply_proficiency_gain(character, track, monster_level, gain):
            self._emit("proficiency", f"{track.value.title()} PT increased to {character.ability_info.track(track).pt}")
        if has_armor_equipped(state.equipped_items):
            if apply_proficiency_gain(character, ProficiencyTrack.DEFENSE, monster_level, gain):
                self._emit("proficiency", f"Defense PT increased to {character.ability_info.defense.pt}")

    def _run_macro(self, state: GameState, character: Character) -> str:
        status = character.status_info
        outcome = evaluate_macro(
            state.macro_state,
            state.inventory_grid,
            status.hp,
            status.max_hp,
            character.level,
            character.general_info.race,
            fp=status.fp, max_fp=status.max_fp,
            sp=status.sp, max_sp=status.max_sp,
        )
        if not outcome.used:
            return ""
        state.inventory_grid = outcome.grid
        status.hp, status.fp, status.sp = outcome.hp, outcome.fp, outcome.sp
        if outcome.slot_exhausted:
            state.macro_state = replace(state.macro_state, potion_slot=None)
            logger.info("Macro potion stack used up; slot cleared")
        return outcome.message

    def _resolve_victory(self, state: GameState, enc: Encounter) -> KillEvent | None:
        if enc.resolved:
            return None
        enc.resolved = True
        enc.phase = CombatPhase.VICTORY
        self._stop_ticking()

        character = state.character
        status = character.status_info
        monster = enc.monster
        eid, tick = enc.encounter_id, enc.tick

        exp = monster.exp_reward * get_experience_multiplier(character.level)
        old_level = character.level
        character.level, status.exp_points = calculate_exp_and_level(character.level, status.exp_points, exp)
        gold = self._dice.gold_drop(eid, tick, monster.gold_drop)
        character.gold += gold

        material_id = None
        material_lost = False
        if monster.material_drop_id and self._dice.material_drops(eid, tick, monster.material_drop_rate):
            added = add_item_with_quantity(state.inventory_grid, monster.material_drop_id, 1)
            if added.success:
                state.inventory_grid = added.grid
                material_id = monster.material_drop_id
            else:
                material_lost = True
                logger.warning("Inventory full, %s drop from %s lost", monster.material_drop_id, monster.monster_id)

        enc.rewards = VictoryRewards(
            exp=exp,
            gold=gold,
            material_id=material_id,
            material_lost=material_lost,
            levels_gained=character.level - old_level,
        )
        enc.add_log(f"{monster.name} has been defeated!")
        enc.add_log(f"Gained {exp * 100:.1f}% experience and {gold} gold.")
        if material_id:
            enc.add_log(f"Obtained {material_id}.")
        elif material_lost:
            enc.add_log(f"Inventory full, {monster.material_drop_id} was lost.")
        self._note_level_up(character, old_level)

        logger.info(
            "Encounter %d: victory over %s (+%.3f exp, +%d gold, drop=%s)",
            eid, monster.monster_id, exp, gold, material_id,
        )
        kill = KillEvent(monster_id=monster.monster_id, material_id=material_id)
        record_kill(state, kill)
        return kill

    def _resolve_defeat(self, character: Character, enc: Encounter) -> None:
        if enc.resolved:
            return
        enc.resolved = True
        enc.phase = CombatPhase.DEFEAT
        self._stop_ticking()

        status = character.status_info
        actual, status.exp_points = calculate_death_penalty(status.exp_points, self._config.death_exp_penalty)
        status.hp = status.max_hp
        enc.exp_lost = actual
        enc.add_log(f"{character.name} has been defeated!")
        enc.add_log(f"You lost {actual * 100:.1f}% experience.")
        logger.info("Encounter %d: defeated by %s (-%.3f exp)", enc.encounter_id, enc.monster.monster_id, actual)
        self._emit("defeat", f"{character.name} was defeated by {enc.monster.name}")

    def _stop_ticking(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _note_level_up(self, character: Character, old_level: int) -> None:
        if character.level > old_level:
            logger.info("%s reached level %d", character.name, character.level)
            self._emit("level", f"{character.name} reached level {character.level}")

    def _emit(self, category: str, message: str) -> None:
        if self._events is not None:
            self._events.append(category, message)
