"""The game aggregate and the command result every mutation reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from idlerpg.core.inventory import EquippedItems, Grid, empty_grid
from idlerpg.core.macro import MacroState

if TYPE_CHECKING:
    from idlerpg.core.models import Character
    from idlerpg.core.quests import ActiveQuest


@dataclass(frozen=True, slots=True)
class CommandResult:
    """User-facing outcome of a command. Failures leave state unchanged."""

    success: bool
    message: str = ""

    @classmethod
    def ok(cls, message: str = "") -> CommandResult:
        return cls(True, message)

    @classmethod
    def fail(cls, message: str) -> CommandResult:
        return cls(False, message)


@dataclass(slots=True)
class GameState:
    """Everything that is persisted between runs.

    Owned by exactly one GameSession; all writes go through its commands.
    """

    character: Character | None = None
    inventory_grid: Grid = field(default_factory=empty_grid)
    equipped_items: EquippedItems = field(default_factory=EquippedItems)
    macro_state: MacroState = field(default_factory=MacroState)
    active_quest: ActiveQuest | None = None
    completed_quest_ids: list[str] = field(default_factory=list)
    current_zone: str | None = None
    continuous_combat: bool = False
    has_started_game: bool = False

    def copy(self) -> GameState:
        # Grid, equipment and macro are immutable values and can be shared
        return GameState(
            character=self.character.copy() if self.character else None,
            inventory_grid=self.inventory_grid,
            equipped_items=self.equipped_items,
            macro_state=self.macro_state,
            active_quest=self.active_quest.copy() if self.active_quest else None,
            completed_quest_ids=list(self.completed_quest_ids),
            current_zone=self.current_zone,
            continuous_combat=self.continuous_combat,
            has_started_game=self.has_started_game,
        )
