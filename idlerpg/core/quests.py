"""Quest tracker — offer, accept, progress from kill events, complete.

Quest types:
  - SLAY: kill N of a specific monster.
  - COLLECT: pick up N of a specific material dropped by a monster.

At most one quest is active. Completing it is an explicit player action
that pays gold, experience and an optional item, then archives the id so
it is never offered again.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Iterable

from idlerpg.core.enums import QuestType
from idlerpg.core.inventory import add_item_with_quantity
from idlerpg.core.items import get_item
from idlerpg.core.progression import calculate_exp_and_level
from idlerpg.core.state import CommandResult

if TYPE_CHECKING:
    from idlerpg.core.state import GameState

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Kill events
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class KillEvent:
    """Raised once per victory."""

    monster_id: str
    material_id: str | None = None


# ---------------------------------------------------------------------------
# Quest definitions (static)
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class QuestRewards:
    gold: int = 0
    exp: float = 0.0             # Fraction of a level
    item_id: str | None = None


@dataclass(frozen=True, slots=True)
class Quest(ABC):
    """Fields shared by every quest type."""

    quest_type: ClassVar[QuestType]

    quest_id: str
    title: str
    level: int
    target_amount: int
    rewards: QuestRewards = QuestRewards()
    description: str = ""

    @abstractmethod
    def matches(self, event: KillEvent) -> bool:
        """True if *event* counts toward this quest."""


@dataclass(frozen=True, slots=True)
class SlayQuest(Quest):
    quest_type: ClassVar[QuestType] = QuestType.SLAY

    target_monster: str = ""

    def matches(self, event: KillEvent) -> bool:
        return event.monster_id == self.target_monster


@dataclass(frozen=True, slots=True)
class CollectQuest(Quest):
    quest_type: ClassVar[QuestType] = QuestType.COLLECT

    target_monster: str = ""     # Where the material drops; informational
    target_material: str = ""

    def matches(self, event: KillEvent) -> bool:
        return event.material_id is not None and event.material_id == self.target_material


# ---------------------------------------------------------------------------
# Active quest (mutable)
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ActiveQuest:
    quest: Quest
    progress: int = 0
    is_complete: bool = False

    @property
    def progress_ratio(self) -> float:
        if self.quest.target_amount <= 0:
            return 1.0
        return min(self.progress / self.quest.target_amount, 1.0)

    def advance(self, amount: int = 1) -> bool:
        """Advance progress. Returns True if the quest just completed."""
        if self.is_complete:
            return False
        self.progress = min(self.progress + amount, self.quest.target_amount)
        if self.progress >= self.quest.target_amount:
            self.is_complete = True
            return True
        return False

    def copy(self) -> ActiveQuest:
        return ActiveQuest(quest=self.quest, progress=self.progress, is_complete=self.is_complete)


@dataclass(frozen=True, slots=True)
class QuestCompletion(CommandResult):
    """Completion outcome, including how much of the reward item fit."""

    gold: int = 0
    exp: float = 0.0
    item_added: int = 0
    levels_gained: int = 0


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

def select_available_quest(
    quests: Iterable[Quest],
    character_level: int,
    completed_ids: Iterable[str],
) -> Quest | None:
    """Lowest-level quest the character qualifies for and has not finished.

    Ties go to the earlier entry in *quests*.
    """
    done = set(completed_ids)
    best: Quest | None = None
    for quest in quests:
        if quest.level > character_level or quest.quest_id in done:
            continue
        if best is None or quest.level < best.level:
            best = quest
    return best


def accept_quest(state: GameState, quest: Quest) -> CommandResult:
    if state.active_quest is not None:
        logger.warning("Rejected quest %s: %s is still active", quest.quest_id, state.active_quest.quest.quest_id)
        return CommandResult.fail("You already have an active quest")
    if quest.quest_id in state.completed_quest_ids:
        logger.warning("Rejected quest %s: already completed", quest.quest_id)
        return CommandResult.fail("Quest already completed")
    if state.character is not None and quest.level > state.character.level:
        return CommandResult.fail(f"Requires level {quest.level}")

    state.active_quest = ActiveQuest(quest=quest)
    logger.info("Accepted quest %s (%s)", quest.quest_id, quest.title)
    return CommandResult.ok(f"Accepted quest: {quest.title}")


def record_kill(state: GameState, event: KillEvent) -> bool:
    """Feed one kill into the active quest. Returns True if progress moved."""
    active = state.active_quest
    if active is None or active.is_complete or not active.quest.matches(event):
        return False
    if active.advance():
        logger.info("Quest %s ready to turn in", active.quest.quest_id)
    return True


def complete_quest(state: GameState) -> QuestCompletion:
    """Pay out the finished active quest and archive it.

    A full inventory forfeits the reward item only; gold and experience
    are still granted and the quest is archived regardless.
    """
    active = state.active_quest
    if active is None:
        return QuestCompletion(False, "No active quest")
    if not active.is_complete:
        return QuestCompletion(False, "Quest is not complete yet")
    character = state.character
    if character is None:
        return QuestCompletion(False, "No character")

    quest = active.quest
    rewards = quest.rewards
    character.gold += rewards.gold
    old_level = character.level
    character.level, character.status_info.exp_points = calculate_exp_and_level(
        character.level, character.status_info.exp_points, rewards.exp,
    )

    item_added = 0
    message = f"Completed quest: {quest.title}"
    template = get_item(rewards.item_id) if rewards.item_id else None
    if rewards.item_id and template is None:
        logger.error("Quest %s rewards unknown item %r", quest.quest_id, rewards.item_id)
        message += f" (reward item {rewards.item_id} does not exist)"
    elif template is not None:
        result = add_item_with_quantity(state.inventory_grid, template.item_id, 1)
        state.inventory_grid = result.grid
        item_added = result.added
        if not result.success:
            logger.warning("Inventory full, quest reward %s not granted", template.item_id)
            message += f" (inventory full, {template.name} was not received)"

    state.completed_quest_ids.append(quest.quest_id)
    state.active_quest = None
    logger.info("Completed quest %s: +%d gold, +%.2f exp", quest.quest_id, rewards.gold, rewards.exp)
    return QuestCompletion(
        True,
        message,
        gold=rewards.gold,
        exp=rewards.exp,
        item_added=item_added,
        levels_gained=character.level - old_level,
    )
