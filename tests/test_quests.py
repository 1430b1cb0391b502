"""Tests for the quest tracker — offer, accept, progress, turn-in."""

import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from idlerpg.core.catalog import QUESTS, get_quest
from idlerpg.core.enums import CharacterClass
from idlerpg.core.inventory import (
    INVENTORY_COLS,
    INVENTORY_ROWS,
    add_item_with_quantity,
    count_item,
    empty_grid,
)
from idlerpg.core.models import create_character
from idlerpg.core.quests import (
    ActiveQuest,
    CollectQuest,
    KillEvent,
    Quest,
    QuestRewards,
    SlayQuest,
    accept_quest,
    complete_quest,
    record_kill,
    select_available_quest,
)
from idlerpg.core.state import GameState

SLAY = SlayQuest("test_slay", "Slay Three", level=1, target_amount=3,
                 rewards=QuestRewards(gold=50, exp=0.3, item_id="bless_hp_potion_100"),
                 target_monster="young_flem")
COLLECT = CollectQuest("test_collect", "Collect Two", level=1, target_amount=2,
                       target_monster="flem", target_material="flem_fluid")


def _state(level=1):
    hero = create_character("Ari", CharacterClass.WARRIOR)
    hero.level = level
    return GameState(character=hero, inventory_grid=empty_grid(), has_started_game=True)


class TestSelectAvailable:
    def test_lowest_level_first(self):
        assert select_available_quest(QUESTS, 10, []).quest_id == "cull_young_flems"

    def test_skips_completed_and_overleveled(self):
        quest = select_available_quest(QUESTS, 6, ["cull_young_flems", "sticky_samples"])
        assert quest.quest_id == "hound_hunt"

    def test_nothing_left(self):
        every = [q.quest_id for q in QUESTS]
        assert select_available_quest(QUESTS, 55, every) is None
        assert select_available_quest(QUESTS, 1, ["cull_young_flems"]) is None

    def test_ties_go_to_catalog_order(self):
        first = SlayQuest("a", "A", level=3, target_amount=1, target_monster="x")
        second = SlayQuest("b", "B", level=3, target_amount=1, target_monster="x")
        assert select_available_quest([first, second], 5, []) is first


class TestAccept:
    def test_accept_sets_active(self):
        state = _state()
        result = accept_quest(state, SLAY)
        assert result.success
        assert state.active_quest.quest is SLAY
        assert state.active_quest.progress == 0

    def test_only_one_active(self, caplog):
        state = _state()
        accept_quest(state, SLAY)
        with caplog.at_level(logging.WARNING, logger="idlerpg.core.quests"):
            result = accept_quest(state, COLLECT)
        assert not result.success
        assert result.message == "You already have an active quest"
        assert state.active_quest.quest is SLAY
        assert "Rejected quest" in caplog.text

    def test_completed_not_reaccepted(self):
        state = _state()
        state.completed_quest_ids.append(SLAY.quest_id)
        assert accept_quest(state, SLAY).message == "Quest already completed"
        assert state.active_quest is None

    def test_level_gate(self):
        state = _state(level=1)
        result = accept_quest(state, get_quest("hound_hunt"))
        assert result.message == "Requires level 6"


class TestRecordKill:
    def test_slay_progress_and_completion(self):
        state = _state()
        accept_quest(state, SLAY)
        for _ in range(3):
            assert record_kill(state, KillEvent("young_flem"))
        assert state.active_quest.is_complete
        assert state.active_quest.progress == 3
        # Further kills are ignored once complete
        assert not record_kill(state, KillEvent("young_flem"))
        assert state.active_quest.progress == 3

    def test_wrong_monster_ignored(self):
        state = _state()
        accept_quest(state, SLAY)
        assert not record_kill(state, KillEvent("flem"))
        assert state.active_quest.progress == 0

    def test_collect_counts_materials_only(self):
        state = _state()
        accept_quest(state, COLLECT)
        assert not record_kill(state, KillEvent("flem"))
        assert record_kill(state, KillEvent("flem", "flem_fluid"))
        assert not record_kill(state, KillEvent("flem", "mutant_hide"))
        assert state.active_quest.progress == 1

    def test_no_active_quest(self):
        assert not record_kill(_state(), KillEvent("young_flem"))

    def test_progress_ratio(self):
        active = ActiveQuest(SLAY, progress=1)
        assert active.progress_ratio == pytest.approx(1 / 3)


class TestComplete:
    def _ready(self, state):
        state.active_quest = ActiveQuest(SLAY, progress=3, is_complete=True)

    def test_pays_out_and_archives(self):
        state = _state()
        gold_before = state.character.gold
        self._ready(state)
        result = complete_quest(state)
        assert result.success
        assert result.gold == 50 and result.item_added == 1
        assert state.character.gold == gold_before + 50
        assert state.character.status_info.exp_points == pytest.approx(0.3)
        assert count_item(state.inventory_grid, "bless_hp_potion_100") == 1
        assert state.active_quest is None
        assert state.completed_quest_ids == [SLAY.quest_id]

    def test_exp_reward_can_level_up(self):
        state = _state()
        state.character.status_info.exp_points = 0.9
        self._ready(state)
        result = complete_quest(state)
        assert result.levels_gained == 1
        assert state.character.level == 2
        assert state.character.status_info.exp_points == pytest.approx(0.2)

    def test_full_inventory_forfeits_item_only(self):
        state = _state()
        state.inventory_grid = add_item_with_quantity(
            empty_grid(), "leather_helmet", INVENTORY_ROWS * INVENTORY_COLS,
        ).grid
        gold_before = state.character.gold
        self._ready(state)
        result = complete_quest(state)
        assert result.success
        assert result.item_added == 0
        assert "inventory full" in result.message
        assert state.character.gold == gold_before + 50
        assert state.character.status_info.exp_points == pytest.approx(0.3)
        assert count_item(state.inventory_grid, "bless_hp_potion_100") == 0
        assert state.active_quest is None
        assert SLAY.quest_id in state.completed_quest_ids

    def test_not_complete_yet(self):
        state = _state()
        accept_quest(state, SLAY)
        result = complete_quest(state)
        assert not result.success
        assert result.message == "Quest is not complete yet"
        assert state.active_quest is not None

    def test_no_active(self):
        assert complete_quest(_state()).message == "No active quest"

    def test_unknown_reward_item_reported(self):
        broken = SlayQuest("test_broken", "Broken Reward", level=1, target_amount=1,
                           rewards=QuestRewards(gold=10, item_id="retired_relic"),
                           target_monster="young_flem")
        state = _state()
        state.active_quest = ActiveQuest(broken, progress=1, is_complete=True)
        result = complete_quest(state)
        assert result.success
        assert result.item_added == 0
        assert "does not exist" in result.message
        assert "inventory full" not in result.message
        assert broken.quest_id in state.completed_quest_ids


class TestQuestTypes:
    def test_base_quest_is_abstract(self):
        with pytest.raises(TypeError):
            Quest("q", "Q", level=1, target_amount=1)

    def test_matching_rules(self):
        assert SLAY.matches(KillEvent("young_flem"))
        assert not SLAY.matches(KillEvent("flem", "flem_fluid"))
        assert COLLECT.matches(KillEvent("flem", "flem_fluid"))
        assert not COLLECT.matches(KillEvent("flem"))
