"""Tests for the auto-potion macro."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from idlerpg.core.enums import CharacterRace
from idlerpg.core.inventory import GridCoord, ItemRef, add_item_with_quantity, empty_grid, get_item_at
from idlerpg.core.macro import DEFAULT_HP_THRESHOLD, MacroState, evaluate_macro

SLOT = GridCoord(0, 0)


def _grid(item_id="bless_hp_potion_100", quantity=3):
    return add_item_with_quantity(empty_grid(), item_id, quantity).grid


def _macro(**overrides):
    fields = dict(enabled=True, potion_slot=SLOT, hp_threshold=DEFAULT_HP_THRESHOLD)
    fields.update(overrides)
    return MacroState(**fields)


class TestMacroFires:
    def test_below_threshold_drinks_one(self):
        outcome = evaluate_macro(_macro(), _grid(), hp=40, max_hp=150, level=1)
        assert outcome.used
        assert outcome.hp == 140
        assert outcome.message == "Macro: Restored 100 HP"
        assert get_item_at(outcome.grid, SLOT) == ItemRef("bless_hp_potion_100", 2)
        assert not outcome.slot_exhausted

    def test_last_potion_marks_slot_exhausted(self):
        outcome = evaluate_macro(_macro(), _grid(quantity=1), hp=10, max_hp=150, level=1)
        assert outcome.used
        assert outcome.slot_exhausted
        assert get_item_at(outcome.grid, SLOT) is None

    def test_threshold_above_max_hp_uses_max(self):
        outcome = evaluate_macro(_macro(hp_threshold=500), _grid(), hp=99, max_hp=100, level=1)
        assert outcome.used
        assert outcome.hp == 100


class TestMacroOtherPools:
    def test_fp_potion_restores_fp(self):
        outcome = evaluate_macro(_macro(), _grid("bless_fp_potion_100"), hp=30, max_hp=150, level=1,
                                 fp=10, max_fp=50, sp=40, max_sp=50)
        assert outcome.used
        assert outcome.message == "Macro: Restored 40 FP"
        assert (outcome.hp, outcome.fp, outcome.sp) == (30, 50, 40)
        assert get_item_at(outcome.grid, SLOT) == ItemRef("bless_fp_potion_100", 2)

    def test_sp_potion_restores_sp(self):
        outcome = evaluate_macro(_macro(), _grid("bless_sp_potion_100", quantity=1), hp=30, max_hp=150, level=1,
                                 fp=10, max_fp=50, sp=0, max_sp=250)
        assert outcome.message == "Macro: Restored 100 SP"
        assert (outcome.hp, outcome.fp, outcome.sp) == (30, 10, 100)
        assert outcome.slot_exhausted

    def test_hp_still_the_trigger(self):
        outcome = evaluate_macro(_macro(), _grid("bless_fp_potion_100"), hp=120, max_hp=150, level=1,
                                 fp=0, max_fp=50)
        assert not outcome.used
        assert outcome.fp == 0

    def test_full_pool_is_noop(self):
        grid = _grid("bless_sp_potion_100")
        outcome = evaluate_macro(_macro(), grid, hp=1, max_hp=150, level=1, sp=50, max_sp=50)
        assert not outcome.used
        assert outcome.grid is grid and outcome.sp == 50


class TestMacroNoOps:
    def test_at_threshold(self):
        grid = _grid()
        outcome = evaluate_macro(_macro(), grid, hp=50, max_hp=150, level=1)
        assert not outcome.used
        assert outcome.grid is grid and outcome.hp == 50

    def test_disabled(self):
        assert not evaluate_macro(_macro(enabled=False), _grid(), hp=1, max_hp=150, level=1).used

    def test_no_slot(self):
        assert not evaluate_macro(_macro(potion_slot=None), _grid(), hp=1, max_hp=150, level=1).used

    def test_empty_slot(self):
        assert not evaluate_macro(_macro(), empty_grid(), hp=1, max_hp=150, level=1).used

    def test_slot_holds_non_potion(self):
        assert not evaluate_macro(_macro(), _grid("flem_fluid"), hp=1, max_hp=150, level=1).used

    def test_level_too_low(self):
        assert not evaluate_macro(_macro(), _grid("bless_hp_potion_250"), hp=1, max_hp=500, level=5).used

    def test_race_mismatch(self):
        outcome = evaluate_macro(_macro(), _grid("repair_kit_300"), hp=1, max_hp=500, level=10,
                                 race=CharacterRace.CORA)
        assert not outcome.used
