"""Tests for the inventory grid — stacking, swapping, consumables, starter kit."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from idlerpg.core.enums import CharacterClass, CharacterRace
from idlerpg.core.inventory import (
    INVENTORY_COLS,
    INVENTORY_ROWS,
    STARTER_POTION_QUANTITY,
    GridCoord,
    ItemRef,
    add_item_with_quantity,
    count_empty_slots,
    count_item,
    create_starter_inventory_grid,
    empty_grid,
    find_empty_slot,
    get_item_at,
    remove_item_at,
    swap_items,
    use_item,
)
from idlerpg.core.items import MAX_STACK_SIZE

TOTAL_SLOTS = INVENTORY_ROWS * INVENTORY_COLS


def _full_grid(item_id="training_sword"):
    grid = empty_grid()
    result = add_item_with_quantity(grid, item_id, TOTAL_SLOTS)
    assert result.success
    return result.grid


def _all_stacks(grid):
    return [slot for row in grid for slot in row if slot is not None]


class TestGridShape:
    def test_empty_grid_dimensions(self):
        grid = empty_grid()
        assert len(grid) == INVENTORY_ROWS
        assert all(len(row) == INVENTORY_COLS for row in grid)
        assert count_empty_slots(grid) == TOTAL_SLOTS

    def test_find_empty_slot_row_major(self):
        grid = add_item_with_quantity(empty_grid(), "training_sword", 9).grid
        assert find_empty_slot(grid) == GridCoord(1, 1)
        assert find_empty_slot(_full_grid()) is None

    def test_out_of_bounds_reads_empty(self):
        assert get_item_at(empty_grid(), GridCoord(9, 9)) is None
        assert get_item_at(empty_grid(), GridCoord(-1, 0)) is None


class TestAddItem:
    def test_stackable_merges(self):
        grid = add_item_with_quantity(empty_grid(), "bless_hp_potion_100", 10).grid
        grid = add_item_with_quantity(grid, "bless_hp_potion_100", 15).grid
        assert _all_stacks(grid) == [ItemRef("bless_hp_potion_100", 25)]

    def test_stacks_never_exceed_limit(self):
        result = add_item_with_quantity(empty_grid(), "bless_hp_potion_100", 250)
        assert result.success and result.added == 250
        quantities = [s.quantity for s in _all_stacks(result.grid)]
        assert quantities == [MAX_STACK_SIZE, MAX_STACK_SIZE, 250 - 2 * MAX_STACK_SIZE]

    def test_custom_stack_limit(self):
        result = add_item_with_quantity(empty_grid(), "ancient_core", 25)
        assert [s.quantity for s in _all_stacks(result.grid)] == [20, 5]

    def test_non_stackable_one_per_slot(self):
        result = add_item_with_quantity(empty_grid(), "leather_helmet", 3)
        assert result.success
        assert [s.quantity for s in _all_stacks(result.grid)] == [1, 1, 1]

    def test_partial_fill_reports_added(self):
        grid = add_item_with_quantity(empty_grid(), "training_sword", TOTAL_SLOTS - 2).grid
        result = add_item_with_quantity(grid, "leather_helmet", 5)
        assert not result.success
        assert result.added == 2
        assert count_item(result.grid, "leather_helmet") == 2
        assert count_empty_slots(result.grid) == 0

    def test_full_grid_still_tops_up_existing_stack(self):
        grid = add_item_with_quantity(empty_grid(), "flem_fluid", 90).grid
        grid = add_item_with_quantity(grid, "training_sword", TOTAL_SLOTS - 1).grid
        result = add_item_with_quantity(grid, "flem_fluid", 20)
        assert result.added == 9
        assert count_item(result.grid, "flem_fluid") == MAX_STACK_SIZE

    def test_unknown_item_and_bad_quantity(self):
        grid = empty_grid()
        unknown = add_item_with_quantity(grid, "no_such_item", 1)
        assert not unknown.success and unknown.added == 0
        result = add_item_with_quantity(grid, "flem_fluid", 0)
        assert not result.success and result.added == 0
        assert result.grid is grid

    def test_input_grid_untouched(self):
        grid = empty_grid()
        add_item_with_quantity(grid, "flem_fluid", 3)
        assert count_empty_slots(grid) == TOTAL_SLOTS


class TestRemoveAndSwap:
    def test_remove_decrements_then_clears(self):
        grid = add_item_with_quantity(empty_grid(), "flem_fluid", 2).grid
        at = GridCoord(0, 0)
        grid = remove_item_at(grid, at)
        assert get_item_at(grid, at) == ItemRef("flem_fluid", 1)
        grid = remove_item_at(grid, at)
        assert get_item_at(grid, at) is None

    def test_remove_from_empty_is_noop(self):
        grid = empty_grid()
        assert remove_item_at(grid, GridCoord(2, 2)) is grid

    def test_swap_two_items(self):
        grid = add_item_with_quantity(empty_grid(), "flem_fluid", 3).grid
        grid = add_item_with_quantity(grid, "training_sword", 1).grid
        swapped = swap_items(grid, GridCoord(0, 0), GridCoord(0, 1))
        assert get_item_at(swapped, GridCoord(0, 0)) == ItemRef("training_sword", 1)
        assert get_item_at(swapped, GridCoord(0, 1)) == ItemRef("flem_fluid", 3)

    def test_swap_with_empty_moves(self):
        grid = add_item_with_quantity(empty_grid(), "flem_fluid", 3).grid
        moved = swap_items(grid, GridCoord(0, 0), GridCoord(4, 7))
        assert get_item_at(moved, GridCoord(0, 0)) is None
        assert get_item_at(moved, GridCoord(4, 7)) == ItemRef("flem_fluid", 3)

    def test_swap_out_of_bounds_is_noop(self):
        grid = add_item_with_quantity(empty_grid(), "flem_fluid", 3).grid
        assert swap_items(grid, GridCoord(0, 0), GridCoord(5, 0)) is grid


class TestUseItem:
    def _potion_grid(self, item_id="bless_hp_potion_100", quantity=3):
        return add_item_with_quantity(empty_grid(), item_id, quantity).grid

    def test_heals_and_consumes_one(self):
        result = use_item(self._potion_grid(), GridCoord(0, 0), hp=40, max_hp=150, level=1)
        assert result.success
        assert result.hp == 140
        assert result.message == "Restored 100 HP"
        assert get_item_at(result.grid, GridCoord(0, 0)).quantity == 2

    def test_heal_clamped_to_max(self):
        result = use_item(self._potion_grid(), GridCoord(0, 0), hp=120, max_hp=150, level=1)
        assert result.hp == 150
        assert result.message == "Restored 30 HP"

    def test_full_health_refused(self):
        grid = self._potion_grid()
        result = use_item(grid, GridCoord(0, 0), hp=150, max_hp=150, level=1)
        assert not result.success
        assert result.message == "Already at full health"
        assert result.grid is grid

    def test_empty_slot(self):
        result = use_item(empty_grid(), GridCoord(0, 0), hp=10, max_hp=150, level=1)
        assert result.message == "No item in this slot"

    def test_not_consumable(self):
        result = use_item(self._potion_grid("leather_helmet", 1), GridCoord(0, 0), hp=10, max_hp=150, level=1)
        assert result.message == "This item cannot be used"

    def test_level_requirement(self):
        result = use_item(self._potion_grid("bless_hp_potion_250"), GridCoord(0, 0), hp=10, max_hp=150, level=9)
        assert not result.success
        assert result.message == "Requires level 10"

    def test_race_restriction(self):
        grid = self._potion_grid("repair_kit_300")
        refused = use_item(grid, GridCoord(0, 0), hp=10, max_hp=500, level=10, race=CharacterRace.BELLATO)
        assert refused.message == "Your race cannot use this item"
        allowed = use_item(grid, GridCoord(0, 0), hp=10, max_hp=500, level=10, race=CharacterRace.ACCRETIA)
        assert allowed.success and allowed.hp == 310

    def test_fp_potion_restores_fp_only(self):
        result = use_item(self._potion_grid("bless_fp_potion_100"), GridCoord(0, 0), hp=10, max_hp=150, level=1,
                          fp=20, max_fp=80, sp=5, max_sp=50)
        assert result.success
        assert result.message == "Restored 60 FP"
        assert (result.hp, result.fp, result.sp) == (10, 80, 5)
        assert get_item_at(result.grid, GridCoord(0, 0)).quantity == 2

    def test_sp_potion_restores_sp_only(self):
        result = use_item(self._potion_grid("bless_sp_potion_100"), GridCoord(0, 0), hp=10, max_hp=150, level=1,
                          fp=20, max_fp=80, sp=5, max_sp=500)
        assert result.message == "Restored 100 SP"
        assert (result.hp, result.fp, result.sp) == (10, 20, 105)

    def test_full_fp_refused(self):
        grid = self._potion_grid("bless_fp_potion_100")
        result = use_item(grid, GridCoord(0, 0), hp=10, max_hp=150, level=1, fp=50, max_fp=50)
        assert not result.success
        assert result.message == "Already at full FP"
        assert result.grid is grid and result.fp == 50

    def test_hp_potion_leaves_other_pools(self):
        result = use_item(self._potion_grid(), GridCoord(0, 0), hp=40, max_hp=150, level=1, fp=7, max_fp=50, sp=9, max_sp=50)
        assert (result.fp, result.sp) == (7, 9)


class TestStarterInventory:
    def test_contents(self):
        grid = create_starter_inventory_grid(CharacterRace.BELLATO, CharacterClass.WARRIOR)
        assert get_item_at(grid, GridCoord(0, 0)) == ItemRef("bless_hp_potion_100", STARTER_POTION_QUANTITY)
        assert get_item_at(grid, GridCoord(0, 1)) == ItemRef("training_sword", 1)
        assert count_empty_slots(grid) == TOTAL_SLOTS - 2

    def test_weapon_follows_class(self):
        grid = create_starter_inventory_grid(CharacterRace.CORA, CharacterClass.RANGER)
        assert count_item(grid, "training_bow") == 1
        assert count_item(grid, "training_sword") == 0
