"""Tests for shop purchases."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from idlerpg.core.enums import CharacterClass, CharacterRace
from idlerpg.core.inventory import (
    INVENTORY_COLS,
    INVENTORY_ROWS,
    add_item_with_quantity,
    count_item,
    empty_grid,
)
from idlerpg.core.models import create_character
from idlerpg.core.shop import EQUIPMENT_PRICE, POTION_PRICES, purchase_equipment, purchase_potion
from idlerpg.core.state import GameState


def _state(gold=100, level=1, race=CharacterRace.BELLATO):
    hero = create_character("Ari", CharacterClass.WARRIOR, race)
    hero.gold = gold
    hero.level = level
    return GameState(character=hero, inventory_grid=empty_grid(), has_started_game=True)


class TestPurchasePotion:
    def test_buys_and_charges(self):
        state = _state(gold=100)
        result = purchase_potion(state, "bless_hp_potion_100", 10)
        assert result.success
        assert count_item(state.inventory_grid, "bless_hp_potion_100") == 10
        assert state.character.gold == 100 - 10 * POTION_PRICES["bless_hp_potion_100"]

    def test_invalid_quantity(self):
        state = _state()
        for qty in (0, -1, 100):
            assert purchase_potion(state, "bless_hp_potion_100", qty).message == "Invalid quantity"

    def test_not_for_sale(self):
        state = _state()
        assert purchase_potion(state, "flem_fluid", 1).message == "Potion not for sale"
        assert purchase_potion(state, "repair_kit_300", 1).message == "Potion not for sale"

    def test_fp_and_sp_potions_sold(self):
        state = _state(gold=100)
        assert purchase_potion(state, "bless_fp_potion_100", 2).success
        assert purchase_potion(state, "bless_sp_potion_100", 3).success
        assert count_item(state.inventory_grid, "bless_fp_potion_100") == 2
        assert count_item(state.inventory_grid, "bless_sp_potion_100") == 3
        assert state.character.gold == 100 - 5 * 5

    def test_not_enough_gold_changes_nothing(self):
        state = _state(gold=4)
        result = purchase_potion(state, "bless_hp_potion_100", 1)
        assert result.message == "Not enough gold"
        assert state.character.gold == 4
        assert count_item(state.inventory_grid, "bless_hp_potion_100") == 0

    def test_level_requirement(self):
        result = purchase_potion(_state(gold=1000, level=5), "bless_hp_potion_250", 1)
        assert result.message == "Requires level 10"

    def test_partial_fill_charges_only_added(self):
        state = _state(gold=1000)
        state.inventory_grid = add_item_with_quantity(
            empty_grid(), "leather_helmet", INVENTORY_ROWS * INVENTORY_COLS - 1,
        ).grid
        state.inventory_grid = add_item_with_quantity(state.inventory_grid, "bless_hp_potion_100", 90).grid
        result = purchase_potion(state, "bless_hp_potion_100", 20)
        assert result.success
        assert "inventory full" in result.message
        assert count_item(state.inventory_grid, "bless_hp_potion_100") == 99
        assert state.character.gold == 1000 - 9 * POTION_PRICES["bless_hp_potion_100"]

    def test_no_space_at_all(self):
        state = _state(gold=1000)
        state.inventory_grid = add_item_with_quantity(
            empty_grid(), "leather_helmet", INVENTORY_ROWS * INVENTORY_COLS,
        ).grid
        result = purchase_potion(state, "bless_hp_potion_100", 1)
        assert result.message == "No inventory space available"
        assert state.character.gold == 1000


class TestPurchaseEquipment:
    def test_buys_one(self):
        state = _state(gold=10)
        result = purchase_equipment(state, "leather_helmet")
        assert result.success
        assert count_item(state.inventory_grid, "leather_helmet") == 1
        assert state.character.gold == 10 - EQUIPMENT_PRICE

    def test_quantity_must_be_one(self):
        result = purchase_equipment(_state(), "leather_helmet", 2)
        assert result.message == "Equipment is not stackable. Purchase one at a time."

    def test_only_weapons_and_armor(self):
        state = _state()
        assert purchase_equipment(state, "copper_ring").message == "Item not for sale"
        assert purchase_equipment(state, "bless_hp_potion_100").message == "Item not for sale"
        assert purchase_equipment(state, "no_such_item").message == "Item not for sale"

    def test_race_locked(self):
        state = _state(gold=10, level=30, race=CharacterRace.CORA)
        assert purchase_equipment(state, "flame_launcher").message == "Your race cannot use this item"
        accretia = _state(gold=10, level=30, race=CharacterRace.ACCRETIA)
        assert purchase_equipment(accretia, "flame_launcher").success

    def test_needs_gold_and_space(self):
        assert purchase_equipment(_state(gold=0), "leather_helmet").message == "Not enough gold"
        full = _state(gold=10)
        full.inventory_grid = add_item_with_quantity(
            empty_grid(), "leather_shoes", INVENTORY_ROWS * INVENTORY_COLS,
        ).grid
        assert purchase_equipment(full, "leather_helmet").message == "No inventory space available"
        assert full.character.gold == 10
