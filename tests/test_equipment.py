"""Tests for equip/unequip and derived equipment stats."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from idlerpg.core.enums import CharacterClass, EquipSlot, WeaponType
from idlerpg.core.inventory import (
    EquippedItems,
    GridCoord,
    ItemRef,
    add_item_with_quantity,
    calculate_equipped_attack,
    calculate_equipped_defense,
    count_empty_slots,
    empty_grid,
    equip_item,
    equipped_weapon_type,
    get_item_at,
    has_armor_equipped,
    refresh_equipment_stats,
    unequip_item,
)
from idlerpg.core.models import CLASS_BASE_STATS, create_character

ORIGIN = GridCoord(0, 0)


def _grid_with(*item_ids):
    grid = empty_grid()
    for item_id in item_ids:
        grid = add_item_with_quantity(grid, item_id, 1).grid
    return grid


class TestEquip:
    def test_equip_moves_item_out_of_grid(self):
        result = equip_item(_grid_with("leather_helmet"), EquippedItems(), EquipSlot.HELMET, ORIGIN)
        assert result.success
        assert result.message == "Equipped Leather Helmet"
        assert result.equipped.helmet == ItemRef("leather_helmet", 1)
        assert get_item_at(result.grid, ORIGIN) is None

    def test_equip_swaps_previous_into_source_slot(self):
        grid = _grid_with("leather_helmet", "iron_helmet")
        first = equip_item(grid, EquippedItems(), EquipSlot.HELMET, GridCoord(0, 0))
        second = equip_item(first.grid, first.equipped, EquipSlot.HELMET, GridCoord(0, 1))
        assert second.success
        assert second.equipped.helmet.item_id == "iron_helmet"
        assert get_item_at(second.grid, GridCoord(0, 1)) == ItemRef("leather_helmet", 1)

    def test_item_is_in_exactly_one_place(self):
        grid = _grid_with("short_sword")
        result = equip_item(grid, EquippedItems(), EquipSlot.WEAPON, ORIGIN)
        in_grid = sum(1 for row in result.grid for s in row if s is not None and s.item_id == "short_sword")
        in_slots = sum(1 for _, ref in result.equipped.items() if ref.item_id == "short_sword")
        assert in_grid + in_slots == 1

    def test_wrong_slot_rejected(self):
        grid = _grid_with("leather_helmet")
        result = equip_item(grid, EquippedItems(), EquipSlot.WEAPON, ORIGIN)
        assert not result.success
        assert result.message == "Leather Helmet cannot be equipped to weapon"
        assert result.grid is grid

    def test_non_equipment_rejected(self):
        grid = add_item_with_quantity(empty_grid(), "bless_hp_potion_100", 3).grid
        assert not equip_item(grid, EquippedItems(), EquipSlot.WEAPON, ORIGIN).success

    def test_empty_slot_rejected(self):
        result = equip_item(empty_grid(), EquippedItems(), EquipSlot.HELMET, ORIGIN)
        assert result.message == "No item in this slot"


class TestUnequip:
    def test_unequip_to_first_empty(self):
        equipped = EquippedItems(cape=ItemRef("traveler_cape"))
        grid = _grid_with("flem_fluid")
        result = unequip_item(grid, equipped, EquipSlot.CAPE)
        assert result.success
        assert result.message == "Unequipped Traveler's Cape"
        assert result.equipped.cape is None
        assert get_item_at(result.grid, GridCoord(0, 1)) == ItemRef("traveler_cape", 1)

    def test_nothing_equipped(self):
        result = unequip_item(empty_grid(), EquippedItems(), EquipSlot.CAPE)
        assert result.message == "Nothing equipped in this slot"

    def test_full_inventory_blocks_unequip(self):
        grid = add_item_with_quantity(empty_grid(), "leather_shoes", 40).grid
        assert count_empty_slots(grid) == 0
        equipped = EquippedItems(cape=ItemRef("traveler_cape"))
        result = unequip_item(grid, equipped, EquipSlot.CAPE)
        assert not result.success
        assert result.message == "No inventory space available"
        assert result.equipped is equipped


class TestDerivedStats:
    def test_totals(self):
        equipped = EquippedItems(
            helmet=ItemRef("leather_helmet"),
            upper_body=ItemRef("leather_upper"),
            weapon=ItemRef("hunting_bow"),
        )
        assert calculate_equipped_defense(equipped) == 4
        assert calculate_equipped_attack(equipped) == 7
        assert equipped_weapon_type(equipped) == WeaponType.RANGED
        assert has_armor_equipped(equipped)

    def test_unarmed(self):
        equipped = EquippedItems()
        assert calculate_equipped_attack(equipped) == 0
        assert equipped_weapon_type(equipped) is None
        assert not has_armor_equipped(equipped)

    def test_refresh_is_base_plus_gear(self):
        hero = create_character("Ari", CharacterClass.WARRIOR)
        base = CLASS_BASE_STATS[CharacterClass.WARRIOR]
        equipped = EquippedItems(weapon=ItemRef("short_sword"), upper_body=ItemRef("iron_upper"))
        refresh_equipment_stats(hero, equipped)
        assert hero.status_info.gen_attack == base.gen_attack + 6
        assert hero.status_info.avg_def_pwr == base.avg_def_pwr + 7
        refresh_equipment_stats(hero, EquippedItems())
        assert hero.status_info.gen_attack == base.gen_attack
        assert hero.status_info.avg_def_pwr == base.avg_def_pwr
