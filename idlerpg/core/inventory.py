"""Inventory grid and equipment slots — pure transforms over immutable values.

The grid is a fixed 5x8 tuple of tuples holding ``ItemRef | None``. Every
operation returns a new grid (and, for equipment, a new ``EquippedItems``)
together with a small result descriptor; nothing here mutates its inputs.
Out-of-range coordinates read as empty and make mutating operations fail.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterator

from idlerpg.core.enums import ARMOR_SLOTS, CharacterClass, CharacterRace, EquipSlot, PotionType, WeaponType
from idlerpg.core.items import (
    ArmorItem,
    ConsumableItem,
    WeaponItem,
    get_item,
    is_race_compatible,
    restore_effect,
    shop_potions,
)
from idlerpg.core.models import CLASS_BASE_STATS, Character

logger = logging.getLogger(__name__)

INVENTORY_ROWS = 5
INVENTORY_COLS = 8
STARTER_POTION_QUANTITY = 5


@dataclass(frozen=True, slots=True)
class ItemRef:
    """A stack of one item kind in a grid slot or equipment slot."""

    item_id: str
    quantity: int = 1


@dataclass(frozen=True, slots=True)
class GridCoord:
    row: int
    col: int

    @property
    def in_bounds(self) -> bool:
        return 0 <= self.row < INVENTORY_ROWS and 0 <= self.col < INVENTORY_COLS


Slot = ItemRef | None
Grid = tuple[tuple[Slot, ...], ...]


@dataclass(frozen=True, slots=True)
class EquippedItems:
    """One optional ItemRef per equipment slot."""

    helmet: ItemRef | None = None
    upper_body: ItemRef | None = None
    lower_body: ItemRef | None = None
    gloves: ItemRef | None = None
    shoes: ItemRef | None = None
    cape: ItemRef | None = None
    weapon: ItemRef | None = None

    def get(self, slot: EquipSlot) -> ItemRef | None:
        return getattr(self, slot.value)

    def with_slot(self, slot: EquipSlot, ref: ItemRef | None) -> EquippedItems:
        return replace(self, **{slot.value: ref})

    def items(self) -> Iterator[tuple[EquipSlot, ItemRef]]:
        """Occupied slots in enum order."""
        for slot in EquipSlot:
            ref = self.get(slot)
            if ref is not None:
                yield slot, ref


@dataclass(frozen=True, slots=True)
class AddResult:
    grid: Grid
    success: bool
    added: int


@dataclass(frozen=True, slots=True)
class EquipResult:
    grid: Grid
    equipped: EquippedItems
    success: bool
    message: str


@dataclass(frozen=True, slots=True)
class UseItemResult:
    """Outcome of drinking a potion. Pools the item did not touch come back unchanged."""

    grid: Grid
    hp: int
    success: bool
    message: str
    fp: int = 0
    sp: int = 0


# ---------------------------------------------------------------------------
# Grid primitives
# ---------------------------------------------------------------------------

def empty_grid() -> Grid:
    return tuple(tuple(None for _ in range(INVENTORY_COLS)) for _ in range(INVENTORY_ROWS))


def iter_coords() -> Iterator[GridCoord]:
    """All coordinates in row-major order."""
    for r in range(INVENTORY_ROWS):
        for c in range(INVENTORY_COLS):
            yield GridCoord(r, c)


def get_item_at(grid: Grid, coord: GridCoord) -> ItemRef | None:
    if not coord.in_bounds:
        return None
    return grid[coord.row][coord.col]


def _with_slot(grid: Grid, coord: GridCoord, value: Slot) -> Grid:
    row = list(grid[coord.row])
    row[coord.col] = value
    return grid[:coord.row] + (tuple(row),) + grid[coord.row + 1:]


def find_empty_slot(grid: Grid) -> GridCoord | None:
    """First empty coordinate in row-major order, or None when full."""
    for coord in iter_coords():
        if grid[coord.row][coord.col] is None:
            return coord
    return None


def count_empty_slots(grid: Grid) -> int:
    return sum(1 for row in grid for slot in row if slot is None)


def count_item(grid: Grid, item_id: str) -> int:
    """Total quantity of *item_id* across all stacks."""
    return sum(slot.quantity for row in grid for slot in row if slot is not None and slot.item_id == item_id)


def remove_item_at(grid: Grid, coord: GridCoord, quantity: int = 1) -> Grid:
    """Take up to *quantity* units from one slot, clearing it at zero."""
    ref = get_item_at(grid, coord)
    if ref is None or quantity <= 0:
        return grid
    remaining = ref.quantity - quantity
    return _with_slot(grid, coord, ItemRef(ref.item_id, remaining) if remaining > 0 else None)


def swap_items(grid: Grid, a: GridCoord, b: GridCoord) -> Grid:
    """Swap two slots unconditionally; swapping with an empty slot is a move."""
    if not (a.in_bounds and b.in_bounds) or a == b:
        return grid
    first = grid[a.row][a.col]
    second = grid[b.row][b.col]
    return _with_slot(_with_slot(grid, a, second), b, first)


def add_item_with_quantity(grid: Grid, item_id: str, quantity: int) -> AddResult:
    """Add *quantity* units, topping up existing stacks before opening new ones.

    Non-stackable items take one slot per unit. When space runs out the
    result reports ``added < quantity`` with whatever did fit.
    """
    template = get_item(item_id)
    if template is None:
        logger.warning("Cannot add unknown item %r", item_id)
        return AddResult(grid, False, 0)
    if quantity <= 0:
        return AddResult(grid, False, 0)

    limit = template.stack_limit
    remaining = quantity

    if template.stackable:
        for coord in iter_coords():
            if remaining == 0:
                break
            ref = grid[coord.row][coord.col]
            if ref is None or ref.item_id != item_id or ref.quantity >= limit:
                continue
            take = min(limit - ref.quantity, remaining)
            grid = _with_slot(grid, coord, ItemRef(item_id, ref.quantity + take))
            remaining -= take

    while remaining > 0:
        coord = find_empty_slot(grid)
        if coord is None:
            break
        take = min(limit, remaining)
        grid = _with_slot(grid, coord, ItemRef(item_id, take))
        remaining -= take

    added = quantity - remaining
    return AddResult(grid, added == quantity, added)


# ---------------------------------------------------------------------------
# Equipment
# ---------------------------------------------------------------------------

def equip_item(grid: Grid, equipped: EquippedItems, slot: EquipSlot, coord: GridCoord) -> EquipResult:
    """Move the item at *coord* into *slot*; the old item takes its place."""
    ref = get_item_at(grid, coord)
    if ref is None:
        return EquipResult(grid, equipped, False, "No item in this slot")
    template = get_item(ref.item_id)
    if template is None:
        return EquipResult(grid, equipped, False, "Item data not found")
    if template.equip_slot != slot:
        return EquipResult(grid, equipped, False, f"{template.name} cannot be equipped to {slot.value}")

    previous = equipped.get(slot)
    new_grid = _with_slot(grid, coord, previous)
    new_equipped = equipped.with_slot(slot, ItemRef(ref.item_id, 1))
    return EquipResult(new_grid, new_equipped, True, f"Equipped {template.name}")


def unequip_item(grid: Grid, equipped: EquippedItems, slot: EquipSlot) -> EquipResult:
    """Move the item in *slot* to the first empty grid slot."""
    ref = equipped.get(slot)
    if ref is None:
        return EquipResult(grid, equipped, False, "Nothing equipped in this slot")
    target = find_empty_slot(grid)
    if target is None:
        return EquipResult(grid, equipped, False, "No inventory space available")

    template = get_item(ref.item_id)
    name = template.name if template else ref.item_id
    return EquipResult(
        _with_slot(grid, target, ref),
        equipped.with_slot(slot, None),
        True,
        f"Unequipped {name}",
    )


def calculate_equipped_defense(equipped: EquippedItems) -> int:
    total = 0
    for _, ref in equipped.items():
        template = get_item(ref.item_id)
        if isinstance(template, ArmorItem):
            total += template.defense
    return total


def calculate_equipped_attack(equipped: EquippedItems) -> int:
    template = get_item(equipped.weapon.item_id) if equipped.weapon else None
    if isinstance(template, WeaponItem):
        return template.attack
    return 0


def equipped_weapon_type(equipped: EquippedItems) -> WeaponType | None:
    """Weapon family in hand, or None when unarmed."""
    template = get_item(equipped.weapon.item_id) if equipped.weapon else None
    if isinstance(template, WeaponItem):
        return template.weapon_type
    return None


def has_armor_equipped(equipped: EquippedItems) -> bool:
    return any(equipped.get(slot) is not None for slot in ARMOR_SLOTS)


def refresh_equipment_stats(character: Character, equipped: EquippedItems) -> None:
    """Recompute derived attack/defense from class base plus gear, in place."""
    base = character.base_stats
    character.status_info.gen_attack = base.gen_attack + calculate_equipped_attack(equipped)
    character.status_info.avg_def_pwr = base.avg_def_pwr + calculate_equipped_defense(equipped)


# ---------------------------------------------------------------------------
# Consumables
# ---------------------------------------------------------------------------

def use_item(
    grid: Grid,
    coord: GridCoord,
    hp: int,
    max_hp: int,
    level: int,
    race: CharacterRace | None = None,
    *,
    fp: int = 0,
    max_fp: int = 0,
    sp: int = 0,
    max_sp: int = 0,
) -> UseItemResult:
    """Drink one unit of the potion at *coord*.

    The potion type picks the pool: HP, FP or SP, each clamped to its max.
    """
    def refused(message: str) -> UseItemResult:
        return UseItemResult(grid, hp, False, message, fp=fp, sp=sp)

    ref = get_item_at(grid, coord)
    if ref is None:
        return refused("No item in this slot")
    template = get_item(ref.item_id)
    if template is None:
        return refused("Item data not found")
    if not isinstance(template, ConsumableItem):
        return refused("This item cannot be used")
    if level < template.level_requirement:
        return refused(f"Requires level {template.level_requirement}")
    if not is_race_compatible(template.race, race):
        return refused("Your race cannot use this item")

    effect = restore_effect(template)
    if effect is None:
        return refused("This item has no effect")
    potion_type, amount = effect
    pools = {
        PotionType.HP: (hp, max_hp),
        PotionType.FP: (fp, max_fp),
        PotionType.SP: (sp, max_sp),
    }
    current, maximum = pools[potion_type]
    if current >= maximum:
        if potion_type == PotionType.HP:
            return refused("Already at full health")
        return refused(f"Already at full {potion_type.value}")

    restored = min(maximum, current + amount)
    new_grid = remove_item_at(grid, coord, 1)
    message = f"Restored {restored - current} {potion_type.value}"
    match potion_type:
        case PotionType.HP:
            return UseItemResult(new_grid, restored, True, message, fp=fp, sp=sp)
        case PotionType.FP:
            return UseItemResult(new_grid, hp, True, message, fp=restored, sp=sp)
        case _:
            return UseItemResult(new_grid, hp, True, message, fp=fp, sp=restored)


# ---------------------------------------------------------------------------
# Starter kit
# ---------------------------------------------------------------------------

def create_starter_inventory_grid(
    race: CharacterRace | None = None,
    char_class: CharacterClass = CharacterClass.WARRIOR,
) -> Grid:
    """A stack of the cheapest usable HP potion plus the class training weapon."""
    grid = empty_grid()
    potions = shop_potions(race)
    if potions:
        grid = add_item_with_quantity(grid, potions[0].item_id, STARTER_POTION_QUANTITY).grid
    grid = add_item_with_quantity(grid, CLASS_BASE_STATS[char_class].starter_weapon, 1).grid
    return grid
