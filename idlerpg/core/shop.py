"""Town shop: validate and fulfil potion and equipment purchases."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from idlerpg.core.inventory import add_item_with_quantity, find_empty_slot
from idlerpg.core.items import ArmorItem, ConsumableItem, ItemTemplate, WeaponItem, get_item, is_race_compatible
from idlerpg.core.state import CommandResult

if TYPE_CHECKING:
    from idlerpg.core.state import GameState

logger = logging.getLogger(__name__)

SHOP_MAX_PURCHASE_QUANTITY = 99
EQUIPMENT_PRICE = 1

POTION_PRICES: dict[str, int] = {
    "bless_hp_potion_100": 5,
    "bless_hp_potion_250": 15,
    "bless_hp_potion_500": 30,
    "bless_hp_potion_2000": 100,
    "bless_hp_potion_3000": 150,
    "bless_hp_potion_4000": 200,
    "bless_hp_potion_5000": 250,
    "bless_fp_potion_100": 5,
    "bless_sp_potion_100": 5,
}


def _check_buyer(state: GameState, template: ItemTemplate) -> CommandResult | None:
    character = state.character
    if character is None:
        return CommandResult.fail("No character")
    if character.level < template.level_requirement:
        return CommandResult.fail(f"Requires level {template.level_requirement}")
    if not is_race_compatible(template.race, character.general_info.race):
        return CommandResult.fail("Your race cannot use this item")
    return None


def purchase_potion(state: GameState, potion_id: str, quantity: int) -> CommandResult:
    """Buy *quantity* potions; gold is only charged for what fits."""
    if not isinstance(quantity, int) or not 1 <= quantity <= SHOP_MAX_PURCHASE_QUANTITY:
        return CommandResult.fail("Invalid quantity")
    template = get_item(potion_id)
    price = POTION_PRICES.get(potion_id)
    if not isinstance(template, ConsumableItem) or price is None:
        return CommandResult.fail("Potion not for sale")
    rejected = _check_buyer(state, template)
    if rejected:
        return rejected

    character = state.character
    total = price * quantity
    if character.gold < total:
        return CommandResult.fail("Not enough gold")

    result = add_item_with_quantity(state.inventory_grid, potion_id, quantity)
    if result.added == 0:
        return CommandResult.fail("No inventory space available")

    state.inventory_grid = result.grid
    cost = price * result.added
    character.gold -= cost
    logger.info("Bought %d x %s for %d gold", result.added, potion_id, cost)
    if not result.success:
        return CommandResult.ok(
            f"Purchased {result.added} of {quantity} {template.name} (inventory full) for {cost} gold"
        )
    return CommandResult.ok(f"Purchased {quantity} {template.name} for {cost} gold")


def purchase_equipment(state: GameState, item_id: str, quantity: int = 1) -> CommandResult:
    if quantity != 1:
        return CommandResult.fail("Equipment is not stackable. Purchase one at a time.")
    template = get_item(item_id)
    if not isinstance(template, (WeaponItem, ArmorItem)):
        return CommandResult.fail("Item not for sale")
    rejected = _check_buyer(state, template)
    if rejected:
        return rejected

    character = state.character
    if character.gold < EQUIPMENT_PRICE:
        return CommandResult.fail("Not enough gold")
    if find_empty_slot(state.inventory_grid) is None:
        return CommandResult.fail("No inventory space available")

    state.inventory_grid = add_item_with_quantity(state.inventory_grid, item_id, 1).grid
    character.gold -= EQUIPMENT_PRICE
    logger.info("Bought %s for %d gold", item_id, EQUIPMENT_PRICE)
    return CommandResult.ok(f"Purchased {template.name} for {EQUIPMENT_PRICE} gold")
