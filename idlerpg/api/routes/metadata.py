"""Metadata endpoints — static catalogs so the UI carries no hardcoded data."""

from __future__ import annotations

from fastapi import APIRouter

from idlerpg.api.routes.state import serialize_quest
from idlerpg.api.schemas import ItemEntry, MonsterEntry, QuestSchema, ZoneEntry
from idlerpg.core.catalog import MONSTER_REGISTRY, QUESTS, ZONES
from idlerpg.core.items import ITEM_REGISTRY, ArmorItem, ConsumableItem, ItemTemplate, WeaponItem
from idlerpg.core.shop import EQUIPMENT_PRICE, POTION_PRICES

router = APIRouter(prefix="/metadata", tags=["Metadata"])


def _item_entry(t: ItemTemplate) -> ItemEntry:
    entry = ItemEntry(
        item_id=t.item_id,
        name=t.name,
        item_type=t.item_type.value,
        description=t.description,
        level_requirement=t.level_requirement,
        race=t.race.value if t.race else None,
        stack_limit=t.stack_limit,
        equip_slot=t.equip_slot.value if t.equip_slot else None,
    )
    match t:
        case WeaponItem():
            entry.attack = t.attack
            entry.weapon_type = t.weapon_type.value
            entry.price = EQUIPMENT_PRICE
        case ArmorItem():
            entry.defense = t.defense
            entry.price = EQUIPMENT_PRICE
        case ConsumableItem():
            entry.heal_amount = t.heal_amount
            entry.potion_type = t.potion_type.value
            entry.price = POTION_PRICES.get(t.item_id)
    return entry


@router.get("/items", response_model=list[ItemEntry])
def list_items() -> list[ItemEntry]:
    return [_item_entry(t) for t in ITEM_REGISTRY.values()]


@router.get("/monsters", response_model=list[MonsterEntry])
def list_monsters() -> list[MonsterEntry]:
    return [
        MonsterEntry(
            monster_id=m.monster_id, name=m.name, hp=m.hp, attack=m.attack, defense=m.defense,
            exp_reward=m.exp_reward, exp_per_hit=m.exp_per_hit,
            gold_drop=m.gold_drop, level_range=m.level_range,
            material_drop_id=m.material_drop_id, material_drop_rate=m.material_drop_rate,
        )
        for m in MONSTER_REGISTRY.values()
    ]


@router.get("/zones", response_model=list[ZoneEntry])
def list_zones() -> list[ZoneEntry]:
    return [
        ZoneEntry(zone_id=z.zone_id, name=z.name, level_requirement=z.level_requirement, monsters=list(z.monsters))
        for z in ZONES
    ]


@router.get("/quests", response_model=list[QuestSchema])
def list_quests() -> list[QuestSchema]:
    return [serialize_quest(q) for q in QUESTS]
