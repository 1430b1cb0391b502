"""Item catalog — tagged item variants and the read-only registry.

Every item kind is its own frozen dataclass so kind-specific fields
(attack, defense, heal amount) only exist on the variant that uses them.
Templates are referenced everywhere else by ``item_id``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from idlerpg.core.enums import CharacterRace, EquipSlot, ItemType, PotionType, WeaponType

MAX_STACK_SIZE = 99


# ---------------------------------------------------------------------------
# Item variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ItemTemplate:
    """Fields shared by every item kind."""

    item_type: ClassVar[ItemType]
    stackable: ClassVar[bool] = False

    item_id: str
    name: str
    description: str = ""
    level_requirement: int = 0
    race: CharacterRace | None = None     # None = usable by every race
    max_stack: int = 1

    @property
    def stack_limit(self) -> int:
        """Per-slot quantity limit (1 for non-stackable kinds)."""
        if not self.stackable:
            return 1
        return max(1, min(self.max_stack, MAX_STACK_SIZE))

    @property
    def equip_slot(self) -> EquipSlot | None:
        return None


@dataclass(frozen=True, slots=True)
class WeaponItem(ItemTemplate):
    item_type: ClassVar[ItemType] = ItemType.WEAPON

    attack: int = 0
    weapon_type: WeaponType = WeaponType.MELEE

    @property
    def equip_slot(self) -> EquipSlot | None:
        return EquipSlot.WEAPON


@dataclass(frozen=True, slots=True)
class ArmorItem(ItemTemplate):
    item_type: ClassVar[ItemType] = ItemType.ARMOR

    defense: int = 0
    slot: EquipSlot = EquipSlot.UPPER_BODY

    @property
    def equip_slot(self) -> EquipSlot | None:
        return self.slot


@dataclass(frozen=True, slots=True)
class AccessoryItem(ItemTemplate):
    item_type: ClassVar[ItemType] = ItemType.ACCESSORY

    bonus_text: str = ""


@dataclass(frozen=True, slots=True)
class ConsumableItem(ItemTemplate):
    item_type: ClassVar[ItemType] = ItemType.CONSUMABLE
    stackable: ClassVar[bool] = True

    heal_amount: int = 0
    potion_type: PotionType = PotionType.HP
    max_stack: int = MAX_STACK_SIZE


@dataclass(frozen=True, slots=True)
class MaterialItem(ItemTemplate):
    item_type: ClassVar[ItemType] = ItemType.MATERIAL
    stackable: ClassVar[bool] = True

    max_stack: int = MAX_STACK_SIZE


# ---------------------------------------------------------------------------
# Item registry: all item definitions live here
# ---------------------------------------------------------------------------

ITEM_REGISTRY: dict[str, ItemTemplate] = {}


def _reg(t: ItemTemplate) -> ItemTemplate:
    ITEM_REGISTRY[t.item_id] = t
    return t


# ---- Weapons ----
_reg(WeaponItem("training_sword",   "Training Sword",    "A dull blade issued to recruits.",            attack=3,  weapon_type=WeaponType.MELEE))
_reg(WeaponItem("short_sword",      "Short Sword",       "Light and quick.",                            attack=6,  weapon_type=WeaponType.MELEE,  level_requirement=5))
_reg(WeaponItem("long_sword",       "Long Sword",        "A dependable soldier's sword.",               attack=12, weapon_type=WeaponType.MELEE,  level_requirement=15))
_reg(WeaponItem("beam_sword",       "Beam Sword",        "Edge of focused energy.",                     attack=22, weapon_type=WeaponType.MELEE,  level_requirement=30))
_reg(WeaponItem("training_bow",     "Training Bow",      "A flimsy bow for target practice.",           attack=3,  weapon_type=WeaponType.RANGED))
_reg(WeaponItem("hunting_bow",      "Hunting Bow",       "Strung for the wilds.",                       attack=7,  weapon_type=WeaponType.RANGED, level_requirement=5))
_reg(WeaponItem("long_bow",         "Long Bow",          "Reaches far across the mining fields.",       attack=13, weapon_type=WeaponType.RANGED, level_requirement=15))
_reg(WeaponItem("flame_launcher",   "Flame Launcher",    "Heavy, loud and effective.",                  attack=24, weapon_type=WeaponType.RANGED, level_requirement=30, race=CharacterRace.ACCRETIA))

# ---- Armor ----
_reg(ArmorItem("leather_helmet",    "Leather Helmet",    defense=1, slot=EquipSlot.HELMET))
_reg(ArmorItem("leather_upper",     "Leather Jacket",    defense=3, slot=EquipSlot.UPPER_BODY))
_reg(ArmorItem("leather_lower",     "Leather Pants",     defense=2, slot=EquipSlot.LOWER_BODY))
_reg(ArmorItem("leather_gloves",    "Leather Gloves",    defense=1, slot=EquipSlot.GLOVES))
_reg(ArmorItem("leather_shoes",     "Leather Shoes",     defense=1, slot=EquipSlot.SHOES))
_reg(ArmorItem("traveler_cape",     "Traveler's Cape",   defense=1, slot=EquipSlot.CAPE))
_reg(ArmorItem("iron_helmet",       "Iron Helmet",       defense=3, slot=EquipSlot.HELMET,     level_requirement=10))
_reg(ArmorItem("iron_upper",        "Iron Breastplate",  defense=7, slot=EquipSlot.UPPER_BODY, level_requirement=10))
_reg(ArmorItem("iron_lower",        "Iron Greaves",      defense=5, slot=EquipSlot.LOWER_BODY, level_requirement=10))

# ---- Accessories ----
_reg(AccessoryItem("copper_ring",   "Copper Ring",       bonus_text="A keepsake. No combat effect."))

# ---- Consumables (healing) ----
_reg(ConsumableItem("bless_hp_potion_100",  "Bless HP Potion (100)",  heal_amount=100))
_reg(ConsumableItem("bless_hp_potion_250",  "Bless HP Potion (250)",  heal_amount=250,  level_requirement=10))
_reg(ConsumableItem("bless_hp_potion_500",  "Bless HP Potion (500)",  heal_amount=500,  level_requirement=20))
_reg(ConsumableItem("bless_hp_potion_2000", "Bless HP Potion (2000)", heal_amount=2000, level_requirement=30))
_reg(ConsumableItem("bless_hp_potion_3000", "Bless HP Potion (3000)", heal_amount=3000, level_requirement=40))
_reg(ConsumableItem("bless_hp_potion_4000", "Bless HP Potion (4000)", heal_amount=4000, level_requirement=45))
_reg(ConsumableItem("bless_hp_potion_5000", "Bless HP Potion (5000)", heal_amount=5000, level_requirement=50))
_reg(ConsumableItem("repair_kit_300",       "Repair Kit (300)",       heal_amount=300,  race=CharacterRace.ACCRETIA, level_requirement=10))
_reg(ConsumableItem("bless_fp_potion_100",  "Bless FP Potion (100)",  heal_amount=100,  potion_type=PotionType.FP))
_reg(ConsumableItem("bless_sp_potion_100",  "Bless SP Potion (100)",  heal_amount=100,  potion_type=PotionType.SP))

# ---- Materials ----
_reg(MaterialItem("flem_fluid",     "Flem Fluid",        "Sticky residue left by flems."))
_reg(MaterialItem("mutant_hide",    "Mutant Hide",       "Tough, scarred hide."))
_reg(MaterialItem("iron_scrap",     "Iron Scrap",        "Salvage from broken machines."))
_reg(MaterialItem("crystal_shard",  "Crystal Shard",     "Glows faintly in the dark."))
_reg(MaterialItem("ancient_core",   "Ancient Core",      "Still warm.", max_stack=20))


def get_item(item_id: str) -> ItemTemplate | None:
    return ITEM_REGISTRY.get(item_id)


def is_race_compatible(item_race: CharacterRace | None, player_race: CharacterRace | None) -> bool:
    """An item with no race restriction fits everyone."""
    if item_race is None or player_race is None:
        return True
    return item_race == player_race


def restore_effect(item: ItemTemplate | None) -> tuple[PotionType, int] | None:
    """Which pool a consumable refills and by how much; None if it does nothing."""
    if isinstance(item, ConsumableItem) and item.heal_amount > 0:
        return item.potion_type, item.heal_amount
    return None


def shop_potions(
    race: CharacterRace | None = None,
    potion_type: PotionType = PotionType.HP,
) -> list[ConsumableItem]:
    """Potions of one type usable by *race*, cheapest tier first."""
    potions = [
        t for t in ITEM_REGISTRY.values()
        if isinstance(t, ConsumableItem)
        and t.potion_type == potion_type
        and t.heal_amount > 0
        and is_race_compatible(t.race, race)
    ]
    return sorted(potions, key=lambda p: p.heal_amount)
