"""Static game data: monsters, hunting zones and the quest board."""

from __future__ import annotations

from dataclasses import dataclass

from idlerpg.core.quests import CollectQuest, Quest, QuestRewards, SlayQuest


# ---------------------------------------------------------------------------
# Monsters
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class MonsterTemplate:
    monster_id: str
    name: str
    hp: int
    attack: int
    defense: int
    exp_reward: float              # Fraction of a level on victory, before multiplier
    exp_per_hit: float             # Trickle per exchange the player survives
    gold_drop: tuple[int, int]
    level_range: tuple[int, int]
    material_drop_id: str | None = None
    material_drop_rate: float = 0.0

    @property
    def level(self) -> int:
        """Representative level, used for proficiency scaling."""
        low, high = self.level_range
        return (low + high) // 2


MONSTER_REGISTRY: dict[str, MonsterTemplate] = {}


def _monster(m: MonsterTemplate) -> MonsterTemplate:
    MONSTER_REGISTRY[m.monster_id] = m
    return m


_monster(MonsterTemplate("young_flem",     "Young Flem",     hp=50,   attack=8,   defense=2,
                         exp_reward=0.08, exp_per_hit=0.002,  gold_drop=(3, 8),     level_range=(1, 3),
                         material_drop_id="flem_fluid",    material_drop_rate=0.5))
_monster(MonsterTemplate("flem",           "Flem",           hp=90,   attack=14,  defense=4,
                         exp_reward=0.06, exp_per_hit=0.0015, gold_drop=(6, 14),    level_range=(3, 6),
                         material_drop_id="flem_fluid",    material_drop_rate=0.6))
_monster(MonsterTemplate("mutant_hound",   "Mutant Hound",   hp=160,  attack=22,  defense=8,
                         exp_reward=0.05, exp_per_hit=0.001,  gold_drop=(12, 25),   level_range=(6, 10),
                         material_drop_id="mutant_hide",   material_drop_rate=0.4))
_monster(MonsterTemplate("scrap_golem",    "Scrap Golem",    hp=320,  attack=34,  defense=16,
                         exp_reward=0.04, exp_per_hit=0.0008, gold_drop=(25, 45),   level_range=(10, 16),
                         material_drop_id="iron_scrap",    material_drop_rate=0.35))
_monster(MonsterTemplate("crystal_lurker", "Crystal Lurker", hp=600,  attack=55,  defense=26,
                         exp_reward=0.03, exp_per_hit=0.0005, gold_drop=(45, 80),   level_range=(18, 25),
                         material_drop_id="crystal_shard", material_drop_rate=0.3))
_monster(MonsterTemplate("ancient_warden", "Ancient Warden", hp=1500, attack=110, defense=50,
                         exp_reward=0.02, exp_per_hit=0.0003, gold_drop=(120, 200), level_range=(30, 40),
                         material_drop_id="ancient_core",  material_drop_rate=0.1))


def get_monster(monster_id: str) -> MonsterTemplate | None:
    return MONSTER_REGISTRY.get(monster_id)


# ---------------------------------------------------------------------------
# Zones
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Zone:
    zone_id: str
    name: str
    level_requirement: int
    monsters: tuple[str, ...]


ZONES: tuple[Zone, ...] = (
    Zone("settlement_outskirts", "Settlement Outskirts", 1,  ("young_flem", "flem")),
    Zone("crag_mine",            "Crag Mine",            6,  ("mutant_hound", "scrap_golem")),
    Zone("ether_wastes",         "Ether Wastes",         18, ("crystal_lurker", "ancient_warden")),
)

ZONE_MAP: dict[str, Zone] = {z.zone_id: z for z in ZONES}


def get_zone(zone_id: str) -> Zone | None:
    return ZONE_MAP.get(zone_id)


# ---------------------------------------------------------------------------
# Quests (catalog order breaks level ties)
# ---------------------------------------------------------------------------

QUESTS: tuple[Quest, ...] = (
    SlayQuest("cull_young_flems", "Cull the Young Flems", level=1, target_amount=5,
              rewards=QuestRewards(gold=50, exp=0.3, item_id="bless_hp_potion_100"),
              description="Young flems are clogging the supply road.",
              target_monster="young_flem"),
    CollectQuest("sticky_samples", "Sticky Samples", level=2, target_amount=3,
                 rewards=QuestRewards(gold=60, exp=0.3, item_id="leather_gloves"),
                 description="The lab wants flem fluid for analysis.",
                 target_monster="flem", target_material="flem_fluid"),
    SlayQuest("hound_hunt", "Hound Hunt", level=6, target_amount=8,
              rewards=QuestRewards(gold=150, exp=0.4, item_id="short_sword"),
              description="Mutant hounds stalk the mine entrance.",
              target_monster="mutant_hound"),
    CollectQuest("tanners_request", "The Tanner's Request", level=7, target_amount=5,
                 rewards=QuestRewards(gold=120, exp=0.35, item_id="leather_upper"),
                 target_monster="mutant_hound", target_material="mutant_hide"),
    SlayQuest("scrap_the_golems", "Scrap the Golems", level=10, target_amount=10,
              rewards=QuestRewards(gold=300, exp=0.5, item_id="iron_helmet"),
              target_monster="scrap_golem"),
    CollectQuest("salvage_run", "Salvage Run", level=12, target_amount=6,
                 rewards=QuestRewards(gold=250, exp=0.4, item_id="bless_hp_potion_250"),
                 target_monster="scrap_golem", target_material="iron_scrap"),
    CollectQuest("shard_survey", "Shard Survey", level=18, target_amount=8,
                 rewards=QuestRewards(gold=600, exp=0.5, item_id="bless_hp_potion_500"),
                 target_monster="crystal_lurker", target_material="crystal_shard"),
    SlayQuest("silence_the_warden", "Silence the Warden", level=30, target_amount=3,
              rewards=QuestRewards(gold=2000, exp=0.8, item_id="beam_sword"),
              target_monster="ancient_warden"),
)

QUEST_MAP: dict[str, Quest] = {q.quest_id: q for q in QUESTS}


def get_quest(quest_id: str) -> Quest | None:
    return QUEST_MAP.get(quest_id)
