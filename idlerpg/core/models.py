"""Character aggregate: general info, status, proficiency and resistances."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from idlerpg.core.enums import CharacterClass, CharacterRace, ProficiencyTrack

CHARACTER_NAME_MAX_LENGTH = 16
_NAME_PATTERN = re.compile(r"^[A-Za-z0-9 ]+$")


@dataclass(frozen=True, slots=True)
class ClassBaseStats:
    """Starting numbers for a class. Equipment bonuses stack on top."""

    hp: int
    fp: int
    sp: int
    gen_attack: int
    force_attack: int
    avg_def_pwr: int
    attack_speed: int
    accuracy: int
    dodge: int
    primary_track: ProficiencyTrack
    starter_weapon: str


CLASS_BASE_STATS: dict[CharacterClass, ClassBaseStats] = {
    CharacterClass.WARRIOR: ClassBaseStats(
        hp=150, fp=50, sp=80, gen_attack=12, force_attack=2, avg_def_pwr=8,
        attack_speed=10, accuracy=10, dodge=5,
        primary_track=ProficiencyTrack.MELEE, starter_weapon="training_sword",
    ),
    CharacterClass.RANGER: ClassBaseStats(
        hp=110, fp=50, sp=100, gen_attack=14, force_attack=2, avg_def_pwr=5,
        attack_speed=14, accuracy=14, dodge=8,
        primary_track=ProficiencyTrack.RANGE, starter_weapon="training_bow",
    ),
    CharacterClass.SPIRITUALIST: ClassBaseStats(
        hp=100, fp=120, sp=60, gen_attack=8, force_attack=16, avg_def_pwr=4,
        attack_speed=9, accuracy=10, dodge=6,
        primary_track=ProficiencyTrack.FORCE, starter_weapon="training_sword",
    ),
    CharacterClass.SPECIALIST: ClassBaseStats(
        hp=125, fp=70, sp=90, gen_attack=11, force_attack=6, avg_def_pwr=6,
        attack_speed=11, accuracy=12, dodge=7,
        primary_track=ProficiencyTrack.UNIT, starter_weapon="training_bow",
    ),
}


@dataclass(slots=True)
class GeneralInfo:
    name: str
    char_class: CharacterClass = CharacterClass.WARRIOR
    race: CharacterRace = CharacterRace.BELLATO

    def copy(self) -> GeneralInfo:
        return GeneralInfo(name=self.name, char_class=self.char_class, race=self.race)


@dataclass(slots=True)
class StatusInfo:
    """Vitals, experience and derived combat numbers."""

    hp: int = 100
    max_hp: int = 100
    fp: int = 50
    max_fp: int = 50
    sp: int = 50
    max_sp: int = 50
    def_gauge: int = 100
    max_def_gauge: int = 100
    exp_points: float = 0.0         # Fraction of the current level, [0, 1)
    gen_attack: int = 10
    force_attack: int = 0
    avg_def_pwr: int = 5
    avg_def_range: int = 0
    avg_def_rate: int = 0
    attack_speed: int = 10
    accuracy: int = 10
    dodge: int = 5

    @property
    def alive(self) -> bool:
        return self.hp > 0

    def copy(self) -> StatusInfo:
        return StatusInfo(
            hp=self.hp, max_hp=self.max_hp, fp=self.fp, max_fp=self.max_fp,
            sp=self.sp, max_sp=self.max_sp,
            def_gauge=self.def_gauge, max_def_gauge=self.max_def_gauge,
            exp_points=self.exp_points,
            gen_attack=self.gen_attack, force_attack=self.force_attack,
            avg_def_pwr=self.avg_def_pwr, avg_def_range=self.avg_def_range,
            avg_def_rate=self.avg_def_rate, attack_speed=self.attack_speed,
            accuracy=self.accuracy, dodge=self.dodge,
        )


@dataclass(slots=True)
class Proficiency:
    """One PT track: whole points plus fractional progress to the next."""

    pt: int = 0
    pt_exp: float = 0.0

    def copy(self) -> Proficiency:
        return Proficiency(pt=self.pt, pt_exp=self.pt_exp)


@dataclass(slots=True)
class AbilityInfo:
    melee: Proficiency = field(default_factory=Proficiency)
    range: Proficiency = field(default_factory=Proficiency)
    unit: Proficiency = field(default_factory=Proficiency)
    force: Proficiency = field(default_factory=Proficiency)
    shield: Proficiency = field(default_factory=Proficiency)
    defense: Proficiency = field(default_factory=Proficiency)

    def track(self, track: ProficiencyTrack) -> Proficiency:
        return getattr(self, track.value)

    def total_pt(self) -> int:
        return sum(self.track(t).pt for t in ProficiencyTrack)

    def copy(self) -> AbilityInfo:
        return AbilityInfo(
            melee=self.melee.copy(), range=self.range.copy(), unit=self.unit.copy(),
            force=self.force.copy(), shield=self.shield.copy(), defense=self.defense.copy(),
        )


@dataclass(slots=True)
class ElementResistInfo:
    fire: int = 0
    water: int = 0
    earth: int = 0
    wind: int = 0

    def copy(self) -> ElementResistInfo:
        return ElementResistInfo(fire=self.fire, water=self.water, earth=self.earth, wind=self.wind)


@dataclass(slots=True)
class Character:
    """The player's mutable record. Owned by the GameState."""

    general_info: GeneralInfo
    level: int = 1
    gold: int = 0
    status_info: StatusInfo = field(default_factory=StatusInfo)
    ability_info: AbilityInfo = field(default_factory=AbilityInfo)
    element_resist_info: ElementResistInfo = field(default_factory=ElementResistInfo)

    @property
    def name(self) -> str:
        return self.general_info.name

    @property
    def base_stats(self) -> ClassBaseStats:
        return CLASS_BASE_STATS[self.general_info.char_class]

    def copy(self) -> Character:
        return Character(
            general_info=self.general_info.copy(),
            level=self.level,
            gold=self.gold,
            status_info=self.status_info.copy(),
            ability_info=self.ability_info.copy(),
            element_resist_info=self.element_resist_info.copy(),
        )


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------

STARTING_GOLD = 100


def validate_character_name(name: str) -> tuple[bool, str | None]:
    """Return ``(valid, error_message)`` for a proposed character name."""
    trimmed = name.strip()
    if not trimmed:
        return False, "Character name cannot be empty"
    if len(trimmed) > CHARACTER_NAME_MAX_LENGTH:
        return False, f"Character name must be at most {CHARACTER_NAME_MAX_LENGTH} characters"
    if not _NAME_PATTERN.match(trimmed):
        return False, "Character name may only contain letters, digits and spaces"
    return True, None


def create_character(
    name: str,
    char_class: CharacterClass,
    race: CharacterRace = CharacterRace.BELLATO,
) -> Character:
    """Build a level-1 character from the class base stats."""
    base = CLASS_BASE_STATS[char_class]
    status = StatusInfo(
        hp=base.hp, max_hp=base.hp,
        fp=base.fp, max_fp=base.fp,
        sp=base.sp, max_sp=base.sp,
        gen_attack=base.gen_attack, force_attack=base.force_attack,
        avg_def_pwr=base.avg_def_pwr,
        attack_speed=base.attack_speed, accuracy=base.accuracy, dodge=base.dodge,
    )
    ability = AbilityInfo()
    ability.track(base.primary_track).pt = 1
    return Character(
        general_info=GeneralInfo(name=name.strip(), char_class=char_class, race=race),
        level=1,
        gold=STARTING_GOLD,
        status_info=status,
        ability_info=ability,
    )
