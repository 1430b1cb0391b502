"""Tests for character creation, name validation and deep copies."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from idlerpg.core.enums import CharacterClass, CharacterRace, ProficiencyTrack
from idlerpg.core.models import (
    CHARACTER_NAME_MAX_LENGTH,
    CLASS_BASE_STATS,
    STARTING_GOLD,
    create_character,
    validate_character_name,
)


class TestNameValidation:
    def test_accepts_letters_digits_spaces(self):
        assert validate_character_name("Hero 42") == (True, None)

    def test_rejects_empty_and_blank(self):
        for name in ("", "   "):
            valid, error = validate_character_name(name)
            assert not valid
            assert "empty" in error

    def test_rejects_too_long(self):
        valid, error = validate_character_name("x" * (CHARACTER_NAME_MAX_LENGTH + 1))
        assert not valid
        assert str(CHARACTER_NAME_MAX_LENGTH) in error

    def test_length_counts_trimmed_name(self):
        assert validate_character_name("  " + "x" * CHARACTER_NAME_MAX_LENGTH + "  ")[0]

    def test_rejects_symbols(self):
        assert not validate_character_name("Bad<Name>")[0]
        assert not validate_character_name("semi;colon")[0]


class TestCreateCharacter:
    def test_level_one_with_class_stats(self):
        hero = create_character("  Ari ", CharacterClass.RANGER, CharacterRace.CORA)
        base = CLASS_BASE_STATS[CharacterClass.RANGER]
        assert hero.name == "Ari"
        assert hero.level == 1
        assert hero.gold == STARTING_GOLD
        assert hero.status_info.hp == hero.status_info.max_hp == base.hp
        assert hero.status_info.gen_attack == base.gen_attack
        assert hero.status_info.exp_points == 0.0
        assert hero.general_info.race == CharacterRace.CORA
        assert hero.base_stats is base

    def test_primary_track_starts_trained(self):
        for char_class, base in CLASS_BASE_STATS.items():
            hero = create_character("Ari", char_class)
            assert hero.ability_info.track(base.primary_track).pt == 1
            assert hero.ability_info.total_pt() == 1

    def test_classes_differ(self):
        warrior = create_character("A", CharacterClass.WARRIOR)
        spiritualist = create_character("B", CharacterClass.SPIRITUALIST)
        assert warrior.status_info.max_hp > spiritualist.status_info.max_hp
        assert spiritualist.status_info.force_attack > warrior.status_info.force_attack


class TestCopy:
    def test_copy_is_deep(self):
        hero = create_character("Ari", CharacterClass.WARRIOR)
        clone = hero.copy()
        clone.status_info.hp = 1
        clone.ability_info.track(ProficiencyTrack.MELEE).pt = 40
        clone.general_info.name = "Other"
        assert hero.status_info.hp == hero.status_info.max_hp
        assert hero.ability_info.melee.pt == 1
        assert hero.name == "Ari"

    def test_alive_property(self):
        hero = create_character("Ari", CharacterClass.WARRIOR)
        assert hero.status_info.alive
        hero.status_info.hp = 0
        assert not hero.status_info.alive
