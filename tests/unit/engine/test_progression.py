"""Tests for leveling, class abilities and rests."""

from __future__ import annotations

import pytest

from conftest import scripted_dice
from dnd_rules.core.exceptions import NotFoundError, PreconditionFailedError
from dnd_rules.engine.progression import MAX_LEVEL, level_up, long_rest, short_rest, use_class_ability
from dnd_rules.models.character import Character, create_character


class TestLevelUp:
    """Tests for level_up."""

    def test_gains_level_and_hit_points(self, fighter: Character) -> None:
        """Test one hit die plus CON is added to current and max HP."""
        messages = level_up(fighter, dice=scripted_dice(6))

        assert fighter.level == 5
        assert fighter.max_hp == 44
        assert fighter.hp == 44
        assert fighter.proficiency_bonus == 3
        assert messages == ["Level up! Now level 5", "Gained 8 hit points (total: 44)"]

    def test_ability_score_improvement_notice(self) -> None:
        """Test every fourth level announces an ability score improvement."""
        hero = create_character("Thorin", "Dwarf", "Fighter", level=3)

        messages = level_up(hero, dice=scripted_dice(5))

        assert messages[-1] == "You can increase your ability scores!"

    def test_minimum_gain_is_one(self) -> None:
        """Test a negative CON modifier still grants 1 HP."""
        frail = create_character(
            "Wisp",
            "Elf",
            "Wizard",
            ability_scores={"STR": 8, "DEX": 10, "CON": 1, "INT": 16, "WIS": 10, "CHA": 10},
        )
        before = frail.max_hp

        level_up(frail, dice=scripted_dice(1))

        assert frail.max_hp == before + 1

    def test_spell_slots_follow_level(self, wizard: Character) -> None:
        """Test slot totals grow and expended slots stay expended."""
        wizard.slot(3).expend()

        level_up(wizard, dice=scripted_dice(4))

        assert [(slot.level, slot.total) for slot in wizard.spell_slots] == [(1, 4), (2, 3), (3, 3)]
        assert wizard.slot(3).used == 1

    def test_unlocks_new_abilities(self) -> None:
        """Test a fighter gains Action Surge at level 2."""
        hero = create_character("Thorin", "Dwarf", "Fighter")
        hero.class_abilities["second_wind"].use()

        level_up(hero, dice=scripted_dice(5))

        assert hero.class_abilities["action_surge"].current == 1
        assert hero.class_abilities["second_wind"].current == 0

    def test_max_level(self) -> None:
        """Test level 20 cannot be exceeded."""
        hero = create_character("Legend", "Human", "Fighter", level=MAX_LEVEL)

        with pytest.raises(PreconditionFailedError):
            level_up(hero, dice=scripted_dice())

        assert hero.level == MAX_LEVEL


class TestClassAbilities:
    """Tests for use_class_ability."""

    def test_second_wind_heals(self, fighter: Character) -> None:
        """Test 1d10 plus fighter level healing and a spent use."""
        fighter.take_damage(20)

        result = use_class_ability(fighter, "second_wind", dice=scripted_dice(5))

        assert result.healing == 9
        assert result.message == "Used Second Wind! Healed for 9 HP."
        assert fighter.class_abilities["second_wind"].current == 0

    def test_no_uses_remaining(self, fighter: Character) -> None:
        """Test an exhausted ability is rejected without changes."""
        use_class_ability(fighter, "second_wind", dice=scripted_dice(5))
        fighter.take_damage(10)

        with pytest.raises(PreconditionFailedError) as exc_info:
            use_class_ability(fighter, "second_wind", dice=scripted_dice(5))

        assert exc_info.value.message == "No uses of Second Wind remaining."
        assert fighter.hp == fighter.max_hp - 10

    def test_level_requirement(self) -> None:
        """Test abilities above the character's level are rejected."""
        hero = create_character("Thorin", "Dwarf", "Fighter")

        with pytest.raises(PreconditionFailedError) as exc_info:
            use_class_ability(hero, "action_surge", dice=scripted_dice())

        assert exc_info.value.message == "Not high enough level for Action Surge."

    def test_action_surge(self, fighter: Character) -> None:
        """Test an extra action is granted."""
        result = use_class_ability(fighter, "action_surge", dice=scripted_dice())

        assert result.extra_action is True
        assert result.message == "Used Action Surge! Gain an extra action this turn!"

    def test_sneak_attack_scales_with_level(self, rogue: Character) -> None:
        """Test one d6 per two rogue levels, rounded up, with no use limit."""
        first = use_class_ability(rogue, "sneak_attack", dice=scripted_dice(4, 5))
        second = use_class_ability(rogue, "sneak_attack", dice=scripted_dice(1, 1))

        assert first.bonus_damage == 9
        assert first.message == "Used Sneak Attack! +9 sneak attack damage!"
        assert second.bonus_damage == 2

    def test_cunning_action(self, rogue: Character) -> None:
        """Test abilities without a mechanical payload."""
        assert use_class_ability(rogue, "cunning_action", dice=scripted_dice()).message == (
            "Used Cunning Action! Effect applied."
        )

    def test_arcane_recovery(self, wizard: Character) -> None:
        """Test Arcane Recovery returns expended slots."""
        wizard.slot(1).expend()
        wizard.slot(2).expend()

        result = use_class_ability(wizard, "arcane_recovery", dice=scripted_dice())

        assert result.slots_recovered == [1, 2]
        assert result.message == "Used Arcane Recovery! Recovered 2 spell slot(s)."
        assert wizard.class_abilities["arcane_recovery"].current == 0

    def test_unknown_ability(self, fighter: Character) -> None:
        """Test another class's ability is not found."""
        with pytest.raises(NotFoundError):
            use_class_ability(fighter, "sneak_attack", dice=scripted_dice())

    def test_missing_counter_is_created(self, fighter: Character) -> None:
        """Test a counter dropped from the character is recreated on use."""
        del fighter.class_abilities["second_wind"]

        use_class_ability(fighter, "second_wind", dice=scripted_dice(3))

        assert fighter.class_abilities["second_wind"].current == 0


class TestRests:
    """Tests for short and long rests."""

    def test_short_rest(self, fighter: Character) -> None:
        """Test short-rest abilities recharge and a hit die heals."""
        use_class_ability(fighter, "second_wind", dice=scripted_dice(1))
        fighter.take_damage(10)

        messages = short_rest(fighter, dice=scripted_dice(3))

        assert messages == [
            "Recharged Second Wind",
            "Recharged Action Surge",
            "Recovered 5 HP from Hit Die",
        ]
        assert fighter.class_abilities["second_wind"].current == 1

    def test_short_rest_at_full_health(self, fighter: Character) -> None:
        """Test no healing message when nothing was healed."""
        messages = short_rest(fighter, dice=scripted_dice(10))

        assert "Recovered" not in " ".join(messages)
        assert fighter.hp == fighter.max_hp

    def test_short_rest_keeps_long_rest_abilities(self, wizard: Character) -> None:
        """Test long-rest abilities stay spent."""
        use_class_ability(wizard, "arcane_recovery", dice=scripted_dice())

        short_rest(wizard, dice=scripted_dice(2))

        assert wizard.class_abilities["arcane_recovery"].current == 0

    def test_long_rest(self, wizard: Character) -> None:
        """Test a long rest restores HP, abilities and slots."""
        wizard.take_damage(7)
        wizard.slot(2).expend()
        use_class_ability(wizard, "arcane_recovery", dice=scripted_dice())
        wizard.slot(1).expend()

        messages = long_rest(wizard)

        assert messages == ["Recovered 7 HP", "Recharged Arcane Recovery", "Spell slots restored"]
        assert wizard.hp == wizard.max_hp
        assert all(slot.used == 0 for slot in wizard.spell_slots)

    def test_long_rest_when_fresh(self, wizard: Character) -> None:
        """Test a rest with nothing to restore."""
        assert long_rest(wizard) == ["Recovered 0 HP", "Recharged Arcane Recovery"]
