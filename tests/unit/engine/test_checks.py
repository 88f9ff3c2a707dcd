"""Tests for ability checks, skill checks, saves and conditions."""

from __future__ import annotations

import pytest

from conftest import scripted_dice
from dnd_rules.core.exceptions import NotFoundError
from dnd_rules.engine.checks import (
    DIFFICULTY_CLASSES,
    Difficulty,
    ability_check,
    advantage_from_conditions,
    can_take_action,
    combine_modes,
    death_saving_throw,
    is_skill_proficient,
    parse_skill,
    saving_throw,
    skill_check,
)
from dnd_rules.engine.dice import RollMode
from dnd_rules.models.character import Character
from dnd_rules.models.enums import Ability, ActionEconomy, CheckType, DeathSaveResult, Skill


class TestDifficulty:
    """Tests for the standard DCs."""

    def test_values(self) -> None:
        """Test the DC ladder."""
        assert Difficulty.MEDIUM == 15
        assert DIFFICULTY_CLASSES["NEARLY_IMPOSSIBLE"] == 30
        assert list(DIFFICULTY_CLASSES.values()) == [5, 10, 15, 20, 25, 30]


class TestAbilityCheck:
    """Tests for ability_check and saving_throw."""

    def test_meeting_dc_succeeds(self, fighter: Character) -> None:
        """Test a total equal to the DC succeeds."""
        result = ability_check(fighter, Ability.STR, 15, dice=scripted_dice(12))

        assert result.success is True
        assert result.total == 15
        assert result.modifier == 3
        assert result.details == "Strength (STR): 12 + 3 = 15 vs DC 15"

    def test_below_dc_fails(self, fighter: Character) -> None:
        """Test a total below the DC fails."""
        result = ability_check(fighter, "DEX", 15, dice=scripted_dice(13))

        assert result.success is False
        assert result.total == 14

    def test_proficiency_and_expertise(self, rogue: Character) -> None:
        """Test proficiency is added once, or twice with expertise."""
        plain = ability_check(rogue, Ability.DEX, 10, True, dice=scripted_dice(10))
        expert = ability_check(rogue, Ability.DEX, 10, True, dice=scripted_dice(10), expertise=True)

        assert plain.modifier == 3 + 2
        assert expert.modifier == 3 + 4

    def test_expertise_needs_proficiency(self, rogue: Character) -> None:
        """Test expertise alone adds nothing."""
        result = ability_check(rogue, Ability.DEX, 10, dice=scripted_dice(10), expertise=True)

        assert result.modifier == 3

    def test_advantage_on_check(self, fighter: Character) -> None:
        """Test the roll mode reaches the d20."""
        result = ability_check(fighter, Ability.STR, 15, dice=scripted_dice(4, 16), mode=RollMode.ADVANTAGE)

        assert result.roll == 16

    def test_saving_throw_alias(self, wizard: Character) -> None:
        """Test saving_throw resolves like an ability check."""
        result = saving_throw(wizard, Ability.INT, 14, True, dice=scripted_dice(3))

        assert result.total == 3 + 4 + 3
        assert result.success is False


class TestSkills:
    """Tests for skill parsing and skill checks."""

    @pytest.mark.parametrize(
        "text",
        ["Sleight of Hand", "sleight_of_hand", "SLEIGHT-OF-HAND", "sleightofhand", Skill.SLEIGHT_OF_HAND],
    )
    def test_parse_skill_variants(self, text: str) -> None:
        """Test every spelling resolves to the same skill."""
        assert parse_skill(text) == Skill.SLEIGHT_OF_HAND

    def test_unknown_skill(self) -> None:
        """Test an unknown skill raises NotFoundError."""
        with pytest.raises(NotFoundError) as exc_info:
            parse_skill("Juggling")

        assert exc_info.value.message == "Skill Juggling not found."

    def test_class_proficiency(self, fighter: Character, rogue: Character) -> None:
        """Test proficiency comes from the class list."""
        assert is_skill_proficient(fighter, "Athletics")
        assert not is_skill_proficient(fighter, "Arcana")
        assert is_skill_proficient(rogue, Skill.STEALTH)

    def test_proficient_skill_check(self, rogue: Character) -> None:
        """Test a proficient Stealth check."""
        result = skill_check(rogue, "stealth", 15, dice=scripted_dice(10))

        assert result.success is True
        assert result.details == "Stealth (DEX): 10 + 5 = 15 vs DC 15"

    def test_unproficient_skill_check(self, fighter: Character) -> None:
        """Test a skill the class lacks uses the bare modifier."""
        result = skill_check(fighter, "Arcana", 10, dice=scripted_dice(9), expertise=True)

        assert result.modifier == 0
        assert result.success is False


class TestDeathSaves:
    """Tests for death saving throws."""

    def test_natural_twenty_revives(self, fighter: Character) -> None:
        """Test a natural 20 restores 1 HP."""
        fighter.take_damage(fighter.max_hp)

        save = death_saving_throw(fighter, dice=scripted_dice(20))

        assert save.result == DeathSaveResult.CRITICAL_SUCCESS
        assert fighter.hp == 1
        assert save.message == "Aria rolled a natural 20! Regains 1 hit point!"

    @pytest.mark.parametrize(
        ("roll", "expected"),
        [
            (1, DeathSaveResult.CRITICAL_FAILURE),
            (9, DeathSaveResult.FAILURE),
            (10, DeathSaveResult.SUCCESS),
            (19, DeathSaveResult.SUCCESS),
        ],
    )
    def test_outcomes(self, fighter: Character, roll: int, expected: DeathSaveResult) -> None:
        """Test the death save thresholds."""
        fighter.take_damage(fighter.max_hp)

        save = death_saving_throw(fighter, dice=scripted_dice(roll))

        assert save.result == expected
        assert fighter.hp == 0


class TestConditionEffects:
    """Tests for advantage from conditions and the action economy."""

    def test_poisoned_attacks_at_disadvantage(self) -> None:
        """Test a disadvantage tag on attacks."""
        assert advantage_from_conditions(["poisoned"], CheckType.ATTACK) == RollMode.DISADVANTAGE

    def test_invisible_attacks_at_advantage(self) -> None:
        """Test an advantage tag on attacks."""
        assert advantage_from_conditions({"invisible"}, "attack") == RollMode.ADVANTAGE

    def test_tags_cancel(self) -> None:
        """Test advantage and disadvantage cancel."""
        assert advantage_from_conditions(["invisible", "poisoned"], CheckType.ATTACK) == RollMode.NORMAL

    def test_check_types(self) -> None:
        """Test conditions only affect the rolls they name."""
        assert advantage_from_conditions(["frightened"], CheckType.ABILITY_CHECK) == RollMode.DISADVANTAGE
        assert advantage_from_conditions(["frightened"], CheckType.SAVING_THROW) == RollMode.NORMAL

    def test_unknown_conditions_ignored(self) -> None:
        """Test unknown names do not raise."""
        assert advantage_from_conditions(["sleepy"], CheckType.ATTACK) == RollMode.NORMAL

    @pytest.mark.parametrize(
        ("first", "second", "expected"),
        [
            (RollMode.ADVANTAGE, RollMode.NORMAL, RollMode.ADVANTAGE),
            (RollMode.ADVANTAGE, RollMode.DISADVANTAGE, RollMode.NORMAL),
            (RollMode.DISADVANTAGE, RollMode.DISADVANTAGE, RollMode.DISADVANTAGE),
            (RollMode.NORMAL, RollMode.NORMAL, RollMode.NORMAL),
        ],
    )
    def test_combine_modes(self, first: RollMode, second: RollMode, expected: RollMode) -> None:
        """Test combining roll modes."""
        assert combine_modes(first, second) == expected

    def test_free_to_act(self) -> None:
        """Test no conditions allow everything."""
        for action_type in ActionEconomy:
            assert can_take_action([], action_type)

    @pytest.mark.parametrize("condition", ["incapacitated", "stunned", "paralyzed", "unconscious"])
    def test_incapacitating_conditions(self, condition: str) -> None:
        """Test incapacitating conditions block every action."""
        assert not can_take_action([condition], ActionEconomy.ACTION)
        assert not can_take_action([condition], "reaction")

    def test_other_conditions_allow_actions(self) -> None:
        """Test conditions without action tags do not block."""
        assert can_take_action(["poisoned", "prone"], ActionEconomy.BONUS_ACTION)
