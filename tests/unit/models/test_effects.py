"""Tests for the effect descriptor grammar."""

from __future__ import annotations

import pytest

from dnd_rules.models.effects import (
    AbilitySet,
    ACBase,
    ACBonus,
    Advantage,
    CheckBonus,
    DexMax,
    ExtraDamage,
    Flag,
    Heal,
    Light,
    Resistance,
    SavingThrowBonus,
    SneakAttack,
    StealthDisadvantage,
    UsesPerPeriod,
    parse_effect,
    parse_effects,
)
from dnd_rules.models.notation import DiceSpec


class TestParseEffect:
    """Tests for single effect tokens."""

    def test_healing_dice(self) -> None:
        """Test healing with a flat bonus."""
        heal = parse_effect("healing:2d4+2")

        assert isinstance(heal, Heal)
        assert heal.dice == DiceSpec(2, 4, 2)
        assert heal.per_level is False

    def test_healing_per_level(self) -> None:
        """Test healing that scales with character level."""
        heal = parse_effect("healing:1d10+level")

        assert isinstance(heal, Heal)
        assert heal.per_level is True
        assert heal.bonus == 0

    def test_extra_damage(self) -> None:
        """Test typed damage dice."""
        effect = parse_effect("fire_damage:2d6")

        assert isinstance(effect, ExtraDamage)
        assert effect.damage_type == "fire"
        assert effect.dice == DiceSpec(2, 6)

    @pytest.mark.parametrize(
        ("token", "expected_type", "value"),
        [
            ("ac_base:14", ACBase, 14),
            ("dex_max:2", DexMax, 2),
            ("ac_bonus:+1", ACBonus, 1),
            ("saving_throws:+1", SavingThrowBonus, 1),
        ],
    )
    def test_numeric_effects(self, token: str, expected_type: type, value: int) -> None:
        """Test integer-valued effects."""
        effect = parse_effect(token)

        assert isinstance(effect, expected_type)
        assert effect.value == value

    def test_ability_set(self) -> None:
        """Test setting an ability score."""
        effect = parse_effect("str_set:19")

        assert isinstance(effect, AbilitySet)
        assert effect.ability == "STR"
        assert effect.value == 19

    def test_qualitative_effects(self) -> None:
        """Test flags with dedicated descriptors."""
        assert isinstance(parse_effect("stealth_disadvantage"), StealthDisadvantage)
        assert isinstance(parse_effect("sneak_damage"), SneakAttack)
        resistance = parse_effect("fire_resistance")
        assert isinstance(resistance, Resistance)
        assert resistance.damage_type == "fire"

    def test_advantage_variants(self) -> None:
        """Test both advantage spellings."""
        plain = parse_effect("leverage:advantage")
        timed = parse_effect("poison_advantage:1h")

        assert isinstance(plain, Advantage)
        assert plain.subject == "leverage"
        assert isinstance(timed, Advantage)
        assert timed.subject == "poison"
        assert timed.duration == "1h"

    def test_light_and_uses(self) -> None:
        """Test light radius and limited uses."""
        light = parse_effect("light:20/40")
        uses = parse_effect("uses:1/day")

        assert isinstance(light, Light)
        assert (light.bright, light.dim) == (20, 40)
        assert isinstance(uses, UsesPerPeriod)
        assert uses.period == "day"

    def test_check_bonus(self) -> None:
        """Test a bonus to a named activity."""
        effect = parse_effect("lockpicking:+2")

        assert isinstance(effect, CheckBonus)
        assert effect.check == "lockpicking"
        assert effect.value == 2

    def test_unknown_token_is_flag(self) -> None:
        """Test that unrecognised tokens are kept verbatim."""
        effect = parse_effect("glows_faintly")

        assert isinstance(effect, Flag)
        assert effect.source == "glows_faintly"


class TestParseEffects:
    """Tests for comma-separated effect text."""

    def test_source_order(self) -> None:
        """Test that descriptors keep source order."""
        effects = parse_effects("ac_base:14,dex_max:2,stealth_disadvantage")

        assert [effect.kind for effect in effects] == ["ac_base", "dex_max", "stealth_disadvantage"]

    @pytest.mark.parametrize("text", ["", "   ", ",,"])
    def test_empty_text(self, text: str) -> None:
        """Test that empty text yields no descriptors."""
        assert parse_effects(text) == ()

    def test_descriptors_are_frozen(self) -> None:
        """Test that descriptors cannot be mutated."""
        effect = parse_effect("ac_bonus:+1")

        with pytest.raises(ValueError):
            effect.value = 3  # type: ignore[misc]
