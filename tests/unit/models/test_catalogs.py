"""Tests for the static spell, ability and condition catalogs."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dnd_rules.core.exceptions import NotFoundError
from dnd_rules.models.abilities import abilities_for_class, clone_ability_uses, get_class_ability
from dnd_rules.models.conditions import CONDITIONS, condition_effects, find_condition, get_condition
from dnd_rules.models.enums import Ability, RechargeType
from dnd_rules.models.notation import DiceSpec
from dnd_rules.models.resources import AbilityUses, SpellSlot
from dnd_rules.models.spells import SPELLS, get_spell, spells_by_level


class TestSpells:
    """Tests for the spell catalog."""

    def test_catalog_size(self) -> None:
        """Test the catalog spans cantrips to 7th level."""
        assert len(SPELLS) == 39
        assert min(spell.level for spell in SPELLS.values()) == 0
        assert max(spell.level for spell in SPELLS.values()) == 7

    def test_parsed_dice(self) -> None:
        """Test damage and healing dice are parsed when the spell is built."""
        assert get_spell("magic_missile").damage == DiceSpec(1, 4, 1)
        assert get_spell("magic_missile").auto_hit
        assert get_spell("cure_wounds").healing == DiceSpec(1, 8)
        assert get_spell("cure_wounds").damage is None
        assert get_spell("fireball").damage == DiceSpec(8, 6)
        assert get_spell("fireball").damage is get_spell("fireball").damage

    def test_cantrips(self) -> None:
        """Test cantrips are level 0."""
        cantrips = spells_by_level(0)

        assert get_spell("fire_bolt") in cantrips
        assert all(spell.is_cantrip for spell in cantrips)

    def test_saving_throw_spell(self) -> None:
        """Test Fireball asks for a Dexterity save."""
        fireball = get_spell("fireball")

        assert fireball.level == 3
        assert fireball.saving_throw == Ability.DEX
        assert not fireball.attack_roll

    def test_concentration(self) -> None:
        """Test concentration comes from the duration text."""
        assert get_spell("detect_magic").requires_concentration
        assert not get_spell("cure_wounds").requires_concentration

    def test_spells_are_frozen(self) -> None:
        """Test catalog entries cannot be edited."""
        with pytest.raises(ValidationError):
            get_spell("fireball").level = 1

    def test_unknown_spell(self) -> None:
        """Test looking up a missing spell."""
        with pytest.raises(NotFoundError) as exc_info:
            get_spell("wish_granting")

        assert exc_info.value.message == "Spell wish_granting not found."


class TestClassAbilities:
    """Tests for the class ability catalog."""

    def test_fighter_abilities(self) -> None:
        """Test the fighter's abilities in unlock order."""
        assert [ability.id for ability in abilities_for_class("FIGHTER")] == ["second_wind", "action_surge"]

    def test_unknown_class_has_none(self) -> None:
        """Test classes without abilities."""
        assert abilities_for_class("Commoner") == ()

    def test_unknown_ability(self) -> None:
        """Test an ability another class owns."""
        with pytest.raises(NotFoundError) as exc_info:
            get_class_ability("Fighter", "sneak_attack")

        assert exc_info.value.message == "Ability sneak_attack not found."

    def test_clone_by_level(self) -> None:
        """Test only unlocked abilities with uses are cloned."""
        assert list(clone_ability_uses("fighter", 1)) == ["second_wind"]
        assert list(clone_ability_uses("fighter")) == ["second_wind", "action_surge"]
        assert clone_ability_uses("rogue") == {}

    def test_clones_are_independent(self) -> None:
        """Test each character gets its own counters."""
        first = clone_ability_uses("wizard")
        second = clone_ability_uses("wizard")

        first["arcane_recovery"].use()

        assert second["arcane_recovery"].current == 1
        assert first["arcane_recovery"].recharge == RechargeType.LONG_REST


class TestConditions:
    """Tests for the condition catalog."""

    def test_lookup_is_case_insensitive(self) -> None:
        """Test names are normalized."""
        assert find_condition("  Poisoned ") is CONDITIONS["poisoned"]
        assert find_condition("hexed") is None

    def test_unknown_condition(self) -> None:
        """Test get_condition raises for unknown names."""
        with pytest.raises(NotFoundError):
            get_condition("hexed")

    def test_effects_keep_repeats(self) -> None:
        """Test effect tags are collected per condition."""
        tags = condition_effects({"poisoned", "hexed", "prone"})

        assert tags.count("attacks_disadvantage") == 2
        assert "ability_checks_disadvantage" in tags

    def test_incapacitated_blocks_actions(self) -> None:
        """Test the incapacitated condition's rule tags."""
        assert condition_effects(["incapacitated"]) == ["no_actions", "no_reactions"]


class TestResources:
    """Tests for spell slots and ability use counters."""

    def test_expend_and_restore(self) -> None:
        """Test slot bookkeeping."""
        slot = SpellSlot(level=1, total=2)

        assert slot.expend() and slot.expend()
        assert not slot.expend()
        assert slot.remaining == 0
        assert slot.restore() == 2
        assert slot.remaining == 2

    def test_used_cannot_exceed_total(self) -> None:
        """Test the slot invariant is validated."""
        with pytest.raises(ValidationError):
            SpellSlot(level=2, total=1, used=2)

    def test_ability_uses(self) -> None:
        """Test use counters."""
        uses = AbilityUses(max=1, current=1, recharge=RechargeType.SHORT_REST)

        assert uses.use()
        assert not uses.use()
        assert uses.uses_display == "0/1"
        uses.restore()
        assert uses.uses_display == "1/1"

    def test_current_cannot_exceed_max(self) -> None:
        """Test the counter invariant holds on assignment."""
        uses = AbilityUses(max=1, current=1)

        with pytest.raises(ValidationError):
            uses.current = 2
