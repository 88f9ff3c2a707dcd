"""Character record and its derived statistics.

A Character is owned by exactly one game session and mutated in place by
the resolvers. Hit points are kept within ``0..max_hp``; the mutators
clamp and the model validator rejects any assignment that would break the
bound.

Example:
    >>> hero = create_character("Aria", "Elf", "Fighter")
    >>> hero.ac
    18
    >>> hero.take_damage(5)
    5
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from dnd_rules.core.constants import BASE_ARMOR_CLASS, MEDIUM_ARMOR_DEX_CAP, SHIELD_AC_BONUS
from dnd_rules.core.logging import get_logger
from dnd_rules.models.abilities import clone_ability_uses
from dnd_rules.models.conditions import condition_effects, get_condition
from dnd_rules.models.effects import AbilitySet, DexMax
from dnd_rules.models.enums import Ability, ArmorWeight, ItemType
from dnd_rules.models.items import Item, starting_equipment
from dnd_rules.models.progression import (
    ability_modifier,
    calculate_max_hp,
    calculate_spell_slots,
    preset_ability_scores,
    proficiency_bonus,
)
from dnd_rules.models.resources import AbilityUses, SpellSlot


logger = get_logger(__name__)


# =============================================================================
# Ability Scores
# =============================================================================


class AbilityScores(BaseModel):
    """The six ability scores, named by abbreviation."""

    model_config = ConfigDict(validate_assignment=True)

    STR: int = Field(default=10, ge=0, le=30)
    DEX: int = Field(default=10, ge=0, le=30)
    CON: int = Field(default=10, ge=0, le=30)
    INT: int = Field(default=10, ge=0, le=30)
    WIS: int = Field(default=10, ge=0, le=30)
    CHA: int = Field(default=10, ge=0, le=30)

    def score(self, ability: Ability | str) -> int:
        """Get the raw score for an ability."""
        return getattr(self, Ability(ability).value)

    def modifier(self, ability: Ability | str) -> int:
        """Get the modifier for an ability."""
        return ability_modifier(self.score(ability))

    @computed_field(description="Modifier per ability")
    @property
    def modifiers(self) -> dict[str, int]:
        return {ability.value: self.modifier(ability) for ability in Ability}


# =============================================================================
# Armor Class
# =============================================================================


def calculate_armor_class(dex_score: int, armor: Item | None = None, has_shield: bool = False) -> int:
    """Calculate armor class from Dexterity, body armor and a shield.

    Without armor (or with armor that names no base AC) the base is
    ``10 + DEX``. Armor with a base AC applies Dexterity by weight: light
    adds all of it, medium at most +2, heavy none. Armor without a weight
    category caps Dexterity only through a ``dex_max`` effect.

    Args:
        dex_score: Dexterity score.
        armor: Worn body armor, if any.
        has_shield: Whether an equipped shield is carried.

    Returns:
        The armor class.
    """
    dex_mod = ability_modifier(dex_score)
    ac = BASE_ARMOR_CLASS + dex_mod

    if armor is not None and armor.base_armor_class > 0:
        weight = armor.armor_weight
        if weight == ArmorWeight.HEAVY:
            ac = armor.base_armor_class
        elif weight == ArmorWeight.MEDIUM:
            ac = armor.base_armor_class + min(MEDIUM_ARMOR_DEX_CAP, dex_mod)
        else:
            caps = armor.effects_of(DexMax)
            dex_bonus = min(dex_mod, caps[0].value) if caps else dex_mod
            ac = armor.base_armor_class + dex_bonus

    if has_shield:
        ac += SHIELD_AC_BONUS
    return ac


# =============================================================================
# Character
# =============================================================================


class Character(BaseModel):
    """A player character.

    Attributes:
        name: Character name, unique within a session.
        race: Race (e.g., 'Dwarf').
        klass: Class (e.g., 'Fighter').
        alignment: Alignment tag.
        level: Character level.
        hp: Current hit points.
        max_hp: Maximum hit points.
        ac: Cached armor class; see refresh_armor_class.
        ability_scores: The six ability scores.
        inventory: Carried items in insertion order.
        conditions: Active condition names (lowercase).
        spell_slots: Spell slots by level.
        class_abilities: Per-character use counters keyed by ability id.
    """

    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(min_length=1, max_length=100)
    race: str = "Human"
    klass: str = "Fighter"
    alignment: str = "true_neutral"
    level: int = Field(default=1, ge=1, le=20)
    hp: int = Field(ge=0)
    max_hp: int = Field(ge=1)
    ac: int = Field(default=BASE_ARMOR_CLASS, ge=0)
    ability_scores: AbilityScores = Field(default_factory=AbilityScores)
    inventory: list[Item] = Field(default_factory=list)
    conditions: set[str] = Field(default_factory=set)
    spell_slots: list[SpellSlot] = Field(default_factory=list)
    class_abilities: dict[str, AbilityUses] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_hp_bounds(self) -> Self:
        """Ensure current HP does not exceed max HP."""
        if self.hp > self.max_hp:
            raise ValueError(f"hp ({self.hp}) cannot exceed max_hp ({self.max_hp})")
        return self

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    @property
    def proficiency_bonus(self) -> int:
        return proficiency_bonus(self.level)

    def ability_score(self, ability: Ability | str) -> int:
        """Effective score, raised by attuned items that set it (Gauntlets of Ogre Power)."""
        ability = Ability(ability)
        score = self.ability_scores.score(ability)
        for item in self.attuned_items():
            if not item.is_equipped:
                continue
            for effect in item.effects_of(AbilitySet):
                if effect.ability == ability.value:
                    score = max(score, effect.value)
        return score

    def modifier(self, ability: Ability | str) -> int:
        """Effective modifier for an ability."""
        return ability_modifier(self.ability_score(ability))

    @property
    def is_conscious(self) -> bool:
        return self.hp > 0

    @property
    def missing_hp(self) -> int:
        return self.max_hp - self.hp

    # -------------------------------------------------------------------------
    # Hit points
    # -------------------------------------------------------------------------

    def take_damage(self, amount: int) -> int:
        """Reduce HP, never below zero.

        Args:
            amount: Damage to apply (negative values count as zero).

        Returns:
            The damage actually applied.
        """
        applied = min(max(0, amount), self.hp)
        self.hp -= applied
        return applied

    def heal(self, amount: int) -> int:
        """Restore HP, never above max_hp.

        Returns:
            The healing actually applied.
        """
        applied = min(max(0, amount), self.missing_hp)
        self.hp += applied
        return applied

    # -------------------------------------------------------------------------
    # Resources
    # -------------------------------------------------------------------------

    def slot(self, level: int) -> SpellSlot | None:
        """Get the spell slot entry for a level, if the character has one."""
        return next((slot for slot in self.spell_slots if slot.level == level), None)

    # -------------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------------

    def find_item(self, item_id: str) -> Item | None:
        return next((item for item in self.inventory if item.answers_to(item_id)), None)

    def equipped_items(self) -> list[Item]:
        return [item for item in self.inventory if item.is_equipped]

    def equipped_weapon(self) -> Item | None:
        return next(
            (item for item in self.equipped_items() if item.type == ItemType.WEAPON),
            None,
        )

    def equipped_armor(self) -> Item | None:
        """The worn body armor (shields excluded)."""
        return next(
            (
                item
                for item in self.equipped_items()
                if item.type == ItemType.ARMOR and not item.is_shield
            ),
            None,
        )

    def equipped_shield(self) -> Item | None:
        return next((item for item in self.equipped_items() if item.is_shield), None)

    def attuned_items(self) -> list[Item]:
        return [item for item in self.inventory if item.is_attuned]

    def refresh_armor_class(self) -> int:
        """Recompute and cache armor class from the equipped gear."""
        self.ac = calculate_armor_class(
            self.ability_score(Ability.DEX),
            self.equipped_armor(),
            self.equipped_shield() is not None,
        )
        return self.ac

    # -------------------------------------------------------------------------
    # Conditions
    # -------------------------------------------------------------------------

    def add_condition(self, name: str) -> None:
        """Apply a condition from the catalog.

        Raises:
            NotFoundError: If the condition is unknown.
        """
        get_condition(name)
        self.conditions.add(name.strip().lower())

    def remove_condition(self, name: str) -> bool:
        """Remove a condition. Returns whether it was present."""
        key = name.strip().lower()
        if key not in self.conditions:
            return False
        self.conditions.discard(key)
        return True

    def has_condition_effect(self, tag: str) -> bool:
        """Whether any active condition carries an effect tag."""
        return tag in condition_effects(self.conditions)


def create_character(
    name: str,
    race: str,
    klass: str,
    alignment: str = "true_neutral",
    *,
    level: int = 1,
    ability_scores: AbilityScores | dict[str, int] | None = None,
) -> Character:
    """Create a character with class defaults.

    Args:
        name: Character name.
        race: Race.
        klass: Class.
        alignment: Alignment tag.
        level: Starting level.
        ability_scores: Scores to use instead of the class preset.

    Returns:
        A full-health character wearing its starting equipment.
    """
    if ability_scores is None:
        scores = AbilityScores(**preset_ability_scores(klass))
    elif isinstance(ability_scores, AbilityScores):
        scores = ability_scores.model_copy()
    else:
        scores = AbilityScores(**ability_scores)

    max_hp = calculate_max_hp(level, klass, scores.CON)
    character = Character(
        name=name,
        race=race,
        klass=klass,
        alignment=alignment,
        level=level,
        hp=max_hp,
        max_hp=max_hp,
        ability_scores=scores,
        inventory=starting_equipment(klass),
        spell_slots=calculate_spell_slots(klass, level),
        class_abilities=clone_ability_uses(klass, level),
    )
    character.refresh_armor_class()

    logger.info(
        "Character created",
        character=name,
        klass=klass,
        level=level,
        max_hp=max_hp,
        ac=character.ac,
    )
    return character


__all__ = [
    "AbilityScores",
    "Character",
    "calculate_armor_class",
    "create_character",
]
