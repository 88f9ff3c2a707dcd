"""Derived combat statistics.

Armor class, attack bonus, initiative, spell numbers, movement speed and
a simplified challenge rating estimate for hand-built opponents.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict

from dnd_rules.core.constants import DEFAULT_SPEED, SMALL_RACE_SPEED, SPELL_SAVE_DC_BASE
from dnd_rules.models.character import Character, calculate_armor_class
from dnd_rules.models.enums import Ability
from dnd_rules.models.items import Item
from dnd_rules.models.progression import spellcasting_ability


SMALL_RACES = frozenset({"dwarf", "halfling", "gnome"})


class CombatStats(BaseModel):
    """Snapshot of a character's combat numbers.

    Attributes:
        attack_bonus: Unified weapon attack bonus.
        armor_class: Armor class with the worn armor and shield.
        initiative: Initiative modifier.
        spell_attack_bonus: Spell attack bonus, None for non-casters.
        spell_save_dc: Spell save DC, None for non-casters.
    """

    model_config = ConfigDict(frozen=True)

    attack_bonus: int
    armor_class: int
    initiative: int
    spell_attack_bonus: int | None = None
    spell_save_dc: int | None = None


def armor_class(character: Character, armor: Item | None = None) -> int:
    """Calculate a character's armor class.

    Args:
        character: The character.
        armor: Body armor to evaluate; the equipped armor when omitted.

    Returns:
        The armor class, including +2 for an equipped shield.
    """
    worn = armor if armor is not None else character.equipped_armor()
    return calculate_armor_class(
        character.ability_score(Ability.DEX),
        worn,
        character.equipped_shield() is not None,
    )


def weapon_attack_bonus(character: Character) -> int:
    """Better of STR and DEX modifier plus proficiency."""
    best = max(character.modifier(Ability.STR), character.modifier(Ability.DEX))
    return best + character.proficiency_bonus


def combat_stats(character: Character) -> CombatStats:
    """Compute the combat numbers for a character.

    Spell values are reported only for classes with a casting ability
    whose modifier is positive.
    """
    spell_attack = None
    save_dc = None
    ability = spellcasting_ability(character.klass)
    if ability is not None:
        casting_mod = character.modifier(ability)
        if casting_mod > 0:
            spell_attack = casting_mod + character.proficiency_bonus
            save_dc = SPELL_SAVE_DC_BASE + casting_mod + character.proficiency_bonus

    return CombatStats(
        attack_bonus=weapon_attack_bonus(character),
        armor_class=armor_class(character),
        initiative=character.modifier(Ability.DEX),
        spell_attack_bonus=spell_attack,
        spell_save_dc=save_dc,
    )


def movement_speed(character: Character) -> int:
    """Walking speed in feet: 30, 25 for small races, 0 when held in place."""
    if character.has_condition_effect("speed_zero"):
        return 0
    if character.race.lower() in SMALL_RACES:
        return SMALL_RACE_SPEED
    return DEFAULT_SPEED


# =============================================================================
# Challenge Rating
# =============================================================================

_HP_BANDS: tuple[tuple[int, float], ...] = (
    (6, 0),
    (35, 0.125),
    (49, 0.25),
    (70, 0.5),
    (85, 1),
    (100, 2),
    (115, 3),
    (130, 4),
)

_DAMAGE_BANDS: tuple[tuple[int, float], ...] = (
    (3, 0),
    (5, 0.125),
    (8, 0.25),
    (14, 0.5),
    (20, 1),
    (26, 2),
    (32, 3),
)


def _band(value: int, bands: tuple[tuple[int, float], ...], above: float) -> float:
    for limit, rating in bands:
        if value <= limit:
            return rating
    return above


def defensive_challenge_rating(hp: int, ac: int) -> float:
    """CR from hit points, nudged by one for very high or low AC."""
    rating = _band(hp, _HP_BANDS, 5)
    if ac >= 17:
        rating += 1
    elif ac <= 13:
        rating -= 1
    return max(0, rating)


def offensive_challenge_rating(damage: int, to_hit: int) -> float:
    """CR from damage per round, nudged by one for an unusual attack bonus."""
    rating = _band(damage, _DAMAGE_BANDS, 4)
    expected_to_hit = 3 + rating * 2
    if to_hit >= expected_to_hit + 2:
        rating += 1
    elif to_hit <= expected_to_hit - 2:
        rating -= 1
    return max(0, rating)


def calculate_challenge_rating(
    hp: int,
    ac: int,
    damage: int,
    to_hit: int,
    save_dc: int | None = None,
) -> int:
    """Estimate a creature's challenge rating.

    Args:
        hp: Hit points.
        ac: Armor class.
        damage: Damage per round.
        to_hit: Attack bonus.
        save_dc: Save DC of its abilities (not used by the estimate).

    Returns:
        The mean of the defensive and offensive ratings, rounded half up.

    Example:
        >>> calculate_challenge_rating(hp=90, ac=15, damage=18, to_hit=5)
        2
    """
    average = (defensive_challenge_rating(hp, ac) + offensive_challenge_rating(damage, to_hit)) / 2
    return math.floor(average + 0.5)


__all__ = [
    "CombatStats",
    "armor_class",
    "weapon_attack_bonus",
    "combat_stats",
    "movement_speed",
    "defensive_challenge_rating",
    "offensive_challenge_rating",
    "calculate_challenge_rating",
]
