"""Static progression data and modifier formulas.

This module contains the pure rules formulas and fixed tables the
resolvers share:
- Ability modifiers and proficiency bonus by level
- Hit dice and maximum hit points by class
- Preset ability scores per class archetype
- Spellcasting ability and spell slots by class and level
- Skill proficiencies by class
"""

from __future__ import annotations

import math

from dnd_rules.core.constants import DEFAULT_HIT_DIE
from dnd_rules.models.enums import Ability, Skill
from dnd_rules.models.resources import SpellSlot


# =============================================================================
# Modifiers
# =============================================================================


def ability_modifier(score: int) -> int:
    """Get the modifier for an ability score.

    Args:
        score: Ability score.

    Returns:
        ``floor((score - 10) / 2)``, negative below 10.

    Example:
        >>> ability_modifier(8)
        -1
    """
    return (score - 10) // 2


def proficiency_bonus(level: int) -> int:
    """Get proficiency bonus for a given level: ``ceil(level / 4) + 1``."""
    return math.ceil(level / 4) + 1


# =============================================================================
# Hit Dice by Class
# =============================================================================

CLASS_HIT_DIE: dict[str, int] = {
    "barbarian": 12,
    "fighter": 10,
    "paladin": 10,
    "ranger": 10,
    "bard": 8,
    "cleric": 8,
    "druid": 8,
    "monk": 8,
    "rogue": 8,
    "warlock": 8,
    "sorcerer": 6,
    "wizard": 6,
}


def get_hit_die(klass: str) -> int:
    """Get hit die size for a class (case-insensitive, 8 when unknown)."""
    return CLASS_HIT_DIE.get(klass.lower(), DEFAULT_HIT_DIE)


def calculate_max_hp(level: int, klass: str, con_score: int) -> int:
    """Calculate maximum hit points using the fixed per-level average.

    Level 1 gets the full hit die plus CON; every later level adds
    half the die plus one plus CON (at least 1).

    Args:
        level: Character level.
        klass: Class name.
        con_score: Constitution score.

    Returns:
        Maximum hit points (at least 1).
    """
    hit_die = get_hit_die(klass)
    con_mod = ability_modifier(con_score)
    per_level = max(1, hit_die // 2 + 1 + con_mod)
    total = hit_die + con_mod + (level - 1) * per_level
    return max(1, total)


# =============================================================================
# Preset Ability Scores
# =============================================================================

_ARCHETYPE_SCORES: dict[str, dict[str, int]] = {
    "martial": {"STR": 15, "CON": 14, "DEX": 13},
    "skirmisher": {"DEX": 15, "WIS": 14, "STR": 13},
    "arcane": {"INT": 15, "CON": 14, "CHA": 13},
    "divine": {"WIS": 15, "CON": 14, "STR": 13},
    "performer": {"CHA": 15, "DEX": 14, "CON": 13},
}

_CLASS_ARCHETYPE: dict[str, str] = {
    "fighter": "martial",
    "barbarian": "martial",
    "paladin": "martial",
    "rogue": "skirmisher",
    "ranger": "skirmisher",
    "monk": "skirmisher",
    "wizard": "arcane",
    "sorcerer": "arcane",
    "warlock": "arcane",
    "cleric": "divine",
    "druid": "divine",
    "bard": "performer",
}


def preset_ability_scores(klass: str) -> dict[str, int]:
    """Get the preset ability scores for a class archetype.

    Scores not raised by the archetype are 10. Unknown classes get
    12 in every ability.

    Args:
        klass: Class name.

    Returns:
        Mapping of ability abbreviation to score.
    """
    archetype = _CLASS_ARCHETYPE.get(klass.lower())
    if archetype is None:
        return {ability.value: 12 for ability in Ability}
    scores = {ability.value: 10 for ability in Ability}
    scores.update(_ARCHETYPE_SCORES[archetype])
    return scores


# =============================================================================
# Spellcasting
# =============================================================================

SPELLCASTING_ABILITY: dict[str, Ability] = {
    "wizard": Ability.INT,
    "eldritch knight": Ability.INT,
    "cleric": Ability.WIS,
    "druid": Ability.WIS,
    "ranger": Ability.WIS,
    "bard": Ability.CHA,
    "paladin": Ability.CHA,
    "sorcerer": Ability.CHA,
    "warlock": Ability.CHA,
}

FULL_CASTERS = frozenset({"wizard", "sorcerer", "cleric", "druid", "bard"})
HALF_CASTERS = frozenset({"paladin", "ranger"})

FULL_CASTER_SLOTS: list[list[int]] = [
    [],
    [2],
    [3],
    [4, 2],
    [4, 3],
    [4, 3, 2],
    [4, 3, 3],
    [4, 3, 3, 1],
    [4, 3, 3, 2],
    [4, 3, 3, 3, 1],
    [4, 3, 3, 3, 2],
]
"""Slots per spell level for full casters, indexed by character level (1-10)."""

HALF_CASTER_SLOTS: list[list[int]] = [
    [],
    [2],
    [3],
    [3],
    [4, 2],
    [4, 3],
]
"""Slots per spell level for half casters, indexed by ``level // 2`` (1-5)."""


def spellcasting_ability(klass: str) -> Ability | None:
    """Get the governing casting ability for a class, or None for non-casters."""
    return SPELLCASTING_ABILITY.get(klass.lower())


def calculate_spell_slots(klass: str, level: int) -> list[SpellSlot]:
    """Get the spell slots for a class at a level.

    Args:
        klass: Class name.
        level: Character level.

    Returns:
        One SpellSlot per available slot level, all unused.
    """
    name = klass.lower()
    if name in FULL_CASTERS:
        row = FULL_CASTER_SLOTS[max(0, min(level, 10))]
    elif name in HALF_CASTERS and level >= 2:
        row = HALF_CASTER_SLOTS[min(level // 2, 5)]
    else:
        row = []
    return [
        SpellSlot(level=index + 1, total=total)
        for index, total in enumerate(row)
        if total > 0
    ]


CONCENTRATION_PROFICIENT_CLASSES = frozenset({"wizard", "sorcerer", "cleric", "druid", "bard"})
"""Classes that add proficiency to concentration (CON) saves."""


# =============================================================================
# Skill Proficiencies by Class
# =============================================================================

CLASS_SKILL_PROFICIENCIES: dict[str, tuple[Skill, ...]] = {
    "fighter": (Skill.ATHLETICS, Skill.INTIMIDATION),
    "rogue": (Skill.STEALTH, Skill.SLEIGHT_OF_HAND, Skill.ACROBATICS, Skill.DECEPTION),
    "wizard": (Skill.ARCANA, Skill.HISTORY, Skill.INVESTIGATION, Skill.RELIGION),
    "cleric": (Skill.HISTORY, Skill.MEDICINE, Skill.PERSUASION, Skill.RELIGION),
    "ranger": (
        Skill.ANIMAL_HANDLING,
        Skill.ATHLETICS,
        Skill.INSIGHT,
        Skill.NATURE,
        Skill.PERCEPTION,
        Skill.STEALTH,
        Skill.SURVIVAL,
    ),
}


def class_skill_proficiencies(klass: str) -> tuple[Skill, ...]:
    """Get the skills a class is proficient in."""
    return CLASS_SKILL_PROFICIENCIES.get(klass.lower(), ())


__all__ = [
    "ability_modifier",
    "proficiency_bonus",
    "CLASS_HIT_DIE",
    "get_hit_die",
    "calculate_max_hp",
    "preset_ability_scores",
    "SPELLCASTING_ABILITY",
    "FULL_CASTERS",
    "HALF_CASTERS",
    "FULL_CASTER_SLOTS",
    "HALF_CASTER_SLOTS",
    "spellcasting_ability",
    "calculate_spell_slots",
    "CONCENTRATION_PROFICIENT_CLASSES",
    "CLASS_SKILL_PROFICIENCIES",
    "class_skill_proficiencies",
]
