"""Rules constants for the dnd_rules resolution engine.

This module defines the fixed numbers the resolvers share: attunement
and party limits, armor class rules, die thresholds and the leveling
cadence. Tunable values are mirrored in ``core.config`` as defaults.
"""

from __future__ import annotations

# =============================================================================
# Session Limits
# =============================================================================

MAX_PARTY_SIZE = 2
"""Maximum number of active characters in a session."""

MAX_SCOPE_LEVEL = 10
"""Level cap for automatic leveling."""

TURNS_PER_LEVEL = 5
"""Completed turns per automatic level."""

# =============================================================================
# Equipment Rules
# =============================================================================

ATTUNEMENT_LIMIT = 3
"""Maximum number of items a character can be attuned to."""

CARRY_FACTOR_KG = 7.0
"""Carrying capacity in kilograms per point of Strength."""

SHIELD_AC_BONUS = 2
"""Armor class bonus granted by an equipped shield."""

MEDIUM_ARMOR_DEX_CAP = 2
"""Maximum Dexterity bonus added to medium armor."""

BASE_ARMOR_CLASS = 10
"""Armor class before Dexterity when no armor is worn."""

# =============================================================================
# Dice Thresholds
# =============================================================================

CRITICAL_HIT_NATURAL = 20
"""Natural d20 result that is a critical hit."""

FUMBLE_NATURAL = 1
"""Natural d20 result that is a critical failure."""

DEATH_SAVE_SUCCESS_THRESHOLD = 10
"""Minimum natural roll for a successful death saving throw."""

ABILITY_SCORE_IMPROVEMENT_INTERVAL = 4
"""Every Nth level grants an ability score improvement."""

UNARMED_DAMAGE_DICE = "1d4"
"""Damage dice used when a weapon has no parseable dice."""

DEFAULT_HIT_DIE = 8
"""Hit die for classes missing from the hit die table."""

# =============================================================================
# Spellcasting
# =============================================================================

DEFAULT_SPELL_TARGET_AC = 15
"""AC assumed for spell attack rolls when no defender AC is available."""

SPELL_SAVE_DC_BASE = 8
"""Base value of a spell save DC before modifiers."""

MIN_CONCENTRATION_DC = 10
"""Floor of the concentration check DC."""

# =============================================================================
# Movement
# =============================================================================

DEFAULT_SPEED = 30
"""Default walking speed in feet."""

SMALL_RACE_SPEED = 25
"""Walking speed in feet for dwarves, halflings and gnomes."""


__all__ = [
    "MAX_PARTY_SIZE",
    "MAX_SCOPE_LEVEL",
    "TURNS_PER_LEVEL",
    "ATTUNEMENT_LIMIT",
    "CARRY_FACTOR_KG",
    "SHIELD_AC_BONUS",
    "MEDIUM_ARMOR_DEX_CAP",
    "BASE_ARMOR_CLASS",
    "CRITICAL_HIT_NATURAL",
    "FUMBLE_NATURAL",
    "DEATH_SAVE_SUCCESS_THRESHOLD",
    "ABILITY_SCORE_IMPROVEMENT_INTERVAL",
    "UNARMED_DAMAGE_DICE",
    "DEFAULT_HIT_DIE",
    "DEFAULT_SPELL_TARGET_AC",
    "SPELL_SAVE_DC_BASE",
    "MIN_CONCENTRATION_DC",
    "DEFAULT_SPEED",
    "SMALL_RACE_SPEED",
]
