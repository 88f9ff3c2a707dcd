"""Enumeration types for the dnd_rules resolution engine.

This module defines the enumeration types used throughout the engine,
including ability scores, skills, item taxonomy, spell schools and the
tags of the action orchestrator. StrEnum values match the strings the
narrative layer sends and receives.
"""

from __future__ import annotations

from enum import StrEnum


class Ability(StrEnum):
    """The six ability scores.

    Values are the three-letter abbreviations used as field names on
    AbilityScores.
    """

    STR = "STR"
    DEX = "DEX"
    CON = "CON"
    INT = "INT"
    WIS = "WIS"
    CHA = "CHA"

    @property
    def full_name(self) -> str:
        """Get the full name of the ability.

        Returns:
            Full ability name (e.g., 'Strength' for STR).
        """
        return _ABILITY_NAMES[self]


_ABILITY_NAMES: dict[Ability, str] = {
    Ability.STR: "Strength",
    Ability.DEX: "Dexterity",
    Ability.CON: "Constitution",
    Ability.INT: "Intelligence",
    Ability.WIS: "Wisdom",
    Ability.CHA: "Charisma",
}


class Skill(StrEnum):
    """The eighteen standard skills and their governing abilities."""

    # Strength skills
    ATHLETICS = "Athletics"

    # Dexterity skills
    ACROBATICS = "Acrobatics"
    SLEIGHT_OF_HAND = "Sleight of Hand"
    STEALTH = "Stealth"

    # Intelligence skills
    ARCANA = "Arcana"
    HISTORY = "History"
    INVESTIGATION = "Investigation"
    NATURE = "Nature"
    RELIGION = "Religion"

    # Wisdom skills
    ANIMAL_HANDLING = "Animal Handling"
    INSIGHT = "Insight"
    MEDICINE = "Medicine"
    PERCEPTION = "Perception"
    SURVIVAL = "Survival"

    # Charisma skills
    DECEPTION = "Deception"
    INTIMIDATION = "Intimidation"
    PERFORMANCE = "Performance"
    PERSUASION = "Persuasion"

    @property
    def ability(self) -> Ability:
        """Get the ability score used for checks with this skill.

        Returns:
            The Ability enum value associated with this skill.
        """
        return SKILL_ABILITY_MAP[self]


SKILL_ABILITY_MAP: dict[Skill, Ability] = {
    Skill.ATHLETICS: Ability.STR,
    Skill.ACROBATICS: Ability.DEX,
    Skill.SLEIGHT_OF_HAND: Ability.DEX,
    Skill.STEALTH: Ability.DEX,
    Skill.ARCANA: Ability.INT,
    Skill.HISTORY: Ability.INT,
    Skill.INVESTIGATION: Ability.INT,
    Skill.NATURE: Ability.INT,
    Skill.RELIGION: Ability.INT,
    Skill.ANIMAL_HANDLING: Ability.WIS,
    Skill.INSIGHT: Ability.WIS,
    Skill.MEDICINE: Ability.WIS,
    Skill.PERCEPTION: Ability.WIS,
    Skill.SURVIVAL: Ability.WIS,
    Skill.DECEPTION: Ability.CHA,
    Skill.INTIMIDATION: Ability.CHA,
    Skill.PERFORMANCE: Ability.CHA,
    Skill.PERSUASION: Ability.CHA,
}
"""Fixed skill to ability table."""


class ItemType(StrEnum):
    """Item categories."""

    WEAPON = "weapon"
    ARMOR = "armor"
    TOOL = "tool"
    CONSUMABLE = "consumable"
    WONDROUS = "wondrous"
    QUEST = "quest"
    CURRENCY = "currency"
    MISC = "misc"


class Rarity(StrEnum):
    """Item rarity tiers, from most to least common."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    VERY_RARE = "very_rare"
    LEGENDARY = "legendary"
    ARTIFACT = "artifact"


class RechargeType(StrEnum):
    """When limited uses are restored."""

    SHORT_REST = "short_rest"
    LONG_REST = "long_rest"
    DAWN = "dawn"
    TURN = "turn"
    NONE = "none"


class AcquisitionMethod(StrEnum):
    """How an item came into play."""

    LOOT = "loot"
    PURCHASE = "purchase"
    QUEST = "quest"
    CRAFT = "craft"
    GIFT = "gift"
    THEFT = "theft"
    SEARCH = "search"


class DamageType(StrEnum):
    """Damage types."""

    ACID = "acid"
    BLUDGEONING = "bludgeoning"
    COLD = "cold"
    FIRE = "fire"
    FORCE = "force"
    LIGHTNING = "lightning"
    NECROTIC = "necrotic"
    PIERCING = "piercing"
    POISON = "poison"
    PSYCHIC = "psychic"
    RADIANT = "radiant"
    SLASHING = "slashing"
    THUNDER = "thunder"


class SpellSchool(StrEnum):
    """Schools of magic."""

    ABJURATION = "Abjuration"
    CONJURATION = "Conjuration"
    DIVINATION = "Divination"
    ENCHANTMENT = "Enchantment"
    EVOCATION = "Evocation"
    ILLUSION = "Illusion"
    NECROMANCY = "Necromancy"
    TRANSMUTATION = "Transmutation"


class ArmorWeight(StrEnum):
    """Armor categories that decide how much Dexterity applies to AC."""

    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


class RestType(StrEnum):
    """Rest lengths."""

    SHORT = "short"
    LONG = "long"


class ActionType(StrEnum):
    """Tagged action kinds handled by the orchestrator."""

    ATTACK = "attack"
    SPELL = "spell"
    ABILITY = "ability"
    ITEM = "item"
    SKILL = "skill"


class SceneType(StrEnum):
    """Scene categories that drive loot tables."""

    COMBAT = "combat"
    EXPLORATION = "exploration"
    SOCIAL = "social"


class CheckType(StrEnum):
    """Roll categories affected by conditions."""

    ATTACK = "attack"
    ABILITY_CHECK = "ability_check"
    SAVING_THROW = "saving_throw"


class ActionEconomy(StrEnum):
    """Kinds of action available on a turn."""

    ACTION = "action"
    BONUS_ACTION = "bonus_action"
    REACTION = "reaction"


class DeathSaveResult(StrEnum):
    """Outcome categories of a death saving throw."""

    SUCCESS = "success"
    FAILURE = "failure"
    CRITICAL_SUCCESS = "critical_success"
    CRITICAL_FAILURE = "critical_failure"


class StatusEffectType(StrEnum):
    """Kinds of status effect attached to attack results."""

    BUFF = "buff"
    DEBUFF = "debuff"
    CONDITION = "condition"


__all__ = [
    "Ability",
    "Skill",
    "SKILL_ABILITY_MAP",
    "ItemType",
    "Rarity",
    "RechargeType",
    "AcquisitionMethod",
    "DamageType",
    "SpellSchool",
    "ArmorWeight",
    "RestType",
    "ActionType",
    "SceneType",
    "CheckType",
    "ActionEconomy",
    "DeathSaveResult",
    "StatusEffectType",
]
