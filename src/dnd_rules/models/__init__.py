"""Pydantic V2 data models and static rules catalogs.

Submodules:
    enums: Enumeration types (Ability, Skill, ItemType, Rarity, ...)
    notation: Dice notation parsing (DiceSpec)
    effects: Typed effect descriptors parsed from effect strings
    resources: Spell slots and ability use counters
    progression: Modifier formulas, hit dice, slot tables
    conditions: Condition catalog
    abilities: Class ability catalog
    spells: Spell catalog
    items: Item model and item template catalog
    character: Character record

Example:
    >>> from dnd_rules.models import create_character, get_spell
    >>> wizard = create_character("Merlin", "Human", "Wizard", level=5)
    >>> get_spell("fireball").level
    3
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from dnd_rules.models.enums import (
    SKILL_ABILITY_MAP,
    Ability,
    AcquisitionMethod,
    ActionEconomy,
    ActionType,
    ArmorWeight,
    CheckType,
    DamageType,
    DeathSaveResult,
    ItemType,
    Rarity,
    RechargeType,
    RestType,
    SceneType,
    Skill,
    SpellSchool,
    StatusEffectType,
)

# =============================================================================
# Notation, Effects and Resources
# =============================================================================
from dnd_rules.models.notation import DiceSpec, find_dice
from dnd_rules.models.effects import Effect, parse_effect, parse_effects
from dnd_rules.models.resources import AbilityUses, SpellSlot

# =============================================================================
# Progression
# =============================================================================
from dnd_rules.models.progression import (
    ability_modifier,
    calculate_max_hp,
    calculate_spell_slots,
    class_skill_proficiencies,
    get_hit_die,
    preset_ability_scores,
    proficiency_bonus,
    spellcasting_ability,
)

# =============================================================================
# Catalogs
# =============================================================================
from dnd_rules.models.conditions import CONDITIONS, Condition, get_condition
from dnd_rules.models.abilities import (
    CLASS_ABILITIES,
    AbilityUsesTemplate,
    ClassAbility,
    abilities_for_class,
    clone_ability_uses,
    get_class_ability,
)
from dnd_rules.models.spells import SPELLS, Spell, get_spell
from dnd_rules.models.items import (
    ITEM_TEMPLATES,
    Item,
    ItemTemplate,
    ItemUses,
    generate_item_id,
    starting_equipment,
)

# =============================================================================
# Character
# =============================================================================
from dnd_rules.models.character import (
    AbilityScores,
    Character,
    calculate_armor_class,
    create_character,
)


__all__ = [
    # Enumerations
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
    # Notation, effects, resources
    "DiceSpec",
    "find_dice",
    "Effect",
    "parse_effect",
    "parse_effects",
    "SpellSlot",
    "AbilityUses",
    # Progression
    "ability_modifier",
    "proficiency_bonus",
    "get_hit_die",
    "calculate_max_hp",
    "preset_ability_scores",
    "spellcasting_ability",
    "calculate_spell_slots",
    "class_skill_proficiencies",
    # Catalogs
    "Condition",
    "CONDITIONS",
    "get_condition",
    "ClassAbility",
    "AbilityUsesTemplate",
    "CLASS_ABILITIES",
    "abilities_for_class",
    "get_class_ability",
    "clone_ability_uses",
    "Spell",
    "SPELLS",
    "get_spell",
    "Item",
    "ItemUses",
    "ItemTemplate",
    "ITEM_TEMPLATES",
    "generate_item_id",
    "starting_equipment",
    # Character
    "AbilityScores",
    "Character",
    "calculate_armor_class",
    "create_character",
]
