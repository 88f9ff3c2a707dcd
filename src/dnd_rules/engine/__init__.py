"""Rules resolution engine.

Every resolver receives the session's DiceRoller explicitly, so a seeded
session replays exactly.

Submodules:
    dice: Dice rolling with advantage and disadvantage
    stats: Armor class, attack bonus, movement and challenge rating
    combat: Weapon attacks and healing
    spellcasting: Spell casting, slots and concentration
    checks: Ability checks, skill checks, saves and conditions
    progression: Leveling, class abilities and rests
    inventory: Carrying, stacking, consumables and equipment
    session: Game session context and turn history
    orchestrator: Tagged action dispatch and the per-turn pipeline
    narration: Read-only summaries for the narrator

Example:
    >>> from dnd_rules.engine import Action, GameSession, process_turn
    >>> from dnd_rules.models import ActionType, create_character
    >>>
    >>> session = GameSession(seed=42)
    >>> session.add_character(create_character("Aria", "Elf", "Fighter"))
    >>> session.add_character(create_character("Orc", "Orc", "Barbarian"))
    >>> outcome = process_turn(
    ...     session, "Aria", Action(type=ActionType.ATTACK, description="attack the orc"),
    ...     roll=14, target_name="Orc",
    ... )
    >>> outcome.action_result.message  # doctest: +SKIP
    'Aria hits Orc for 9 damage!'
"""

from __future__ import annotations

# =============================================================================
# Dice Rolling
# =============================================================================
from dnd_rules.engine.dice import (
    D20Roll,
    DiceResult,
    DiceRoller,
    RollMode,
)

# =============================================================================
# Statistics and Combat
# =============================================================================
from dnd_rules.engine.stats import (
    CombatStats,
    armor_class,
    calculate_challenge_rating,
    combat_stats,
    movement_speed,
    weapon_attack_bonus,
)
from dnd_rules.engine.combat import (
    AttackResult,
    StatusEffect,
    perform_attack,
    perform_healing,
    roll_initiative,
)

# =============================================================================
# Spells, Checks and Progression
# =============================================================================
from dnd_rules.engine.spellcasting import (
    SpellResult,
    cast_spell,
    concentration_check,
    recover_spell_slots,
    restore_spell_slots,
    spell_attack_bonus,
    spell_save_dc,
)
from dnd_rules.engine.checks import (
    DIFFICULTY_CLASSES,
    CheckResult,
    DeathSave,
    Difficulty,
    ability_check,
    advantage_from_conditions,
    can_take_action,
    death_saving_throw,
    is_skill_proficient,
    parse_skill,
    saving_throw,
    skill_check,
)
from dnd_rules.engine.progression import (
    AbilityResult,
    level_up,
    long_rest,
    short_rest,
    use_class_ability,
)

# =============================================================================
# Inventory
# =============================================================================
from dnd_rules.engine.inventory import (
    CarryingCapacity,
    InventoryResult,
    add_item,
    calculate_inventory_value,
    carrying_capacity,
    carrying_capacity_tiers,
    create_item_from_template,
    equip_item,
    find_items_by_type,
    generate_random_loot,
    get_equippable_items,
    get_starting_equipment,
    get_total_inventory_weight,
    remove_item,
    search_inventory,
    unequip_item,
    use_consumable,
)

# =============================================================================
# Session and Orchestration
# =============================================================================
from dnd_rules.engine.session import GameSession, TurnRecord
from dnd_rules.engine.orchestrator import (
    Action,
    ActionResult,
    KeywordSceneClassifier,
    RollConsequences,
    SceneClassifier,
    TurnOutcome,
    apply_roll_consequences,
    auto_level_up,
    check_level_up,
    generate_scene_loot,
    loot_messages,
    perform_rest,
    process_turn,
    resolve_action,
)
from dnd_rules.engine.narration import (
    CharacterStatistics,
    CombatInfo,
    character_statistics,
    combat_info,
    suggest_actions,
)


__all__ = [
    # Dice
    "RollMode",
    "DiceResult",
    "D20Roll",
    "DiceRoller",
    # Statistics and combat
    "CombatStats",
    "armor_class",
    "weapon_attack_bonus",
    "combat_stats",
    "movement_speed",
    "calculate_challenge_rating",
    "StatusEffect",
    "AttackResult",
    "perform_attack",
    "roll_initiative",
    "perform_healing",
    # Spells
    "SpellResult",
    "spell_attack_bonus",
    "spell_save_dc",
    "cast_spell",
    "restore_spell_slots",
    "recover_spell_slots",
    "concentration_check",
    # Checks
    "Difficulty",
    "DIFFICULTY_CLASSES",
    "CheckResult",
    "ability_check",
    "saving_throw",
    "parse_skill",
    "is_skill_proficient",
    "skill_check",
    "DeathSave",
    "death_saving_throw",
    "advantage_from_conditions",
    "can_take_action",
    # Progression
    "level_up",
    "AbilityResult",
    "use_class_ability",
    "short_rest",
    "long_rest",
    # Inventory
    "InventoryResult",
    "CarryingCapacity",
    "create_item_from_template",
    "get_starting_equipment",
    "carrying_capacity",
    "carrying_capacity_tiers",
    "get_total_inventory_weight",
    "calculate_inventory_value",
    "add_item",
    "remove_item",
    "use_consumable",
    "equip_item",
    "unequip_item",
    "generate_random_loot",
    "find_items_by_type",
    "get_equippable_items",
    "search_inventory",
    # Session and orchestration
    "GameSession",
    "TurnRecord",
    "Action",
    "ActionResult",
    "resolve_action",
    "RollConsequences",
    "apply_roll_consequences",
    "SceneClassifier",
    "KeywordSceneClassifier",
    "generate_scene_loot",
    "loot_messages",
    "perform_rest",
    "check_level_up",
    "auto_level_up",
    "TurnOutcome",
    "process_turn",
    # Narration
    "suggest_actions",
    "CombatInfo",
    "combat_info",
    "CharacterStatistics",
    "character_statistics",
]
