"""Read-only summaries for the narrative layer.

Action suggestions, a combat info snapshot and normalized character
statistics. Nothing here mutates a character or rolls dice.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from dnd_rules.engine.checks import can_take_action
from dnd_rules.engine.inventory import calculate_inventory_value
from dnd_rules.engine.stats import CombatStats, combat_stats
from dnd_rules.models.abilities import abilities_for_class
from dnd_rules.models.character import Character
from dnd_rules.models.enums import Ability, ActionEconomy, SceneType


SPELLCASTING_SUGGESTION_CLASSES = frozenset({"wizard", "sorcerer", "cleric"})


def suggest_actions(character: Character, scene_type: SceneType | str) -> list[str]:
    """Suggest sensible actions for the situation.

    Example:
        >>> suggest_actions(fighter, "combat")[:2]
        ['Attack with weapon (Longsword)', 'Use Second Wind']
    """
    scene_type = SceneType(scene_type)
    suggestions = []
    if character.hp < character.max_hp * 0.5:
        suggestions += ["Use healing potion", "Take defensive stance"]

    if scene_type == SceneType.COMBAT:
        weapon = character.equipped_weapon()
        if weapon is not None:
            suggestions.append(f"Attack with weapon ({weapon.name})")
        else:
            suggestions.append("Attack with weapon")
        if character.klass.lower() in SPELLCASTING_SUGGESTION_CLASSES:
            suggestions.append("Cast a spell")
        for ability in abilities_for_class(character.klass):
            if character.level < ability.level:
                continue
            uses = character.class_abilities.get(ability.id)
            if ability.uses is None or (uses is not None and uses.current > 0):
                suggestions.append(f"Use {ability.name}")
    elif scene_type == SceneType.EXPLORATION:
        suggestions += ["Search the area carefully", "Check for traps", "Look for hidden passages"]
    else:
        suggestions += ["Try to persuade", "Attempt deception", "Use intimidation", "Show insight"]
    return suggestions


class ActionAvailability(BaseModel):
    action: bool = True
    bonus_action: bool = True
    reaction: bool = True


class CombatInfo(BaseModel):
    """Combat numbers, active conditions and what the character may do."""

    stats: CombatStats
    conditions: list[str] = Field(default_factory=list)
    action_economy: ActionAvailability


def combat_info(character: Character) -> CombatInfo:
    conditions = sorted(character.conditions)
    return CombatInfo(
        stats=combat_stats(character),
        conditions=conditions,
        action_economy=ActionAvailability(
            action=can_take_action(conditions, ActionEconomy.ACTION),
            bonus_action=can_take_action(conditions, ActionEconomy.BONUS_ACTION),
            reaction=can_take_action(conditions, ActionEconomy.REACTION),
        ),
    )


class CharacterStatistics(BaseModel):
    """Normalized 0-100 ratings used to flavor narration.

    Attributes:
        combat_readiness: Armor, attack bonus and health.
        magical_power: Magic items and spell attack bonus.
        social_influence: Charisma.
        exploration: Wisdom and Intelligence.
        overall_power: Level and wealth.
    """

    combat_readiness: float = Field(le=100)
    magical_power: float = Field(le=100)
    social_influence: float = Field(le=100)
    exploration: float = Field(le=100)
    overall_power: float = Field(le=100)


def character_statistics(character: Character) -> CharacterStatistics:
    stats = combat_stats(character)
    magic_items = sum(1 for item in character.inventory if "magical" in item.properties)
    return CharacterStatistics(
        combat_readiness=min(
            100,
            (stats.armor_class - 10) * 5 + stats.attack_bonus * 3 + character.hp / character.max_hp * 20,
        ),
        magical_power=min(100, magic_items * 15 + (stats.spell_attack_bonus or 0) * 5),
        social_influence=min(100, character.modifier(Ability.CHA) * 10 + 50),
        exploration=min(
            100,
            character.modifier(Ability.WIS) * 8 + character.modifier(Ability.INT) * 7 + 30,
        ),
        overall_power=min(100, character.level * 8 + calculate_inventory_value(character) / 100),
    )


__all__ = [
    "suggest_actions",
    "ActionAvailability",
    "CombatInfo",
    "combat_info",
    "CharacterStatistics",
    "character_statistics",
]
