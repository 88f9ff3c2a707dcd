"""Action orchestration for the narrative layer.

The narrator sends tagged actions and free-text actions with a d20 roll.
This module dispatches tagged actions to the resolvers, turns the roll
into narrative consequences, classifies the scene for loot and runs the
whole per-turn pipeline. Rules failures never escape: they become
``success=False`` results the narrator can describe.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from dnd_rules.core.exceptions import DndRulesError, InvalidTargetError, RulesError
from dnd_rules.core.logging import bind_context, clear_context, get_logger
from dnd_rules.engine.checks import advantage_from_conditions, combine_modes, skill_check
from dnd_rules.engine.combat import perform_attack, perform_healing
from dnd_rules.engine.dice import RollMode
from dnd_rules.engine.inventory import (
    add_item,
    create_item_from_template,
    generate_random_loot,
    remove_item,
    use_consumable,
)
from dnd_rules.engine.progression import level_up, long_rest, short_rest, use_class_ability
from dnd_rules.engine.session import GameSession, TurnRecord
from dnd_rules.engine.spellcasting import cast_spell
from dnd_rules.engine.stats import CombatStats, armor_class, combat_stats
from dnd_rules.models.character import Character
from dnd_rules.models.enums import ActionType, CheckType, ItemType, Rarity, RestType, SceneType
from dnd_rules.models.items import Item
from dnd_rules.models.spells import get_spell


logger = get_logger(__name__)


# =============================================================================
# Actions and Results
# =============================================================================


class Action(BaseModel):
    """A tagged action sent by the narrative layer.

    Attributes:
        type: Which resolver handles the action.
        description: Free-text description, used for scene classification.
        target: Name of the target character, if any.
        item_id: Item to use (item actions).
        spell_id: Spell to cast (spell actions).
        ability_id: Class ability to use (ability actions).
        skill_name: Skill to roll (skill actions).
        dc: Difficulty class (skill actions).
        slot_level: Slot level to cast at; the spell's level when omitted.
        mode: Advantage or disadvantage requested by the narrator.
    """

    type: ActionType
    description: str = ""
    target: str | None = None
    item_id: str | None = None
    spell_id: str | None = None
    ability_id: str | None = None
    skill_name: str | None = None
    dc: int | None = Field(default=None, ge=1)
    slot_level: int | None = Field(default=None, ge=0, le=9)
    mode: RollMode = RollMode.NORMAL


class ActionResult(BaseModel):
    """Outcome of a tagged action.

    Attributes:
        success: Whether the action succeeded.
        message: Narration of what happened.
        damage: Damage dealt.
        healing: Hit points restored.
        effects_applied: Names of status effects inflicted.
        items_gained: Names of items gained.
    """

    success: bool
    message: str
    damage: int = 0
    healing: int = 0
    effects_applied: list[str] = Field(default_factory=list)
    items_gained: list[str] = Field(default_factory=list)

    @classmethod
    def failure(cls, message: str) -> ActionResult:
        return cls(success=False, message=message)

    @classmethod
    def from_error(cls, error: DndRulesError) -> ActionResult:
        """Build a failed result from a rules error."""
        return cls(success=False, message=error.message)


# =============================================================================
# Action Handlers
# =============================================================================


def _handle_attack(
    actor: Character, action: Action, target: Character | None, session: GameSession
) -> ActionResult:
    if target is None:
        raise InvalidTargetError("No target specified for attack", character=actor.name)

    mode = combine_modes(action.mode, advantage_from_conditions(actor.conditions, CheckType.ATTACK))
    result = perform_attack(actor, target, actor.equipped_weapon(), mode, dice=session.dice)
    if result.hit:
        target.take_damage(result.damage)
        message = f"{actor.name} hits {target.name} for {result.damage} damage!"
    else:
        message = f"{actor.name} misses {target.name}!"
    if result.critical_hit:
        message += " CRITICAL HIT!"

    return ActionResult(
        success=result.hit,
        message=message,
        damage=result.damage,
        effects_applied=[effect.name for effect in result.status_effects],
    )


def _handle_spell(
    actor: Character, action: Action, target: Character | None, session: GameSession
) -> ActionResult:
    if not action.spell_id:
        raise InvalidTargetError("No spell specified", character=actor.name)

    spell = get_spell(action.spell_id)
    # Cantrips never use a slot and do not scale with one
    slot_level = 0
    if not spell.is_cantrip:
        slot_level = max(spell.level, action.slot_level or spell.level)
    if target is None and spell.healing is not None:
        target = actor

    result = cast_spell(
        actor,
        spell.id,
        slot_level,
        target,
        dice=session.dice,
        target_ac=armor_class(target) if target is not None else None,
        enforce_slots=session.settings.enforce_spell_slots,
    )
    return ActionResult(
        success=result.success,
        message=result.message,
        damage=result.damage,
        healing=result.healing,
    )


def _handle_ability(
    actor: Character, action: Action, target: Character | None, session: GameSession
) -> ActionResult:
    if not action.ability_id:
        raise InvalidTargetError("No ability specified", character=actor.name)

    result = use_class_ability(actor, action.ability_id, target, dice=session.dice)
    return ActionResult(
        success=result.success,
        message=result.message,
        damage=result.bonus_damage,
        healing=result.healing,
    )


def _handle_item(
    actor: Character, action: Action, target: Character | None, session: GameSession
) -> ActionResult:
    if not action.item_id:
        raise InvalidTargetError("No item specified", character=actor.name)

    result = use_consumable(actor, action.item_id, dice=session.dice)
    if not result.success:
        return ActionResult.failure(result.message)
    return ActionResult(success=True, message=result.message, healing=result.healing)


def _handle_skill(
    actor: Character, action: Action, target: Character | None, session: GameSession
) -> ActionResult:
    if not action.skill_name or not action.dc:
        raise InvalidTargetError("Skill check requires skill name and DC", character=actor.name)

    mode = combine_modes(action.mode, advantage_from_conditions(actor.conditions, CheckType.ABILITY_CHECK))
    result = skill_check(actor, action.skill_name, action.dc, dice=session.dice, mode=mode)
    return ActionResult(success=result.success, message=f"{action.skill_name} check: {result.details}")


ActionHandler = Callable[[Character, Action, Character | None, GameSession], ActionResult]

ACTION_HANDLERS: dict[ActionType, ActionHandler] = {
    ActionType.ATTACK: _handle_attack,
    ActionType.SPELL: _handle_spell,
    ActionType.ABILITY: _handle_ability,
    ActionType.ITEM: _handle_item,
    ActionType.SKILL: _handle_skill,
}


def resolve_action(
    actor: Character,
    action: Action,
    target: Character | None = None,
    *,
    session: GameSession,
) -> ActionResult:
    """Resolve a tagged action.

    Args:
        actor: The acting character.
        action: The tagged action.
        target: Target character, when the action has one.
        session: The game session (dice and settings).

    Returns:
        The ActionResult; rules failures are reported with success=False.
    """
    handler = ACTION_HANDLERS.get(action.type)
    if handler is None:
        return ActionResult.failure(f"Unknown action type: {action.type}")

    try:
        result = handler(actor, action, target, session)
    except RulesError as e:
        logger.warning("Action failed", actor=actor.name, action=str(action.type), error=e.message)
        return ActionResult.from_error(e)

    logger.info(
        "Action resolved",
        actor=actor.name,
        action=str(action.type),
        success=result.success,
        damage=result.damage,
        healing=result.healing,
    )
    return result


# =============================================================================
# Roll Consequences
# =============================================================================


class RollConsequences(BaseModel):
    """Narrative consequences of a free-text action's d20 roll.

    Attributes:
        success: Whether the roll counts as a success (10 or more).
        consequences: Narration lines, first the band headline.
        rewards: Items gained, as 'Bonus loot: X'.
    """

    success: bool
    consequences: list[str] = Field(default_factory=list)
    rewards: list[str] = Field(default_factory=list)


def _lose_item(character: Character, session: GameSession) -> str | None:
    expendable = [
        item
        for item in character.inventory
        if not item.is_equipped
        and item.rarity == Rarity.COMMON
        and item.type not in (ItemType.WEAPON, ItemType.ARMOR)
    ]
    if not expendable:
        return None
    lost = session.dice.choice(expendable)
    removed = remove_item(character, lost.id).item
    return removed.name if removed is not None else None


def apply_roll_consequences(
    character: Character,
    action_description: str,
    roll: int,
    *,
    session: GameSession,
) -> RollConsequences:
    """Apply the outcome band of a narrative d20 roll.

    Bands: 18+ exceptional success (chance of bonus loot and healing),
    15-17 strong success, 10-14 partial success, 6-9 failure (chance of
    minor damage) and 1-5 critical failure (damage and a chance to lose
    a common item). Rolls outside 1-20 are clamped.

    Args:
        character: The acting character, mutated in place.
        action_description: What the player attempted.
        roll: The d20 result.
        session: The game session (dice and loot settings).

    Returns:
        The RollConsequences.
    """
    roll = max(1, min(20, roll))
    loot = session.loot
    dice = session.dice
    consequences: list[str] = []
    rewards: list[str] = []

    if roll >= 18:
        consequences.append("Exceptional success!")
        if dice.chance(loot.exceptional_loot_chance):
            for item in generate_random_loot(character.level, Rarity.COMMON, dice=dice):
                if not add_item(character, item).success:
                    continue
                rewards.append(f"Bonus loot: {item.name}")
        if character.hp < character.max_hp and dice.chance(loot.exceptional_heal_chance):
            healed = perform_healing(character, math.floor(character.max_hp * 0.1))
            if healed > 0:
                consequences.append(f"Recovered {healed} HP from success")
        success = True
    elif roll >= 15:
        consequences.append("Strong success!")
        success = True
    elif roll >= 10:
        consequences.append("Partial success with complications")
        success = True
    elif roll >= 6:
        consequences.append("Failure with minor consequences")
        if dice.chance(loot.minor_failure_damage_chance):
            damage = min(3, math.floor(character.max_hp * 0.1))
            character.take_damage(damage)
            consequences.append(f"Took {damage} damage from failure")
        success = False
    else:
        consequences.append("Critical failure!")
        damage = min(5, math.floor(character.max_hp * 0.15))
        character.take_damage(damage)
        consequences.append(f"Took {damage} damage from critical failure")
        if dice.chance(loot.critical_failure_item_loss_chance):
            lost = _lose_item(character, session)
            if lost is not None:
                consequences.append(f"Lost {lost} in the chaos")
        success = False

    logger.info(
        "Roll consequences applied",
        character=character.name,
        action=action_description,
        roll=roll,
        success=success,
    )
    return RollConsequences(success=success, consequences=consequences, rewards=rewards)


# =============================================================================
# Scenes and Loot
# =============================================================================


@runtime_checkable
class SceneClassifier(Protocol):
    """Classifies a free-text action into a scene type."""

    def classify(self, action_description: str) -> SceneType: ...


class KeywordSceneClassifier:
    """Best-effort keyword matching; anything unmatched is social."""

    COMBAT_KEYWORDS: tuple[str, ...] = ("attack", "fight", "cast", "defend")
    EXPLORATION_KEYWORDS: tuple[str, ...] = ("search", "investigate", "climb", "sneak")

    def classify(self, action_description: str) -> SceneType:
        text = action_description.lower()
        if any(word in text for word in self.COMBAT_KEYWORDS):
            return SceneType.COMBAT
        if any(word in text for word in self.EXPLORATION_KEYWORDS):
            return SceneType.EXPLORATION
        return SceneType.SOCIAL


EXPLORATION_FINDS: tuple[str, ...] = ("rope_hemp", "thieves_tools", "healing_potion")


def generate_scene_loot(level: int, scene_type: SceneType | str, *, session: GameSession) -> list[Item]:
    """Generate the loot a scene yields.

    Combat yields one to three items whose rarity depends on a roll and
    the character level; exploration sometimes yields a utility item;
    social scenes yield nothing.
    """
    scene_type = SceneType(scene_type)
    loot = session.loot
    dice = session.dice

    if scene_type == SceneType.COMBAT:
        chance = dice.random()
        rarity = Rarity.COMMON
        if chance < loot.combat_rare_chance and level >= loot.combat_rare_min_level:
            rarity = Rarity.RARE
        elif chance < loot.combat_uncommon_chance and level >= loot.combat_uncommon_min_level:
            rarity = Rarity.UNCOMMON
        return generate_random_loot(level, rarity, dice=dice)

    if scene_type == SceneType.EXPLORATION and dice.chance(loot.exploration_find_chance):
        return [create_item_from_template(dice.choice(EXPLORATION_FINDS))]

    return []


def loot_messages(items: list[Item], scene_type: SceneType | str) -> list[str]:
    """Narration lines for scene loot."""
    if SceneType(scene_type) == SceneType.COMBAT:
        return [f"Found: {item.name} ({item.rarity.value})" for item in items]
    return [f"Discovered: {item.name}" for item in items]


# =============================================================================
# Rest and Leveling
# =============================================================================


def perform_rest(character: Character, rest_type: RestType | str, *, session: GameSession) -> list[str]:
    if RestType(rest_type) == RestType.SHORT:
        return short_rest(character, dice=session.dice)
    return long_rest(character)


def check_level_up(
    character: Character,
    turn_index: int,
    *,
    max_level: int = 10,
    turns_per_level: int = 5,
) -> bool:
    """Whether the character is behind the level its turn count earns."""
    expected = turn_index // turns_per_level + 1
    return character.level < expected and character.level < max_level


def auto_level_up(character: Character, turn_index: int, *, session: GameSession) -> list[str]:
    """Level up once when the turn count calls for it."""
    settings = session.settings
    if check_level_up(
        character,
        turn_index,
        max_level=settings.max_level,
        turns_per_level=settings.turns_per_level,
    ):
        return level_up(character, dice=session.dice)
    return []


# =============================================================================
# Turn Pipeline
# =============================================================================


class TurnOutcome(BaseModel):
    """Everything the narrator needs about one processed turn.

    Attributes:
        character: Name of the acting character.
        scene_type: Scene classification of the action text.
        action_result: Result of the tagged action, if one was sent.
        consequences: Roll consequences.
        loot: Scene loot added to the inventory.
        loot_messages: Narration lines for that loot.
        level_up: Level-up messages (empty when no level was gained).
        combat_stats: Combat numbers after the turn.
    """

    character: str
    scene_type: SceneType
    action_result: ActionResult | None = None
    consequences: RollConsequences
    loot: list[Item] = Field(default_factory=list)
    loot_messages: list[str] = Field(default_factory=list)
    level_up: list[str] = Field(default_factory=list)
    combat_stats: CombatStats


def process_turn(
    session: GameSession,
    character_name: str,
    action: Action | str,
    roll: int,
    target_name: str | None = None,
    *,
    classifier: SceneClassifier | None = None,
) -> TurnOutcome:
    """Run one full turn for a character.

    Resolves the tagged action (when one is given), applies the roll's
    consequences, adds scene loot that fits in the inventory, levels the
    character up when due, records the turn and advances the session.

    Args:
        session: The game session.
        character_name: Name of the acting character.
        action: A tagged Action, or free text for a narrative-only turn.
        roll: The narrative d20 roll.
        target_name: Name of the action's target, if any.
        classifier: Scene classifier, keyword matching by default.

    Returns:
        The TurnOutcome.

    Raises:
        SessionError: If a named character is not in the session.
    """
    bind_context(session_id=session.session_id, turn=session.turn_index)
    try:
        return _run_turn(session, character_name, action, roll, target_name, classifier)
    finally:
        clear_context()


def _run_turn(
    session: GameSession,
    character_name: str,
    action: Action | str,
    roll: int,
    target_name: str | None,
    classifier: SceneClassifier | None,
) -> TurnOutcome:
    character = session.get_character(character_name)
    target = session.get_character(target_name) if target_name else None
    if target is None and isinstance(action, Action) and action.target:
        target = session.get_character(action.target)
    classifier = classifier or KeywordSceneClassifier()

    action_result = None
    if isinstance(action, Action):
        action_result = resolve_action(character, action, target, session=session)
        description = action.description or action.type.value
    else:
        description = action

    consequences = apply_roll_consequences(character, description, roll, session=session)

    scene_type = classifier.classify(description)
    gained: list[Item] = []
    for item in generate_scene_loot(character.level, scene_type, session=session):
        if add_item(character, item).success:
            gained.append(item)
    if action_result is not None:
        action_result.items_gained = [item.name for item in gained]

    level_messages = auto_level_up(character, session.turn_index + 1, session=session)

    session.record_turn(
        TurnRecord(
            turn_index=session.turn_index,
            character=character.name,
            action_type=action.type if isinstance(action, Action) else None,
            success=action_result.success if action_result else consequences.success,
            message=action_result.message if action_result else " ".join(consequences.consequences),
            roll=roll,
            scene_type=scene_type,
            items_gained=tuple(item.name for item in gained),
            leveled_up=bool(level_messages),
        )
    )
    session.next_turn()
    logger.info(
        "Turn processed",
        character=character.name,
        scene=str(scene_type),
        roll=roll,
        items_gained=len(gained),
        leveled_up=bool(level_messages),
    )

    return TurnOutcome(
        character=character.name,
        scene_type=scene_type,
        action_result=action_result,
        consequences=consequences,
        loot=gained,
        loot_messages=loot_messages(gained, scene_type),
        level_up=level_messages,
        combat_stats=combat_stats(character),
    )


__all__ = [
    "Action",
    "ActionResult",
    "ACTION_HANDLERS",
    "resolve_action",
    "RollConsequences",
    "apply_roll_consequences",
    "SceneClassifier",
    "KeywordSceneClassifier",
    "EXPLORATION_FINDS",
    "generate_scene_loot",
    "loot_messages",
    "perform_rest",
    "check_level_up",
    "auto_level_up",
    "TurnOutcome",
    "process_turn",
]
