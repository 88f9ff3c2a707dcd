"""Ability checks, skill checks and saving throws.

Every check is ``d20 + modifier`` against a difficulty class, with the
proficiency bonus added when the character is proficient (twice with
expertise). Conditions can grant advantage or disadvantage and block
actions outright.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import IntEnum

from pydantic import BaseModel, Field

from dnd_rules.core.constants import DEATH_SAVE_SUCCESS_THRESHOLD
from dnd_rules.core.exceptions import NotFoundError
from dnd_rules.core.logging import get_logger
from dnd_rules.engine.dice import DiceRoller, RollMode
from dnd_rules.models.character import Character
from dnd_rules.models.conditions import condition_effects
from dnd_rules.models.enums import Ability, ActionEconomy, CheckType, DeathSaveResult, Skill
from dnd_rules.models.progression import class_skill_proficiencies


logger = get_logger(__name__)


class Difficulty(IntEnum):
    """Standard difficulty classes."""

    VERY_EASY = 5
    EASY = 10
    MEDIUM = 15
    HARD = 20
    VERY_HARD = 25
    NEARLY_IMPOSSIBLE = 30


DIFFICULTY_CLASSES: dict[str, int] = {difficulty.name: int(difficulty) for difficulty in Difficulty}


class CheckResult(BaseModel):
    """Result of a d20 check.

    Attributes:
        success: Whether the total met the DC.
        roll: The kept d20.
        total: d20 plus modifier.
        dc: Difficulty class.
        modifier: Everything added to the d20.
        details: Human-readable breakdown.
    """

    success: bool
    roll: int = Field(ge=1, le=20)
    total: int
    dc: int
    modifier: int
    details: str = ""


def _check_modifier(character: Character, ability: Ability, proficient: bool, expertise: bool) -> int:
    modifier = character.modifier(ability)
    if proficient:
        modifier += character.proficiency_bonus
        if expertise:
            modifier += character.proficiency_bonus
    return modifier


def ability_check(
    character: Character,
    ability: Ability | str,
    dc: int,
    proficient: bool = False,
    *,
    dice: DiceRoller,
    mode: RollMode = RollMode.NORMAL,
    expertise: bool = False,
) -> CheckResult:
    """Roll an ability check or saving throw.

    Args:
        character: The character rolling.
        ability: Ability used for the check.
        dc: Difficulty class to meet.
        proficient: Whether the proficiency bonus applies.
        dice: Session dice roller.
        mode: Advantage or disadvantage.
        expertise: Double the proficiency bonus (only when proficient).

    Returns:
        CheckResult with the breakdown in ``details``.
    """
    ability = Ability(ability)
    modifier = _check_modifier(character, ability, proficient, expertise)
    roll = dice.roll_d20(mode)
    total = roll + modifier
    return CheckResult(
        success=total >= dc,
        roll=roll,
        total=total,
        dc=dc,
        modifier=modifier,
        details=f"{ability.full_name} ({ability.value}): {roll} + {modifier} = {total} vs DC {dc}",
    )


saving_throw = ability_check


# =============================================================================
# Skills
# =============================================================================

_SKILLS_BY_KEY: dict[str, Skill] = {
    re.sub(r"[^a-z]", "", skill.value.lower()): skill for skill in Skill
}


def parse_skill(name: str | Skill) -> Skill:
    """Resolve a skill from display text or an identifier.

    Accepts 'Sleight of Hand', 'sleight_of_hand', 'SLEIGHT-OF-HAND' and so on.

    Raises:
        NotFoundError: If no skill matches.
    """
    if isinstance(name, Skill):
        return name
    skill = _SKILLS_BY_KEY.get(re.sub(r"[^a-z]", "", name.lower()))
    if skill is None:
        raise NotFoundError(f"Skill {name} not found.", kind="skill", identifier=name)
    return skill


def is_skill_proficient(character: Character, skill: Skill | str) -> bool:
    """Whether the character's class grants proficiency in a skill."""
    return parse_skill(skill) in class_skill_proficiencies(character.klass)


def skill_check(
    character: Character,
    skill: Skill | str,
    dc: int,
    *,
    dice: DiceRoller,
    mode: RollMode = RollMode.NORMAL,
    expertise: bool = False,
) -> CheckResult:
    """Roll a skill check.

    Example:
        >>> result = skill_check(rogue, "Stealth", 15, dice=DiceRoller(seed=1))
        >>> result.details  # doctest: +SKIP
        'Stealth (DEX): 12 + 5 = 17 vs DC 15'
    """
    skill = parse_skill(skill)
    ability = skill.ability
    modifier = _check_modifier(character, ability, is_skill_proficient(character, skill), expertise)
    roll = dice.roll_d20(mode)
    total = roll + modifier
    result = CheckResult(
        success=total >= dc,
        roll=roll,
        total=total,
        dc=dc,
        modifier=modifier,
        details=f"{skill.value} ({ability.value}): {roll} + {modifier} = {total} vs DC {dc}",
    )
    logger.debug("Skill check", character=character.name, skill=skill.value, total=total, dc=dc)
    return result


# =============================================================================
# Death Saves
# =============================================================================


class DeathSave(BaseModel):
    """Outcome of a death saving throw. The caller tracks the tally."""

    result: DeathSaveResult
    roll: int = Field(ge=1, le=20)
    message: str


def death_saving_throw(character: Character, *, dice: DiceRoller) -> DeathSave:
    """Roll a death saving throw.

    A natural 20 restores the character to 1 HP; a natural 1 counts as
    two failures.
    """
    roll = dice.roll_d20()
    if roll == 20:
        character.hp = min(1, character.max_hp)
        return DeathSave(
            result=DeathSaveResult.CRITICAL_SUCCESS,
            roll=roll,
            message=f"{character.name} rolled a natural 20! Regains 1 hit point!",
        )
    if roll == 1:
        return DeathSave(
            result=DeathSaveResult.CRITICAL_FAILURE,
            roll=roll,
            message=f"{character.name} rolled a natural 1! Counts as two failures!",
        )
    if roll >= DEATH_SAVE_SUCCESS_THRESHOLD:
        return DeathSave(
            result=DeathSaveResult.SUCCESS,
            roll=roll,
            message=f"{character.name} succeeds on death saving throw.",
        )
    return DeathSave(
        result=DeathSaveResult.FAILURE,
        roll=roll,
        message=f"{character.name} fails death saving throw.",
    )


# =============================================================================
# Conditions
# =============================================================================


def advantage_from_conditions(conditions: Iterable[str], check_type: CheckType | str) -> RollMode:
    """Net advantage granted by active conditions.

    Advantage and disadvantage cancel one for one. Unknown condition
    names are ignored.
    """
    check_type = CheckType(check_type)
    tags = condition_effects(set(conditions))
    score = 0
    if check_type == CheckType.ATTACK:
        score += tags.count("attacks_advantage")
        score -= tags.count("attacks_disadvantage")
    elif check_type == CheckType.ABILITY_CHECK:
        score -= tags.count("ability_checks_disadvantage")

    if score > 0:
        return RollMode.ADVANTAGE
    if score < 0:
        return RollMode.DISADVANTAGE
    return RollMode.NORMAL


def combine_modes(first: RollMode, second: RollMode) -> RollMode:
    """Combine two roll modes; advantage and disadvantage cancel."""
    score = 0
    for mode in (first, second):
        if mode == RollMode.ADVANTAGE:
            score += 1
        elif mode == RollMode.DISADVANTAGE:
            score -= 1
    if score > 0:
        return RollMode.ADVANTAGE
    if score < 0:
        return RollMode.DISADVANTAGE
    return RollMode.NORMAL


def can_take_action(conditions: Iterable[str], action_type: ActionEconomy | str) -> bool:
    """Whether active conditions allow an action, bonus action or reaction.

    Conditions tagged 'incapacitated' (paralyzed, stunned, unconscious)
    block everything the incapacitated condition blocks.
    """
    action_type = ActionEconomy(action_type)
    tags = condition_effects(set(conditions))
    if "no_actions" in tags or "incapacitated" in tags:
        return False
    return not (action_type == ActionEconomy.REACTION and "no_reactions" in tags)


__all__ = [
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
    "combine_modes",
    "can_take_action",
]
