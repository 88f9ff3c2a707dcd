"""Leveling, class abilities and rests.

Use counters live on each Character (``class_abilities``); the catalog in
``models.abilities`` only describes the abilities.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field

from dnd_rules.core.constants import ABILITY_SCORE_IMPROVEMENT_INTERVAL
from dnd_rules.core.exceptions import PreconditionFailedError
from dnd_rules.core.logging import get_logger
from dnd_rules.engine.dice import DiceRoller
from dnd_rules.engine.spellcasting import arcane_recovery_budget, recover_spell_slots, restore_spell_slots
from dnd_rules.models.abilities import abilities_for_class, clone_ability_uses, get_class_ability
from dnd_rules.models.character import Character
from dnd_rules.models.effects import ExtraAction, Heal, RecoverSpellSlots, SneakAttack
from dnd_rules.models.enums import Ability, RechargeType
from dnd_rules.models.progression import calculate_spell_slots, get_hit_die
from dnd_rules.models.resources import SpellSlot


logger = get_logger(__name__)

MAX_LEVEL = 20


# =============================================================================
# Leveling
# =============================================================================


def _rebuild_spell_slots(character: Character) -> None:
    previous = {slot.level: slot.used for slot in character.spell_slots}
    character.spell_slots = [
        SpellSlot(level=slot.level, total=slot.total, used=min(previous.get(slot.level, 0), slot.total))
        for slot in calculate_spell_slots(character.klass, character.level)
    ]


def level_up(character: Character, *, dice: DiceRoller) -> list[str]:
    """Advance a character one level.

    Hit points grow by one hit die plus the CON modifier (at least 1),
    spell slot totals follow the new level and newly unlocked class
    abilities get fresh uses.

    Args:
        character: The character to advance.
        dice: Session dice roller.

    Returns:
        Narration messages.

    Raises:
        PreconditionFailedError: If the character is already level 20.
    """
    if character.level >= MAX_LEVEL:
        raise PreconditionFailedError(
            f"{character.name} is already at maximum level.",
            reason="max_level",
            character=character.name,
        )

    character.level += 1
    messages = [f"Level up! Now level {character.level}"]

    hp_gain = max(1, dice.roll_die(get_hit_die(character.klass)) + character.modifier(Ability.CON))
    character.max_hp += hp_gain
    character.hp += hp_gain
    messages.append(f"Gained {hp_gain} hit points (total: {character.max_hp})")

    if character.level % ABILITY_SCORE_IMPROVEMENT_INTERVAL == 0:
        messages.append("You can increase your ability scores!")

    _rebuild_spell_slots(character)
    for ability_id, uses in clone_ability_uses(character.klass, character.level).items():
        character.class_abilities.setdefault(ability_id, uses)

    logger.info("Level up", character=character.name, level=character.level, hp_gain=hp_gain)
    return messages


# =============================================================================
# Class Abilities
# =============================================================================


class AbilityResult(BaseModel):
    """Outcome of using a class ability.

    Attributes:
        success: Whether the ability was used.
        message: Narration starting with 'Used <Name>!'.
        healing: Hit points restored.
        bonus_damage: Extra damage to add to the next hit.
        extra_action: Whether an extra action was granted.
        slots_recovered: Levels of the spell slots recovered.
    """

    success: bool = True
    message: str
    healing: int = Field(default=0, ge=0)
    bonus_damage: int = Field(default=0, ge=0)
    extra_action: bool = False
    slots_recovered: list[int] = Field(default_factory=list)


def use_class_ability(
    character: Character,
    ability_id: str,
    target: Character | None = None,
    *,
    dice: DiceRoller,
) -> AbilityResult:
    """Activate a class ability and spend one of its uses.

    Args:
        character: The character using the ability.
        ability_id: Ability catalog key.
        target: Unused by the current abilities, which all affect the user.
        dice: Session dice roller.

    Returns:
        The AbilityResult.

    Raises:
        NotFoundError: If the character's class has no such ability.
        PreconditionFailedError: If the level is too low or no uses remain.
    """
    ability = get_class_ability(character.klass, ability_id)
    if character.level < ability.level:
        raise PreconditionFailedError(
            f"Not high enough level for {ability.name}.",
            reason="level_too_low",
            character=character.name,
        )

    counter = None
    if ability.uses is not None:
        counter = character.class_abilities.setdefault(ability.id, ability.uses.fresh())
        if counter.current <= 0:
            raise PreconditionFailedError(
                f"No uses of {ability.name} remaining.",
                reason="no_uses",
                character=character.name,
            )

    effect = ability.effect
    result = AbilityResult(message="")
    if isinstance(effect, Heal):
        rolled = dice.roll_total(effect.dice) + (character.level if effect.per_level else 0)
        result.healing = character.heal(rolled)
        detail = f"Healed for {result.healing} HP."
    elif isinstance(effect, ExtraAction):
        result.extra_action = True
        detail = "Gain an extra action this turn!"
    elif isinstance(effect, SneakAttack):
        result.bonus_damage = sum(dice.roll_dice(math.ceil(character.level / 2), effect.sides))
        detail = f"+{result.bonus_damage} sneak attack damage!"
    elif isinstance(effect, RecoverSpellSlots):
        result.slots_recovered = recover_spell_slots(character, arcane_recovery_budget(character.level))
        detail = f"Recovered {len(result.slots_recovered)} spell slot(s)."
    else:
        detail = "Effect applied."

    if counter is not None:
        counter.use()
    result.message = f"Used {ability.name}! {detail}"

    logger.info("Class ability used", character=character.name, ability=ability.id)
    return result


# =============================================================================
# Rests
# =============================================================================


def _ability_names(character: Character) -> dict[str, str]:
    return {ability.id: ability.name for ability in abilities_for_class(character.klass)}


def short_rest(character: Character, *, dice: DiceRoller) -> list[str]:
    """Take a short rest.

    Short-rest abilities recharge and one hit die plus the CON modifier
    is recovered, bounded by the missing hit points.
    """
    messages = []
    names = _ability_names(character)
    for ability_id, uses in character.class_abilities.items():
        if uses.recharge == RechargeType.SHORT_REST:
            uses.restore()
            messages.append(f"Recharged {names.get(ability_id, ability_id)}")

    rolled = dice.roll_die(get_hit_die(character.klass)) + character.modifier(Ability.CON)
    healed = character.heal(rolled)
    if healed > 0:
        messages.append(f"Recovered {healed} HP from Hit Die")

    logger.info("Short rest", character=character.name, healed=healed)
    return messages


def long_rest(character: Character) -> list[str]:
    """Take a long rest: full hit points, every ability use and spell slot."""
    healed = character.heal(character.missing_hp)
    messages = [f"Recovered {healed} HP"]

    names = _ability_names(character)
    for ability_id, uses in character.class_abilities.items():
        uses.restore()
        messages.append(f"Recharged {names.get(ability_id, ability_id)}")

    if restore_spell_slots(character):
        messages.append("Spell slots restored")

    logger.info("Long rest", character=character.name, healed=healed)
    return messages


__all__ = [
    "MAX_LEVEL",
    "level_up",
    "AbilityResult",
    "use_class_ability",
    "short_rest",
    "long_rest",
]
