"""Spell casting.

Casting validates the requested slot, spends it, then resolves the
spell's attack roll or saving throw and applies damage or healing to
the target. Upcasting adds one die per slot level above the spell's
level.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field

from dnd_rules.core.config import get_settings
from dnd_rules.core.constants import MIN_CONCENTRATION_DC, SPELL_SAVE_DC_BASE
from dnd_rules.core.exceptions import InsufficientSlotsError, InvalidTargetError, PreconditionFailedError
from dnd_rules.core.logging import get_logger
from dnd_rules.engine.checks import CheckResult, ability_check
from dnd_rules.engine.dice import DiceRoller
from dnd_rules.models.character import Character
from dnd_rules.models.enums import Ability
from dnd_rules.models.progression import CONCENTRATION_PROFICIENT_CLASSES, spellcasting_ability
from dnd_rules.models.spells import Spell, get_spell


logger = get_logger(__name__)

ARCANE_RECOVERY_MAX_SLOT_LEVEL = 5


class SpellResult(BaseModel):
    """Outcome of casting a spell.

    Attributes:
        success: Whether the spell was cast.
        message: Narration starting with 'Cast <Name>!'.
        damage: Damage dealt to the target.
        healing: Hit points restored to the target.
        attack_roll: Spell attack total, when the spell attacks.
        save_roll: Target's saving throw total, when the spell allows a save.
        save_dc: The caster's spell save DC, when the spell allows a save.
        slot_level: Slot level the spell was cast at.
    """

    success: bool = True
    message: str
    damage: int = Field(default=0, ge=0)
    healing: int = Field(default=0, ge=0)
    attack_roll: int | None = None
    save_roll: int | None = None
    save_dc: int | None = None
    slot_level: int = Field(default=0, ge=0)


def _casting_modifier(caster: Character) -> int:
    # Classes without a casting ability fall back to Intelligence
    ability = spellcasting_ability(caster.klass) or Ability.INT
    return caster.modifier(ability)


def spell_attack_bonus(caster: Character) -> int:
    """Casting modifier plus proficiency."""
    return _casting_modifier(caster) + caster.proficiency_bonus


def spell_save_dc(caster: Character) -> int:
    """8 plus casting modifier plus proficiency."""
    return SPELL_SAVE_DC_BASE + _casting_modifier(caster) + caster.proficiency_bonus


def _spend_slot(caster: Character, spell: Spell, slot_level: int, enforce_slots: bool) -> None:
    if slot_level < spell.level:
        raise PreconditionFailedError(
            f"Cannot cast {spell.name} with a level {slot_level} slot.",
            reason="slot_too_low",
            character=caster.name,
        )
    if spell.is_cantrip or not enforce_slots:
        return

    slot = caster.slot(slot_level)
    if slot is None or not slot.expend():
        raise InsufficientSlotsError(
            f"No level {slot_level} spell slots remaining.",
            slot_level=slot_level,
            character=caster.name,
        )


def cast_spell(
    caster: Character,
    spell_id: str,
    slot_level: int,
    target: Character | None = None,
    *,
    dice: DiceRoller,
    target_ac: int | None = None,
    enforce_slots: bool | None = None,
) -> SpellResult:
    """Cast a spell, spending a slot and applying its effect to the target.

    Args:
        caster: The spellcaster.
        spell_id: Spell catalog key.
        slot_level: Slot level to cast at (upcasting adds dice).
        target: Creature affected by damage or healing.
        dice: Session dice roller.
        target_ac: AC for spell attacks, the configured default when None.
        enforce_slots: Check and spend slots; the configured default when None.

    Returns:
        The SpellResult.

    Raises:
        NotFoundError: If the spell is unknown.
        PreconditionFailedError: If the slot is below the spell's level.
        InsufficientSlotsError: If no slot of that level remains.
        InvalidTargetError: If a damaging spell has no target.
    """
    spell = get_spell(spell_id)
    if spell.damage is not None and target is None:
        raise InvalidTargetError(f"{spell.name} needs a target", character=caster.name)
    settings = get_settings().game
    if enforce_slots is None:
        enforce_slots = settings.enforce_spell_slots
    _spend_slot(caster, spell, slot_level, enforce_slots)

    upcast = max(0, slot_level - spell.level)
    result = SpellResult(message=f"Cast {spell.name}!", slot_level=slot_level)
    damage_type = spell.damage_type.value if spell.damage_type else ""

    damage_dice = spell.damage
    if damage_dice is not None and target is not None:
        damage = max(0, dice.roll_total(damage_dice.with_extra_dice(upcast)))
        if spell.auto_hit:
            result.damage = damage
            result.message += f" Hit for {damage} {damage_type} damage!"
        elif spell.attack_roll:
            armor = target_ac if target_ac is not None else settings.default_spell_target_ac
            result.attack_roll = dice.roll_d20() + spell_attack_bonus(caster)
            if result.attack_roll >= armor:
                result.damage = damage
                result.message += f" Hit for {damage} {damage_type} damage!"
            else:
                result.message += " Missed!"
        elif spell.saving_throw is not None:
            result.save_dc = spell_save_dc(caster)
            result.save_roll = dice.roll_d20() + target.modifier(spell.saving_throw)
            if result.save_roll >= result.save_dc:
                result.damage = damage // 2
                result.message += f" Save successful! {result.damage} {damage_type} damage."
            else:
                result.damage = damage
                result.message += f" Save failed! {damage} {damage_type} damage!"
        target.take_damage(result.damage)

    healing_dice = spell.healing
    if healing_dice is not None and target is not None:
        rolled = dice.roll_total(healing_dice.with_extra_dice(upcast))
        result.healing = target.heal(rolled)
        result.message += f" Healed for {result.healing} HP!"

    logger.info(
        "Spell cast",
        caster=caster.name,
        spell=spell.id,
        slot_level=slot_level,
        target=target.name if target else None,
        damage=result.damage,
        healing=result.healing,
    )
    return result


def restore_spell_slots(character: Character) -> int:
    """Restore every expended slot. Returns the number of slots restored."""
    return sum(slot.restore() for slot in character.spell_slots)


def recover_spell_slots(character: Character, budget: int) -> list[int]:
    """Recover expended slots, lowest level first, up to a total of slot levels.

    Slots above 5th level are never recovered.

    Args:
        character: The caster.
        budget: Combined slot levels that may be recovered.

    Returns:
        The level of each slot recovered.
    """
    recovered: list[int] = []
    remaining = budget
    for slot in sorted(character.spell_slots, key=lambda s: s.level):
        if slot.level > ARCANE_RECOVERY_MAX_SLOT_LEVEL:
            break
        while slot.used > 0 and slot.level <= remaining:
            slot.used -= 1
            remaining -= slot.level
            recovered.append(slot.level)
    return recovered


def arcane_recovery_budget(level: int) -> int:
    """Slot levels recoverable by Arcane Recovery: half the level, rounded up."""
    return math.ceil(level / 2)


def concentration_check(character: Character, damage: int, *, dice: DiceRoller) -> CheckResult:
    """Constitution save to keep concentrating after taking damage.

    The DC is half the damage taken, at least 10. Full casters add their
    proficiency bonus.
    """
    dc = max(MIN_CONCENTRATION_DC, damage // 2)
    proficient = character.klass.lower() in CONCENTRATION_PROFICIENT_CLASSES
    return ability_check(character, Ability.CON, dc, proficient, dice=dice)


__all__ = [
    "SpellResult",
    "spell_attack_bonus",
    "spell_save_dc",
    "cast_spell",
    "restore_spell_slots",
    "recover_spell_slots",
    "arcane_recovery_budget",
    "concentration_check",
]
