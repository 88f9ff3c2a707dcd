"""Weapon attack resolution.

An attack is a d20 roll plus the attacker's unified attack bonus against
the defender's armor class. A natural 20 always hits and doubles the
damage dice. The resolver reports the outcome; the caller applies the
damage to the defender.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dnd_rules.core.constants import UNARMED_DAMAGE_DICE
from dnd_rules.core.logging import get_logger
from dnd_rules.engine.dice import DiceRoller, RollMode
from dnd_rules.engine.stats import armor_class, weapon_attack_bonus
from dnd_rules.models.character import Character
from dnd_rules.models.effects import AttackBonus, DamageBonus, ExtraDamage, Flag
from dnd_rules.models.enums import Ability, DamageType, StatusEffectType
from dnd_rules.models.items import Item
from dnd_rules.models.notation import DiceSpec


logger = get_logger(__name__)

_UNARMED = DiceSpec.parse(UNARMED_DAMAGE_DICE)


class StatusEffect(BaseModel):
    """A status effect inflicted by a hit, for narration.

    Attributes:
        name: Effect name (e.g., 'Burning').
        type: Buff, debuff or condition.
        duration: Length in rounds.
        effect: What the effect does.
        value: Optional magnitude.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: StatusEffectType
    duration: int = Field(ge=0)
    effect: str
    value: int | None = None


POISONED = StatusEffect(
    name="Poisoned",
    type=StatusEffectType.DEBUFF,
    duration=3,
    effect="Disadvantage on attack rolls and ability checks",
)
BURNING = StatusEffect(
    name="Burning",
    type=StatusEffectType.DEBUFF,
    duration=2,
    effect="Takes fire damage at start of turn",
    value=1,
)


class AttackResult(BaseModel):
    """Outcome of one weapon attack.

    Attributes:
        damage: Damage dealt (0 on a miss, at least 1 on a hit).
        critical_hit: Whether the d20 was a natural 20.
        hit: Whether the attack hit.
        attack_roll: d20 plus attack bonus.
        natural_roll: The kept d20.
        damage_roll: Individual damage dice.
        status_effects: Effects the weapon inflicts.
    """

    damage: int = Field(default=0, ge=0)
    critical_hit: bool = False
    hit: bool = False
    attack_roll: int
    natural_roll: int = Field(ge=1, le=20)
    damage_roll: list[int] = Field(default_factory=list)
    status_effects: list[StatusEffect] = Field(default_factory=list)


def weapon_status_effects(weapon: Item) -> list[StatusEffect]:
    """Status effects carried by a weapon's effects (poison and fire)."""
    poisonous = False
    burning = False
    for effect in weapon.effect_list:
        if isinstance(effect, ExtraDamage):
            poisonous = poisonous or effect.damage_type == DamageType.POISON
            burning = burning or effect.damage_type == DamageType.FIRE
        elif isinstance(effect, Flag) and "poison" in effect.name:
            poisonous = True

    effects = []
    if poisonous:
        effects.append(POISONED)
    if burning:
        effects.append(BURNING)
    return effects


def _weapon_bonuses(attacker: Character, weapon: Item | None) -> tuple[int, int]:
    """Attack and damage bonuses for an attacker wielding a weapon."""
    attack_bonus = weapon_attack_bonus(attacker)
    damage_bonus = attacker.modifier(Ability.STR)
    if weapon is None:
        return attack_bonus, damage_bonus

    if weapon.is_finesse:
        damage_bonus = max(attacker.modifier(Ability.DEX), attacker.modifier(Ability.STR))

    # A '+N' property wins over separate attack/damage effects
    enhancement = weapon.enhancement_bonus
    if enhancement:
        return attack_bonus + enhancement, damage_bonus + enhancement
    attack_bonus += sum(effect.value for effect in weapon.effects_of(AttackBonus))
    damage_bonus += sum(effect.value for effect in weapon.effects_of(DamageBonus))
    return attack_bonus, damage_bonus


def perform_attack(
    attacker: Character,
    defender: Character,
    weapon: Item | None = None,
    mode: RollMode = RollMode.NORMAL,
    *,
    dice: DiceRoller,
) -> AttackResult:
    """Resolve a weapon attack.

    Args:
        attacker: The attacking character.
        defender: The target; its hit points are not changed.
        weapon: The weapon used, unarmed (1d4) when None.
        mode: Advantage or disadvantage on the d20.
        dice: Session dice roller.

    Returns:
        The AttackResult.
    """
    attack_bonus, damage_bonus = _weapon_bonuses(attacker, weapon)
    target_ac = armor_class(defender)

    d20 = dice.roll_d20_detailed(mode)
    total = d20.natural + attack_bonus
    critical = d20.is_critical
    hit = critical or total >= target_ac

    damage = 0
    damage_roll: list[int] = []
    if hit:
        spec = weapon.damage if weapon is not None and weapon.damage is not None else _UNARMED
        if critical:
            spec = spec.doubled()
        damage_roll = dice.roll_dice(spec.count, spec.sides)
        damage = max(1, sum(damage_roll) + damage_bonus)

    status_effects = weapon_status_effects(weapon) if weapon is not None else []

    logger.info(
        "Attack resolved",
        attacker=attacker.name,
        defender=defender.name,
        weapon=weapon.name if weapon else None,
        natural=d20.natural,
        total=total,
        target_ac=target_ac,
        hit=hit,
        critical=critical,
        damage=damage,
    )
    return AttackResult(
        damage=damage,
        critical_hit=critical,
        hit=hit,
        attack_roll=total,
        natural_roll=d20.natural,
        damage_roll=damage_roll,
        status_effects=status_effects,
    )


def roll_initiative(character: Character, *, dice: DiceRoller) -> int:
    """Roll initiative: d20 plus DEX modifier."""
    return dice.roll_d20() + character.modifier(Ability.DEX)


def perform_healing(target: Character, amount: int) -> int:
    """Heal a character. Returns the HP actually restored."""
    healed = target.heal(amount)
    logger.info("Healing applied", target=target.name, requested=amount, healed=healed)
    return healed


__all__ = [
    "StatusEffect",
    "POISONED",
    "BURNING",
    "AttackResult",
    "weapon_status_effects",
    "perform_attack",
    "roll_initiative",
    "perform_healing",
]
