"""Typed effect descriptors parsed from the item and ability effect grammar.

Catalog data writes effects as compact strings such as ``healing:2d4+2``
or ``ac_base:14,dex_max:2``. Those strings are parsed exactly once, when an
Item or ClassAbility is built, into a tuple of descriptor models. Resolvers
then match on descriptor type and never touch the raw text again.

Grammar:
    effects  := token ("," token)*
    token    := key ":" value | flag
    value    := dice | signed-int | text

Example:
    >>> effects = parse_effects("ac_base:14,dex_max:2,stealth_disadvantage")
    >>> [e.kind for e in effects]
    ['ac_base', 'dex_max', 'stealth_disadvantage']
"""

from __future__ import annotations

import re
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from dnd_rules.core.exceptions import DiceRollError
from dnd_rules.core.logging import get_logger
from dnd_rules.models.notation import DiceSpec


logger = get_logger(__name__)

_HEAL_PATTERN = re.compile(r"^(\d*)d(\d+)(?:\+(\d+|level))?$")
_SIGNED_INT = re.compile(r"^[+-]?\d+$")
_LIGHT_PATTERN = re.compile(r"^(\d+)/(\d+)$")


class _Descriptor(BaseModel):
    """Base for effect descriptors: immutable, remembers its source token."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(default="", description="Token the descriptor was parsed from")


# =============================================================================
# Dice-bearing descriptors
# =============================================================================


class Heal(_Descriptor):
    """Restore hit points: ``healing:2d4+2`` or ``healing:1d10+level``."""

    kind: Literal["heal"] = "heal"
    count: int = Field(ge=0)
    sides: int = Field(ge=1)
    bonus: int = 0
    per_level: bool = Field(default=False, description="Add the character level to the roll")

    @property
    def dice(self) -> DiceSpec:
        """The healing dice with the flat bonus."""
        return DiceSpec(count=self.count, sides=self.sides, modifier=self.bonus)


class ExtraDamage(_Descriptor):
    """Additional typed damage on hit: ``fire_damage:2d6``."""

    kind: Literal["extra_damage"] = "extra_damage"
    damage_type: str
    count: int = Field(ge=0)
    sides: int = Field(ge=1)

    @property
    def dice(self) -> DiceSpec:
        return DiceSpec(count=self.count, sides=self.sides)


# =============================================================================
# Numeric descriptors
# =============================================================================


class ACBase(_Descriptor):
    """Armor base AC: ``ac_base:14``."""

    kind: Literal["ac_base"] = "ac_base"
    value: int


class DexMax(_Descriptor):
    """Cap on the Dexterity bonus to AC: ``dex_max:2``."""

    kind: Literal["dex_max"] = "dex_max"
    value: int


class ACBonus(_Descriptor):
    """Flat AC bonus: ``ac_bonus:+1``."""

    kind: Literal["ac_bonus"] = "ac_bonus"
    value: int


class AttackBonus(_Descriptor):
    """Attack roll bonus: ``attack_bonus:+1``."""

    kind: Literal["attack_bonus"] = "attack_bonus"
    value: int


class DamageBonus(_Descriptor):
    """Damage roll bonus: ``damage_bonus:+1``."""

    kind: Literal["damage_bonus"] = "damage_bonus"
    value: int


class SavingThrowBonus(_Descriptor):
    """Bonus to every saving throw: ``saving_throws:+1``."""

    kind: Literal["saving_throw_bonus"] = "saving_throw_bonus"
    value: int


class CheckBonus(_Descriptor):
    """Bonus to a named activity: ``lockpicking:+2``."""

    kind: Literal["check_bonus"] = "check_bonus"
    check: str
    value: int


class AbilitySet(_Descriptor):
    """Set an ability score while worn: ``str_set:19``."""

    kind: Literal["ability_set"] = "ability_set"
    ability: str
    value: int


class ExtraStorage(_Descriptor):
    """Extra carrying space in kilograms: ``extra_storage:500``."""

    kind: Literal["extra_storage"] = "extra_storage"
    value: int


class Light(_Descriptor):
    """Bright and dim light radius in feet: ``light:20/40``."""

    kind: Literal["light"] = "light"
    bright: int
    dim: int


# =============================================================================
# Qualitative descriptors
# =============================================================================


class Resistance(_Descriptor):
    """Damage resistance: ``fire_resistance``."""

    kind: Literal["resistance"] = "resistance"
    damage_type: str


class Advantage(_Descriptor):
    """Advantage on a kind of roll: ``leverage:advantage`` or ``poison_advantage:1h``."""

    kind: Literal["advantage"] = "advantage"
    subject: str
    duration: str | None = None


class StealthDisadvantage(_Descriptor):
    """Disadvantage on Stealth checks while worn."""

    kind: Literal["stealth_disadvantage"] = "stealth_disadvantage"


class Restrain(_Descriptor):
    """Restrains the target on hit."""

    kind: Literal["restrain"] = "restrain"


class Duration(_Descriptor):
    """How long the item's effect lasts: ``duration:1h``."""

    kind: Literal["duration"] = "duration"
    value: str


class SpeedMultiplier(_Descriptor):
    """Multiplies walking speed for a time: ``speed_double:10min``."""

    kind: Literal["speed_multiplier"] = "speed_multiplier"
    factor: int
    duration: str | None = None


class UsesPerPeriod(_Descriptor):
    """Limited activations: ``uses:1/day``."""

    kind: Literal["uses_per_period"] = "uses_per_period"
    uses: int
    period: str


class ExtraAction(_Descriptor):
    """Grants an additional action this turn."""

    kind: Literal["extra_action"] = "extra_action"


class SneakAttack(_Descriptor):
    """Bonus d6 damage, one die per two character levels (rounded up)."""

    kind: Literal["sneak_attack"] = "sneak_attack"
    sides: int = 6


class BonusActionOptions(_Descriptor):
    """Dash, Disengage or Hide as a bonus action."""

    kind: Literal["bonus_action_options"] = "bonus_action_options"


class RecoverSpellSlots(_Descriptor):
    """Recover expended spell slots during a rest."""

    kind: Literal["recover_spell_slots"] = "recover_spell_slots"


class Flag(_Descriptor):
    """Any token the grammar does not recognise, kept verbatim."""

    kind: Literal["flag"] = "flag"
    name: str
    value: str | None = None


Effect = Annotated[
    Union[
        Heal,
        ExtraDamage,
        ACBase,
        DexMax,
        ACBonus,
        AttackBonus,
        DamageBonus,
        SavingThrowBonus,
        CheckBonus,
        AbilitySet,
        ExtraStorage,
        Light,
        Resistance,
        Advantage,
        StealthDisadvantage,
        Restrain,
        Duration,
        SpeedMultiplier,
        UsesPerPeriod,
        ExtraAction,
        SneakAttack,
        BonusActionOptions,
        RecoverSpellSlots,
        Flag,
    ],
    Field(discriminator="kind"),
]
"""Tagged union of every effect descriptor."""


_FLAG_EFFECTS: dict[str, type[_Descriptor]] = {
    "stealth_disadvantage": StealthDisadvantage,
    "restrain": Restrain,
    "extra_action": ExtraAction,
    "sneak_damage": SneakAttack,
    "bonus_action_options": BonusActionOptions,
    "recover_spell_slots": RecoverSpellSlots,
}

_INT_EFFECTS: dict[str, type[_Descriptor]] = {
    "ac_base": ACBase,
    "dex_max": DexMax,
    "ac_bonus": ACBonus,
    "attack_bonus": AttackBonus,
    "damage_bonus": DamageBonus,
    "saving_throws": SavingThrowBonus,
    "extra_storage": ExtraStorage,
}


def _parse_heal(token: str, value: str) -> Heal | None:
    match = _HEAL_PATTERN.match(value)
    if not match:
        return None
    count = int(match.group(1)) if match.group(1) else 1
    bonus_text = match.group(3)
    per_level = bonus_text == "level"
    bonus = int(bonus_text) if bonus_text and not per_level else 0
    return Heal(source=token, count=count, sides=int(match.group(2)), bonus=bonus, per_level=per_level)


def parse_effect(token: str) -> _Descriptor:
    """Parse one effect token into its descriptor.

    Args:
        token: A single token such as ``ac_bonus:+2`` or ``fire_resistance``.

    Returns:
        The matching descriptor, or a Flag for unrecognised tokens.
    """
    token = token.strip()
    key, _, value = token.partition(":")
    key = key.strip().lower()
    value = value.strip().lower()

    if not value:
        if key in _FLAG_EFFECTS:
            return _FLAG_EFFECTS[key](source=token)
        if key.endswith("_resistance"):
            return Resistance(source=token, damage_type=key.removesuffix("_resistance"))
        return Flag(source=token, name=key)

    if key == "healing":
        heal = _parse_heal(token, value)
        if heal is not None:
            return heal

    if key in _INT_EFFECTS and _SIGNED_INT.match(value):
        return _INT_EFFECTS[key](source=token, value=int(value))

    if key.endswith("_damage"):
        try:
            spec = DiceSpec.parse(value)
        except DiceRollError:
            spec = None
        if spec is not None and spec.count > 0:
            return ExtraDamage(
                source=token,
                damage_type=key.removesuffix("_damage"),
                count=spec.count,
                sides=spec.sides,
            )

    if key.endswith("_set") and _SIGNED_INT.match(value):
        return AbilitySet(source=token, ability=key.removesuffix("_set").upper(), value=int(value))

    if key == "light":
        light = _LIGHT_PATTERN.match(value)
        if light:
            return Light(source=token, bright=int(light.group(1)), dim=int(light.group(2)))

    if key == "duration":
        return Duration(source=token, value=value)

    if key == "uses" and "/" in value:
        uses, _, period = value.partition("/")
        if uses.isdigit():
            return UsesPerPeriod(source=token, uses=int(uses), period=period)

    if key == "speed_double":
        return SpeedMultiplier(source=token, factor=2, duration=value)

    if value == "advantage":
        return Advantage(source=token, subject=key)
    if key.endswith("_advantage"):
        return Advantage(source=token, subject=key.removesuffix("_advantage"), duration=value)

    if _SIGNED_INT.match(value):
        return CheckBonus(source=token, check=key, value=int(value))

    return Flag(source=token, name=key, value=value)


def parse_effects(text: str) -> tuple[Effect, ...]:
    """Parse a comma-separated effect string.

    Args:
        text: Raw effect text; empty text yields no descriptors.

    Returns:
        Descriptors in source order.
    """
    if not text or not text.strip():
        return ()
    effects = tuple(parse_effect(token) for token in text.split(",") if token.strip())
    unknown = [e.source for e in effects if isinstance(e, Flag)]
    if unknown:
        logger.debug("Unrecognised effect tokens kept as flags", tokens=unknown)
    return effects  # type: ignore[return-value]


__all__ = [
    "Effect",
    "Heal",
    "ExtraDamage",
    "ACBase",
    "DexMax",
    "ACBonus",
    "AttackBonus",
    "DamageBonus",
    "SavingThrowBonus",
    "CheckBonus",
    "AbilitySet",
    "ExtraStorage",
    "Light",
    "Resistance",
    "Advantage",
    "StealthDisadvantage",
    "Restrain",
    "Duration",
    "SpeedMultiplier",
    "UsesPerPeriod",
    "ExtraAction",
    "SneakAttack",
    "BonusActionOptions",
    "RecoverSpellSlots",
    "Flag",
    "parse_effect",
    "parse_effects",
]
