"""Class ability catalog.

Abilities are static definitions. Their use counters are cloned into
each Character when it is created (and when a level unlocks a new
ability), so two characters of the same class never share a counter.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dnd_rules.core.exceptions import NotFoundError
from dnd_rules.models.effects import Effect, parse_effect
from dnd_rules.models.enums import RechargeType
from dnd_rules.models.resources import AbilityUses


class AbilityUsesTemplate(BaseModel):
    """Use limits of a class ability, copied into each character."""

    model_config = ConfigDict(frozen=True)

    max: int = Field(ge=1)
    recharge: RechargeType

    def fresh(self) -> AbilityUses:
        """Create a full, independent counter."""
        return AbilityUses(max=self.max, current=self.max, recharge=self.recharge)


class ClassAbility(BaseModel):
    """A class feature that can be activated.

    Attributes:
        id: Catalog key.
        name: Display name.
        description: Rules text.
        level: Minimum character level.
        uses: Use limits, or None for at-will abilities.
        effect: Parsed effect descriptor.
        tags: Free-form tags.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    level: int = Field(ge=1)
    uses: AbilityUsesTemplate | None = None
    effect: Effect
    tags: tuple[str, ...] = ()

    @field_validator("effect", mode="before")
    @classmethod
    def parse_effect_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_effect(value)
        return value


CLASS_ABILITIES: dict[str, tuple[ClassAbility, ...]] = {
    "fighter": (
        ClassAbility(
            id="second_wind",
            name="Second Wind",
            description=(
                "You have a limited well of stamina that you can draw on to protect yourself "
                "from harm. You can use a bonus action to regain 1d10 + your fighter level "
                "hit points."
            ),
            level=1,
            uses=AbilityUsesTemplate(max=1, recharge=RechargeType.SHORT_REST),
            effect="healing:1d10+level",
            tags=("healing", "bonus_action", "self"),
        ),
        ClassAbility(
            id="action_surge",
            name="Action Surge",
            description=(
                "You can push yourself beyond your normal limits for a moment. You can take "
                "one additional action on your turn."
            ),
            level=2,
            uses=AbilityUsesTemplate(max=1, recharge=RechargeType.SHORT_REST),
            effect="extra_action",
            tags=("action", "combat"),
        ),
    ),
    "rogue": (
        ClassAbility(
            id="sneak_attack",
            name="Sneak Attack",
            description=(
                "You know how to strike subtly and exploit a foe's distraction. Once per turn, "
                "you can deal extra damage when you hit with a finesse or ranged weapon."
            ),
            level=1,
            effect="sneak_damage",
            tags=("damage", "stealth"),
        ),
        ClassAbility(
            id="cunning_action",
            name="Cunning Action",
            description="You can take a Dash, Disengage, or Hide action as a bonus action.",
            level=2,
            effect="bonus_action_options",
            tags=("bonus_action", "mobility"),
        ),
    ),
    "wizard": (
        ClassAbility(
            id="arcane_recovery",
            name="Arcane Recovery",
            description=(
                "You can regain some of your magical energy by studying your spellbook. Once "
                "per day during a short rest, you can choose expended spell slots to recover."
            ),
            level=1,
            uses=AbilityUsesTemplate(max=1, recharge=RechargeType.LONG_REST),
            effect="recover_spell_slots",
            tags=("spell_slots", "recovery"),
        ),
    ),
}
"""Class abilities keyed by lowercase class name."""


def abilities_for_class(klass: str) -> tuple[ClassAbility, ...]:
    """Get every ability of a class (empty for classes without any)."""
    return CLASS_ABILITIES.get(klass.lower(), ())


def get_class_ability(klass: str, ability_id: str) -> ClassAbility:
    """Look up one ability of a class.

    Raises:
        NotFoundError: If the class has no ability with that id.
    """
    for ability in abilities_for_class(klass):
        if ability.id == ability_id:
            return ability
    raise NotFoundError(f"Ability {ability_id} not found.", kind="ability", identifier=ability_id)


def clone_ability_uses(klass: str, level: int | None = None) -> dict[str, AbilityUses]:
    """Create fresh per-character counters for a class.

    Args:
        klass: Class name.
        level: Only include abilities unlocked at this level; all when None.

    Returns:
        Mapping of ability id to a new AbilityUses.
    """
    return {
        ability.id: ability.uses.fresh()
        for ability in abilities_for_class(klass)
        if ability.uses is not None and (level is None or ability.level <= level)
    }


__all__ = [
    "AbilityUsesTemplate",
    "ClassAbility",
    "CLASS_ABILITIES",
    "abilities_for_class",
    "get_class_ability",
    "clone_ability_uses",
]
