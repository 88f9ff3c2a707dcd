"""Condition catalog.

Each condition carries machine-readable effect tags that the check and
combat resolvers consult (``attacks_disadvantage``, ``no_actions``,
``speed_zero`` and so on).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dnd_rules.core.exceptions import NotFoundError


class Condition(BaseModel):
    """A named condition and its rule tags.

    Attributes:
        name: Display name.
        description: Rules text.
        effects: Effect tags consulted by the resolvers.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    effects: tuple[str, ...] = Field(default_factory=tuple)

    def has_effect(self, tag: str) -> bool:
        return tag in self.effects


CONDITIONS: dict[str, Condition] = {
    "blinded": Condition(
        name="Blinded",
        description=(
            "A blinded creature cannot see and automatically fails any ability "
            "check that requires sight."
        ),
        effects=("attacks_disadvantage", "target_attacks_advantage", "sight_checks_fail"),
    ),
    "charmed": Condition(
        name="Charmed",
        description=(
            "A charmed creature cannot attack the charmer or target the charmer "
            "with harmful abilities or magical effects."
        ),
        effects=("cannot_attack_charmer", "charmer_advantage_social"),
    ),
    "deafened": Condition(
        name="Deafened",
        description=(
            "A deafened creature cannot hear and automatically fails any ability "
            "check that requires hearing."
        ),
        effects=("hearing_checks_fail",),
    ),
    "frightened": Condition(
        name="Frightened",
        description=(
            "A frightened creature has disadvantage on ability checks and attack "
            "rolls while the source of its fear is within line of sight."
        ),
        effects=("attacks_disadvantage", "ability_checks_disadvantage"),
    ),
    "grappled": Condition(
        name="Grappled",
        description=(
            "A grappled creature's speed becomes 0, and it cannot benefit from "
            "any bonus to its speed."
        ),
        effects=("speed_zero", "no_speed_bonus"),
    ),
    "incapacitated": Condition(
        name="Incapacitated",
        description="An incapacitated creature cannot take actions or reactions.",
        effects=("no_actions", "no_reactions"),
    ),
    "invisible": Condition(
        name="Invisible",
        description=(
            "An invisible creature is impossible to see without the aid of magic "
            "or a special sense."
        ),
        effects=("attacks_advantage", "target_attacks_disadvantage", "hide_anywhere"),
    ),
    "paralyzed": Condition(
        name="Paralyzed",
        description="A paralyzed creature is incapacitated and cannot move or speak.",
        effects=(
            "incapacitated",
            "cannot_move",
            "cannot_speak",
            "auto_fail_str_dex_saves",
            "melee_crits",
        ),
    ),
    "poisoned": Condition(
        name="Poisoned",
        description="A poisoned creature has disadvantage on attack rolls and ability checks.",
        effects=("attacks_disadvantage", "ability_checks_disadvantage"),
    ),
    "prone": Condition(
        name="Prone",
        description="A prone creature's only movement option is to crawl, unless it stands up.",
        effects=(
            "attacks_disadvantage",
            "melee_target_advantage",
            "ranged_target_disadvantage",
            "crawl_movement",
        ),
    ),
    "restrained": Condition(
        name="Restrained",
        description=(
            "A restrained creature's speed becomes 0, and it cannot benefit from "
            "any bonus to its speed."
        ),
        effects=(
            "speed_zero",
            "attacks_disadvantage",
            "dex_saves_disadvantage",
            "target_attacks_advantage",
        ),
    ),
    "stunned": Condition(
        name="Stunned",
        description=(
            "A stunned creature is incapacitated, cannot move, and can speak only "
            "falteringly."
        ),
        effects=("incapacitated", "cannot_move", "speak_falteringly", "auto_fail_str_dex_saves"),
    ),
    "unconscious": Condition(
        name="Unconscious",
        description=(
            "An unconscious creature is incapacitated, cannot move or speak, and is "
            "unaware of its surroundings."
        ),
        effects=(
            "incapacitated",
            "cannot_move",
            "cannot_speak",
            "unaware",
            "prone",
            "auto_fail_str_dex_saves",
            "melee_crits",
        ),
    ),
}


def find_condition(name: str) -> Condition | None:
    """Look up a condition by name (case-insensitive), None when unknown."""
    return CONDITIONS.get(name.strip().lower())


def get_condition(name: str) -> Condition:
    """Look up a condition by name (case-insensitive).

    Raises:
        NotFoundError: If the condition is not in the catalog.
    """
    condition = find_condition(name)
    if condition is None:
        raise NotFoundError(f"Condition {name} not found", kind="condition", identifier=name)
    return condition


def condition_effects(conditions: set[str] | list[str]) -> list[str]:
    """Collect the effect tags of every known condition, in order, with repeats.

    Unknown condition names are skipped.
    """
    tags: list[str] = []
    for name in sorted(conditions):
        condition = find_condition(name)
        if condition is not None:
            tags.extend(condition.effects)
    return tags


__all__ = [
    "Condition",
    "CONDITIONS",
    "find_condition",
    "get_condition",
    "condition_effects",
]
