"""Dice rolling mechanics for the rules engine.

This module provides the dice primitives every resolver uses: single dice,
d20 rolls with advantage or disadvantage, and ``NdM+K`` expressions.

All randomness flows through a DiceRoller that owns one ``random.Random``
instance. A game session creates exactly one roller and passes it to the
resolvers, which keeps a seeded session reproducible.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeVar

from dnd_rules.core.constants import CRITICAL_HIT_NATURAL, FUMBLE_NATURAL
from dnd_rules.core.exceptions import DiceRollError
from dnd_rules.core.logging import get_logger
from dnd_rules.models.notation import DiceSpec, find_dice


logger = get_logger(__name__)

T = TypeVar("T")


class RollMode(StrEnum):
    """How a d20 is rolled."""

    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"


@dataclass(frozen=True)
class DiceResult:
    """Result of rolling a dice expression.

    Attributes:
        expression: The expression that was rolled.
        rolls: Individual die results.
        modifier: Flat modifier applied.
        total: Sum of the dice plus the modifier.
    """

    expression: str
    rolls: list[int]
    modifier: int
    total: int


@dataclass(frozen=True)
class D20Roll:
    """A single d20 roll, keeping both dice for advantage and disadvantage.

    Attributes:
        natural: The kept die.
        rolls: Every die that was rolled.
        mode: The roll mode used.
    """

    natural: int
    rolls: tuple[int, ...]
    mode: RollMode

    @property
    def is_critical(self) -> bool:
        """Whether the kept die is a natural 20."""
        return self.natural == CRITICAL_HIT_NATURAL

    @property
    def is_fumble(self) -> bool:
        """Whether the kept die is a natural 1."""
        return self.natural == FUMBLE_NATURAL


class DiceRoller:
    """Dice rolling backed by a single random source.

    Example:
        >>> roller = DiceRoller(seed=42)
        >>> result = roller.roll("2d6+3")
        >>> 5 <= result.total <= 15
        True
    """

    def __init__(self, rng: random.Random | None = None, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            rng: Random source to use. Takes precedence over ``seed``.
            seed: Seed for a new random source when ``rng`` is not given.
        """
        self._rng = rng if rng is not None else random.Random(seed)
        logger.debug("DiceRoller initialized", seed=seed, injected=rng is not None)

    @property
    def rng(self) -> random.Random:
        """The underlying random source."""
        return self._rng

    def roll_die(self, sides: int) -> int:
        """Roll one die.

        Args:
            sides: Number of sides (at least 1).

        Returns:
            A uniform integer in ``[1, sides]``.

        Raises:
            DiceRollError: If ``sides`` is less than 1.
        """
        if sides < 1:
            raise DiceRollError(f"Cannot roll a die with {sides} sides", expression=f"1d{sides}")
        return self._rng.randint(1, sides)

    def roll_dice(self, count: int, sides: int) -> list[int]:
        """Roll ``count`` dice with ``sides`` sides each."""
        return [self.roll_die(sides) for _ in range(max(0, count))]

    def roll_d20_detailed(self, mode: RollMode = RollMode.NORMAL) -> D20Roll:
        """Roll a d20, twice for advantage or disadvantage.

        Args:
            mode: Normal, advantage (keep higher) or disadvantage (keep lower).

        Returns:
            The D20Roll with the kept die and every die rolled.
        """
        first = self.roll_die(20)
        if mode == RollMode.NORMAL:
            result = D20Roll(natural=first, rolls=(first,), mode=mode)
        else:
            second = self.roll_die(20)
            kept = max(first, second) if mode == RollMode.ADVANTAGE else min(first, second)
            result = D20Roll(natural=kept, rolls=(first, second), mode=mode)

        logger.debug("d20 rolled", natural=result.natural, rolls=result.rolls, mode=str(mode))
        return result

    def roll_d20(self, mode: RollMode = RollMode.NORMAL) -> int:
        """Roll a d20 and return the kept die."""
        return self.roll_d20_detailed(mode).natural

    def roll(self, expression: str | DiceSpec) -> DiceResult:
        """Roll a dice expression.

        Args:
            expression: Dice expression (e.g., '2d4+2') or a parsed DiceSpec.

        Returns:
            DiceResult containing every die and the total.

        Raises:
            DiceRollError: If the expression is invalid.
        """
        spec = expression if isinstance(expression, DiceSpec) else DiceSpec.parse(expression)
        rolls = self.roll_dice(spec.count, spec.sides) if spec.count else []
        total = sum(rolls) + spec.modifier

        logger.debug("Dice rolled", expression=str(spec), rolls=rolls, total=total)
        return DiceResult(expression=str(spec), rolls=rolls, modifier=spec.modifier, total=total)

    def roll_expression(self, spec: DiceSpec) -> DiceResult:
        """Roll an already parsed DiceSpec."""
        return self.roll(spec)

    def roll_total(self, expression: str | DiceSpec) -> int:
        """Roll a dice expression and return only the total."""
        return self.roll(expression).total

    def chance(self, probability: float) -> bool:
        """Return True with the given probability."""
        return self._rng.random() < probability

    def random(self) -> float:
        """Return a float in ``[0, 1)`` from the session source."""
        return self._rng.random()

    def choice(self, options: Sequence[T]) -> T:
        """Pick one element uniformly at random."""
        return self._rng.choice(options)

    def randint(self, low: int, high: int) -> int:
        """Return a uniform integer in ``[low, high]``."""
        return self._rng.randint(low, high)


__all__ = [
    "RollMode",
    "DiceSpec",
    "DiceResult",
    "D20Roll",
    "DiceRoller",
    "find_dice",
]
