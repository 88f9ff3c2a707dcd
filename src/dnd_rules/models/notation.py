"""Dice notation shared by the catalogs and the dice roller.

Catalog data (spells, items, class abilities) carries dice as text. The
``d20`` library parses that text; this module folds the parsed tree into
DiceSpec values. Rolling them is the job of
``dnd_rules.engine.dice.DiceRoller``, which draws every die from the
session's random source.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

import d20
from d20 import diceast

from dnd_rules.core.exceptions import DiceRollError


_DICE_IN_TEXT = re.compile(r"(\d+)d(\d+)", re.IGNORECASE)


@dataclass(frozen=True)
class DiceSpec:
    """A parsed dice expression such as ``2d4+2``.

    Attributes:
        count: Number of dice to roll.
        sides: Number of sides per die.
        modifier: Flat value added to the dice sum.
    """

    count: int
    sides: int
    modifier: int = 0

    @classmethod
    def parse(cls, text: str) -> DiceSpec:
        """Parse ``NdM``, ``NdM+K``, ``NdM-K``, ``dM`` or a flat integer.

        Args:
            text: The dice expression.

        Returns:
            The parsed DiceSpec.

        Raises:
            DiceRollError: If the expression is empty, malformed, or uses
                operations beyond a sum of one kind of dice and integers.
        """
        if not text or not text.strip():
            raise DiceRollError("Empty dice expression", expression=text)
        return _parse_expression(text.strip())

    def with_extra_dice(self, extra: int) -> DiceSpec:
        """Return a copy with additional dice (negative values are ignored)."""
        return DiceSpec(count=self.count + max(0, extra), sides=self.sides, modifier=self.modifier)

    def doubled(self) -> DiceSpec:
        """Return a copy with the dice count doubled and the modifier unchanged."""
        return DiceSpec(count=self.count * 2, sides=self.sides, modifier=self.modifier)

    def __str__(self) -> str:
        if self.count == 0:
            return str(self.modifier)
        base = f"{self.count}d{self.sides}"
        if self.modifier > 0:
            return f"{base}+{self.modifier}"
        if self.modifier < 0:
            return f"{base}{self.modifier}"
        return base


@lru_cache(maxsize=256)
def _parse_expression(text: str) -> DiceSpec:
    try:
        expression = d20.parse(text)
    except d20.RollError as e:
        raise DiceRollError("Invalid dice expression", expression=text) from e
    return _fold(expression.roll, text)


def _combine(left: DiceSpec, right: DiceSpec, text: str) -> DiceSpec:
    if left.count and right.count and left.sides != right.sides:
        raise DiceRollError("Only one kind of die per expression is supported", expression=text)
    return DiceSpec(
        count=left.count + right.count,
        sides=left.sides or right.sides,
        modifier=left.modifier + right.modifier,
    )


def _fold(node: diceast.Node, text: str) -> DiceSpec:
    """Fold a d20 syntax tree into a single DiceSpec."""
    if isinstance(node, diceast.Parenthetical):
        return _fold(node.value, text)

    if isinstance(node, diceast.Literal):
        if not isinstance(node.value, int):
            raise DiceRollError("Dice modifiers must be whole numbers", expression=text)
        return DiceSpec(count=0, sides=0, modifier=node.value)

    if isinstance(node, diceast.Dice):
        sides = 100 if node.size == "%" else int(node.size)
        if sides < 1:
            raise DiceRollError("Dice must have at least one side", expression=text)
        return DiceSpec(count=int(node.num), sides=sides)

    if isinstance(node, diceast.UnOp) and node.op in ("+", "-"):
        inner = _fold(node.value, text)
        if node.op == "+":
            return inner
        if inner.count:
            raise DiceRollError("Dice cannot be negated", expression=text)
        return DiceSpec(count=0, sides=0, modifier=-inner.modifier)

    if isinstance(node, diceast.BinOp) and node.op in ("+", "-"):
        left = _fold(node.left, text)
        right = _fold(node.right, text)
        if node.op == "-":
            if right.count:
                raise DiceRollError("Dice cannot be subtracted", expression=text)
            right = DiceSpec(count=0, sides=0, modifier=-right.modifier)
        return _combine(left, right, text)

    raise DiceRollError("Unsupported dice expression", expression=text)


def find_dice(text: str) -> DiceSpec | None:
    """Find the first ``NdM`` notation embedded in free text.

    Args:
        text: Text such as ``"1d8 slashing damage (1d10 two-handed)"``.

    Returns:
        The first dice found, or None.

    Example:
        >>> find_dice("2d6 slashing damage")
        DiceSpec(count=2, sides=6, modifier=0)
    """
    match = _DICE_IN_TEXT.search(text or "")
    if not match:
        return None
    return DiceSpec(count=int(match.group(1)), sides=int(match.group(2)))


__all__ = [
    "DiceSpec",
    "find_dice",
]
