"""Per-character resource counters: spell slots and limited-use abilities.

These are the only mutable counters attached to otherwise static
reference data. Each character owns its own copies.
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dnd_rules.models.enums import RechargeType


class SpellSlot(BaseModel):
    """Spell slots of one level.

    Attributes:
        level: Spell slot level (1-9).
        total: Number of slots of this level.
        used: Number of slots expended.
    """

    model_config = ConfigDict(validate_assignment=True)

    level: int = Field(ge=1, le=9)
    total: int = Field(ge=0)
    used: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_used_within_total(self) -> Self:
        if self.used > self.total:
            raise ValueError(f"used ({self.used}) cannot exceed total ({self.total})")
        return self

    @property
    def remaining(self) -> int:
        """Slots still available."""
        return self.total - self.used

    def expend(self) -> bool:
        """Use one slot. Returns success."""
        if self.remaining <= 0:
            return False
        self.used += 1
        return True

    def restore(self) -> int:
        """Restore every expended slot. Returns how many were restored."""
        restored = self.used
        self.used = 0
        return restored


class AbilityUses(BaseModel):
    """Usage counter for a limited-use class ability.

    Attributes:
        max: Maximum uses.
        current: Uses remaining.
        recharge: When uses are restored.
    """

    model_config = ConfigDict(validate_assignment=True)

    max: int = Field(ge=0)
    current: int = Field(ge=0)
    recharge: RechargeType = RechargeType.LONG_REST

    @model_validator(mode="after")
    def check_current_within_max(self) -> Self:
        if self.current > self.max:
            raise ValueError(f"current ({self.current}) cannot exceed max ({self.max})")
        return self

    def use(self) -> bool:
        """Spend one use. Returns success."""
        if self.current <= 0:
            return False
        self.current -= 1
        return True

    def restore(self) -> None:
        """Restore all uses."""
        self.current = self.max

    @property
    def uses_display(self) -> str:
        """Display string such as ``1/1``."""
        return f"{self.current}/{self.max}"


__all__ = [
    "SpellSlot",
    "AbilityUses",
]
