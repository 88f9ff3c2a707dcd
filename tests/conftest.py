"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the dnd_rules test suite.
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from typing import TYPE_CHECKING

import pytest

from dnd_rules.engine.dice import DiceRoller
from dnd_rules.engine.session import GameSession
from dnd_rules.models.character import Character, create_character


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Random Sources
# =============================================================================


class ScriptedRandom(random.Random):
    """A random source that returns scripted values first.

    ``randint`` pops from ``ints`` and ``random`` pops from ``floats``;
    once a script runs out the seeded generator takes over.
    """

    def __init__(self, *, ints: Iterable[int] = (), floats: Iterable[float] = (), seed: int = 0) -> None:
        super().__init__(seed)
        self.ints = list(ints)
        self.floats = list(floats)

    def randint(self, a: int, b: int) -> int:
        if self.ints:
            value = self.ints.pop(0)
            if not a <= value <= b:
                raise AssertionError(f"scripted value {value} outside [{a}, {b}]")
            return value
        return super().randint(a, b)

    def random(self) -> float:
        if self.floats:
            return self.floats.pop(0)
        return super().random()


def scripted_dice(*ints: int, floats: Iterable[float] = ()) -> DiceRoller:
    """Build a DiceRoller whose dice come out in the given order."""
    return DiceRoller(ScriptedRandom(ints=ints, floats=floats))


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from dnd_rules.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "DND_RULES_DEBUG": "true",
        "DND_RULES_LOG_LEVEL": "DEBUG",
        "DND_RULES_GAME_RNG_SEED": "42",
        "DND_RULES_GAME_ATTUNEMENT_LIMIT": "2",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Dice Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> DiceRoller:
    """Provide a seeded DiceRoller."""
    return DiceRoller(seed=1234)


# =============================================================================
# Character Fixtures
# =============================================================================


@pytest.fixture
def fighter() -> Character:
    """Level 4 fighter with STR 16 wearing chain mail and a shield (AC 18)."""
    return create_character(
        "Aria",
        "Human",
        "Fighter",
        level=4,
        ability_scores={"STR": 16, "DEX": 12, "CON": 14, "INT": 10, "WIS": 10, "CHA": 10},
    )


@pytest.fixture
def wizard() -> Character:
    """Level 5 wizard with INT 18."""
    return create_character(
        "Merlin",
        "Human",
        "Wizard",
        level=5,
        ability_scores={"STR": 8, "DEX": 14, "CON": 12, "INT": 18, "WIS": 12, "CHA": 10},
    )


@pytest.fixture
def rogue() -> Character:
    """Level 3 halfling rogue with DEX 16."""
    return create_character(
        "Pip",
        "Halfling",
        "Rogue",
        level=3,
        ability_scores={"STR": 10, "DEX": 16, "CON": 12, "INT": 12, "WIS": 10, "CHA": 14},
    )


@pytest.fixture
def goblin() -> Character:
    """A plain target with DEX 14 (+2) and no armor (AC 12)."""
    target = create_character(
        "Goblin",
        "Goblin",
        "Commoner",
        ability_scores={"STR": 8, "DEX": 14, "CON": 10, "INT": 10, "WIS": 8, "CHA": 8},
    )
    target.inventory.clear()
    target.refresh_armor_class()
    return target


# =============================================================================
# Session Fixtures
# =============================================================================


@pytest.fixture
def session(fighter: Character, goblin: Character) -> GameSession:
    """A seeded session with the fighter and the goblin."""
    game = GameSession(seed=99)
    game.add_character(fighter)
    game.add_character(goblin)
    return game
