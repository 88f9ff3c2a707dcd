"""dnd_rules - rules and resolution engine for an AI-narrated tabletop RPG.

The engine owns the mechanical truth of a game: dice, characters,
inventory, combat, spells, checks and leveling. A narrative layer (an
LLM) sends tagged actions and free-text actions with a d20 roll and
receives structured results to narrate. The narrator never rolls dice
or mutates state itself.

Example:
    >>> from dnd_rules import GameSession, create_character, process_turn
    >>>
    >>> session = GameSession(seed=7)
    >>> session.add_character(create_character("Thorin", "Dwarf", "Fighter", level=3))
    >>> outcome = process_turn(session, "Thorin", "I search the room for traps", roll=17)
    >>> outcome.consequences.consequences
    ['Strong success!']

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 data models and static catalogs.
    engine: Resolvers, the game session and the action orchestrator.
"""

from __future__ import annotations

# Core
from dnd_rules.core.config import Settings, get_settings
from dnd_rules.core.exceptions import DndRulesError, RulesError
from dnd_rules.core.logging import configure_logging, get_logger

# Models
from dnd_rules.models.character import Character, create_character
from dnd_rules.models.enums import Ability, ActionType, RestType, SceneType, Skill
from dnd_rules.models.items import Item

# Engine
from dnd_rules.engine.dice import DiceRoller, RollMode
from dnd_rules.engine.orchestrator import (
    Action,
    ActionResult,
    TurnOutcome,
    process_turn,
    resolve_action,
)
from dnd_rules.engine.session import GameSession


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "DndRulesError",
    "RulesError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Ability",
    "ActionType",
    "RestType",
    "SceneType",
    "Skill",
    "Character",
    "create_character",
    "Item",
    # Engine
    "DiceRoller",
    "RollMode",
    "GameSession",
    "Action",
    "ActionResult",
    "TurnOutcome",
    "process_turn",
    "resolve_action",
]
