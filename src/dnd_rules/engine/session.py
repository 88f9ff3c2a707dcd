"""Game session context.

A GameSession owns everything a run of the game shares: the settings,
the single dice roller, the party roster and the turn history. Resolvers
receive it explicitly; there is no module-level game state.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, computed_field

from dnd_rules.core.config import GameSettings, LootSettings, get_settings
from dnd_rules.core.exceptions import SessionError
from dnd_rules.core.logging import get_logger
from dnd_rules.engine.dice import DiceRoller
from dnd_rules.models.character import Character
from dnd_rules.models.enums import ActionType, SceneType


logger = get_logger(__name__)


class TurnRecord(BaseModel):
    """Structured summary of one processed turn.

    Attributes:
        turn_index: Session turn the record belongs to.
        character: Name of the acting character.
        action_type: Tagged action resolved, if any.
        success: Whether the action succeeded (True for narrative-only turns).
        message: Action narration.
        roll: The narrative d20 roll.
        scene_type: Scene classification of the turn.
        items_gained: Names of items added to the inventory.
        leveled_up: Whether the character gained a level.
        timestamp: When the turn was processed.
    """

    model_config = ConfigDict(frozen=True)

    turn_index: int = Field(ge=0)
    character: str
    action_type: ActionType | None = None
    success: bool = True
    message: str = ""
    roll: int
    scene_type: SceneType
    items_gained: tuple[str, ...] = ()
    leveled_up: bool = False
    timestamp: datetime = Field(default_factory=datetime.now)


class GameSession(BaseModel):
    """State shared by every resolver during one game.

    Attributes:
        session_id: Session identifier.
        settings: Rules settings.
        loot: Loot and consequence probabilities.
        characters: Party roster keyed by character name.
        turn_index: Number of completed turns.
        history: One record per processed turn.

    Example:
        >>> session = GameSession(seed=7)
        >>> session.add_character(create_character("Aria", "Elf", "Fighter"))
        >>> session.dice.roll("1d20").total  # doctest: +SKIP
        12
    """

    model_config = ConfigDict(validate_assignment=True)

    session_id: str = Field(default_factory=lambda: uuid4().hex)
    settings: GameSettings = Field(default_factory=lambda: get_settings().game)
    loot: LootSettings = Field(default_factory=lambda: get_settings().loot)
    characters: dict[str, Character] = Field(default_factory=dict)
    turn_index: int = Field(default=0, ge=0)
    history: list[TurnRecord] = Field(default_factory=list)

    _dice: DiceRoller = PrivateAttr()

    def __init__(self, *, dice: DiceRoller | None = None, seed: int | None = None, **data: Any) -> None:
        """Create a session.

        Args:
            dice: Dice roller to share; a new one is created when omitted.
            seed: Seed for the new roller, overriding ``settings.rng_seed``.
            **data: Model fields.
        """
        super().__init__(**data)
        if dice is None:
            dice = DiceRoller(seed=seed if seed is not None else self.settings.rng_seed)
        self._dice = dice
        logger.info("Session created", session_id=self.session_id)

    @property
    def dice(self) -> DiceRoller:
        """The single dice roller of this session."""
        return self._dice

    @computed_field(description="Number of characters in the party")
    @property
    def party_size(self) -> int:
        return len(self.characters)

    def add_character(self, character: Character) -> Character:
        """Add a character to the roster.

        Raises:
            SessionError: If the party is full or the name is taken.
        """
        if character.name in self.characters:
            raise SessionError(
                f"A character named {character.name} is already in the session.",
                session_id=self.session_id,
            )
        if len(self.characters) >= self.settings.max_party_size:
            raise SessionError(
                f"The party is full ({self.settings.max_party_size} characters).",
                session_id=self.session_id,
            )
        self.characters[character.name] = character
        logger.info("Character joined", session_id=self.session_id, character=character.name)
        return character

    def get_character(self, name: str) -> Character:
        """Look up a character by name.

        Raises:
            SessionError: If no such character is in the session.
        """
        character = self.characters.get(name)
        if character is None:
            raise SessionError(f"No character named {name} in the session.", session_id=self.session_id)
        return character

    def active_character(self, turn: int | None = None) -> Character:
        """Character whose turn it is, rotating through the roster in join order.

        Raises:
            SessionError: If the roster is empty.
        """
        if not self.characters:
            raise SessionError("The session has no characters.", session_id=self.session_id)
        index = self.turn_index if turn is None else turn
        names = list(self.characters)
        return self.characters[names[index % len(names)]]

    def record_turn(self, record: TurnRecord) -> None:
        self.history.append(record)

    def next_turn(self) -> int:
        """Advance to the next turn. Returns the new turn index."""
        self.turn_index += 1
        return self.turn_index


__all__ = [
    "TurnRecord",
    "GameSession",
]
