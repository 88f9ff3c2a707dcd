"""Custom exception hierarchy for the dnd_rules resolution engine.

This module defines the exception hierarchy used across the rules engine.
All exceptions inherit from DndRulesError, enabling unified error handling
at the orchestration boundary while preserving domain-specific context.

Rules failures (unknown ids, unmet preconditions, missing targets) are
recoverable: resolvers raise them, and the action orchestrator converts
them into ``success=False`` results so a session can always continue
with the next turn.

Example:
    >>> from dnd_rules.core.exceptions import NotFoundError
    >>> raise NotFoundError("Spell not found", kind="spell", identifier="wish")
"""

from __future__ import annotations

from typing import Any


class DndRulesError(Exception):
    """Base exception for all rules engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception.

        Returns:
            String representation suitable for debugging.
        """
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(DndRulesError):
    """Raised when there is a configuration error.

    This includes missing required settings, invalid setting values,
    or inconsistent probability tables.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class DiceRollError(DndRulesError):
    """Raised when a dice expression is malformed or a die size is invalid."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that failed.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression is not None:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


# =============================================================================
# Rules Domain Exceptions
# =============================================================================


class RulesError(DndRulesError):
    """Base exception for recoverable rules failures.

    A RulesError never ends a session. The orchestrator reports
    ``error.message`` back to the caller and leaves state untouched.
    """

    def __init__(
        self,
        message: str,
        *,
        character: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize rules error with character context.

        Args:
            message: Human-readable error description.
            character: Name of the character the failure concerns.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if character:
            combined_details["character"] = character
        super().__init__(message, details=combined_details)


class NotFoundError(RulesError):
    """Raised for an unknown spell, class ability, item, template or condition."""

    def __init__(
        self,
        message: str,
        *,
        kind: str | None = None,
        identifier: str | None = None,
        character: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize not-found error with lookup context.

        Args:
            message: Human-readable error description.
            kind: What was looked up (spell, ability, item, template, condition).
            identifier: The id that was not found.
            character: Name of the character the lookup concerned.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if kind:
            combined_details["kind"] = kind
        if identifier is not None:
            combined_details["identifier"] = identifier
        super().__init__(message, character=character, details=combined_details)


class PreconditionFailedError(RulesError):
    """Raised when an operation's preconditions are not met.

    Covers insufficient level, exhausted uses, carrying capacity,
    the attunement limit and items that cannot be used that way.
    """

    def __init__(
        self,
        message: str,
        *,
        reason: str | None = None,
        character: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize precondition error with a machine-readable reason.

        Args:
            message: Human-readable error description.
            reason: Short reason code (e.g., 'attunement_limit').
            character: Name of the character the failure concerns.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if reason:
            combined_details["reason"] = reason
        super().__init__(message, character=character, details=combined_details)


class InsufficientSlotsError(PreconditionFailedError):
    """Raised when no spell slot of the requested level remains."""

    def __init__(
        self,
        message: str,
        *,
        slot_level: int | None = None,
        character: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize insufficient slots error with slot context.

        Args:
            message: Human-readable error description.
            slot_level: The spell slot level that was requested.
            character: Name of the caster.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if slot_level is not None:
            combined_details["slot_level"] = slot_level
        super().__init__(
            message,
            reason="insufficient_slots",
            character=character,
            details=combined_details,
        )


class InvalidTargetError(RulesError):
    """Raised when an action needs a target or parameter that was not supplied."""


# =============================================================================
# Session Exceptions
# =============================================================================


class SessionError(DndRulesError):
    """Raised for roster violations in a game session.

    This includes duplicate character names, a full party, or a
    lookup of a character that is not part of the session.
    """

    def __init__(
        self,
        message: str,
        *,
        session_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize session error with session context.

        Args:
            message: Human-readable error description.
            session_id: Identifier of the session.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if session_id:
            combined_details["session_id"] = session_id
        super().__init__(message, details=combined_details)


__all__ = [
    "DndRulesError",
    "ConfigurationError",
    "DiceRollError",
    "RulesError",
    "NotFoundError",
    "PreconditionFailedError",
    "InsufficientSlotsError",
    "InvalidTargetError",
    "SessionError",
]
