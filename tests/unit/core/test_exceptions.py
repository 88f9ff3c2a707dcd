"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from dnd_rules.core.exceptions import (
    ConfigurationError,
    DiceRollError,
    DndRulesError,
    InsufficientSlotsError,
    InvalidTargetError,
    NotFoundError,
    PreconditionFailedError,
    RulesError,
    SessionError,
)


class TestDndRulesError:
    """Tests for the base DndRulesError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = DndRulesError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = DndRulesError("Test error", details={"key": "value", "count": 42})
        assert exc.details == {"key": "value", "count": 42}
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        repr_str = repr(DndRulesError("Test", details={"x": 1}))
        assert "DndRulesError" in repr_str
        assert "Test" in repr_str


class TestRulesExceptions:
    """Tests for recoverable rules failures."""

    def test_not_found_context(self) -> None:
        """Test NotFoundError records what was looked up."""
        exc = NotFoundError("Spell wish not found.", kind="spell", identifier="wish", character="Merlin")
        assert exc.message == "Spell wish not found."
        assert exc.details == {"kind": "spell", "identifier": "wish", "character": "Merlin"}

    def test_precondition_reason(self) -> None:
        """Test PreconditionFailedError carries a reason code."""
        exc = PreconditionFailedError("Too heavy", reason="carrying_capacity")
        assert exc.details["reason"] == "carrying_capacity"

    def test_insufficient_slots(self) -> None:
        """Test InsufficientSlotsError reason and slot level."""
        exc = InsufficientSlotsError("No level 3 spell slots remaining.", slot_level=3)
        assert exc.details["reason"] == "insufficient_slots"
        assert exc.details["slot_level"] == 3
        assert isinstance(exc, PreconditionFailedError)

    @pytest.mark.parametrize(
        "exc_class",
        [NotFoundError, PreconditionFailedError, InsufficientSlotsError, InvalidTargetError],
    )
    def test_inheritance(self, exc_class: type[RulesError]) -> None:
        """Test that rules failures share one catchable base."""
        exc = exc_class("Error")
        assert isinstance(exc, RulesError)
        assert isinstance(exc, DndRulesError)


class TestOtherExceptions:
    """Tests for configuration, dice and session exceptions."""

    def test_configuration_key(self) -> None:
        """Test ConfigurationError with config key."""
        exc = ConfigurationError("Bad value", config_key="attunement_limit")
        assert exc.details["config_key"] == "attunement_limit"

    def test_dice_expression(self) -> None:
        """Test DiceRollError keeps the expression."""
        exc = DiceRollError("Invalid dice expression", expression="2x6")
        assert exc.details["expression"] == "2x6"

    def test_session_errors_are_not_rules_errors(self) -> None:
        """Test that roster violations propagate past the orchestrator."""
        exc = SessionError("Party is full", session_id="abc")
        assert exc.details["session_id"] == "abc"
        assert not isinstance(exc, RulesError)
