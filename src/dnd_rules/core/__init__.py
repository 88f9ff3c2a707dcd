"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        DndRulesError: Base exception for all engine errors.
        NotFoundError, PreconditionFailedError, InsufficientSlotsError,
        InvalidTargetError: Recoverable rules failures.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        configure_logging_from_settings: Set up logging from Settings.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from dnd_rules.core.config import (
    GameSettings,
    LootSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
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
from dnd_rules.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)


__all__ = [
    # Exceptions
    "DndRulesError",
    "ConfigurationError",
    "DiceRollError",
    "RulesError",
    "NotFoundError",
    "PreconditionFailedError",
    "InsufficientSlotsError",
    "InvalidTargetError",
    "SessionError",
    # Configuration
    "GameSettings",
    "LootSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
]
