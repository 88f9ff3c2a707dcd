"""Configuration management for the dnd_rules resolution engine.

This module provides centralized configuration management using pydantic-settings,
supporting environment variables, .env files, and runtime configuration overrides.
Game tunables (attunement limit, leveling cadence, loot and consequence
probabilities) live here so sessions and tests can override them without
touching the rules code.

Example:
    >>> from dnd_rules.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.game.attunement_limit
    3

Environment Variables:
    DND_RULES_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    DND_RULES_JSON_LOGS: Emit JSON logs instead of console output
    DND_RULES_GAME_RNG_SEED: Seed for the per-session random source
    DND_RULES_GAME_ENFORCE_SPELL_SLOTS: Check and consume spell slots
    DND_RULES_LOOT_EXCEPTIONAL_LOOT_CHANCE: Bonus loot chance on 18-20 rolls
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dnd_rules.core.constants import (
    ATTUNEMENT_LIMIT,
    CARRY_FACTOR_KG,
    DEFAULT_SPELL_TARGET_AC,
    MAX_PARTY_SIZE,
    MAX_SCOPE_LEVEL,
    TURNS_PER_LEVEL,
)
from dnd_rules.core.exceptions import ConfigurationError


class GameSettings(BaseSettings):
    """Configuration for rules engine behavior.

    Attributes:
        rng_seed: Seed for the session random source (None for entropy).
        default_spell_target_ac: AC assumed for spell attacks without a defender AC.
        attunement_limit: Maximum number of attuned items per character.
        max_level: Level cap for automatic leveling.
        turns_per_level: Completed turns per automatic level.
        carry_factor_kg: Carrying capacity in kilograms per point of Strength.
        max_party_size: Maximum number of characters in a session.
        enforce_spell_slots: Check and consume spell slots when casting.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_RULES_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    rng_seed: int | None = Field(
        default=None,
        description="Seed for the session random source",
    )
    default_spell_target_ac: int = Field(
        default=DEFAULT_SPELL_TARGET_AC,
        ge=1,
        le=30,
        description="AC assumed for spell attacks without a defender",
    )
    attunement_limit: int = Field(
        default=ATTUNEMENT_LIMIT,
        ge=0,
        le=10,
        description="Maximum attuned items per character",
    )
    max_level: int = Field(
        default=MAX_SCOPE_LEVEL,
        ge=1,
        le=20,
        description="Level cap for automatic leveling",
    )
    turns_per_level: int = Field(
        default=TURNS_PER_LEVEL,
        ge=1,
        description="Completed turns per automatic level",
    )
    carry_factor_kg: float = Field(
        default=CARRY_FACTOR_KG,
        gt=0,
        description="Carrying capacity per point of Strength (kg)",
    )
    max_party_size: int = Field(
        default=MAX_PARTY_SIZE,
        ge=1,
        le=8,
        description="Maximum characters per session",
    )
    enforce_spell_slots: bool = Field(
        default=True,
        description="Check and consume spell slots when casting",
    )


class LootSettings(BaseSettings):
    """Probabilities for roll consequences and scene loot.

    Attributes:
        exceptional_loot_chance: Bonus loot chance on an exceptional success.
        exceptional_heal_chance: Healing chance on an exceptional success.
        minor_failure_damage_chance: Damage chance on a minor failure.
        critical_failure_item_loss_chance: Item loss chance on a critical failure.
        combat_rare_chance: Roll threshold for rare combat loot.
        combat_uncommon_chance: Roll threshold for uncommon combat loot.
        combat_rare_min_level: Minimum level for rare combat loot.
        combat_uncommon_min_level: Minimum level for uncommon combat loot.
        exploration_find_chance: Chance of a utility item while exploring.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_RULES_LOOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    exceptional_loot_chance: float = Field(default=0.4, ge=0, le=1)
    exceptional_heal_chance: float = Field(default=0.3, ge=0, le=1)
    minor_failure_damage_chance: float = Field(default=0.3, ge=0, le=1)
    critical_failure_item_loss_chance: float = Field(default=0.2, ge=0, le=1)
    combat_rare_chance: float = Field(default=0.05, ge=0, le=1)
    combat_uncommon_chance: float = Field(default=0.2, ge=0, le=1)
    combat_rare_min_level: int = Field(default=5, ge=1, le=20)
    combat_uncommon_min_level: int = Field(default=3, ge=1, le=20)
    exploration_find_chance: float = Field(default=0.3, ge=0, le=1)

    @model_validator(mode="after")
    def validate_combat_thresholds(self) -> "LootSettings":
        """Ensure the rare threshold does not exceed the uncommon threshold.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If combat_rare_chance > combat_uncommon_chance.
        """
        if self.combat_rare_chance > self.combat_uncommon_chance:
            raise ConfigurationError(
                f"combat_rare_chance ({self.combat_rare_chance}) must not exceed "
                f"combat_uncommon_chance ({self.combat_uncommon_chance})",
                config_key="combat_rare_chance",
            )
        return self


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        json_logs: Emit JSON logs.
        game: Rules engine settings.
        loot: Loot and consequence probabilities.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="dnd_rules",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit JSON logs",
    )

    game: GameSettings = Field(default_factory=GameSettings)
    loot: LootSettings = Field(default_factory=LootSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode.

        Returns:
            True if not in debug mode.
        """
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.

    Example:
        >>> settings = get_settings()
        >>> settings.game.max_level
        10
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Example:
        >>> clear_settings_cache()
        >>> settings = get_settings()  # Reloads from environment
    """
    get_settings.cache_clear()


__all__ = [
    "GameSettings",
    "LootSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
