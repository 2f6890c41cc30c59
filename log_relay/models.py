# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Configuration data models for appenders and categories."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .exceptions import ConfigurationError
from .levels import Level


@dataclass
class AppenderConfig:
    """Configuration for one named appender.

    Attributes:
        name: Name the appender is referenced by in category configuration
        appender_type: Appender type discriminant (e.g. "console", "slack")
        options: Type-specific options, passed unchanged to the appender builder
    """
    name: str
    appender_type: str
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, name: str, raw: Mapping[str, Any]) -> "AppenderConfig":
        """Build an AppenderConfig from a raw ``{"type": ..., **options}`` mapping.

        Raises:
            ConfigurationError: If the mapping has no ``type``
        """
        if not isinstance(raw, Mapping):
            raise ConfigurationError(f"Appender '{name}' configuration must be a mapping")
        appender_type = raw.get("type")
        if not isinstance(appender_type, str) or not appender_type:
            raise ConfigurationError(f"Appender '{name}' is missing a 'type'")
        options = {k: v for k, v in raw.items() if k != "type"}
        return cls(name=name, appender_type=appender_type, options=options)


@dataclass
class CategoryConfig:
    """Configuration for one category.

    Attributes:
        name: Category name ("default" configures the registry-wide defaults)
        appenders: Names of appenders attached to the category, in order
        level: Threshold, or None to inherit
    """
    name: str
    appenders: list[str] = field(default_factory=list)
    level: Level | None = None

    @classmethod
    def from_mapping(cls, name: str, raw: Mapping[str, Any]) -> "CategoryConfig":
        """Build a CategoryConfig from ``{"appenders": [...], "level": ...}``.

        The level is parsed here so an invalid one is rejected before any
        registry state changes.

        Raises:
            ConfigurationError: If the mapping is malformed or the level unknown
        """
        if not isinstance(raw, Mapping):
            raise ConfigurationError(f"Category '{name}' configuration must be a mapping")
        appenders = raw.get("appenders", [])
        if not isinstance(appenders, (list, tuple)) or not all(isinstance(a, str) for a in appenders):
            raise ConfigurationError(f"Category '{name}' appenders must be a list of names")
        level = raw.get("level")
        if level is not None:
            try:
                level = Level.parse(level)
            except ConfigurationError as e:
                raise ConfigurationError(f"Category '{name}': {e}") from e
        return cls(name=name, appenders=list(appenders), level=level)
