# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Log levels."""

import sys
from enum import IntEnum

from .exceptions import ConfigurationError

_ALIASES = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
}


class Level(IntEnum):
    """Ordered severity levels.

    ALL and OFF are only meaningful as category thresholds.
    """

    ALL = 0
    TRACE = 5000
    DEBUG = 10000
    INFO = 20000
    WARN = 30000
    ERROR = 40000
    FATAL = 50000
    OFF = sys.maxsize

    @classmethod
    def parse(cls, value: "Level | int | str") -> "Level":
        """Convert a level name or number into a Level.

        Args:
            value: Level instance, integer value, or case-insensitive name

        Returns:
            Matching Level

        Raises:
            ConfigurationError: If the value does not name a level
        """
        if isinstance(value, Level):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        elif isinstance(value, str):
            name = value.strip().upper()
            name = _ALIASES.get(name, name)
            if name in cls.__members__:
                return cls[name]
        raise ConfigurationError(
            f"Invalid log level: {value!r}. Must be one of {list(cls.__members__)}"
        )
