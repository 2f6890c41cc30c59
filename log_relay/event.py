# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Log event data model."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .levels import Level


@dataclass(frozen=True)
class LogEvent:
    """A single emission from a logger.

    Attributes:
        category: Name of the category that emitted the event
        level: Severity of the event
        message: Message text, optionally containing %-style placeholders
        args: Positional arguments applied to ``message`` when formatting
        extra: Structured keyword data passed to the emission call
        timestamp: UTC time of the emission
    """
    category: str
    level: Level
    message: str
    args: tuple[Any, ...] = ()
    extra: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def formatted_message(self) -> str:
        """Return the message with ``args`` applied.

        Raises:
            TypeError: If the placeholders do not match ``args``
        """
        message = str(self.message)
        if self.args:
            return message % self.args
        return message


@dataclass(frozen=True)
class RenderedEvent:
    """An event paired with the scheduler-level rendering.

    ``text`` is None when the scheduler layout failed; appenders with their
    own layout render from ``event`` instead.
    """
    event: LogEvent
    text: str | None
