# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Logger handle bound to a category."""

from typing import Any

from .diagnostics import DiagnosticReporter
from .event import LogEvent
from .levels import Level
from .registry import CategoryRegistry
from .scheduler import DispatchScheduler


class Logger:
    """Lightweight handle emitting events for one category.

    Emission methods check the category threshold, build a LogEvent and hand
    it to the dispatch scheduler. They return without waiting for any appender
    and never raise.
    """

    def __init__(
        self,
        category: str,
        registry: CategoryRegistry,
        scheduler: DispatchScheduler,
        reporter: DiagnosticReporter,
    ):
        self.category = category
        self._registry = registry
        self._scheduler = scheduler
        self._reporter = reporter

    def __repr__(self) -> str:
        return f"Logger(category={self.category!r})"

    @property
    def level(self) -> Level:
        """Effective threshold of this logger's category."""
        return self._registry.resolve_level(self.category)

    def set_level(self, level: Level | str | None) -> None:
        """Set the threshold of this logger's category (None to inherit)."""
        self._registry.set_level(self.category, level)

    def is_level_enabled(self, level: Level | str) -> bool:
        """Return True if events at ``level`` would be accepted."""
        return Level.parse(level) >= self.level

    def log(self, level: Level | str, message: str, *args: Any, **extra: Any) -> None:
        """Emit an event at the given level.

        Args:
            level: Event severity
            message: Message, optionally with %-style placeholders for ``args``
            *args: Arguments for the placeholders
            **extra: Additional structured data carried on the event
        """
        try:
            parsed = Level.parse(level)
            if parsed in (Level.ALL, Level.OFF) or parsed < self.level:
                return
            event = LogEvent(
                category=self.category,
                level=parsed,
                message=message,
                args=args,
                extra=extra,
            )
            self._scheduler.dispatch(event, self._registry.resolve(self.category))
        except Exception as e:
            self._reporter.report(e, context={"category": self.category, "phase": "emit"})

    def trace(self, message: str, *args: Any, **extra: Any) -> None:
        self.log(Level.TRACE, message, *args, **extra)

    def debug(self, message: str, *args: Any, **extra: Any) -> None:
        self.log(Level.DEBUG, message, *args, **extra)

    def info(self, message: str, *args: Any, **extra: Any) -> None:
        self.log(Level.INFO, message, *args, **extra)

    def warn(self, message: str, *args: Any, **extra: Any) -> None:
        self.log(Level.WARN, message, *args, **extra)

    warning = warn

    def error(self, message: str, *args: Any, **extra: Any) -> None:
        self.log(Level.ERROR, message, *args, **extra)

    def fatal(self, message: str, *args: Any, **extra: Any) -> None:
        self.log(Level.FATAL, message, *args, **extra)
