# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Layout functions and the layout provider.

A layout is a plain callable mapping a LogEvent to a string. Appenders that
need a configurable layout ask a LayoutProvider to resolve a named type plus
its parameters once, at configuration time, and keep the returned function.

Example:
    >>> from log_relay.layouts import default_layouts
    >>> layout = default_layouts.resolve_layout("pattern", {"pattern": "%p %c %m"})
"""

import json
import re
import threading
from collections.abc import Callable, Mapping
from typing import Any

from .event import LogEvent
from .exceptions import ConfigurationError
from .levels import Level

LayoutFunction = Callable[[LogEvent], str]
LayoutFactory = Callable[[Mapping[str, Any]], LayoutFunction]

_COLORS = {
    Level.TRACE: "\x1b[34m",
    Level.DEBUG: "\x1b[36m",
    Level.INFO: "\x1b[32m",
    Level.WARN: "\x1b[33m",
    Level.ERROR: "\x1b[31m",
    Level.FATAL: "\x1b[35m",
}
_RESET = "\x1b[39m"

_PATTERN_TOKEN = re.compile(r"%(-?\d+)?([dpcmnr%])(\{[^}]*\})?")


def _timestamp(event: LogEvent) -> str:
    return event.timestamp.strftime("%Y-%m-%dT%H:%M:%S.") + f"{event.timestamp.microsecond // 1000:03d}"


def _header(event: LogEvent) -> str:
    return f"[{_timestamp(event)}] [{event.level.name}] {event.category} - "


def _body(event: LogEvent) -> str:
    body = event.formatted_message()
    if event.extra:
        body += " " + json.dumps(event.extra, default=str)
    return body


def basic_layout(event: LogEvent) -> str:
    """Render ``[timestamp] [LEVEL] category - message``."""
    return _header(event) + _body(event)


def colored_layout(event: LogEvent) -> str:
    """Render like basic_layout with the header wrapped in an ANSI color."""
    color = _COLORS.get(event.level)
    if color is None:
        return basic_layout(event)
    return f"{color}{_header(event)}{_RESET}{_body(event)}"


def message_pass_through_layout(event: LogEvent) -> str:
    """Render only the formatted message, unchanged."""
    return event.formatted_message()


def pattern_layout(pattern: str) -> LayoutFunction:
    """Build a layout from a pattern string.

    Supported tokens: %d (timestamp), %p (level), %c (category), %m (message),
    %n (newline), %r (local time hh:mm:ss) and %% (literal percent). A width
    such as %-5p pads the value.

    Args:
        pattern: Pattern string

    Returns:
        Layout function applying the pattern
    """
    def render(event: LogEvent) -> str:
        def replace(match: re.Match) -> str:
            width, token = match.group(1), match.group(2)
            if token == "d":
                value = _timestamp(event)
            elif token == "p":
                value = event.level.name
            elif token == "c":
                value = event.category
            elif token == "m":
                value = event.formatted_message()
            elif token == "n":
                value = "\n"
            elif token == "r":
                value = event.timestamp.astimezone().strftime("%H:%M:%S")
            else:
                value = "%"
            if width:
                size = int(width)
                value = value.ljust(-size) if size < 0 else value.rjust(size)
            return value

        return _PATTERN_TOKEN.sub(replace, pattern)

    return render


def _pattern_factory(params: Mapping[str, Any]) -> LayoutFunction:
    pattern = params.get("pattern")
    if not isinstance(pattern, str) or not pattern:
        raise ConfigurationError("pattern layout requires a non-empty 'pattern' parameter")
    return pattern_layout(pattern)


class LayoutProvider:
    """Resolves layout type names to layout functions.

    Built-in types are registered on construction; custom types can be added
    with register().
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._factories: dict[str, LayoutFactory] = {
            "basic": lambda params: basic_layout,
            "colored": lambda params: colored_layout,
            "coloured": lambda params: colored_layout,
            "messagepassthrough": lambda params: message_pass_through_layout,
            "pattern": _pattern_factory,
        }

    def register(self, type_name: str, factory: LayoutFactory) -> None:
        """Register a factory for a custom layout type.

        Args:
            type_name: Layout type name (case-insensitive)
            factory: Callable receiving the layout parameters and returning
                a layout function
        """
        with self._lock:
            self._factories[type_name.lower()] = factory

    def resolve_layout(self, type_name: str, params: Mapping[str, Any] | None = None) -> LayoutFunction:
        """Resolve a layout type and its parameters to a layout function.

        Args:
            type_name: Layout type name
            params: Type-specific parameters

        Returns:
            Layout function

        Raises:
            ConfigurationError: If the type is unknown or its parameters are invalid
        """
        if not isinstance(type_name, str) or not type_name:
            raise ConfigurationError("layout type is required")
        with self._lock:
            factory = self._factories.get(type_name.lower())
            supported = ", ".join(sorted(self._factories))
        if factory is None:
            raise ConfigurationError(
                f"Unknown layout type: {type_name}. Supported types: {supported}"
            )
        layout = factory(dict(params or {}))
        if not callable(layout):
            raise ConfigurationError(f"Layout factory for {type_name} did not return a callable")
        return layout

    def resolve_options(self, options: Any, owner: str = "appender") -> LayoutFunction:
        """Resolve a ``{"type": ..., **params}`` layout entry from appender options.

        Raises:
            ConfigurationError: If the entry is not a mapping with a ``type``
        """
        if not isinstance(options, Mapping) or not options.get("type"):
            raise ConfigurationError(f"{owner} 'layout' must be a mapping with a 'type'")
        return self.resolve_layout(options["type"], options)


default_layouts = LayoutProvider()
