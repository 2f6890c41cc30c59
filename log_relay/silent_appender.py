# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Silent appender implementation for testing."""

import threading
from collections.abc import Mapping
from typing import Any

from .appender import Appender
from .event import LogEvent, RenderedEvent
from .layouts import LayoutFunction


class SilentAppender(Appender):
    """Appender that stores delivered events in memory without output.

    Useful for testing routing and ordering without side effects.
    """

    def __init__(self, layout: LayoutFunction | None = None):
        self.layout = layout
        self.records: list[dict[str, Any]] = []
        self.closed = False
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, options: Mapping[str, Any]) -> "SilentAppender":
        """Create SilentAppender from configuration options (ignored)."""
        return cls()

    def invoke(self, rendered: RenderedEvent) -> None:
        text = self.render(rendered)
        with self._lock:
            self.records.append({"event": rendered.event, "text": text})

    def close(self) -> None:
        self.closed = True

    @property
    def texts(self) -> list[str]:
        """Delivered texts in delivery order."""
        with self._lock:
            return [record["text"] for record in self.records]

    @property
    def events(self) -> list[LogEvent]:
        """Delivered events in delivery order."""
        with self._lock:
            return [record["event"] for record in self.records]

    def clear(self) -> None:
        """Clear all stored records."""
        with self._lock:
            self.records.clear()
