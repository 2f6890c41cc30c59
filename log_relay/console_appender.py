# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Console appender implementation."""

import sys
import threading
from collections.abc import Mapping
from typing import Any, TextIO

from .appender import Appender
from .event import RenderedEvent
from .layouts import LayoutFunction, LayoutProvider, default_layouts


class ConsoleAppender(Appender):
    """Appender that writes each rendered event as a line to a stream."""

    def __init__(self, stream: TextIO | None = None, layout: LayoutFunction | None = None):
        """Initialize console appender.

        Args:
            stream: Output stream (defaults to sys.stdout at write time)
            layout: Optional layout overriding the scheduler-level rendering
        """
        self.stream = stream
        self.layout = layout
        self._lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        options: Mapping[str, Any],
        layouts: LayoutProvider = default_layouts,
    ) -> "ConsoleAppender":
        """Create a ConsoleAppender from configuration options.

        Args:
            options: Mapping with an optional ``layout`` entry
            layouts: Provider used to resolve the layout

        Returns:
            ConsoleAppender instance

        Raises:
            ConfigurationError: If the layout entry is malformed
        """
        layout = None
        if options.get("layout") is not None:
            layout = layouts.resolve_options(options["layout"], owner="console appender")
        return cls(layout=layout)

    def invoke(self, rendered: RenderedEvent) -> None:
        text = self.render(rendered)
        stream = self.stream or sys.stdout
        with self._lock:
            stream.write(text + "\n")
            stream.flush()
