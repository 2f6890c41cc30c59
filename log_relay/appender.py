# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Abstract appender interface."""

from abc import ABC, abstractmethod

from .event import RenderedEvent
from .exceptions import RenderError
from .layouts import LayoutFunction


class Appender(ABC):
    """Abstract base class for appenders.

    An appender consumes one rendered event per invoke() call and performs a
    side effect with it. Invocations run on the dispatch scheduler's worker
    threads, never on the thread that emitted the event.

    Attributes:
        layout: Optional layout overriding the scheduler-level rendering
    """

    layout: LayoutFunction | None = None

    @abstractmethod
    def invoke(self, rendered: RenderedEvent) -> None:
        """Deliver a rendered event.

        Args:
            rendered: The event and its scheduler-level text
        """
        pass

    def close(self) -> None:
        """Release resources held by the appender."""
        pass

    def render(self, rendered: RenderedEvent) -> str:
        """Return the text this appender should deliver for an event.

        Uses the appender's own layout when set, otherwise the scheduler-level
        text.

        Raises:
            RenderError: If the layout fails or no text is available
        """
        if self.layout is not None:
            try:
                return self.layout(rendered.event)
            except Exception as e:
                raise RenderError(f"Layout failed for category {rendered.event.category}: {e}") from e
        if rendered.text is None:
            raise RenderError(f"No rendered text for category {rendered.event.category}")
        return rendered.text
