# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Diagnostic side-channel for failures inside appenders and layouts.

Nothing raised by an appender reaches the code that emitted the event.
Instead it becomes a Diagnostic: a record of what failed, in which category
and appender, and for delivery failures the exact payload that was lost.
Reporters decide where those records go.
"""

import json
import logging
import traceback
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger("log_relay.diagnostics")

_LEVEL_MAP = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


@dataclass(frozen=True)
class Diagnostic:
    """One entry on the diagnostic side-channel.

    Attributes:
        message: Human-readable description
        level: Severity name (debug, info, warning, error, critical)
        context: Where it happened (category, appender, channel, ...)
        error: The exception, for failures
        payload: Outbound message that could not be delivered, if any
        response: Transport acknowledgment that rejected the payload, if any
    """
    message: str
    level: str = "error"
    context: dict[str, Any] = field(default_factory=dict)
    error: Exception | None = None
    payload: dict[str, Any] | None = None
    response: Any = None

    @classmethod
    def from_error(cls, error: Exception, context: dict[str, Any] | None = None) -> "Diagnostic":
        """Build a diagnostic for a failure.

        A ``payload`` entry in the context, or the ``payload``/``response``
        carried by a DeliveryError, is lifted into its own field.
        """
        context = dict(context or {})
        payload = context.pop("payload", None)
        if payload is None:
            payload = getattr(error, "payload", None)
        return cls(
            message=str(error),
            level="error",
            context=context,
            error=error,
            payload=payload,
            response=getattr(error, "response", None),
        )

    @property
    def error_type(self) -> str | None:
        return type(self.error).__name__ if self.error is not None else None


class DiagnosticReporter(ABC):
    """Abstract base class for diagnostic reporters.

    Subclasses implement record(); report() and capture_message() build the
    Diagnostic passed to it.
    """

    @abstractmethod
    def record(self, diagnostic: Diagnostic) -> None:
        """Handle one diagnostic."""
        pass

    def report(self, error: Exception, context: dict[str, Any] | None = None) -> None:
        """Report an exception with optional context.

        Args:
            error: The exception to report
            context: Optional dictionary with additional context
        """
        self.record(Diagnostic.from_error(error, context))

    def capture_message(
        self,
        message: str,
        level: str = "error",
        context: dict[str, Any] | None = None
    ) -> None:
        """Capture a message without an exception.

        Args:
            message: The message to capture
            level: Severity level (debug, info, warning, error, critical)
            context: Optional dictionary with additional context
        """
        self.record(Diagnostic(message=message, level=level.lower(), context=dict(context or {})))


class ConsoleDiagnosticReporter(DiagnosticReporter):
    """Writes diagnostics through the standard library logging system.

    The Diagnostic itself is attached to each log record as ``diagnostic`` so
    handlers can forward the structured fields.
    """

    def __init__(self, logger_name: str | None = None):
        """Initialize console diagnostic reporter.

        Args:
            logger_name: Optional logger name to use (defaults to log_relay.diagnostics)
        """
        self.logger = logging.getLogger(logger_name) if logger_name else logger

    def record(self, diagnostic: Diagnostic) -> None:
        line = diagnostic.message
        if diagnostic.error_type:
            line = f"{diagnostic.error_type}: {line}"
        if diagnostic.context:
            line += " | Context: " + ", ".join(f"{k}={v}" for k, v in diagnostic.context.items())
        if diagnostic.payload is not None:
            line += f" | Payload: {json.dumps(diagnostic.payload, default=str, ensure_ascii=False)}"

        level = _LEVEL_MAP.get(diagnostic.level, logging.ERROR)
        self.logger.log(level, line, extra={"diagnostic": diagnostic})

        error = diagnostic.error
        if error is not None and error.__traceback__ is not None:
            stack_trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
            self.logger.debug(f"Stack trace:\n{stack_trace}")


class SilentDiagnosticReporter(DiagnosticReporter):
    """Keeps diagnostics in memory for tests."""

    def __init__(self):
        self.diagnostics: list[Diagnostic] = []

    def record(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def get_errors(self, error_type: str | None = None) -> list[Diagnostic]:
        """Get reported failures, optionally filtered by exception type name."""
        return [
            d for d in self.diagnostics
            if d.error is not None and (error_type is None or d.error_type == error_type)
        ]

    def get_messages(self, level: str | None = None) -> list[Diagnostic]:
        """Get captured messages, optionally filtered by level."""
        return [
            d for d in self.diagnostics
            if d.error is None and (level is None or d.level == level)
        ]

    def lost_payloads(self) -> list[dict[str, Any]]:
        """Payloads of every failed delivery, in report order."""
        return [d.payload for d in self.diagnostics if d.payload is not None]

    def has_errors(self) -> bool:
        return any(d.error is not None for d in self.diagnostics)

    def clear(self) -> None:
        self.diagnostics.clear()
