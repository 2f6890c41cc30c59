# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Exception types raised by log-relay."""


class LogRelayError(Exception):
    """Base class for log-relay errors."""


class ConfigurationError(LogRelayError, ValueError):
    """Raised when an appender, layout or category is configured incorrectly.

    Surfaced to whoever builds the configuration; never raised from an
    emission call.
    """


class DeliveryError(LogRelayError):
    """Raised by a transport when a single outbound call fails."""

    def __init__(self, message: str, payload: dict | None = None, response: object = None):
        super().__init__(message)
        self.payload = payload
        self.response = response


class RenderError(LogRelayError):
    """Raised when a layout function fails to format an event."""
