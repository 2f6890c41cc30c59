# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""log-relay: category-routed logging with pluggable appenders.

Loggers are bound to hierarchical categories. Each accepted event is rendered
through a layout and handed, asynchronously, to the appenders attached to its
category, one of which posts messages to Slack.

Example:
    >>> import log_relay
    >>> log_relay.configure({
    ...     "appenders": {
    ...         "out": {"type": "console"},
    ...         "alerts": {
    ...             "type": "slack",
    ...             "token": "xoxb-...",
    ...             "channel_id": "#alerts",
    ...             "username": "payments",
    ...         },
    ...     },
    ...     "categories": {
    ...         "default": {"appenders": ["out"], "level": "info"},
    ...         "payments": {"appenders": ["out", "alerts"], "level": "warn"},
    ...     },
    ... })
    >>> log_relay.get_logger("payments.refunds").error("Refund %s failed", "r-42")
"""

__version__ = "0.1.0"

from .appender import Appender
from .console_appender import ConsoleAppender
from .diagnostics import ConsoleDiagnosticReporter, Diagnostic, DiagnosticReporter, SilentDiagnosticReporter
from .event import LogEvent, RenderedEvent
from .exceptions import ConfigurationError, DeliveryError, LogRelayError, RenderError
from .factory import (
    add_appender,
    clear_appenders,
    configure,
    create_appender,
    flush,
    get_logger,
    get_registry,
    set_diagnostic_reporter,
    shutdown,
)
from .layouts import (
    LayoutFunction,
    LayoutProvider,
    basic_layout,
    colored_layout,
    default_layouts,
    message_pass_through_layout,
    pattern_layout,
)
from .levels import Level
from .logger import Logger
from .models import AppenderConfig, CategoryConfig
from .registry import Category, CategoryRegistry
from .scheduler import DispatchScheduler
from .silent_appender import SilentAppender
from .slack_appender import SlackAppender, SlackConfig
from .slack_client import MessageTransport, SlackClient

__all__ = [
    # Version
    "__version__",
    # Core
    "Level",
    "LogEvent",
    "RenderedEvent",
    "Logger",
    "Category",
    "CategoryRegistry",
    "DispatchScheduler",
    # Appenders
    "Appender",
    "ConsoleAppender",
    "SilentAppender",
    "SlackAppender",
    "SlackConfig",
    "MessageTransport",
    "SlackClient",
    # Layouts
    "LayoutFunction",
    "LayoutProvider",
    "basic_layout",
    "colored_layout",
    "message_pass_through_layout",
    "pattern_layout",
    "default_layouts",
    # Diagnostics
    "Diagnostic",
    "DiagnosticReporter",
    "ConsoleDiagnosticReporter",
    "SilentDiagnosticReporter",
    # Errors
    "LogRelayError",
    "ConfigurationError",
    "DeliveryError",
    "RenderError",
    # Configuration
    "AppenderConfig",
    "CategoryConfig",
    "add_appender",
    "clear_appenders",
    "configure",
    "create_appender",
    "flush",
    "get_logger",
    "get_registry",
    "set_diagnostic_reporter",
    "shutdown",
]
