# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Notification appender delivering log events to Slack.

Every event is rendered and posted on its own: there is no batching, no
coalescing of rapid events and no retry. Delivery failures are reported to the
diagnostic side-channel together with the payload and never raised.

Example:
    >>> appender = SlackAppender.from_config({
    ...     "token": "xoxb-...",
    ...     "channel_id": "#alerts",
    ...     "username": "log-relay",
    ...     "layout": {"type": "pattern", "pattern": "%p %c - %m"},
    ... })
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .appender import Appender
from .diagnostics import ConsoleDiagnosticReporter, DiagnosticReporter
from .event import RenderedEvent
from .exceptions import ConfigurationError, DeliveryError
from .layouts import LayoutFunction, LayoutProvider, default_layouts, message_pass_through_layout
from .slack_client import MessageTransport, SlackClient


def _required(options: Mapping[str, Any], key: str, env_var: str | None = None) -> str:
    value = options.get(key)
    if value is None and env_var:
        value = os.getenv(env_var)
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"slack appender requires a non-empty '{key}'")
    return value


@dataclass(frozen=True)
class SlackConfig:
    """Validated configuration of a SlackAppender.

    Attributes:
        token: Slack API token
        channel_id: Destination channel (e.g. "#alerts" or a channel ID)
        username: Name the messages are posted as
        icon_url: Optional avatar URL
        layout: Optional layout options with a ``type`` and type-specific params
    """
    token: str
    channel_id: str
    username: str
    icon_url: str | None = None
    layout: Mapping[str, Any] | None = field(default=None, compare=False)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "SlackConfig":
        """Validate raw options.

        ``token`` falls back to the SLACK_TOKEN environment variable. Keys
        not listed above are ignored.

        Raises:
            ConfigurationError: If a required field is missing or malformed
        """
        icon_url = options.get("icon_url")
        if icon_url is not None and not isinstance(icon_url, str):
            raise ConfigurationError("slack appender 'icon_url' must be a string")

        layout = options.get("layout")
        if layout is not None:
            if not isinstance(layout, Mapping) or not layout.get("type"):
                raise ConfigurationError("slack appender 'layout' must be a mapping with a 'type'")

        return cls(
            token=_required(options, "token", env_var="SLACK_TOKEN"),
            channel_id=_required(options, "channel_id"),
            username=_required(options, "username"),
            icon_url=icon_url or None,
            layout=dict(layout) if layout is not None else None,
        )


class SlackAppender(Appender):
    """Appender posting each event to a Slack channel."""

    def __init__(
        self,
        config: SlackConfig,
        transport: MessageTransport | None = None,
        layout: LayoutFunction = message_pass_through_layout,
        reporter: DiagnosticReporter | None = None,
    ):
        """Initialize Slack appender.

        Args:
            config: Validated configuration
            transport: Outbound client (defaults to a SlackClient for config.token)
            layout: Layout rendering the message text
            reporter: Diagnostic side-channel for delivery outcomes
        """
        self.config = config
        self.transport = transport or SlackClient(config.token)
        self.layout = layout
        self.reporter = reporter or ConsoleDiagnosticReporter()

    @classmethod
    def from_config(
        cls,
        options: Mapping[str, Any],
        layouts: LayoutProvider = default_layouts,
        transport: MessageTransport | None = None,
        reporter: DiagnosticReporter | None = None,
    ) -> "SlackAppender":
        """Create a SlackAppender from configuration options.

        The layout options, when present, are resolved once here and reused for
        every event.

        Args:
            options: Mapping with token, channel_id, username, icon_url, layout
            layouts: Provider used to resolve the layout options
            transport: Optional outbound client override
            reporter: Optional diagnostic reporter

        Returns:
            Configured SlackAppender

        Raises:
            ConfigurationError: If the options are invalid
        """
        config = SlackConfig.from_mapping(options)
        layout = message_pass_through_layout
        if config.layout is not None:
            layout = layouts.resolve_options(config.layout, owner="slack appender")
        return cls(config, transport=transport, layout=layout, reporter=reporter)

    def build_payload(self, text: str) -> dict[str, Any]:
        """Build the chat.postMessage body for a rendered message."""
        payload: dict[str, Any] = {
            "channel": self.config.channel_id,
            "username": self.config.username,
            "text": text,
        }
        if self.config.icon_url:
            payload["icon_url"] = self.config.icon_url
        return payload

    def invoke(self, rendered: RenderedEvent) -> None:
        context: dict[str, Any] = {
            "category": rendered.event.category,
            "channel": self.config.channel_id,
        }
        try:
            text = self.render(rendered)
        except Exception as e:
            self.reporter.report(e, context=context)
            return

        payload = self.build_payload(text)
        try:
            ack = self.transport.send(payload)
            if isinstance(ack, Mapping) and ack.get("ok") is False:
                raise DeliveryError(
                    f"Slack rejected the message: {ack.get('error', 'unknown_error')}",
                    payload=payload,
                    response=ack,
                )
        except Exception as e:
            context["payload"] = payload
            self.reporter.report(e, context=context)
            return

        self.reporter.capture_message("Slack message delivered", level="debug", context={"ack": ack})

    def close(self) -> None:
        self.transport.close()
