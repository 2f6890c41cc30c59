# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Transport used by the notification appender to reach Slack."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any

import requests

from .exceptions import DeliveryError

logger = logging.getLogger(__name__)

SLACK_API_URL = "https://slack.com/api"


class MessageTransport(ABC):
    """Abstract outbound messaging client."""

    @abstractmethod
    def send(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Post one message.

        Args:
            payload: Message payload (channel, username, text, optional icon_url)

        Returns:
            Provider acknowledgment

        Raises:
            DeliveryError: If the message was not accepted
        """
        pass

    def close(self) -> None:
        """Release resources held by the transport."""
        pass


class SlackClient(MessageTransport):
    """Slack Web API client posting through chat.postMessage."""

    def __init__(
        self,
        token: str,
        base_url: str = SLACK_API_URL,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        """Initialize Slack client.

        Args:
            token: Slack API token
            base_url: Base URL of the Slack Web API
            timeout: Request timeout in seconds
            session: Optional requests session (one is created if omitted)
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {token}"})
        # requests.Session is not documented as thread-safe.
        self._lock = threading.Lock()

    def api(self, method: str, data: dict[str, Any]) -> dict[str, Any]:
        """Call a Slack Web API method.

        Args:
            method: API method name (e.g. "chat.postMessage")
            data: JSON body

        Returns:
            Decoded response body

        Raises:
            DeliveryError: On network errors, HTTP errors or ``ok: false``
        """
        url = f"{self.base_url}/{method}"
        try:
            with self._lock:
                response = self._session.post(url, json=data, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            raise DeliveryError(f"Slack {method} request failed: {e}", payload=data) from e
        except ValueError as e:
            raise DeliveryError(f"Slack {method} returned a non-JSON response", payload=data) from e

        if not isinstance(body, dict) or not body.get("ok", False):
            error = body.get("error", "unknown_error") if isinstance(body, dict) else "unknown_error"
            raise DeliveryError(f"Slack {method} rejected the message: {error}", payload=data, response=body)
        return body

    def send(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self.api("chat.postMessage", payload)

    def close(self) -> None:
        self._session.close()
