# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Tests for the Slack Web API client."""

from unittest.mock import MagicMock

import pytest
import requests

from log_relay import DeliveryError, SlackClient


def make_session(body=None, status_error=None, post_error=None, json_error=None):
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    response = MagicMock()
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = body if body is not None else {"ok": True}
    if post_error is not None:
        session.post.side_effect = post_error
    else:
        session.post.return_value = response
    return session


PAYLOAD = {"channel": "#CHANNEL", "username": "USERNAME", "text": "hi"}


class TestSlackClient:
    """Tests for SlackClient."""

    def test_send_posts_chat_message(self):
        session = make_session(body={"ok": True, "ts": "1.2"})
        client = SlackClient("TOKEN", session=session, timeout=3)

        ack = client.send(PAYLOAD)

        assert ack == {"ok": True, "ts": "1.2"}
        session.post.assert_called_once_with(
            "https://slack.com/api/chat.postMessage", json=PAYLOAD, timeout=3
        )
        assert session.headers["Authorization"] == "Bearer TOKEN"

    def test_custom_base_url(self):
        session = make_session()
        client = SlackClient("TOKEN", base_url="http://localhost:9000/api/", session=session)

        client.api("auth.test", {})

        assert session.post.call_args.args[0] == "http://localhost:9000/api/auth.test"

    def test_not_ok_raises_delivery_error(self):
        client = SlackClient("TOKEN", session=make_session(body={"ok": False, "error": "invalid_auth"}))

        with pytest.raises(DeliveryError, match="invalid_auth") as exc_info:
            client.send(PAYLOAD)

        assert exc_info.value.payload == PAYLOAD
        assert exc_info.value.response == {"ok": False, "error": "invalid_auth"}

    def test_http_error_raises_delivery_error(self):
        session = make_session(status_error=requests.HTTPError("500 Server Error"))
        client = SlackClient("TOKEN", session=session)

        with pytest.raises(DeliveryError, match="500"):
            client.send(PAYLOAD)

    def test_network_error_raises_delivery_error(self):
        session = make_session(post_error=requests.ConnectionError("connection refused"))
        client = SlackClient("TOKEN", session=session)

        with pytest.raises(DeliveryError, match="connection refused"):
            client.send(PAYLOAD)

    def test_non_json_response_raises_delivery_error(self):
        session = make_session(json_error=ValueError("no json"))
        client = SlackClient("TOKEN", session=session)

        with pytest.raises(DeliveryError, match="non-JSON"):
            client.send(PAYLOAD)

    def test_close_closes_session(self):
        session = make_session()
        client = SlackClient("TOKEN", session=session)

        client.close()

        session.close.assert_called_once()
