# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Tests for levels and layouts."""

from datetime import datetime, timezone

import pytest

from log_relay import (
    ConfigurationError,
    LayoutProvider,
    Level,
    LogEvent,
    basic_layout,
    colored_layout,
    message_pass_through_layout,
    pattern_layout,
)

TIMESTAMP = datetime(2025, 3, 4, 5, 6, 7, 89000, tzinfo=timezone.utc)


def make_event(message="hello", level=Level.INFO, args=(), extra=None):
    return LogEvent(
        category="app.web",
        level=level,
        message=message,
        args=args,
        extra=extra or {},
        timestamp=TIMESTAMP,
    )


class TestLevel:
    """Tests for Level parsing and ordering."""

    def test_ordering(self):
        assert Level.ALL < Level.TRACE < Level.DEBUG < Level.INFO < Level.WARN < Level.ERROR < Level.FATAL < Level.OFF

    @pytest.mark.parametrize("value,expected", [
        ("info", Level.INFO),
        (" Error ", Level.ERROR),
        ("WARNING", Level.WARN),
        ("critical", Level.FATAL),
        (Level.DEBUG, Level.DEBUG),
        (20000, Level.INFO),
    ])
    def test_parse(self, value, expected):
        assert Level.parse(value) == expected

    @pytest.mark.parametrize("value", ["verbose", 12, None, True])
    def test_parse_invalid(self, value):
        with pytest.raises(ConfigurationError):
            Level.parse(value)


class TestBuiltinLayouts:
    """Tests for the built-in layout functions."""

    def test_basic_layout(self):
        assert basic_layout(make_event()) == "[2025-03-04T05:06:07.089] [INFO] app.web - hello"

    def test_basic_layout_appends_extra(self):
        text = basic_layout(make_event(extra={"user": "u1"}))

        assert text.endswith('hello {"user": "u1"}')

    def test_colored_layout_wraps_header(self):
        text = colored_layout(make_event(level=Level.ERROR))

        assert text.startswith("\x1b[31m[2025-03-04T05:06:07.089] [ERROR] app.web - \x1b[39m")
        assert text.endswith("hello")

    def test_message_pass_through(self):
        assert message_pass_through_layout(make_event("%s=%d", args=("n", 3))) == "n=3"

    def test_pass_through_keeps_control_characters(self):
        assert message_pass_through_layout(make_event("a\nb\x07")) == "a\nb\x07"

    def test_pattern_layout(self):
        layout = pattern_layout("%d %-5p %c %m%n100%%")

        assert layout(make_event()) == "2025-03-04T05:06:07.089 INFO  app.web hello\n100%"

    def test_pattern_layout_right_pad(self):
        assert pattern_layout("[%6p]")(make_event(level=Level.WARN)) == "[  WARN]"

    def test_bad_args_raise_on_render(self):
        with pytest.raises(TypeError):
            message_pass_through_layout(make_event("%d", args=("x",)))


class TestLayoutProvider:
    """Tests for layout resolution."""

    @pytest.mark.parametrize("type_name,expected", [
        ("basic", basic_layout),
        ("colored", colored_layout),
        ("coloured", colored_layout),
        ("messagePassThrough", message_pass_through_layout),
    ])
    def test_resolve_builtin(self, type_name, expected):
        assert LayoutProvider().resolve_layout(type_name, {"type": type_name}) is expected

    def test_resolve_pattern(self):
        layout = LayoutProvider().resolve_layout("pattern", {"pattern": "%p|%m"})

        assert layout(make_event()) == "INFO|hello"

    def test_pattern_requires_pattern(self):
        with pytest.raises(ConfigurationError, match="pattern"):
            LayoutProvider().resolve_layout("pattern", {})

    def test_unknown_type(self):
        with pytest.raises(ConfigurationError, match="Unknown layout type: tester"):
            LayoutProvider().resolve_layout("tester", {})

    def test_register_custom_type(self):
        provider = LayoutProvider()
        provider.register("upper", lambda params: lambda event: event.message.upper() + params.get("suffix", ""))

        layout = provider.resolve_layout("Upper", {"suffix": "!"})

        assert layout(make_event()) == "HELLO!"

    def test_factory_must_return_callable(self):
        provider = LayoutProvider()
        provider.register("broken", lambda params: "not callable")

        with pytest.raises(ConfigurationError, match="callable"):
            provider.resolve_layout("broken")
