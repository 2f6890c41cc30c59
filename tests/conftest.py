# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Shared fixtures for log-relay tests."""

import pytest

import log_relay
import log_relay.factory as factory
from fakes import SLACK_OPTIONS, RecordingTransport
from log_relay import SilentDiagnosticReporter


@pytest.fixture
def reporter():
    """In-memory diagnostic reporter installed process-wide."""
    silent = SilentDiagnosticReporter()
    log_relay.set_diagnostic_reporter(silent)
    return silent


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def slack_options():
    return dict(SLACK_OPTIONS)


@pytest.fixture(autouse=True)
def reset_logging_state():
    """Reset process-wide logging state around each test."""
    original_reporter = factory._reporter
    log_relay.clear_appenders()
    yield
    log_relay.shutdown(timeout=5)
    log_relay.clear_appenders()
    log_relay.set_diagnostic_reporter(original_reporter)
    factory._logger_registry.clear()
