# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Tests for the diagnostic reporters."""

import logging

from log_relay import ConsoleDiagnosticReporter, DeliveryError, Diagnostic, SilentDiagnosticReporter

PAYLOAD = {"channel": "#CHANNEL", "username": "USERNAME", "text": "disk full"}


class TestDiagnostic:
    """Tests for building Diagnostic records."""

    def test_from_error_lifts_payload_out_of_context(self):
        diagnostic = Diagnostic.from_error(
            RuntimeError("timeout"), context={"category": "app", "payload": PAYLOAD}
        )

        assert diagnostic.error_type == "RuntimeError"
        assert diagnostic.message == "timeout"
        assert diagnostic.context == {"category": "app"}
        assert diagnostic.payload == PAYLOAD

    def test_from_error_uses_delivery_error_fields(self):
        error = DeliveryError("rejected", payload=PAYLOAD, response={"ok": False})

        diagnostic = Diagnostic.from_error(error)

        assert diagnostic.payload == PAYLOAD
        assert diagnostic.response == {"ok": False}

    def test_from_error_does_not_mutate_context(self):
        context = {"payload": PAYLOAD}

        Diagnostic.from_error(RuntimeError("x"), context=context)

        assert context == {"payload": PAYLOAD}


class TestConsoleDiagnosticReporter:
    """Tests for ConsoleDiagnosticReporter."""

    def test_report_logs_error_with_context(self, caplog):
        reporter = ConsoleDiagnosticReporter()

        with caplog.at_level(logging.ERROR, logger="log_relay.diagnostics"):
            reporter.report(DeliveryError("transport down"), context={"channel": "#CHANNEL"})

        assert "DeliveryError: transport down | Context: channel=#CHANNEL" in caplog.text

    def test_report_includes_payload_and_attaches_diagnostic(self, caplog):
        reporter = ConsoleDiagnosticReporter()

        with caplog.at_level(logging.ERROR, logger="log_relay.diagnostics"):
            reporter.report(DeliveryError("transport down", payload=PAYLOAD))

        record = caplog.records[0]
        assert record.levelno == logging.ERROR
        assert '"text": "disk full"' in record.getMessage()
        assert record.diagnostic.payload == PAYLOAD

    def test_report_includes_stack_trace_at_debug(self, caplog):
        reporter = ConsoleDiagnosticReporter()
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            error = e

        with caplog.at_level(logging.DEBUG, logger="log_relay.diagnostics"):
            reporter.report(error)

        assert "Stack trace" in caplog.text

    def test_capture_message_level(self, caplog):
        reporter = ConsoleDiagnosticReporter(logger_name="custom.diagnostics")

        with caplog.at_level(logging.DEBUG, logger="custom.diagnostics"):
            reporter.capture_message("delivered", level="debug", context={"ack": "ok"})

        record = caplog.records[0]
        assert record.levelno == logging.DEBUG
        assert record.getMessage() == "delivered | Context: ack=ok"


class TestSilentDiagnosticReporter:
    """Tests for SilentDiagnosticReporter."""

    def test_stores_errors_and_messages(self):
        reporter = SilentDiagnosticReporter()

        reporter.report(DeliveryError("down"), context={"a": 1})
        reporter.report(ValueError("bad"))
        reporter.capture_message("note", level="info")

        assert reporter.has_errors()
        assert len(reporter.get_errors()) == 2
        assert reporter.get_errors("DeliveryError")[0].context == {"a": 1}
        assert reporter.get_messages("info")[0].message == "note"

        reporter.clear()
        assert not reporter.has_errors()
        assert reporter.get_messages() == []

    def test_lost_payloads(self):
        reporter = SilentDiagnosticReporter()

        reporter.report(DeliveryError("down", payload=PAYLOAD))
        reporter.report(ValueError("bad"))

        assert reporter.lost_payloads() == [PAYLOAD]
