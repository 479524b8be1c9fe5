"""
Tests for faultline/logging_config.py and the engine's log events
"""

import json
import logging
from unittest.mock import MagicMock

import pytest
import structlog
from structlog.testing import capture_logs

from faultline import Fault
from faultline.logging_config import get_logger, log_fault_decision, setup_json_logging
from faultline.metrics import get_metrics_content_type, get_metrics_text
from conftest import ErrorInjector


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupJsonLogging:

    def test_emits_json_with_service_context(self, restore_logging, capsys):
        setup_json_logging(log_level="INFO", service_name="svc", environment="test")

        get_logger("faultline.test.probe").info("probe", value=1)

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "probe"
        assert record["service"] == "svc"
        assert record["environment"] == "test"
        assert record["level"] == "info"
        assert record["value"] == 1

    def test_filters_below_level(self, restore_logging, capsys):
        setup_json_logging(log_level="warning")

        get_logger("faultline.test.quiet").info("hidden")

        assert "hidden" not in capsys.readouterr().out


class TestLogFaultDecision:

    def test_inject_logged_at_info(self):
        logger = MagicMock()
        log_fault_decision(logger, "/", "inject", method="GET")
        logger.info.assert_called_once_with(
            "fault_injected", path="/", decision="inject", method="GET"
        )

    def test_skip_logged_at_debug(self):
        logger = MagicMock()
        log_fault_decision(logger, "/health", "blacklisted")
        logger.debug.assert_called_once_with(
            "fault_skipped", path="/health", decision="blacklisted"
        )
        logger.info.assert_not_called()


class TestEngineLogEvents:

    def test_construction_events(self):
        with capture_logs() as logs:
            Fault(None, enabled=True, inject_percent=1.1)

        events = [entry["event"] for entry in logs]
        assert "fault_injector_missing" in events
        assert "fault_percent_invalid" in events
        assert "fault_configured" in events

    def test_valid_config_has_no_warnings(self):
        with capture_logs() as logs:
            Fault(ErrorInjector(), enabled=True, inject_percent=0.5)

        assert [e for e in logs if e["log_level"] == "warning"] == []


class TestMetricsExposition:

    def test_metrics_text(self):
        Fault(ErrorInjector(), enabled=True, inject_percent=1.0).evaluate("/")

        text = get_metrics_text().decode()

        assert "faultline_decisions_total" in text
        assert "faultline_inject_percent" in text
        assert get_metrics_content_type().startswith("text/plain")
