"""Unit tests for structured logging."""

from __future__ import annotations

import json
import logging

import pytest

from util_logger import (
    ComponentConfig,
    ComponentType,
    JSONFormatter,
    LogContext,
    LoggerFactory,
    LogLevel,
    log_exceptions,
)


class TestJSONFormatter:
    """Tests for JSON output."""

    def test_formats_record_as_json(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 10, "hello %s", ("world",), None)
        record.custom_dimensions = {"component_type": "client"}

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["customDimensions"] == {"component_type": "client"}

    def test_truncates_long_messages(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 10, "a" * 50, (), None)

        data = json.loads(JSONFormatter(max_message_length=10).format(record))

        assert data["message"] == "a" * 10 + "..."


class TestLoggerFactory:
    """Tests for component loggers."""

    def test_context_is_attached_as_custom_dimensions(self, caplog) -> None:
        logger = LoggerFactory.create_logger(
            ComponentType.CLIENT,
            "TestClient",
            context=LogContext(landing_page_url="https://host/stac", search_mode="AUTO"),
        )

        with caplog.at_level(logging.INFO, logger=logger.name):
            logger.info("loaded")

        dims = caplog.records[-1].custom_dimensions
        assert dims["landing_page_url"] == "https://host/stac"
        assert dims["search_mode"] == "AUTO"
        assert dims["component_type"] == "client"
        assert logger.name == "stac_client.client.TestClient"

    def test_recreating_logger_replaces_context(self, caplog) -> None:
        LoggerFactory.create_logger(
            ComponentType.TRANSPORT, "Recreated", context=LogContext(landing_page_url="https://first/stac")
        )
        logger = LoggerFactory.create_logger(
            ComponentType.TRANSPORT, "Recreated", context=LogContext(landing_page_url="https://second/stac")
        )

        with caplog.at_level(logging.INFO, logger=logger.name):
            logger.info("sent")

        assert caplog.records[-1].custom_dimensions["landing_page_url"] == "https://second/stac"
        assert len(logger.handlers) == 1

    def test_explicit_level(self) -> None:
        logger = LoggerFactory.create_logger(
            ComponentType.BUILDER,
            "Quiet",
            config=ComponentConfig(ComponentType.BUILDER, log_level=LogLevel.ERROR),
        )

        assert logger.level == logging.ERROR

    def test_context_adapter_leaves_logger_untouched(self, caplog) -> None:
        logger = LoggerFactory.create_logger(ComponentType.CLIENT, "Shared")
        first = LoggerFactory.with_context(logger, LogContext(landing_page_url="https://a/stac"))
        second = LoggerFactory.with_context(logger, LogContext(landing_page_url="https://b/stac"))

        with caplog.at_level(logging.INFO, logger=logger.name):
            first.info("one", extra={"custom_dimensions": {"search_mode": "GET"}})
            second.info("two")
            logger.info("three")

        one, two, three = caplog.records[-3:]
        assert one.custom_dimensions["landing_page_url"] == "https://a/stac"
        assert one.custom_dimensions["search_mode"] == "GET"
        assert one.custom_dimensions["component_name"] == "Shared"
        assert two.custom_dimensions["landing_page_url"] == "https://b/stac"
        assert "landing_page_url" not in three.custom_dimensions

    def test_set_level_applies_to_component_loggers(self) -> None:
        logger = LoggerFactory.create_logger(ComponentType.BUILDER, "Leveled")
        try:
            LoggerFactory.set_level(LogLevel.DEBUG)

            assert logger.level == logging.DEBUG
            assert logger.handlers[0].level == logging.DEBUG
        finally:
            LoggerFactory.set_level(LogLevel.INFO)

    def test_debug_environment_switch(self, monkeypatch) -> None:
        monkeypatch.setenv("STAC_CLIENT_DEBUG_LOGGING", "true")

        assert LoggerFactory.default_config(ComponentType.CLIENT).log_level == LogLevel.DEBUG


class TestLogExceptions:
    """Tests for the exception decorator."""

    def test_logs_and_reraises(self, caplog) -> None:
        logger = LoggerFactory.create_logger(ComponentType.CLIENT, "Decorated")

        @log_exceptions(logger=logger)
        def fail():
            raise ValueError("bad input")

        with caplog.at_level(logging.ERROR, logger=logger.name):
            with pytest.raises(ValueError):
                fail()

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.custom_dimensions["exception_type"] == "ValueError"

    def test_passes_through_return_value(self) -> None:
        @log_exceptions(ComponentType.CLIENT, "PassThrough")
        def ok():
            return 42

        assert ok() == 42

    def test_expected_exceptions_logged_as_warning(self, caplog) -> None:
        logger = LoggerFactory.create_logger(ComponentType.CLIENT, "Expected")

        @log_exceptions(logger=logger, expected=(KeyError,))
        def fail():
            raise KeyError("missing")

        with caplog.at_level(logging.WARNING, logger=logger.name):
            with pytest.raises(KeyError):
                fail()

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.exc_info is None
        assert "traceback" not in record.custom_dimensions
