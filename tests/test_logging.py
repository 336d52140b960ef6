"""Tests for Hookshot structured logging."""

import json
import logging

import structlog
from structlog.contextvars import clear_contextvars

from hookshot.logging import (
    bind_context,
    configure_logging,
    delivery_context,
    get_logger,
    unbind_context,
)


class TestConfigureLogging:
    """Tests for logging configuration."""

    def test_configure_with_defaults(self):
        """Should configure with INFO level and JSON format by default."""
        configure_logging()
        logger = get_logger("test")
        logger.info("test message")

    def test_configure_with_debug_level(self):
        """Should accept DEBUG level."""
        configure_logging(level="DEBUG")
        logger = get_logger("test")
        logger.debug("debug message")

    def test_configure_with_text_format(self):
        """Should accept text format for development."""
        configure_logging(level="INFO", format="text")
        logger = get_logger("test")
        logger.info("text format message")

    def test_configure_with_unknown_level(self):
        """Unknown level names should fall back to INFO without raising."""
        configure_logging(level="LOUD")
        logger = get_logger("test")
        logger.info("still logging")

    def test_configure_multiple_times(self):
        """Should handle multiple configuration calls."""
        configure_logging(level="INFO")
        configure_logging(level="DEBUG")
        logger = get_logger("test")
        logger.info("after reconfigure")

    def test_reconfigure_changes_root_level(self):
        """A later call changes the level even though handlers already exist."""
        root = logging.getLogger()
        original = root.level
        try:
            configure_logging(level="INFO")
            assert root.handlers
            configure_logging(level="DEBUG")
            assert root.level == logging.DEBUG
            configure_logging(level="WARNING")
            assert root.level == logging.WARNING
        finally:
            root.setLevel(original)

    def test_reconfigure_applies_to_existing_loggers(self, caplog):
        """Loggers obtained before reconfiguration use the new renderer."""
        logger = get_logger("test.existing")
        configure_logging(level="INFO", format="text")
        logger.info("first")
        configure_logging(level="INFO", format="json")
        logger.info("second", port=4567)

        record = next(r for r in caplog.records if "second" in r.getMessage())
        assert json.loads(record.getMessage())["port"] == 4567


class TestGetLogger:
    """Tests for logger creation."""

    def test_get_logger_with_name(self):
        """Should create logger with specified name."""
        logger = get_logger("hookshot.builder")
        assert logger is not None

    def test_get_logger_without_name(self):
        """Should create logger without name."""
        logger = get_logger()
        assert logger is not None

    def test_loggers_are_callable(self):
        """Should return callable logger instances."""
        logger = get_logger("test")
        assert callable(getattr(logger, "info", None))
        assert callable(getattr(logger, "exception", None))
        assert callable(getattr(logger, "debug", None))


class TestContextBinding:
    """Tests for context variable binding."""

    def setup_method(self):
        clear_contextvars()

    def teardown_method(self):
        clear_contextvars()

    def test_bind_context(self):
        """Should bind request context variables."""
        bind_context(event_name="push", delivery_id="72d3162e")
        logger = get_logger("test")
        logger.info("with context")

    def test_unbind_specific_context(self):
        """Should unbind specific context keys."""
        bind_context(event_name="push", source="github")
        unbind_context("source")
        logger = get_logger("test")
        logger.info("partial unbind")

    def test_log_with_exception(self):
        """Should handle exception logging."""
        configure_logging()
        logger = get_logger("test")

        try:
            raise ValueError("callback exploded")
        except ValueError:
            logger.exception("caught an error", event_pattern="push")


class TestModuleLevelLogger:
    """Tests for the pre-configured module-level logger."""

    def test_import_logger(self):
        """Should be able to import pre-configured logger."""
        from hookshot.logging import logger

        assert logger is not None
        logger.info("using module logger")


class TestDeliveryContext:
    """Tests for the delivery_context manager."""

    def setup_method(self):
        clear_contextvars()

    def teardown_method(self):
        clear_contextvars()

    def test_binds_inside_block(self):
        """Fields are bound inside the block and removed afterwards."""
        with delivery_context(event_name="push", source="github"):
            assert structlog.contextvars.get_contextvars() == {
                "event_name": "push",
                "source": "github",
            }
        assert structlog.contextvars.get_contextvars() == {}

    def test_keeps_outer_context(self):
        """Context bound outside the block survives."""
        bind_context(request_id="req_1")
        with delivery_context(event_name="push"):
            pass
        assert structlog.contextvars.get_contextvars() == {"request_id": "req_1"}

    def test_unbinds_on_error(self):
        """Fields are removed even when the block raises."""
        try:
            with delivery_context(event_name="push"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert "event_name" not in structlog.contextvars.get_contextvars()

    def test_fields_appear_in_log_lines(self, caplog):
        """Bound fields are rendered into every line logged inside the block."""
        configure_logging(level="INFO", format="json")
        logger = get_logger("test.context")

        with delivery_context(event_name="push", source="github"):
            logger.info("Dispatching")

        line = json.loads(caplog.records[-1].getMessage())
        assert line["event"] == "Dispatching"
        assert line["event_name"] == "push"
        assert line["source"] == "github"
