"""
Unit tests for logger utilities.

Tests ContextAwareLogger, CorrelationContextFilter and AzureQueueHandler.
Queue clients are patched so nothing leaves the process.
"""

import json
import logging
from unittest.mock import Mock, patch

import pytest

from gateway_credentials.exceptions import clear_correlation_id, set_correlation_id
from gateway_credentials.utils.logger import (
    AzureQueueHandler,
    ContextAwareLogger,
    CorrelationContextFilter,
    configure_logging,
    get_logger,
)

QUEUE_SERVICE = "gateway_credentials.utils.logger.QueueServiceClient"
QUEUE_CLIENT = "gateway_credentials.utils.logger.QueueClient"


def make_record(msg="Credential origins resolved", **extra):
    record = logging.LogRecord(
        name="gateway_credentials.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestContextAwareLogger:
    """Test ContextAwareLogger functionality."""

    def setup_method(self):
        """Set up test fixtures."""
        self.mock_logger = Mock(spec=logging.Logger)
        self.context_logger = ContextAwareLogger(self.mock_logger)

    def test_set_level(self):
        """Test setting log level."""
        self.context_logger.set_level(logging.DEBUG)
        self.mock_logger.setLevel.assert_called_once_with(logging.DEBUG)

    def test_no_extras(self):
        """Test logging without extra data."""
        self.context_logger.info("Test message")
        self.mock_logger.info.assert_called_once_with("Test message", extra={})

    def test_extras_formatted_into_message(self):
        """Test extras are appended as key=value pairs and preserved."""
        extra = {"provider": "stripe", "count": 2}
        self.context_logger.warning("Listed", extra=extra)

        self.mock_logger.warning.assert_called_once_with(
            "Listed | provider=stripe | count=2", extra=extra
        )

    def test_other_kwargs_passed_through(self):
        """Test exc_info and similar kwargs reach the underlying logger."""
        error = RuntimeError("boom")
        self.context_logger.error("Failed", exc_info=error)

        self.mock_logger.error.assert_called_once_with("Failed", extra={}, exc_info=error)


class TestCorrelationContextFilter:
    """Test correlation ID stamping."""

    def test_adds_correlation_id(self):
        set_correlation_id("corr-1")
        try:
            record = make_record()
            assert CorrelationContextFilter().filter(record) is True
        finally:
            clear_correlation_id()

        assert record.correlation_id == "corr-1"

    def test_no_correlation_id(self):
        record = make_record()
        CorrelationContextFilter().filter(record)
        assert not hasattr(record, "correlation_id")

    def test_existing_value_kept(self):
        set_correlation_id("corr-2")
        try:
            record = make_record(correlation_id="explicit")
            CorrelationContextFilter().filter(record)
        finally:
            clear_correlation_id()

        assert record.correlation_id == "explicit"


class TestAzureQueueHandler:
    """Test the queue log handler."""

    @patch(QUEUE_SERVICE)
    def test_creates_missing_queue(self, mock_service_class):
        """Test the handler creates its queue when absent."""
        service = mock_service_class.from_connection_string.return_value
        service.list_queues.return_value = []

        AzureQueueHandler(queue_name="logs-queue", connection_string="UseDevelopmentStorage=true")

        service.create_queue.assert_called_once_with("logs-queue")

    @patch(QUEUE_SERVICE)
    def test_build_entry(self, mock_service_class):
        """Test structured entries carry correlation, provider and context extras."""
        handler = AzureQueueHandler(connection_string="UseDevelopmentStorage=true")
        record = make_record(correlation_id="corr-9", provider="asaas", needs_promotion=True)

        entry = handler.build_entry(record)

        assert entry["level"] == "INFO"
        assert entry["message"] == "Credential origins resolved"
        assert entry["correlation_id"] == "corr-9"
        assert entry["provider"] == "asaas"
        assert entry["context"] == {"needs_promotion": True}

    @patch(QUEUE_CLIENT)
    @patch(QUEUE_SERVICE)
    def test_batches_until_full(self, mock_service_class, mock_client_class):
        """Test entries are sent once the batch is full."""
        client = mock_client_class.from_connection_string.return_value
        handler = AzureQueueHandler(connection_string="UseDevelopmentStorage=true", batch_size=2)

        handler.emit(make_record("first"))
        client.send_message.assert_not_called()

        handler.emit(make_record("second"))
        assert client.send_message.call_count == 2
        sent = json.loads(client.send_message.call_args_list[0].args[0])
        assert sent["message"] == "first"
        assert handler.log_buffer == []

    @patch(QUEUE_CLIENT)
    @patch(QUEUE_SERVICE)
    def test_close_flushes(self, mock_service_class, mock_client_class):
        """Test closing the handler sends buffered entries."""
        client = mock_client_class.from_connection_string.return_value
        handler = AzureQueueHandler(connection_string="UseDevelopmentStorage=true", batch_size=10)

        handler.emit(make_record())
        handler.close()

        client.send_message.assert_called_once()

    @patch(QUEUE_CLIENT)
    def test_no_connection_string_keeps_buffer(self, mock_client_class):
        """Test nothing is sent without a connection string."""
        with patch.dict("os.environ", {}, clear=True):
            handler = AzureQueueHandler(connection_string=None, batch_size=1)

        handler.emit(make_record())

        mock_client_class.from_connection_string.assert_not_called()
        assert len(handler.log_buffer) == 1


class TestConfigureLogging:
    """Test configure_logging and get_logger."""

    def test_console_only(self):
        """Test a console handler with the correlation filter is installed."""
        logger = configure_logging("resolver", log_level="DEBUG", enable_queue=False)

        underlying = logger.logger
        assert underlying.name == "gateway_credentials.resolver"
        assert underlying.level == logging.DEBUG
        assert len(underlying.handlers) == 1
        assert isinstance(underlying.handlers[0].filters[0], CorrelationContextFilter)
        assert get_logger() is logger

    @patch(QUEUE_SERVICE)
    def test_with_queue(self, mock_service_class):
        """Test the queue handler is added when enabled."""
        logger = configure_logging(
            "promotion",
            enable_queue=True,
            queue_name="credential-logs",
            connection_string="UseDevelopmentStorage=true",
        )

        handlers = logger.logger.handlers
        assert any(isinstance(h, AzureQueueHandler) for h in handlers)
        queue_handler = next(h for h in handlers if isinstance(h, AzureQueueHandler))
        assert queue_handler.queue_name == "credential-logs"
        assert len(queue_handler.log_buffer) == 1

        queue_handler.log_buffer.clear()
        logger.logger.handlers.clear()

    def test_reconfigure_replaces_handlers(self):
        """Test configuring twice does not duplicate handlers."""
        configure_logging("resolver", enable_queue=False)
        logger = configure_logging("resolver", enable_queue=False)

        assert len(logger.logger.handlers) == 1

    def test_get_logger_default(self):
        """Test get_logger falls back to the root logger."""
        logger = get_logger("WARNING")

        assert isinstance(logger, ContextAwareLogger)
        assert logger.logger is logging.getLogger()
        assert logger.logger.level == logging.WARNING

    @pytest.fixture(autouse=True)
    def restore_root_level(self):
        root = logging.getLogger()
        level = root.level
        yield
        root.setLevel(level)


class TestQueuePayloadSerialization:
    """Test JSON encoding of queue entries."""

    def test_dumps_handles_domain_values(self):
        from datetime import datetime, timezone
        from decimal import Decimal

        from gateway_credentials.enums import ScopeType
        from gateway_credentials.schemas.credential_schemas import PromotionResult
        from gateway_credentials.utils.json_utils import dumps

        payload = {
            "at": datetime(2024, 1, 1, tzinfo=timezone.utc),
            "scope": ScopeType.PLATFORM,
            "amount": Decimal("1.5"),
            "result": PromotionResult.nothing_to_promote("stripe"),
        }

        decoded = json.loads(dumps(payload))

        assert decoded["at"] == "2024-01-01T00:00:00+00:00"
        assert decoded["scope"] == "platform"
        assert decoded["amount"] == 1.5
        assert decoded["result"]["status"] == "nothing_to_promote"
