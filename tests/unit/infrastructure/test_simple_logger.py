"""Tests for the SimpleLogger adapter."""

import logging
from unittest.mock import Mock, patch

from ledger_gateway.infrastructure.config import LogContext
from ledger_gateway.infrastructure.simple_logger import ContextFormatter, SimpleLogger
from ledger_gateway.ports.logger import LoggerPort


class TestSimpleLogger:
    """Test cases for SimpleLogger implementation."""

    def test_implements_logger_port(self):
        assert isinstance(SimpleLogger(), LoggerPort)

    def test_initialization_default_values(self):
        with patch("logging.getLogger") as mock_get_logger:
            mock_logger = Mock()
            mock_logger.handlers = []
            mock_get_logger.return_value = mock_logger

            logger = SimpleLogger()

            mock_get_logger.assert_called_once_with("ledger_gateway")
            mock_logger.setLevel.assert_called_once_with(logging.INFO)
            handler = mock_logger.addHandler.call_args.args[0]
            assert isinstance(handler.formatter, ContextFormatter)
            assert logger.context == LogContext()

    def test_existing_handlers_kept(self):
        with patch("logging.getLogger") as mock_get_logger:
            mock_logger = Mock()
            mock_logger.handlers = [Mock()]
            mock_get_logger.return_value = mock_logger

            SimpleLogger(name="ledger_gateway.test", level=logging.DEBUG)

            mock_logger.setLevel.assert_called_once_with(logging.DEBUG)
            mock_logger.addHandler.assert_not_called()

    def test_level_methods_forward_fields(self):
        with patch("logging.getLogger") as mock_get_logger:
            mock_logger = Mock()
            mock_get_logger.return_value = mock_logger

            logger = SimpleLogger()
            logger.info("Resolved peer", msp_id="Org1MSP", endpoint="localhost:7051")
            logger.error("Failed")

            fields = {"msp_id": "Org1MSP", "endpoint": "localhost:7051"}
            mock_logger.log.assert_any_call(
                logging.INFO, "Resolved peer", extra={**fields, "gateway_context": fields}
            )
            mock_logger.log.assert_any_call(
                logging.ERROR, "Failed", extra={"gateway_context": {}}
            )

    def test_bound_fields_merge_into_records(self):
        with patch("logging.getLogger") as mock_get_logger:
            mock_logger = Mock()
            mock_get_logger.return_value = mock_logger

            base = SimpleLogger()
            bound = base.bind(msp_id="Org1MSP", component="GatewayBootstrap")
            bound.bind(endpoint="localhost:7051").warning("Degraded", state="FAILED")

            extra = mock_logger.log.call_args.kwargs["extra"]
            assert extra["gateway_context"] == {
                "msp_id": "Org1MSP",
                "endpoint": "localhost:7051",
                "component": "GatewayBootstrap",
                "state": "FAILED",
            }
            assert extra["component"] == "GatewayBootstrap"

    def test_bind_leaves_original_untouched(self):
        base = SimpleLogger()
        bound = base.bind(user="admin")

        assert bound.context.user == "admin"
        assert base.context.user is None

    def test_none_fields_dropped(self):
        with patch("logging.getLogger") as mock_get_logger:
            mock_logger = Mock()
            mock_get_logger.return_value = mock_logger

            SimpleLogger().bind(msp_id=None).debug("Resolving", peer_name=None)

            mock_logger.log.assert_called_once_with(
                logging.DEBUG, "Resolving", extra={"gateway_context": {}}
            )


class TestContextFormatter:
    """Test rendering of bound context."""

    def test_appends_context(self):
        record = logging.makeLogRecord(
            {"msg": "Gateway bootstrap READY", "gateway_context": {"state": "READY"}}
        )
        assert ContextFormatter("%(message)s").format(record) == (
            "Gateway bootstrap READY [state=READY]"
        )

    def test_plain_record(self):
        record = logging.makeLogRecord({"msg": "Closed channel"})
        assert ContextFormatter("%(message)s").format(record) == "Closed channel"
