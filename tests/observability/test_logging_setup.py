"""Tests for logging configuration and correlation ID propagation."""

import logging

import pytest

from contract_engine.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from contract_engine.configs.base import AppSettings
from contract_engine.core.exceptions import TemplateRenderError
from contract_engine.observability.log_utils import (
    REDACTED,
    log_exception_with_context,
    safe_log_value,
)
from contract_engine.observability.logger import CorrelationIdFilter, configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestCorrelation:
    def test_set_and_clear(self) -> None:
        assert set_correlation_id("req-1") == "req-1"
        assert get_correlation_id() == "req-1"

        clear_correlation_id()

        assert get_correlation_id() == ""

    def test_generated_when_missing(self) -> None:
        value = set_correlation_id()
        assert len(value) == 36
        clear_correlation_id()

    def test_filter_defaults_to_dash(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "-"


def test_configure_logging(restore_root_logger: logging.Logger) -> None:
    configure_logging("debug")

    assert restore_root_logger.level == logging.DEBUG
    assert len(restore_root_logger.handlers) == 1
    assert logging.getLogger("botocore").level == logging.WARNING


class TestLogUtils:
    def test_safe_log_value(self) -> None:
        assert safe_log_value(None) == "None"
        assert safe_log_value([1, 2]) == "list(2 items)"
        assert safe_log_value({"a": 1}) == "dict(1 keys)"
        assert safe_log_value("x" * 10, max_length=4) == "xxxx... (truncated, 10 total)"

    def test_exception_context(self, caplog) -> None:
        logger = logging.getLogger("contract_engine.test")

        with caplog.at_level(logging.ERROR, logger="contract_engine.test"):
            try:
                raise KeyError("providerId")
            except KeyError as e:
                log_exception_with_context(logger, "Failed", e, endpoint="generate_contract")

        record = caplog.records[-1]
        assert record.error_type == "KeyError"
        assert record.endpoint == "generate_contract"
        assert record.exc_info is not None

    def test_bytes_summarized(self) -> None:
        assert safe_log_value(b"PK\x03\x04" * 100) == "bytes(400)"

    def test_sensitive_context_redacted(self, caplog) -> None:
        logger = logging.getLogger("contract_engine.test")

        with caplog.at_level(logging.ERROR, logger="contract_engine.test"):
            try:
                raise RuntimeError("boom")
            except RuntimeError as e:
                log_exception_with_context(
                    logger, "Failed", e, temporary_password="Abc123!", id_token="eyJ", email="a@b.c"
                )

        record = caplog.records[-1]
        assert record.temporary_password == REDACTED
        assert record.id_token == REDACTED
        assert record.email == "a@b.c"

    def test_engine_error_details_merged(self, caplog) -> None:
        logger = logging.getLogger("contract_engine.test")

        with caplog.at_level(logging.ERROR, logger="contract_engine.test"):
            try:
                raise TemplateRenderError("Unreadable template", template_id="t1")
            except TemplateRenderError as e:
                log_exception_with_context(logger, "Failed", e, endpoint="generate_contract")

        record = caplog.records[-1]
        assert record.template_id == "t1"
        assert record.error_msg == "Unreadable template"


class TestAppSettings:
    def test_log_level_normalized(self) -> None:
        assert AppSettings(log_level="warning").log_level == "WARNING"

    def test_unknown_log_level_rejected(self) -> None:
        with pytest.raises(ValueError):
            AppSettings(log_level="verbose")

    def test_cors_origins(self) -> None:
        settings = AppSettings(cors_origins=["https://admin.example.com"])

        assert settings.cors_origins == ["https://admin.example.com"]
