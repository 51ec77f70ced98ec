"""Tests for structured error log records and logging setup."""

import json
import logging

import pytest

from errorlens import from_value
from errorlens.config import LoggingConfig
from errorlens.logs import (
    PACKAGE_LOGGER,
    ErrorLogRecord,
    JsonLineFormatter,
    configure_logging,
    log_report,
)
from errorlens.utils.redaction import REDACTED


@pytest.fixture
def sap_report(sap_payload, fixed_clock):
    return from_value(sap_payload, "corr-sap", clock=fixed_clock).info()


@pytest.fixture
def raml_report(raml_payload, fixed_clock):
    return from_value(raml_payload, "corr-raml", clock=fixed_clock).info()


class TestErrorLogRecord:
    """Records accumulate fields immutably."""

    def test_from_report(self, sap_report):
        fields = ErrorLogRecord.from_report(sap_report).build()
        assert fields["correlation_id"] == "corr-sap"
        assert fields["error_type"] == "SAP_ERROR"
        assert fields["error_message"] == "Material not found in SAP"
        assert fields["retryable"] is True
        assert "raw_payload" not in fields

    def test_with_field_returns_new_record(self, sap_report):
        base = ErrorLogRecord.from_report(sap_report)
        extended = base.with_flow("orders-sync").with_fields({"attempt": 2})
        assert "flow" not in base.build()
        assert extended.build()["flow"] == "orders-sync"
        assert extended.build()["attempt"] == 2

    def test_raw_payload_is_redacted(self, sap_report):
        raw = {"errorMessage": {"session_id": "s3cr3t"}}
        fields = ErrorLogRecord.from_report(sap_report, raw).build()
        assert fields["raw_payload"]["errorMessage"]["session_id"] == REDACTED
        assert raw["errorMessage"]["session_id"] == "s3cr3t"

    def test_build_returns_copy(self, sap_report):
        record = ErrorLogRecord.from_report(sap_report)
        built = record.build()
        built["extra"] = 1
        assert "extra" not in record.build()


class TestLogReport:
    """log_report picks the level from retryability."""

    def test_retryable_logs_warning(self, sap_report, caplog):
        target = logging.getLogger("tests.logs.retryable")
        with caplog.at_level(logging.DEBUG, logger="tests.logs.retryable"):
            fields = log_report(target, sap_report, flow="materials")
        assert caplog.records[-1].levelno == logging.WARNING
        assert caplog.records[-1].error_record["flow"] == "materials"
        assert fields["flow"] == "materials"

    def test_non_retryable_logs_error(self, raml_report, caplog):
        target = logging.getLogger("tests.logs.fatal")
        with caplog.at_level(logging.DEBUG, logger="tests.logs.fatal"):
            log_report(target, raml_report)
        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert "corr-raml" in record.getMessage()
        assert "Invalid customer ID" in record.getMessage()


class TestConfigureLogging:
    """configure_logging installs exactly one package handler."""

    def test_handler_not_stacked(self):
        package_logger = configure_logging(LoggingConfig(level="debug"))
        configure_logging(LoggingConfig(level="warning", format="json"))
        ours = [h for h in package_logger.handlers if getattr(h, "_errorlens_handler", False)]
        assert len(ours) == 1
        assert isinstance(ours[0].formatter, JsonLineFormatter)
        assert package_logger.level == logging.WARNING
        assert package_logger.name == PACKAGE_LOGGER
        package_logger.removeHandler(ours[0])

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "errors.log"
        package_logger = configure_logging(LoggingConfig(file=str(log_file), format="json"))
        logging.getLogger("errorlens.test").error("boom", extra={"error_record": {"k": "v"}})
        for handler in list(package_logger.handlers):
            if getattr(handler, "_errorlens_handler", False):
                handler.close()
                package_logger.removeHandler(handler)
        line = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert line["message"] == "boom"
        assert line["k"] == "v"
        assert line["level"] == "ERROR"
