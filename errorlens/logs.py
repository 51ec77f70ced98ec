"""Logging setup and structured log records for classified errors.

The classification engine itself only logs at DEBUG. Callers that want one
structured line per upstream failure build an ErrorLogRecord from a report
and emit it with log_report(). Raw payloads are redacted before they are
attached to a record.
"""

import json
import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from errorlens.classification.report import ClassificationReport
from errorlens.config import LoggingConfig
from errorlens.utils.redaction import redact_payload, redact_text

PACKAGE_LOGGER = "errorlens"

TEXT_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"


class JsonLineFormatter(logging.Formatter):
    """One JSON object per line; ``error_record`` extras are merged in."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra = getattr(record, "error_record", None)
        if isinstance(extra, Mapping):
            payload.update(extra)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Attach a single handler to the package logger.

    Calling it again replaces the previous handler instead of stacking.

    Args:
        config: Level, format ("text" or "json") and optional file path.

    Returns:
        The configured package logger.
    """
    config = config or LoggingConfig()
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    for existing in list(package_logger.handlers):
        if getattr(existing, "_errorlens_handler", False):
            package_logger.removeHandler(existing)
            existing.close()

    if config.file:
        handler: logging.Handler = logging.FileHandler(config.file)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler._errorlens_handler = True  # type: ignore[attr-defined]

    if config.format == "json":
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    package_logger.addHandler(handler)
    package_logger.setLevel(config.level.upper())
    return package_logger


@dataclass(frozen=True)
class ErrorLogRecord:
    """Immutable accumulation of log fields for one classified error.

    Every ``with_*`` method returns a new record.
    """

    fields: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_report(cls, report: ClassificationReport, raw: Any = None) -> "ErrorLogRecord":
        base = {
            "correlation_id": report.correlation_id,
            "timestamp": report.timestamp,
            "error_type": report.type,
            "error_code": report.code,
            "error_message": redact_text(report.message),
            "error_details": redact_text(report.details),
            "error_source": report.source,
            "http_status": report.http_status,
            "retryable": report.retryable,
        }
        record = cls(MappingProxyType(base))
        if raw is not None:
            record = record.with_field("raw_payload", redact_payload(raw))
        return record

    def with_field(self, name: str, value: Any) -> "ErrorLogRecord":
        return replace(self, fields=MappingProxyType({**self.fields, name: value}))

    def with_fields(self, values: Mapping[str, Any]) -> "ErrorLogRecord":
        return replace(self, fields=MappingProxyType({**self.fields, **values}))

    def with_flow(self, flow_name: str) -> "ErrorLogRecord":
        return self.with_field("flow", flow_name)

    def build(self) -> dict[str, Any]:
        return dict(self.fields)


def log_report(
    target: logging.Logger,
    report: ClassificationReport,
    raw: Any = None,
    **extra_fields: Any,
) -> dict[str, Any]:
    """Emit one log line for ``report`` and return the fields logged.

    Retryable errors are logged at WARNING, everything else at ERROR.
    """
    record = ErrorLogRecord.from_report(report, raw)
    if extra_fields:
        record = record.with_fields(extra_fields)
    built = record.build()
    level = logging.WARNING if report.retryable else logging.ERROR
    target.log(
        level,
        "[%s] %s: %s",
        report.correlation_id,
        report.type,
        built["error_message"],
        extra={"error_record": built},
    )
    return built
