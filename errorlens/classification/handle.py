"""Immutable fluent handle over a raw error payload.

Usage:
    handle = from_value(payload).of_type("SAP").with_correlation_id("req-42")
    handle.get_message()
    handle.to_http_response()

Configuration methods return new handles. Terminal queries re-derive their
answer from (value, hint) on every call. The clock is read once, when the
handle is created, so repeated reports from one handle are identical. The
clock and the correlation id factory are injectable.

Static equivalents (``get_message(value)``, ``info(value)``, ...) cover
single-call use without keeping a handle.
"""

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any

from errorlens.classification.extractor import AUTO, ExtractedInfo, extract_by_hint
from errorlens.classification.registry import DEFAULT_REGISTRY, ShapeRegistry
from errorlens.classification.report import (
    ClassificationReport,
    HttpErrorResponse,
    RetryPolicy,
    is_retryable as _is_retryable,
    retry_config as _retry_config,
)
from errorlens.config import RetrySettings

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]


def utc_now() -> datetime:
    return datetime.now(UTC)


def new_correlation_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class ErrorHandle:
    """Caller-facing view of one raw payload.

    Attributes:
        value: The caller's payload; never mutated.
        hint: Shape id to try first, or "auto".
        correlation_id: Identifier stamped onto reports.
        timestamp: Creation time stamped onto reports; configuration
            calls keep it.
    """

    value: Any
    hint: str = AUTO
    correlation_id: str = ""
    timestamp: str = field(default_factory=lambda: utc_now().isoformat())
    registry: ShapeRegistry = field(default=DEFAULT_REGISTRY, repr=False, compare=False)
    retry_settings: RetrySettings | None = field(default=None, repr=False, compare=False)

    # Configuration

    def of_type(self, hint: str) -> "ErrorHandle":
        return replace(self, hint=hint)

    def with_correlation_id(self, correlation_id: str) -> "ErrorHandle":
        return replace(self, correlation_id=correlation_id)

    # Terminal queries

    def _extract(self) -> ExtractedInfo:
        return extract_by_hint(self.value, self.hint, self.registry)

    def get_message(self) -> str:
        return self._extract().message

    def error_type(self) -> str:
        return self._extract().type

    def error_code(self) -> str:
        return self._extract().code

    def details(self) -> str:
        return self._extract().details

    def source(self) -> str:
        return self._extract().source

    def raw(self) -> Any:
        return self.value

    def extracted(self) -> ExtractedInfo:
        return self._extract()

    def info(self) -> ClassificationReport:
        """Build the full classification report for this payload."""
        return ClassificationReport.from_info(
            self._extract(),
            timestamp=self.timestamp,
            correlation_id=self.correlation_id,
        )

    def to_http_response(self) -> HttpErrorResponse:
        report = self.info()
        return HttpErrorResponse(http_status=report.http_status, error=report)

    def is_retryable(self) -> bool:
        return _is_retryable(self.error_type())

    def retry_config(self) -> RetryPolicy:
        return _retry_config(self.error_type(), self.retry_settings)


def from_value(
    value: Any,
    correlation_id: str | None = None,
    *,
    clock: Clock | None = None,
    id_factory: IdFactory | None = None,
    registry: ShapeRegistry | None = None,
    retry_settings: RetrySettings | None = None,
) -> ErrorHandle:
    """Create a handle for ``value`` with auto-detection enabled.

    Args:
        value: Raw payload (mapping, string, None, ...).
        correlation_id: Explicit id; generated with ``id_factory`` if omitted.
        clock: Wall-clock reader, read once here to stamp every report.
        id_factory: Correlation id generator.
        registry: Shape registry to classify against.
        retry_settings: Numbers for retry_config().

    Returns:
        A fresh ErrorHandle with hint "auto".
    """
    if correlation_id is None:
        correlation_id = (id_factory or new_correlation_id)()
    return ErrorHandle(
        value=value,
        hint=AUTO,
        correlation_id=correlation_id,
        timestamp=(clock or utc_now)().isoformat(),
        registry=registry or DEFAULT_REGISTRY,
        retry_settings=retry_settings,
    )


def _static(value: Any, hint: str | None) -> ErrorHandle:
    return ErrorHandle(value=value, hint=hint or AUTO)


def get_message(value: Any, hint: str | None = None) -> str:
    return _static(value, hint).get_message()


def error_type(value: Any, hint: str | None = None) -> str:
    return _static(value, hint).error_type()


def error_code(value: Any, hint: str | None = None) -> str:
    return _static(value, hint).error_code()


def details(value: Any, hint: str | None = None) -> str:
    return _static(value, hint).details()


def source(value: Any, hint: str | None = None) -> str:
    return _static(value, hint).source()


def is_retryable(value: Any, hint: str | None = None) -> bool:
    return _static(value, hint).is_retryable()


def retry_config(
    value: Any,
    hint: str | None = None,
    settings: RetrySettings | None = None,
) -> RetryPolicy:
    return _retry_config(error_type(value, hint), settings)


def info(
    value: Any,
    hint: str | None = None,
    correlation_id: str | None = None,
    *,
    clock: Clock | None = None,
    id_factory: IdFactory | None = None,
) -> ClassificationReport:
    """One-shot report for ``value`` without keeping a handle."""
    handle = from_value(value, correlation_id, clock=clock, id_factory=id_factory)
    return handle.of_type(hint or AUTO).info()


def to_http_response(
    value: Any,
    hint: str | None = None,
    correlation_id: str | None = None,
    *,
    clock: Clock | None = None,
    id_factory: IdFactory | None = None,
) -> HttpErrorResponse:
    handle = from_value(value, correlation_id, clock=clock, id_factory=id_factory)
    return handle.of_type(hint or AUTO).to_http_response()
