"""Classification report: HTTP status mapping and retry decisions.

Both tables are static policy. The HTTP table is evaluated top to bottom and
the first matching rule wins, so specific rules precede general ones.
"""

from dataclasses import asdict, dataclass
from typing import Any

from errorlens.classification.extractor import ExtractedInfo
from errorlens.classification.registry import ErrorType
from errorlens.config import RetrySettings

DEFAULT_HTTP_STATUS = 500

SAP_SENTINEL_CODE = "SAP_ERROR"

# (kind, needles, status); kind is "contains" or "equals"
HTTP_STATUS_RULES: tuple[tuple[str, tuple[str, ...], int], ...] = (
    ("contains", ("TIMEOUT",), 504),
    ("contains", ("VALIDATION", "BAD_REQUEST", "INVALID"), 400),
    ("contains", ("UNAUTHORIZED", "AUTHENTICATION"), 401),
    ("contains", ("FORBIDDEN", "PERMISSION"), 403),
    ("contains", ("NOT_FOUND",), 404),
    ("contains", ("RATE_LIMIT", "TOO_MANY_REQUESTS"), 429),
    ("equals", (SAP_SENTINEL_CODE,), 502),
    ("contains", ("CONNECTIVITY", "GATEWAY"), 502),
    ("contains", ("UNAVAILABLE",), 503),
)

RETRYABLE_TYPES: frozenset[str] = frozenset({
    ErrorType.SAP.value,
    ErrorType.GATEWAY.value,
})


def map_code_to_http_status(code: Any) -> int:
    """Map a machine error code to an HTTP status.

    Args:
        code: Extracted error code; non-strings map to the default.

    Returns:
        HTTP status from the first matching rule, else 500.
    """
    if not isinstance(code, str):
        return DEFAULT_HTTP_STATUS
    normalized = code.strip().upper()
    for kind, needles, status in HTTP_STATUS_RULES:
        if kind == "equals":
            if normalized in needles:
                return status
        elif any(needle in normalized for needle in needles):
            return status
    return DEFAULT_HTTP_STATUS


def is_retryable(error_type: Any) -> bool:
    """Return True for connectivity-flavoured error types."""
    if isinstance(error_type, ErrorType):
        error_type = error_type.value
    return error_type in RETRYABLE_TYPES


@dataclass(frozen=True)
class RetryPolicy:
    """Retry instructions for one error type. Always fully populated."""

    should_retry: bool
    max_retries: int
    backoff_millis: int
    strategy: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


NO_RETRY = RetryPolicy(should_retry=False, max_retries=0, backoff_millis=0, strategy="none")


def retry_config(error_type: Any, settings: RetrySettings | None = None) -> RetryPolicy:
    """Derive the retry policy for ``error_type``.

    Args:
        error_type: ErrorType or its string value.
        settings: Configured retry numbers; defaults apply when None.

    Returns:
        Configured policy for retryable types, NO_RETRY otherwise.
    """
    if not is_retryable(error_type):
        return NO_RETRY
    settings = settings or RetrySettings()
    return RetryPolicy(
        should_retry=True,
        max_retries=settings.max_retries,
        backoff_millis=settings.backoff_millis,
        strategy=settings.strategy,
    )


@dataclass(frozen=True)
class ClassificationReport:
    """Extracted fields plus the derived HTTP status and retry decision."""

    message: str
    code: str
    details: str
    source: str
    type: str
    http_status: int
    retryable: bool
    timestamp: str
    correlation_id: str

    @classmethod
    def from_info(
        cls,
        info: ExtractedInfo,
        timestamp: str,
        correlation_id: str,
    ) -> "ClassificationReport":
        return cls(
            message=info.message,
            code=info.code,
            details=info.details,
            source=info.source,
            type=info.type,
            http_status=map_code_to_http_status(info.code),
            retryable=is_retryable(info.type),
            timestamp=timestamp,
            correlation_id=correlation_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HttpErrorResponse:
    """HTTP status paired with the report that produced it."""

    http_status: int
    error: ClassificationReport

    def to_dict(self) -> dict[str, Any]:
        return {"http_status": self.http_status, "error": self.error.to_dict()}
