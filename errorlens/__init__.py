"""errorlens: classify heterogeneous upstream error payloads.

Usage:
    from errorlens import from_value

    handle = from_value(payload)
    handle.get_message()
    handle.error_type()
    handle.to_http_response().http_status
"""

from errorlens.classification import (
    ClassificationReport,
    ErrorHandle,
    ErrorType,
    ExtractedInfo,
    HttpErrorResponse,
    RetryPolicy,
    from_value,
)

__all__ = [
    "ClassificationReport",
    "ErrorHandle",
    "ErrorType",
    "ExtractedInfo",
    "HttpErrorResponse",
    "RetryPolicy",
    "from_value",
]
