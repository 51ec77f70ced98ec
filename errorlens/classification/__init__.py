"""Structural error classification and extraction engine.

This package provides:
- Shape registry of recognized upstream error formats
- Matcher with first-match-wins precedence
- Extractor with auto-detect and hinted paths
- Classification report (HTTP status, retry policy)
- Immutable fluent handle over raw payloads

Error types:
- RAML_ERROR: RAML-defined API errors
- SAP_ERROR: SAP OData backend errors
- SF_ERROR: Salesforce/Apex errors
- GATEWAY_ERROR: API gateway wrappers
- UNKNOWN_ERROR: anything else
"""

from errorlens.classification.extractor import (
    ExtractedInfo,
    extract_auto,
    extract_by_hint,
)
from errorlens.classification.handle import (
    ErrorHandle,
    details,
    error_code,
    error_type,
    from_value,
    get_message,
    info,
    is_retryable,
    retry_config,
    source,
    to_http_response,
)
from errorlens.classification.matcher import MatchResult, classify
from errorlens.classification.registry import (
    DEFAULT_REGISTRY,
    ErrorShape,
    ErrorType,
    ShapeRegistry,
)
from errorlens.classification.report import (
    ClassificationReport,
    HttpErrorResponse,
    RetryPolicy,
    map_code_to_http_status,
)

__all__ = [
    # Registry
    "ErrorType",
    "ErrorShape",
    "ShapeRegistry",
    "DEFAULT_REGISTRY",
    # Matcher / extractor
    "MatchResult",
    "classify",
    "ExtractedInfo",
    "extract_auto",
    "extract_by_hint",
    # Report
    "ClassificationReport",
    "HttpErrorResponse",
    "RetryPolicy",
    "map_code_to_http_status",
    # Handle
    "ErrorHandle",
    "from_value",
    "get_message",
    "error_type",
    "error_code",
    "details",
    "source",
    "info",
    "to_http_response",
    "is_retryable",
    "retry_config",
]
