"""Pydantic schemas for classified error responses."""

from pydantic import BaseModel, ConfigDict, Field

from errorlens.classification.report import ClassificationReport, RetryPolicy


class RetryPolicySchema(BaseModel):
    """Retry instructions returned to API clients."""

    should_retry: bool
    max_retries: int = Field(..., ge=0)
    backoff_millis: int = Field(..., ge=0)
    strategy: str


class ErrorResponse(BaseModel):
    """Response body for a classified upstream error."""

    model_config = ConfigDict(frozen=True)

    error_type: str
    error_code: str
    message: str
    details: str
    source: str
    retryable: bool
    correlation_id: str
    timestamp: str
    retry: RetryPolicySchema

    @classmethod
    def from_report(cls, report: ClassificationReport, policy: RetryPolicy) -> "ErrorResponse":
        return cls(
            error_type=report.type,
            error_code=report.code,
            message=report.message,
            details=report.details,
            source=report.source,
            retryable=report.retryable,
            correlation_id=report.correlation_id,
            timestamp=report.timestamp,
            retry=RetryPolicySchema(**policy.to_dict()),
        )
