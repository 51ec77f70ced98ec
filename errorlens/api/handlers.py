"""FastAPI integration: turn upstream error payloads into HTTP responses.

Usage:
    app = FastAPI()
    register_error_handlers(app, config)

    @app.get("/orders/{order_id}")
    async def get_order(order_id: str):
        payload = await backend.fetch(order_id)
        if "errorMessage" in payload:
            raise UpstreamError(payload, hint="SAP")
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from errorlens.api.schemas import ErrorResponse
from errorlens.classification.extractor import AUTO
from errorlens.classification.handle import from_value
from errorlens.config import ErrorLensConfig
from errorlens.logs import log_report

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Raised by route code that received an error payload from a backend.

    Attributes:
        payload: The raw upstream payload, passed through unmodified.
        hint: Optional shape id to try before auto-detection.
    """

    def __init__(self, payload: Any, hint: str | None = None) -> None:
        super().__init__("Upstream system returned an error")
        self.payload = payload
        self.hint = hint


def register_error_handlers(app: FastAPI, config: ErrorLensConfig | None = None) -> None:
    """Install the UpstreamError handler on ``app``.

    Args:
        app: FastAPI application.
        config: Supplies the default hint, correlation id header and retry
            numbers; defaults apply when None.
    """
    config = config or ErrorLensConfig()
    header = config.classification.correlation_id_header

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
        """Classify the upstream payload and respond with the mapped status."""
        handle = from_value(
            exc.payload,
            request.headers.get(header),
            retry_settings=config.retry,
        ).of_type(exc.hint or config.classification.default_hint or AUTO)

        report = handle.info()
        log_report(logger, report, exc.payload, path=request.url.path)

        body = ErrorResponse.from_report(report, handle.retry_config())
        return JSONResponse(
            status_code=report.http_status,
            content=body.model_dump(),
            headers={header: report.correlation_id},
        )
