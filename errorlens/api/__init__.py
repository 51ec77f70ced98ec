"""FastAPI integration for classified upstream errors."""

from errorlens.api.handlers import UpstreamError, register_error_handlers
from errorlens.api.schemas import ErrorResponse

__all__ = ["ErrorResponse", "UpstreamError", "register_error_handlers"]
