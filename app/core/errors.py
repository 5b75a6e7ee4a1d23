"""
app/core/errors.py

Purpose: HTTP error mapping

- SmsLinkError subclasses keep their own status code and error code
- Body validation and routing errors use the same envelope
- Anything unexpected becomes a 500 without leaking details in production
"""

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.exceptions import SmsLinkError
from app.core.logging import get_logger
from app.schemas.response import ErrorResponse

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "The SMS link service hit an unexpected error. Please retry shortly."


def error_response(status_code: int, error: str, code: str, details: Optional[Any] = None) -> JSONResponse:
    """JSON response in the {success: false, error, code, details} envelope."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, code=code, details=details).model_dump()
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Pydantic error list without the non-serializable ctx/input values."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(SmsLinkError)
    async def sms_link_error_handler(request: Request, exc: SmsLinkError):
        # Store outages are worth a log line; bad input and unknown links are not
        if exc.status_code >= 500:
            logger.error(
                f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
                extra={"short_id": request.path_params.get("short_id")}
            )
        return error_response(exc.status_code, exc.message, exc.code, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Unknown routes, wrong methods and other framework-level errors."""
        return error_response(exc.status_code, str(exc.detail), "HTTP_ERROR")

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Malformed request bodies (wrong JSON types, unparsable payloads)."""
        return error_response(422, "Input validation failed", "VALIDATION_ERROR", jsonable_errors(exc))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
            exc_info=True
        )
        message = INTERNAL_ERROR_MESSAGE if settings.is_production else str(exc)
        return error_response(500, message, "INTERNAL_ERROR")
