"""Error taxonomy and its mapping onto the HTTP error envelope.

Every failure leaves the API as ``{"error": {"message": ...}}`` with a status
code chosen by exception type:

    NotAuthenticatedError        401
    ForbiddenError               403
    ObjectNotFoundError          404
    ValidationError / bad input  400
    ExpectedVersionError         409
    anything else                500 (message is generic, details are logged)
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import (
    ExpectedVersionError,
    InvalidDataError,
    InvalidOperationError,
    InvalidStateError,
    ObjectNotFoundError,
    ValidationError,
)
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)


class NotAuthenticatedError(Exception):
    """No identity could be resolved for the caller."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)
        self.message = message


class ForbiddenError(Exception):
    """The caller is known but lacks the role or ownership required."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)
        self.message = message


def flatten_messages(messages: Any) -> str:
    """Collapse Protean's ``{field: [msg, ...]}`` messages into one sentence."""
    if isinstance(messages, dict):
        parts = []
        for value in messages.values():
            parts.extend(value if isinstance(value, list | tuple) else [value])
        return "; ".join(str(part) for part in parts)
    if isinstance(messages, list | tuple):
        return "; ".join(str(part) for part in messages)
    return str(messages)


def error_response(status_code: int, message: str, details: Any = None) -> JSONResponse:
    error: dict[str, Any] = {"message": message}
    if details is not None:
        error["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content={"error": error})


def register_exception_handlers(app: FastAPI) -> None:
    """Map the error taxonomy onto HTTP responses for ``app``."""

    @app.exception_handler(NotAuthenticatedError)
    async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError) -> JSONResponse:
        return error_response(401, exc.message)

    @app.exception_handler(ForbiddenError)
    async def forbidden_handler(request: Request, exc: ForbiddenError) -> JSONResponse:
        logger.warning("request.forbidden", path=request.url.path, reason=exc.message)
        return error_response(403, exc.message)

    @app.exception_handler(ObjectNotFoundError)
    async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
        return error_response(404, str(exc) or "Not found")

    @app.exception_handler(ValidationError)
    @app.exception_handler(InvalidDataError)
    async def validation_error_handler(request: Request, exc: ValidationError | InvalidDataError) -> JSONResponse:
        return error_response(400, flatten_messages(exc.messages), details=exc.messages)

    @app.exception_handler(InvalidOperationError)
    @app.exception_handler(InvalidStateError)
    async def invalid_operation_handler(
        request: Request, exc: InvalidOperationError | InvalidStateError
    ) -> JSONResponse:
        return error_response(400, str(exc))

    @app.exception_handler(ExpectedVersionError)
    async def conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
        logger.warning("request.version_conflict", path=request.url.path)
        return error_response(409, "The resource was modified concurrently, please retry")

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(400, "Invalid request", details=exc.errors())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request.unhandled_error", path=request.url.path)
        return error_response(500, "Internal server error")
