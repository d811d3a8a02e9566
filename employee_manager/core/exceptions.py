"""
Global exception handling for the application.
Every failure a handler can produce is one of the AppError variants below;
the handlers turn them into `{"message", "code", "errors"}` JSON bodies.
"""

from typing import Any, Dict, List, Optional

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)

FieldError = Dict[str, str]


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        errors: Optional[List[FieldError]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.errors = errors or []
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing input, with one entry per offending field."""
    def __init__(self, errors: List[FieldError], message: str = "Validation failed"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, errors)


class ConflictError(AppError):
    """Uniqueness violation."""
    def __init__(self, message: str = "Resource already exists", field: Optional[str] = None):
        self.field = field
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class UnauthenticatedError(AppError):
    """Missing, malformed or expired bearer token."""
    def __init__(self, message: str = "No token, authorization denied"):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class InvalidCredentialsError(AppError):
    """Unknown email or wrong password. Both cases share one message."""
    def __init__(self):
        super().__init__("Invalid credentials", status.HTTP_401_UNAUTHORIZED)


class NotFoundError(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class StoreUnavailableError(AppError):
    """The document store cannot be reached."""
    def __init__(
        self,
        message: str = "Database connection error. Please make sure MongoDB is running.",
    ):
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)


def error_body(exc: AppError) -> Dict[str, Any]:
    body: Dict[str, Any] = {"message": exc.message, "code": exc.__class__.__name__}
    if exc.errors:
        body["errors"] = exc.errors
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=error_body(exc), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Framework-level parsing failures (bad JSON, wrong body type) use the same 400 shape."""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc) or "body", "message": err.get("msg", "Invalid value")})
    return await app_error_handler(request, ValidationError(errors))


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""

    if isinstance(exc, AppError):
        return await app_error_handler(request, exc)

    logger.exception("Unexpected error occurred", path=request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "message": "An unexpected error occurred. Please try again later.",
            "code": "InternalServerError",
        },
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, global_exception_handler)
