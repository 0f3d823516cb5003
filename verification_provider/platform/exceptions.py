import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from verification_provider.platform.response import api_response

logger = logging.getLogger(__name__)


class VerificationProviderError(Exception):
    """Base class for every error raised by the verification core."""

    code = "VERIFICATION_PROVIDER_ERROR"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedPayloadError(VerificationProviderError, ValueError):
    """Queue payload could not be parsed or lacks a required field."""

    code = "MALFORMED_PAYLOAD"
    http_status = status.HTTP_400_BAD_REQUEST


class InvalidArgumentError(VerificationProviderError, ValueError):
    """A required input was absent."""

    code = "INVALID_ARGUMENT"
    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, argument: str, message: str | None = None):
        super().__init__(message or f"'{argument}' is required")
        self.argument = argument


class PersistenceError(VerificationProviderError):
    """The verification record store failed to complete an operation."""

    code = "PERSISTENCE_ERROR"
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, operation: str, message: str):
        super().__init__(f"Store {operation} failed: {message}")
        self.operation = operation


def add_exception_handlers(app):
    @app.exception_handler(VerificationProviderError)
    async def verification_error_handler(request: Request, exc: VerificationProviderError):
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
        # Internal detail stays in the log; callers only see the category
        message = "Service temporarily unavailable" if isinstance(exc, PersistenceError) else exc.message
        return api_response(message=message, status_code=exc.http_status, data={"code": exc.code})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return api_response(message=str(exc.detail) or "Error", status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return api_response(
            message="Validation failed",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            data={"errors": exc.errors()},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return api_response(
            message="Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
