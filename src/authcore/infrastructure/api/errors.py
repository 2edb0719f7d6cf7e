"""Mapping of exceptions to HTTP error envelopes.

Routes let domain exceptions propagate; the handlers registered here turn
them into the uniform envelope with a stable ``code``.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from authcore.core.config import get_settings
from authcore.core.logging import get_logger
from authcore.domain.exceptions import (
    AccountNotActiveError,
    AlreadyExistsError,
    CredentialError,
    InvalidCredentialsError,
    InvalidTokenError,
    PersistenceUnavailableError,
    TokenAlreadyUsedError,
    TokenExpiredError,
    TokenNotFoundError,
    TokenRevokedError,
    UserNotFoundError,
)
from authcore.infrastructure.api.schemas import error_response

logger = get_logger(__name__)

TOKEN_ERRORS = (
    InvalidTokenError,
    TokenNotFoundError,
    TokenRevokedError,
    TokenExpiredError,
    TokenAlreadyUsedError,
)

STATUS_BY_ERROR: dict[type[CredentialError], int] = {
    AlreadyExistsError: status.HTTP_409_CONFLICT,
    InvalidCredentialsError: status.HTTP_401_UNAUTHORIZED,
    AccountNotActiveError: status.HTTP_403_FORBIDDEN,
    UserNotFoundError: status.HTTP_404_NOT_FOUND,
    **{error: status.HTTP_400_BAD_REQUEST for error in TOKEN_ERRORS},
}

CODE_BY_STATUS = {
    status.HTTP_400_BAD_REQUEST: "BAD_REQUEST",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


class ApiError(Exception):
    """An error response raised from a route or dependency."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self.code = code
        self.message = message
        self.headers = headers
        super().__init__(message)

    @classmethod
    def from_credential_error(cls, exc: CredentialError, status_code: int) -> "ApiError":
        """Re-raise a domain error with a status other than its default one."""
        return cls(status_code, exc.code, exc.message)


def status_for(exc: CredentialError) -> int:
    """HTTP status for a domain error, looked up along its class hierarchy."""
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_400_BAD_REQUEST


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message, exc.code),
            headers=exc.headers,
        )

    @app.exception_handler(CredentialError)
    async def credential_error_handler(request: Request, exc: CredentialError) -> JSONResponse:
        return JSONResponse(
            status_code=status_for(exc),
            content=error_response(exc.message, exc.code),
        )

    @app.exception_handler(PersistenceUnavailableError)
    async def persistence_error_handler(
        request: Request, exc: PersistenceUnavailableError
    ) -> JSONResponse:
        logger.error("Persistence unavailable", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=error_response("Service temporarily unavailable", exc.code),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
            for error in exc.errors()
        )
        logger.info("Request validation failed", path=request.url.path, errors=details)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_response("Invalid request data", "VALIDATION_ERROR", details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(
                str(exc.detail), CODE_BY_STATUS.get(exc.status_code, "HTTP_ERROR")
            ),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response(
                "Internal server error",
                "INTERNAL_ERROR",
                str(exc) if get_settings().debug else "An unexpected error occurred",
            ),
        )
