"""Error Handlers — every failure leaving the app carries the RemotingError envelope.

Invariants:
    - RemotingError → its own envelope and http_status
    - Routing misses (404, 405 from Starlette) → UNKNOWN_ROUTE / METHOD_NOT_ALLOWED
      envelopes, keeping the Allow header
    - Exception (catch-all) → INTERNAL_ERROR envelope, never leaks internal details

Design Decisions:
    - No RequestValidationError layer: operation endpoints read the raw body and
      the Dispatcher reports bad input as MALFORMED_PAYLOAD itself
    - Framework errors are converted into RemotingError first, so to_response()
      stays the single place the envelope is built
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from remoting.core.errors import (
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    MethodNotAllowedError,
    RemotingError,
    UnknownRouteError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_remoting_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_remoting_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RemotingError)
    async def remoting_error_handler(request: Request, exc: RemotingError):
        """RemotingError raised outside the Dispatcher, e.g. by the fallback route."""
        return _envelope(request, exc)


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _envelope(request, _from_http_exception(request, exc), exc.headers)


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc!r}",
            exc_info=True,
        )
        error = RemotingError(
            "An unexpected error occurred", "INTERNAL_ERROR",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
            ErrorContext(path=request.url.path),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
        return JSONResponse(status_code=error.http_status, content=error.to_response())


def _from_http_exception(
    request: Request, exc: StarletteHTTPException,
) -> RemotingError:
    path = request.url.path
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return UnknownRouteError(path)
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return MethodNotAllowedError(request.method, path)
    return RemotingError(
        str(exc.detail), "HTTP_ERROR", ErrorCategory.INTERNAL,
        ErrorSeverity.WARNING, ErrorContext(path=path), exc.status_code,
    )


def _envelope(
    request: Request, exc: RemotingError, headers: dict[str, str] | None = None,
) -> JSONResponse:
    logger.warning(
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "status_code": exc.http_status,
        },
    )
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(), headers=headers,
    )
