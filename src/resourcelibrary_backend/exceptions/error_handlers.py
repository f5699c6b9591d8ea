"""
FastAPI exception handlers.

Every error leaves the service as ``{"error_code", "message"}`` JSON, with
``details`` for request validation errors and ``debug`` in dev mode only.
"""

import logging
import traceback
from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from resourcelibrary_backend.exceptions.exceptions import (
    BadRequestException,
    InternalServerException,
    NotFoundException,
    ResourceLibraryException,
    UnauthorizedException,
)
from resourcelibrary_backend.settings import settings

logger = logging.getLogger(__name__)

# Framework errors raised outside our code (unknown route, missing auth...)
HTTP_STATUS_EXCEPTIONS = {
    400: BadRequestException,
    401: UnauthorizedException,
    404: NotFoundException,
}


def _include_debug() -> bool:
    return (
        settings.DEBUG_MODE.lower() in ['dev', 'development', 'local']
        and not settings.DISABLE_API_DEBUG_INFO
    )


def _error_response(exc: ResourceLibraryException, details: Optional[dict[str, Any]] = None) -> JSONResponse:
    include_debug = _include_debug()
    error_response = exc.to_error_response(include_debug=include_debug)

    content = {
        "error_code": error_response.error_code,
        "message": error_response.message,
    }
    if details:
        content["details"] = details
    if include_debug and error_response.debug:
        content["debug"] = error_response.debug.model_dump(exclude_none=True)

    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers or {})


async def resourcelibrary_exception_handler(request: Request, exc: ResourceLibraryException) -> JSONResponse:
    log_error(request, exc)
    return _error_response(exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report Pydantic validation errors as VAL_001 with one entry per field."""
    errors = [
        {
            # loc starts with 'body' / 'query' / 'path'
            "field": " -> ".join(str(part) for part in error["loc"][1:]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning(
        f"Validation error on {request.method} {request.url.path}",
        extra={"validation_errors": errors},
    )

    exception = BadRequestException(
        detail="Request validation failed",
        context={"validation_errors": errors},
    )
    return _error_response(exception, details={"validation_errors": errors} if errors else None)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Handle HTTP errors raised by the framework.

    Statuses with a registry code are reported with it; any other status is
    kept as is with an ``HTTP_<status>`` code.
    """
    headers = getattr(exc, "headers", None)
    exception_class = HTTP_STATUS_EXCEPTIONS.get(exc.status_code)

    if exception_class is None:
        logger.warning(f"HTTP {exc.status_code} on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error_code": f"HTTP_{exc.status_code}", "message": str(exc.detail)},
            headers=headers,
        )

    exception = exception_class(detail=exc.detail, headers=headers)
    log_error(request, exception)
    return _error_response(exception)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback of an unexpected error and answer INT_001."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)

    exception = InternalServerException(
        detail="An unexpected error occurred",
        context={"exception_type": type(exc).__name__},
    )
    if _include_debug():
        exception.context["exception_message"] = str(exc)
        exception.context["traceback"] = "".join(traceback.format_exception(exc))

    return _error_response(exception)


def log_error(request: Request, exception: ResourceLibraryException) -> None:
    """Server errors are logged at error level with traceback, client errors at warning."""
    log_data = {
        "error_code": exception.error_code,
        "status_code": exception.status_code,
        "method": request.method,
        "path": request.url.path,
        "user_id": exception.user_id,
        "function": exception.function_name,
        "context": exception.context,
    }

    if exception.status_code >= 500:
        logger.error(f"Server error: {exception.error_code}", extra=log_data, exc_info=True)
    else:
        logger.warning(f"Client error: {exception.error_code}", extra=log_data)


def register_exception_handlers(app) -> None:
    app.add_exception_handler(ResourceLibraryException, resourcelibrary_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Registered custom exception handlers")
