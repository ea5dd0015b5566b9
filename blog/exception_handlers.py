"""
Exception handlers for the plain HTTP routes.

GraphQL errors never reach these handlers; they are reported inside the
GraphQL response by `blog.graphql.schema.BlogSchema`. What is left is the
health check, unknown routes and the middleware, which all answer with the
same envelope:

{
    "error": {
        "status_code": 504,
        "error_code": "REQUEST_TIMEOUT",
        "message": "Request did not complete within 30 seconds",
        "type": "Gateway Timeout",
        "details": {"timeout_seconds": 30.0},
        "path": "/graphql",
        "request_id": "3f0c..."
    }
}
"""

import logging
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from blog.exceptions import BlogError, ErrorCode
from blog.middleware.logging import get_request_id

logger = logging.getLogger(__name__)

# Overrides where the standard reason phrase reads poorly in an API error
ERROR_TYPES = {
    422: "Validation Error",
}


def get_error_type(status_code: int) -> str:
    """Short label for a status code, e.g. 404 -> "Not Found"."""
    if status_code in ERROR_TYPES:
        return ERROR_TYPES[status_code]
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def create_error_response(
    status_code: int,
    message: str,
    error_code: str | ErrorCode | None = None,
    details: dict[str, Any] | None = None,
    path: str | None = None,
) -> JSONResponse:
    """
    Render the error envelope.

    Optional members (`error_code`, `details`, `path`, `request_id`) are
    left out when empty.
    """
    body: dict[str, Any] = {
        "status_code": status_code,
        "message": message,
        "type": get_error_type(status_code),
    }
    if error_code:
        body["error_code"] = error_code.value if isinstance(error_code, ErrorCode) else error_code
    if details:
        body["details"] = details
    if path:
        body["path"] = path
    request_id = get_request_id()
    if request_id:
        body["request_id"] = request_id

    return JSONResponse(status_code=status_code, content={"error": body})


async def blog_exception_handler(request: Request, exc: BlogError) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        f"{type(exc).__name__}: {exc.message}",
        extra={"status_code": exc.status_code, "error_code": exc.error_code.value, "path": request.url.path},
    )
    return create_error_response(
        status_code=exc.status_code,
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details,
        path=request.url.path,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown routes, wrong methods and other framework-level refusals."""
    logger.warning(f"HTTP {exc.status_code}: {exc.detail}", extra={"status_code": exc.status_code, "path": request.url.path})
    response = create_error_response(status_code=exc.status_code, message=str(exc.detail), path=request.url.path)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback; the client only learns that something failed."""
    logger.exception(f"Unhandled exception on {request.url.path}: {exc}")
    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="An unexpected error occurred",
        error_code=ErrorCode.INTERNAL_ERROR,
        path=request.url.path,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BlogError, blog_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
