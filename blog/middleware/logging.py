"""
Structured Logging Middleware

Request logging with a per-request ID. The ID is taken from the incoming
X-Request-ID header (or generated), echoed on the response, and attached to
every log record emitted while the request is being served, including the
GraphQL error logs written from inside resolvers.
"""

import json
import logging
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Record attributes copied into the JSON document when present
EXTRA_FIELDS = ("method", "path", "status_code", "duration_ms", "client_ip", "error_code")

# Paths polled by load balancers; not worth an access log line
QUIET_PATHS = frozenset({"/health"})


class RequestIdFilter(logging.Filter):
    """Stamp each record with the ID of the request being served."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("")
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        document = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", ""),
        }
        document.update({key: getattr(record, key) for key in EXTRA_FIELDS if hasattr(record, key)})

        if record.exc_info:
            document["exception"] = self.formatException(record.exc_info)

        return json.dumps(document, default=str)


def _client_ip(scope: Scope, headers: Headers) -> str:
    forwarded = headers.get("x-forwarded-for") or headers.get("x-real-ip")
    if forwarded:
        return forwarded.split(",")[0].strip()
    client = scope.get("client")
    return client[0] if client else "unknown"


class StructuredLoggingMiddleware:
    """
    Access log plus request ID propagation.

    Written as plain ASGI so the request ID context variable is set in the
    same context the endpoint runs in.
    """

    def __init__(self, app: ASGIApp, logger_name: str = "blog.access"):
        self.app = app
        self.logger = logging.getLogger(logger_name)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        request_id = headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_var.set(request_id)
        started = time.perf_counter()
        status_code = 500

        async def send_with_request_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        except Exception as e:
            self._log(scope, headers, 500, started, error=str(e))
            raise
        else:
            self._log(scope, headers, status_code, started)
        finally:
            request_id_var.reset(token)

    def _log(self, scope: Scope, headers: Headers, status_code: int, started: float, error: str | None = None) -> None:
        path = scope.get("path", "")
        if path in QUIET_PATHS:
            return

        duration_ms = (time.perf_counter() - started) * 1000
        method = scope.get("method", "")

        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        message = f"{method} {path} - {status_code} ({duration_ms:.2f}ms)"
        if error:
            message += f" - Error: {error}"

        self.logger.log(
            level,
            message,
            extra={
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": _client_ip(scope, headers),
            },
        )


def setup_structured_logging(
    log_level: str = "INFO",
    json_format: bool = True,
    log_file: str | None = None,
) -> None:
    """
    Install a single root handler with the request ID filter.

    Args:
        log_level: Level for the root and blog loggers
        json_format: JSON lines when True, a readable text format otherwise
        log_file: Write to this file instead of stderr
    """
    level = logging.getLevelName(log_level.upper())

    handler: logging.Handler = logging.FileHandler(log_file) if log_file else logging.StreamHandler()
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"))
    handler.addFilter(RequestIdFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in ("blog", "blog.access"):
        logging.getLogger(name).setLevel(level)
    for name in ("uvicorn", "uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_request_id() -> str:
    """ID of the request currently being served, or an empty string."""
    return request_id_var.get("")
