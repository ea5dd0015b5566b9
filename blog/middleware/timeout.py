"""
Request Timeout Middleware

Bounds the time spent on a single HTTP request. Requests that have not
started their response when the budget runs out are answered with 504.
"""

import asyncio
import logging

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from blog.exception_handlers import create_error_response
from blog.exceptions import RequestTimeoutError

logger = logging.getLogger(__name__)


class RequestTimeoutMiddleware:
    def __init__(self, app: ASGIApp, timeout_seconds: float = 30.0):
        self.app = app
        self.timeout_seconds = timeout_seconds

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self.timeout_seconds or self.timeout_seconds <= 0:
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(self.app(scope, receive, send_wrapper), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            if response_started:
                # Headers already went out; nothing sensible left to send
                raise

            exc = RequestTimeoutError(self.timeout_seconds)
            path = scope.get("path", "")
            logger.warning(f"Request timed out after {self.timeout_seconds}s: {path}")
            response = create_error_response(
                status_code=exc.status_code,
                message=exc.message,
                error_code=exc.error_code,
                details=exc.details,
                path=path,
            )
            await response(scope, receive, send)
