"""ASGI middleware for CORS headers and access logging.

Both wrappers are plain ASGI callables so they see the raw
``http.response.start`` message: the access log records the status the
handler actually sent, and CORS headers are stamped on every response.
Install order (outermost first): CORSMiddleware, AccessLogMiddleware.
"""

import asyncio
import time
import uuid
from typing import Optional

import structlog
from starlette.datastructures import MutableHeaders
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = structlog.get_logger(__name__)


class CORSMiddleware:
    """Permissive cross-origin headers with a fixed allowed origin.

    Every OPTIONS request is answered here with 204 and never reaches the
    wrapped application.
    """

    def __init__(
        self,
        app: ASGIApp,
        allow_origin: str = "http://localhost:3000",
        allow_headers: str = "Content-Type, Authorization",
        allow_methods: str = "GET, POST, PUT, DELETE, OPTIONS",
        allow_credentials: bool = True,
    ) -> None:
        self.app = app
        self.cors_headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Credentials": "true" if allow_credentials else "false",
            "Access-Control-Allow-Headers": allow_headers,
            "Access-Control-Allow-Methods": allow_methods,
        }

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if scope["method"] == "OPTIONS":
            response = Response(status_code=204, headers=self.cors_headers)
            await response(scope, receive, send)
            return

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in self.cors_headers.items():
                    headers[name] = value
            await send(message)

        await self.app(scope, receive, send_with_cors)


class AccessLogMiddleware:
    """Access log with request tracing.

    Features:
    - Generates unique request_id (UUID4) for each request
    - Binds request_id to structlog context (appears in all logs of the request)
    - Adds X-Request-ID response header for client correlation
    - Logs method, path, real status code and duration once the request ends
    - Optional deadline: a handler that has not started its response within
      ``request_timeout`` seconds is cancelled and answered with 504
    - Unhandled exceptions are logged with their traceback and answered with
      500 here, inside the CORS wrapper
    """

    def __init__(self, app: ASGIApp, request_timeout: Optional[float] = None) -> None:
        self.app = app
        self.request_timeout = request_timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid.uuid4())
        method = scope["method"]
        path = scope["path"]
        status_code = 500
        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code, response_started
            if message["type"] == "http.response.start":
                status_code = message["status"]
                response_started = True
                MutableHeaders(scope=message).append("X-Request-ID", request_id)
            await send(message)

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            start_time = time.perf_counter()
            try:
                await asyncio.wait_for(
                    self.app(scope, receive, send_wrapper),
                    timeout=self.request_timeout,
                )
            except asyncio.TimeoutError:
                logger.error(
                    "Request deadline exceeded",
                    method=method,
                    path=path,
                    timeout=self.request_timeout,
                )
                if not response_started:
                    timeout_response = JSONResponse(
                        status_code=504,
                        content={"error": "request timed out"},
                    )
                    await timeout_response(scope, receive, send_wrapper)
            except Exception as exc:
                logger.error(
                    "Request failed",
                    method=method,
                    path=path,
                    status_code=500,
                    duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                    exc_info=exc,
                )
                if response_started:
                    raise
                error_response = JSONResponse(
                    status_code=500,
                    content={"error": "internal server error"},
                )
                await error_response(scope, receive, send_wrapper)

            logger.info(
                "Request completed",
                method=method,
                path=path,
                status_code=status_code,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
