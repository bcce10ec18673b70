# app/middleware.py
"""
ASGI middleware wrapped around the routers.

Both classes sit inside CORSMiddleware, so the 413 and 500 responses they
produce still carry the CORS headers.
"""

import logging

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.errors import InternalError

logger = logging.getLogger(__name__)


class PayloadTooLarge(Exception):
    pass


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than max_body_bytes with 413.

    A declared Content-Length is checked up front. Bodies without one
    (chunked uploads) are counted as they are received; once the limit is
    passed the route's own response is discarded and 413 is sent instead.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def _reject(self, scope: Scope, receive: Receive, send: Send, size) -> None:
        logger.warning(
            "Rejected %s %s: body of %s bytes exceeds %s",
            scope.get("method"),
            scope.get("path"),
            size,
            self.max_body_bytes,
        )
        response = JSONResponse(status_code=413, content={"error": "Payload too large"})
        await response(scope, receive, send)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_body_bytes:
            await self._reject(scope, receive, send, content_length)
            return

        received = 0
        too_large = False
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received, too_large
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    too_large = True
                    raise PayloadTooLarge()
            return message

        async def guarded_send(message: Message) -> None:
            nonlocal response_started
            if too_large:
                # whatever error the route produced while reading the body
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, guarded_send)
        except PayloadTooLarge:
            pass

        if too_large and not response_started:
            await self._reject(scope, receive, send, f"more than {received}")


class UnhandledErrorMiddleware:
    """
    Turn any exception that escaped the exception handlers into the generic
    500 body, logging the cause.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, tracking_send)
        except PayloadTooLarge:
            raise
        except Exception:
            logger.exception("Unhandled error on %s %s", scope.get("method"), scope.get("path"))
            if response_started:
                raise
            response = JSONResponse(
                status_code=InternalError.status_code,
                content=InternalError().body(),
            )
            await response(scope, receive, send)
