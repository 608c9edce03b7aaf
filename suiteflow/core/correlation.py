import uuid

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from suiteflow.core.logging import correlation_id_context


class CorrelationMiddleware:
    """Binds a per-request correlation id for log events and echoes it back in the response."""

    CORRELATION_HEADER = "X-Correlation-ID"

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope["headers"])
        correlation_id = None
        for header_name in (b"x-correlation-id", b"x-request-id"):
            if header_name in headers:
                correlation_id = headers[header_name].decode("latin-1")
                break
        if not correlation_id:
            correlation_id = f"req_{uuid.uuid4()}"

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[self.CORRELATION_HEADER] = correlation_id
            await send(message)

        token = correlation_id_context.set(correlation_id)
        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            correlation_id_context.reset(token)
