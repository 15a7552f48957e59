"""Request context middleware: trace ids and HTTP metrics.

Written as plain ASGI so that `receive` reaches the endpoint unwrapped; the
payment route relies on seeing `http.disconnect` from the server.
"""

from time import perf_counter
from uuid import uuid4

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from orderdesk.common.logging import trace_id_ctx
from orderdesk.common.metrics import http_request_duration_seconds, http_requests_total


class RequestContextMiddleware:
    """Bind a trace id and record request count and latency for every HTTP call."""

    def __init__(self, app: ASGIApp, service_name: str) -> None:
        self.app = app
        self.service_name = service_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        trace_id = Headers(scope=scope).get("x-trace-id") or str(uuid4())
        token = trace_id_ctx.set(trace_id)
        start = perf_counter()
        method = scope["method"]
        status_code = 500

        async def send_with_trace(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                MutableHeaders(scope=message).append("x-trace-id", trace_id)
            await send(message)

        try:
            await self.app(scope, receive, send_with_trace)
        finally:
            route_obj = scope.get("route")
            route = getattr(route_obj, "path", None) or scope["path"]
            elapsed = max(0.0, perf_counter() - start)
            http_request_duration_seconds.labels(service=self.service_name, route=route, method=method).observe(elapsed)
            http_requests_total.labels(
                service=self.service_name,
                route=route,
                method=method,
                status_code=str(status_code),
            ).inc()
            trace_id_ctx.reset(token)
