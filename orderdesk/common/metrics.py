"""Prometheus metric definitions for the order desk API."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)
customers_created_total = Counter("customers_created_total", "Customers created", ["service"])
orders_created_total = Counter("orders_created_total", "Orders created", ["service"])
orders_cancelled_total = Counter("orders_cancelled_total", "Orders moved to cancelled", ["service"])
payments_settled_total = Counter("payments_settled_total", "Orders moved to paid", ["service"])
payments_abandoned_total = Counter(
    "payments_abandoned_total",
    "Payment settlements cancelled before writing",
    ["service", "reason"],
)
payment_settlement_seconds = Histogram(
    "payment_settlement_seconds",
    "Seconds from payment submission until the order is marked paid",
    ["service"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")
