"""Order desk API: customer and order resources on one FastAPI app.

`create_app` wires the document store into both services and ties its
lifecycle to the application lifespan. Tests pass their own store and settings.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from pymongo.errors import PyMongoError

from orderdesk.common.config import Settings, settings
from orderdesk.common.db import MongoStore
from orderdesk.common.docs import install_openapi
from orderdesk.common.errors import register_error_handlers
from orderdesk.common.logging import configure_logging, logger
from orderdesk.common.metrics import metrics_response
from orderdesk.common.middleware import RequestContextMiddleware
from orderdesk.common.startup import log_startup_config
from orderdesk.common.tracing import instrument_app, setup_tracing
from orderdesk.services.customers.router import router as customers_router
from orderdesk.services.customers.service import CustomerService
from orderdesk.services.orders.router import router as orders_router
from orderdesk.services.orders.service import OrderService

configure_logging()


def create_app(store: MongoStore | None = None, app_settings: Settings | None = None) -> FastAPI:
    cfg = app_settings or settings
    if store is None:
        store = MongoStore(cfg.mongo_url, cfg.mongo_db_name, timeout_ms=cfg.mongo_timeout_ms)
    customer_service = CustomerService(store, service_name=cfg.service_name)
    order_service = OrderService(
        store,
        payment_delay_seconds=cfg.payment_delay_seconds,
        poll_interval_seconds=cfg.payment_poll_interval_seconds,
        enforce_transitions=cfg.enforce_status_transitions,
        service_name=cfg.service_name,
    )
    tracer_provider = None
    if cfg.tracing_enabled:
        tracer_provider = setup_tracing(cfg.service_name, cfg.otel_exporter_otlp_endpoint, cfg.mongo_db_name)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        """Open the store before serving; settle or cancel payments before closing it.

        An unreachable store at boot stops the process instead of serving 500s.
        """

        log_startup_config(
            cfg.service_name,
            ["SERVICE_NAME", "PORT", "MONGO_URL", "MONGO_DB_NAME", "PAYMENT_DELAY_SECONDS", "ENFORCE_STATUS_TRANSITIONS"],
        )
        try:
            store.open()
            store.ensure_indexes()
        except PyMongoError as exc:
            logger.error("store_unavailable db=%s error=%s", cfg.mongo_db_name, exc)
            store.close()
            raise
        yield
        await order_service.shutdown()
        store.close()
        if tracer_provider is not None:
            tracer_provider.shutdown()

    app = FastAPI(
        title="Order Desk API",
        version="1.0.0",
        description="Customers and orders backed by a document store.",
        docs_url="/api-docs",
        lifespan=lifespan,
    )
    app.state.customer_service = customer_service
    app.state.order_service = order_service
    register_error_handlers(app)
    app.add_middleware(RequestContextMiddleware, service_name=cfg.service_name)
    if tracer_provider is not None:
        instrument_app(app, tracer_provider)

    app.include_router(customers_router)
    app.include_router(orders_router)

    @app.get("/metrics", include_in_schema=False)
    def metrics():
        """Prometheus scrape endpoint."""

        return metrics_response()

    @app.get("/health", include_in_schema=False)
    def health():
        """Container health check endpoint."""

        return {"ok": True}

    install_openapi(app, cfg.public_url)
    return app


app = create_app()
