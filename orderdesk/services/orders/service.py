"""Order persistence and payment settlement.

Status changes are plain writes unless `enforce_transitions` is on, in which
case the write is conditioned on the current status so that illegal moves and
concurrent changes are rejected instead of overwritten.

Payment settlement runs as a task owned by the request that started it: the
request waits for it, cancels it when the client disconnects, and sees any
error it raises.
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from time import perf_counter

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError
from starlette.concurrency import run_in_threadpool

from orderdesk.common.db import MongoStore, parse_object_id, to_public
from orderdesk.common.errors import PaymentAbandoned, StorageError, ValidationError
from orderdesk.common.logging import logger, order_id_ctx
from orderdesk.common.metrics import (
    orders_cancelled_total,
    orders_created_total,
    payment_settlement_seconds,
    payments_abandoned_total,
    payments_settled_total,
)
from orderdesk.common.state_machine import OrderStatus, sources_of, validate_transition
from orderdesk.services.orders.schemas import OrderCreate


def _now_ms() -> datetime:
    # BSON dates carry millisecond precision.
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class OrderService:
    """Create/list/cancel/pay/delete over the `orders` collection."""

    def __init__(
        self,
        store: MongoStore,
        payment_delay_seconds: float = 3.0,
        poll_interval_seconds: float = 0.1,
        enforce_transitions: bool = False,
        service_name: str = "orderdesk",
    ) -> None:
        self.store = store
        self.payment_delay_seconds = payment_delay_seconds
        self.poll_interval_seconds = poll_interval_seconds
        self.enforce_transitions = enforce_transitions
        self.service_name = service_name
        self._settlements: set[asyncio.Task] = set()

    def create(self, req: OrderCreate) -> dict:
        if self.enforce_transitions and req.status is not OrderStatus.PENDING:
            # Strict mode: paid/cancelled are only reachable through cancel and payment.
            raise ValidationError(f"orders must be created pending, got {req.status.value}")
        doc = {
            "customerId": req.customerId,
            "items": [item.model_dump(exclude_none=True) for item in req.items],
            "total": req.total,
            "status": req.status.value,
            "createdAt": _now_ms(),
        }
        try:
            result = self.store.orders.insert_one(doc)
        except PyMongoError as exc:
            raise ValidationError(str(exc)) from exc
        doc["_id"] = result.inserted_id
        order_id_ctx.set(str(result.inserted_id))
        orders_created_total.labels(service=self.service_name).inc()
        logger.info("order_created customer_id=%s total=%s", req.customerId, req.total)
        return to_public(doc)

    def list_all(self) -> list[dict]:
        try:
            return [to_public(doc) for doc in self.store.orders.find()]
        except PyMongoError as exc:
            raise StorageError(str(exc)) from exc

    def _set_status(self, oid: ObjectId, new_status: OrderStatus) -> dict | None:
        """Write `status`; returns the updated document or None for an unknown id."""

        query: dict = {"_id": oid}
        if self.enforce_transitions:
            query["status"] = {"$in": sources_of(new_status, strict=True)}
        current = None
        try:
            doc = self.store.orders.find_one_and_update(
                query,
                {"$set": {"status": new_status.value}},
                return_document=ReturnDocument.AFTER,
            )
            if doc is None and self.enforce_transitions:
                current = self.store.orders.find_one({"_id": oid}, {"status": 1})
        except PyMongoError as exc:
            raise ValidationError(str(exc)) from exc

        if current is not None:
            try:
                validate_transition(current["status"], new_status.value, strict=True)
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc
            raise ValidationError(f"order {oid} changed status concurrently, retry the request")
        return to_public(doc)

    def cancel(self, order_id: str) -> dict | None:
        oid = parse_object_id(order_id)
        order_id_ctx.set(order_id)
        doc = self._set_status(oid, OrderStatus.CANCELLED)
        if doc is not None:
            orders_cancelled_total.labels(service=self.service_name).inc()
        logger.info("order_cancelled found=%s", doc is not None)
        return doc

    async def _settle_payment(self, oid: ObjectId) -> dict | None:
        await asyncio.sleep(self.payment_delay_seconds)
        return await run_in_threadpool(self._set_status, oid, OrderStatus.PAID)

    async def submit_payment(self, order_id: str, is_disconnected: Callable[[], Awaitable[bool]]) -> dict | None:
        """Mark the order paid after the settlement delay.

        The id is validated before the delay starts. While the delay runs,
        `is_disconnected` is polled; a disconnect cancels the settlement before
        it writes and raises `PaymentAbandoned`.
        """

        oid = parse_object_id(order_id)
        order_id_ctx.set(order_id)
        started = perf_counter()
        logger.info("payment_submitted delay_seconds=%s", self.payment_delay_seconds)

        task = asyncio.create_task(self._settle_payment(oid))
        self._settlements.add(task)
        task.add_done_callback(self._settlements.discard)
        try:
            while True:
                done, _ = await asyncio.wait({task}, timeout=self.poll_interval_seconds)
                if done:
                    break
                if await is_disconnected():
                    task.cancel()
                    payments_abandoned_total.labels(service=self.service_name, reason="client_disconnected").inc()
                    logger.warning("payment_abandoned reason=client_disconnected")
                    raise PaymentAbandoned("client disconnected before payment settled")
        except asyncio.CancelledError:
            task.cancel()
            raise

        if task.cancelled():
            payments_abandoned_total.labels(service=self.service_name, reason="shutdown").inc()
            logger.warning("payment_abandoned reason=shutdown")
            raise PaymentAbandoned("payment settlement cancelled by shutdown")

        doc = task.result()
        if doc is not None:
            payments_settled_total.labels(service=self.service_name).inc()
            payment_settlement_seconds.labels(service=self.service_name).observe(perf_counter() - started)
        logger.info("payment_settled found=%s", doc is not None)
        return doc

    def delete(self, order_id: str) -> None:
        oid = parse_object_id(order_id)
        order_id_ctx.set(order_id)
        try:
            result = self.store.orders.delete_one({"_id": oid})
        except PyMongoError as exc:
            raise ValidationError(str(exc)) from exc
        logger.info("order_deleted deleted=%s", result.deleted_count)

    async def shutdown(self) -> None:
        """Cancel settlements still waiting out their delay."""

        pending = list(self._settlements)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.info("payment_settlements_cancelled count=%s", len(pending))
