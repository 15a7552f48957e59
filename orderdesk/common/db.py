"""Document store adapter shared by both resource services."""

from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from orderdesk.common.errors import ValidationError
from orderdesk.common.logging import logger


CUSTOMERS = "customers"
ORDERS = "orders"


class MongoStore:
    """One MongoDB client per process, opened and closed with the app lifespan.

    `client_factory` defaults to pymongo's `MongoClient`; anything with the same
    call signature (e.g. `mongomock.MongoClient`) can be injected.
    """

    def __init__(self, url: str, db_name: str, timeout_ms: int = 3000, client_factory=MongoClient) -> None:
        self.url = url
        self.db_name = db_name
        self.timeout_ms = timeout_ms
        self._client_factory = client_factory
        self._client = None

    def open(self) -> None:
        if self._client is None:
            self._client = self._client_factory(self.url, serverSelectionTimeoutMS=self.timeout_ms, tz_aware=True)
            logger.info("store_opened db=%s", self.db_name)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("store_closed db=%s", self.db_name)

    @property
    def client(self):
        if self._client is None:
            raise RuntimeError("store is not open")
        return self._client

    @property
    def db(self) -> Database:
        return self.client[self.db_name]

    @property
    def customers(self) -> Collection:
        return self.db[CUSTOMERS]

    @property
    def orders(self) -> Collection:
        return self.db[ORDERS]

    def ensure_indexes(self) -> None:
        # Email uniqueness is enforced by the store, not by the service.
        self.customers.create_index([("email", ASCENDING)], unique=True, name="uq_customer_email")


def parse_object_id(raw: str) -> ObjectId:
    """Convert a path identifier into an ObjectId, rejecting malformed input."""

    if not ObjectId.is_valid(raw):
        raise ValidationError(f'invalid id "{raw}": expected a 24-character hex string')
    return ObjectId(raw)


def _as_utc(value: Any) -> Any:
    if not isinstance(value, datetime):
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_public(doc: dict | None) -> dict | None:
    """Rename `_id` to a string `id` and normalize stored datetimes to UTC."""

    if doc is None:
        return None
    out = {key: _as_utc(value) for key, value in doc.items() if key != "_id"}
    out["id"] = str(doc["_id"])
    return out
