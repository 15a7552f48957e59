"""Shared fixtures: an in-memory document store and a test client bound to it."""

import mongomock
import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from orderdesk.common.config import Settings
from orderdesk.common.db import MongoStore
from orderdesk.main import create_app

PAYMENT_DELAY = 0.2


@pytest.fixture
def app_settings() -> Settings:
    return Settings(
        mongo_db_name="orderdesk_test",
        payment_delay_seconds=PAYMENT_DELAY,
        payment_poll_interval_seconds=0.01,
    )


@pytest.fixture
def store(app_settings):
    store = MongoStore(app_settings.mongo_url, app_settings.mongo_db_name, client_factory=mongomock.MongoClient)
    yield store
    store.close()


@pytest.fixture
def client(store, app_settings):
    with TestClient(create_app(store=store, app_settings=app_settings)) as test_client:
        yield test_client


class UnavailableCollection:
    """Collection double whose every call fails like an unreachable server."""

    def _fail(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("localhost:27017: [Errno 111] Connection refused")

    find = find_one = insert_one = find_one_and_update = delete_one = _fail


class UnavailableStore:
    customers = UnavailableCollection()
    orders = UnavailableCollection()

    def open(self) -> None:
        pass

    def close(self) -> None:
        pass

    def ensure_indexes(self) -> None:
        pass


@pytest.fixture
def unavailable_client(app_settings):
    with TestClient(create_app(store=UnavailableStore(), app_settings=app_settings)) as test_client:
        yield test_client
