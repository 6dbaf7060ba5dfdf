"""
Tests for the connection manager's caching and retry behavior
"""

import asyncio
import threading

import firebase_admin
import pytest

from app.core.config import Settings
from app.core.db import ConnectionManager, FirestoreDatabase, SqlDatabase
from app.core.errors import ConfigurationError, InfrastructureError
from tests.helpers import run


class FakeHandle:
    def __init__(self, number):
        self.number = number
        self.closed = False

    async def close(self):
        self.closed = True


class CountingConnector:
    """Connector that yields to the event loop before handing out a new handle"""

    def __init__(self, failures=0):
        self.calls = 0
        self.failures = failures

    async def __call__(self, settings):
        self.calls += 1
        await asyncio.sleep(0.01)
        if self.calls <= self.failures:
            raise OSError("connection refused")
        return FakeHandle(self.calls)


@pytest.fixture
def settings():
    return Settings(DATABASE_URL="sqlite://", USE_FIREBASE=False)


def test_concurrent_connects_share_one_attempt(settings):
    connector = CountingConnector()
    manager = ConnectionManager(settings, connector=connector)

    async def connect_twice():
        return await asyncio.gather(manager.connect(), manager.connect())

    first, second = run(connect_twice())

    assert connector.calls == 1
    assert first is second
    assert manager.is_connected

def test_connect_returns_cached_handle(settings):
    connector = CountingConnector()
    manager = ConnectionManager(settings, connector=connector)

    first = run(manager.connect())
    second = run(manager.connect())

    assert first is second
    assert connector.calls == 1

def test_missing_connection_string(settings):
    connector = CountingConnector()
    manager = ConnectionManager(Settings(DATABASE_URL=None, USE_FIREBASE=False), connector=connector)

    with pytest.raises(ConfigurationError):
        run(manager.connect())
    assert connector.calls == 0

def test_missing_firebase_credentials():
    settings = Settings(
        USE_FIREBASE=True,
        FIREBASE_CREDENTIALS_JSON=None,
        FIREBASE_CREDENTIALS_B64=None,
        FIREBASE_CREDENTIALS_FILE=None,
    )
    manager = ConnectionManager(settings, connector=CountingConnector())

    with pytest.raises(ConfigurationError):
        run(manager.connect())

def test_failed_connect_can_be_retried(settings):
    connector = CountingConnector(failures=1)
    manager = ConnectionManager(settings, connector=connector)

    with pytest.raises(InfrastructureError) as exc_info:
        run(manager.connect())
    assert "connection refused" in exc_info.value.message
    assert not manager.is_connected

    handle = run(manager.connect())
    assert handle.number == 2
    assert connector.calls == 2

def test_concurrent_callers_share_a_failure(settings):
    connector = CountingConnector(failures=1)
    manager = ConnectionManager(settings, connector=connector)

    async def connect_twice():
        return await asyncio.gather(manager.connect(), manager.connect(), return_exceptions=True)

    results = run(connect_twice())

    assert connector.calls == 1
    assert all(isinstance(result, InfrastructureError) for result in results)

def test_disconnect_closes_and_clears(settings):
    connector = CountingConnector()
    manager = ConnectionManager(settings, connector=connector)
    handle = run(manager.connect())

    run(manager.disconnect())

    assert handle.closed
    assert not manager.is_connected
    assert run(manager.connect()) is not handle
    assert connector.calls == 2

def test_disconnect_without_connection_is_noop(settings):
    manager = ConnectionManager(settings, connector=CountingConnector())
    run(manager.disconnect())
    assert not manager.is_connected

def test_default_connector_opens_sqlite(settings):
    manager = ConnectionManager(settings)
    handle = run(manager.acquire())
    try:
        assert isinstance(handle, SqlDatabase)
    finally:
        run(manager.release())

def test_unreachable_database_is_infrastructure_error():
    manager = ConnectionManager(Settings(DATABASE_URL="sqlite:////nonexistent-dir/events.db", USE_FIREBASE=False))
    with pytest.raises(InfrastructureError):
        run(manager.connect())

def test_firestore_connect_runs_off_the_event_loop(monkeypatch, firestore_client):
    settings = Settings(USE_FIREBASE=True, FIREBASE_CREDENTIALS_JSON='{"type": "service_account"}')
    threads = []

    def fake_open_firestore(settings):
        threads.append(threading.get_ident())
        return "firebase-app", firestore_client

    monkeypatch.setattr("app.services.firebase_client.open_firestore", fake_open_firestore)
    manager = ConnectionManager(settings)

    handle = run(manager.connect())

    assert isinstance(handle, FirestoreDatabase)
    assert handle.client is firestore_client
    assert threads and threads[0] != threading.get_ident()

def test_firestore_disconnect_closes_client_and_app(monkeypatch, firestore_client):
    deleted = []
    monkeypatch.setattr(firebase_admin, "delete_app", deleted.append)
    manager = ConnectionManager(
        Settings(USE_FIREBASE=True, FIREBASE_CREDENTIALS_JSON="{}"),
        connector=lambda settings: asyncio.sleep(0, result=FirestoreDatabase("firebase-app", firestore_client)),
    )
    run(manager.connect())

    run(manager.disconnect())

    assert firestore_client.closed
    assert deleted == ["firebase-app"]
    assert not manager.is_connected
