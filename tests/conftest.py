"""
Shared fixtures: an in-memory SQLite database opened through the real
connection manager, and an in-memory stand-in for the async Firestore client.
"""

import itertools
from copy import deepcopy

import pytest
from google.api_core.exceptions import AlreadyExists

from app.core.config import Settings
from app.core.db import ConnectionManager
from app.services.booking_service import BookingService
from app.services.event_service import EventService
from app.services.repositories import build_repositories
from tests.helpers import make_event_payload, run


@pytest.fixture
def sql_settings():
    return Settings(DATABASE_URL="sqlite://", USE_FIREBASE=False)


@pytest.fixture
def database(sql_settings):
    """Open a fresh in-memory database for one test"""
    manager = ConnectionManager(sql_settings)
    handle = run(manager.connect())
    try:
        yield handle
    finally:
        run(manager.disconnect())


@pytest.fixture
def event_service(database):
    events, _ = build_repositories(database)
    return EventService(events)


@pytest.fixture
def booking_service(database):
    events, bookings = build_repositories(database)
    return BookingService(bookings, events)


@pytest.fixture
def sample_event(event_service):
    return run(event_service.create_event(make_event_payload()))


# -------- In-memory Firestore stand-in --------

_ids = itertools.count(1)


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return deepcopy(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, store, collection, doc_id):
        self._store = store
        self._collection = collection
        self.id = doc_id

    @property
    def _docs(self):
        return self._store.setdefault(self._collection, {})

    async def get(self):
        return FakeSnapshot(self.id, self._docs.get(self.id))

    async def set(self, data, merge=False):
        if merge and self.id in self._docs:
            self._docs[self.id].update(deepcopy(data))
        else:
            self._docs[self.id] = deepcopy(data)

    async def create(self, data):
        if self.id in self._docs:
            raise AlreadyExists(f"Document already exists: {self._collection}/{self.id}")
        self._docs[self.id] = deepcopy(data)

    async def update(self, data):
        self._docs[self.id].update(deepcopy(data))

    async def delete(self):
        self._docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, store, collection, filters=(), order=None, limit=None):
        self._store = store
        self._collection = collection
        self._filters = list(filters)
        self._order = order
        self._limit = limit

    def where(self, field, op, value):
        assert op == "=="
        return FakeQuery(self._store, self._collection, self._filters + [(field, value)], self._order, self._limit)

    def order_by(self, field, direction="ASCENDING"):
        return FakeQuery(self._store, self._collection, self._filters, (field, direction), self._limit)

    def limit(self, count):
        return FakeQuery(self._store, self._collection, self._filters, self._order, count)

    async def stream(self):
        docs = self._store.get(self._collection, {})
        items = [
            (doc_id, data) for doc_id, data in docs.items()
            if all(data.get(field) == value for field, value in self._filters)
        ]
        if self._order:
            field, direction = self._order
            items.sort(key=lambda item: item[1][field], reverse=direction == "DESCENDING")
        if self._limit is not None:
            items = items[:self._limit]
        for doc_id, data in items:
            yield FakeSnapshot(doc_id, deepcopy(data))


class FakeCollection(FakeQuery):
    def document(self, doc_id=None):
        return FakeDocumentReference(self._store, self._collection, doc_id or f"doc{next(_ids)}")


class FakeWriteBatch:
    def __init__(self, store):
        self._store = store
        self._writes = []

    def create(self, ref, data):
        self._writes.append(("create", ref, data))

    def set(self, ref, data):
        self._writes.append(("set", ref, data))

    def update(self, ref, data):
        self._writes.append(("update", ref, data))

    def delete(self, ref):
        self._writes.append(("delete", ref, None))

    async def commit(self):
        # All-or-nothing: check create preconditions before applying anything
        for op, ref, _ in self._writes:
            if op == "create" and ref.id in ref._docs:
                raise AlreadyExists(f"Document already exists: {ref.id}")
        for op, ref, data in self._writes:
            if op == "delete":
                await ref.delete()
            else:
                await getattr(ref, op)(data)


class FakeFirestoreClient:
    def __init__(self):
        self.store = {}
        self.closed = False

    async def close(self):
        self.closed = True

    def collection(self, name):
        return FakeCollection(self.store, name)

    def batch(self):
        return FakeWriteBatch(self.store)


@pytest.fixture
def firestore_client():
    return FakeFirestoreClient()
