"""
Repository layer abstracting storage (SQLAlchemy vs Firebase Firestore).

Repositories return schema records and raise domain errors; they never
validate or normalize input.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

from google.api_core.exceptions import Conflict, GoogleAPICallError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.db import Database, FirestoreDatabase, SqlDatabase
from app.core.errors import InfrastructureError, UniquenessViolation
from app.models import Booking, Event
from app.schemas.booking import BookingResponse
from app.schemas.event import EventResponse

logger = logging.getLogger(__name__)


# -------- Interfaces --------

class EventRepository(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    async def create(self, fields: Dict[str, Any]) -> EventResponse:
        """Insert a new event. Raises UniquenessViolation on a taken slug."""
        ...

    @abstractmethod
    async def update(self, event_id: str, changes: Dict[str, Any]) -> Optional[EventResponse]:
        """Apply changes to an event, or return None if it does not exist."""
        ...

    @abstractmethod
    async def get(self, event_id: str) -> Optional[EventResponse]:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Optional[EventResponse]:
        """Return an event by slug, or None if not found."""
        ...

    @abstractmethod
    async def list(self) -> List[EventResponse]:
        """Return all events ordered by createdAt descending."""
        ...

    @abstractmethod
    async def exists(self, event_id: str) -> bool:
        """Check if an event exists."""
        ...


class BookingRepository(ABC):
    """Interface for booking persistence operations. Bookings are append-only."""

    @abstractmethod
    async def create(self, fields: Dict[str, Any]) -> BookingResponse:
        ...

    @abstractmethod
    async def list_for_event(self, event_id: str) -> List[BookingResponse]:
        """Return bookings for one event ordered by createdAt ascending."""
        ...


def build_repositories(database: Database) -> Tuple[EventRepository, BookingRepository]:
    """Return the event and booking repositories for a connection handle"""
    if isinstance(database, FirestoreDatabase):
        return (
            FirestoreEventRepository(database.client),
            FirestoreBookingRepository(database.client),
        )
    if isinstance(database, SqlDatabase):
        return SqlEventRepository(database), SqlBookingRepository(database)
    raise TypeError(f"Unsupported database handle: {type(database).__name__}")


# -------- SQLAlchemy repositories --------

def _event_record(event: Event) -> EventResponse:
    return EventResponse.model_validate(
        {name: getattr(event, name) for name in EventResponse.model_fields}
    )


def _booking_record(booking: Booking) -> BookingResponse:
    return BookingResponse.model_validate(
        {name: getattr(booking, name) for name in BookingResponse.model_fields}
    )


def _commit_event(db: Session, event: Event) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise UniquenessViolation("slug", event.slug) from e
    db.refresh(event)


class SqlEventRepository(EventRepository):
    def __init__(self, database: SqlDatabase):
        self.database = database

    async def create(self, fields: Dict[str, Any]) -> EventResponse:
        return await self.database.run(self._create, fields)

    async def update(self, event_id: str, changes: Dict[str, Any]) -> Optional[EventResponse]:
        return await self.database.run(self._update, event_id, changes)

    async def get(self, event_id: str) -> Optional[EventResponse]:
        return await self.database.run(self._get, event_id)

    async def get_by_slug(self, slug: str) -> Optional[EventResponse]:
        return await self.database.run(self._get_by_slug, slug)

    async def list(self) -> List[EventResponse]:
        return await self.database.run(self._list)

    async def exists(self, event_id: str) -> bool:
        return await self.database.run(self._exists, event_id)

    @staticmethod
    def _create(db: Session, fields: Dict[str, Any]) -> EventResponse:
        event = Event(**fields)
        db.add(event)
        _commit_event(db, event)
        return _event_record(event)

    @staticmethod
    def _update(db: Session, event_id: str, changes: Dict[str, Any]) -> Optional[EventResponse]:
        event = db.get(Event, event_id)
        if not event:
            return None
        for name, value in changes.items():
            setattr(event, name, value)
        _commit_event(db, event)
        return _event_record(event)

    @staticmethod
    def _get(db: Session, event_id: str) -> Optional[EventResponse]:
        event = db.get(Event, event_id)
        return _event_record(event) if event else None

    @staticmethod
    def _get_by_slug(db: Session, slug: str) -> Optional[EventResponse]:
        event = db.query(Event).filter(Event.slug == slug).first()
        return _event_record(event) if event else None

    @staticmethod
    def _list(db: Session) -> List[EventResponse]:
        events = db.query(Event).order_by(Event.created_at.desc()).all()
        return [_event_record(event) for event in events]

    @staticmethod
    def _exists(db: Session, event_id: str) -> bool:
        return db.query(Event.id).filter(Event.id == event_id).first() is not None


class SqlBookingRepository(BookingRepository):
    def __init__(self, database: SqlDatabase):
        self.database = database

    async def create(self, fields: Dict[str, Any]) -> BookingResponse:
        return await self.database.run(self._create, fields)

    async def list_for_event(self, event_id: str) -> List[BookingResponse]:
        return await self.database.run(self._list_for_event, event_id)

    @staticmethod
    def _create(db: Session, fields: Dict[str, Any]) -> BookingResponse:
        booking = Booking(**fields)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return _booking_record(booking)

    @staticmethod
    def _list_for_event(db: Session, event_id: str) -> List[BookingResponse]:
        bookings = db.query(Booking).filter(Booking.event_id == event_id).order_by(Booking.created_at).all()
        return [_booking_record(booking) for booking in bookings]


# -------- Firestore repositories --------
# Collections: "events", "bookings", and "event_slugs/{slug}" documents that
# reserve each slug for exactly one event.

EVENTS = "events"
BOOKINGS = "bookings"
EVENT_SLUGS = "event_slugs"


def _valid_document_id(doc_id: str) -> bool:
    return bool(doc_id) and "/" not in doc_id


def _snapshot_data(snapshot: Any) -> Dict[str, Any]:
    data = snapshot.to_dict()
    data["id"] = snapshot.id
    return data


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except GoogleAPICallError as e:
        logger.error(f"Firestore error while trying to {action}: {e}")
        raise InfrastructureError(f"Failed to {action}: {e}") from e


class FirestoreEventRepository(EventRepository):
    def __init__(self, client: Any):
        self.client = client

    async def _commit(self, batch: Any, slug: str) -> None:
        try:
            await batch.commit()
        except Conflict as e:
            raise UniquenessViolation("slug", slug) from e

    async def create(self, fields: Dict[str, Any]) -> EventResponse:
        now = datetime.utcnow()
        ref = self.client.collection(EVENTS).document()
        data = {**fields, "createdAt": now, "updatedAt": now}

        batch = self.client.batch()
        batch.create(self.client.collection(EVENT_SLUGS).document(fields["slug"]), {"eventId": ref.id})
        batch.set(ref, data)
        with _store_errors("create event"):
            await self._commit(batch, fields["slug"])

        data["id"] = ref.id
        return EventResponse.model_validate(data)

    async def update(self, event_id: str, changes: Dict[str, Any]) -> Optional[EventResponse]:
        if not _valid_document_id(event_id):
            return None
        ref = self.client.collection(EVENTS).document(event_id)
        with _store_errors("update event"):
            snapshot = await ref.get()
            if not snapshot.exists:
                return None
            current = _snapshot_data(snapshot)
            data = {**changes, "updatedAt": datetime.utcnow()}

            batch = self.client.batch()
            new_slug = changes.get("slug")
            if new_slug and new_slug != current["slug"]:
                slugs = self.client.collection(EVENT_SLUGS)
                batch.create(slugs.document(new_slug), {"eventId": event_id})
                batch.delete(slugs.document(current["slug"]))
            batch.update(ref, data)
            await self._commit(batch, new_slug or current["slug"])

        return EventResponse.model_validate({**current, **data})

    async def get(self, event_id: str) -> Optional[EventResponse]:
        if not _valid_document_id(event_id):
            return None
        with _store_errors("load event"):
            snapshot = await self.client.collection(EVENTS).document(event_id).get()
        if not snapshot.exists:
            return None
        return EventResponse.model_validate(_snapshot_data(snapshot))

    async def get_by_slug(self, slug: str) -> Optional[EventResponse]:
        query = self.client.collection(EVENTS).where("slug", "==", slug).limit(1)
        with _store_errors("load event"):
            async for snapshot in query.stream():
                return EventResponse.model_validate(_snapshot_data(snapshot))
        return None

    async def list(self) -> List[EventResponse]:
        query = self.client.collection(EVENTS).order_by("createdAt", direction="DESCENDING")
        with _store_errors("list events"):
            return [EventResponse.model_validate(_snapshot_data(s)) async for s in query.stream()]

    async def exists(self, event_id: str) -> bool:
        if not _valid_document_id(event_id):
            return False
        with _store_errors("look up event"):
            snapshot = await self.client.collection(EVENTS).document(event_id).get()
        return snapshot.exists


class FirestoreBookingRepository(BookingRepository):
    def __init__(self, client: Any):
        self.client = client

    async def create(self, fields: Dict[str, Any]) -> BookingResponse:
        now = datetime.utcnow()
        ref = self.client.collection(BOOKINGS).document()
        data = {"eventId": fields["event_id"], "email": fields["email"], "createdAt": now, "updatedAt": now}
        with _store_errors("create booking"):
            await ref.set(data)
        data["id"] = ref.id
        return BookingResponse.model_validate(data)

    async def list_for_event(self, event_id: str) -> List[BookingResponse]:
        # Sorted here; an equality filter plus order_by needs a composite index
        query = self.client.collection(BOOKINGS).where("eventId", "==", event_id)
        with _store_errors("list bookings"):
            bookings = [BookingResponse.model_validate(_snapshot_data(s)) async for s in query.stream()]
        return sorted(bookings, key=lambda booking: booking.created_at)
