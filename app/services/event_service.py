"""Event service - validation, normalization and persistence of events.

Every write runs the same pipeline: validate the field constraints, derive
the slug and normalize date/time for the fields that changed, check the
normalized date, then hand the record to the repository. Nothing reaches
the store when any step fails.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from app.core.errors import EventNotFoundError, ValidationError
from app.schemas.event import EventCreate, EventResponse, EventUpdate
from app.services.repositories import EventRepository
from app.services.validation import validate_payload
from app.utils.normalize import generate_slug, is_calendar_date, normalize_date, normalize_time

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = tuple(EventCreate.model_fields)


def _check_normalized(fields: Dict[str, Any]) -> None:
    errors = []
    if not fields["slug"]:
        errors.append({"field": "title", "message": "Title must contain at least one letter or digit"})
    if not is_calendar_date(fields["date"]):
        errors.append({"field": "date", "message": "Date must be in ISO format (YYYY-MM-DD)"})
    if errors:
        raise ValidationError(errors)


class EventService:
    """Service for event operations."""

    def __init__(self, events: EventRepository) -> None:
        self.events = events

    async def create_event(self, payload: Union[EventCreate, Mapping[str, Any]]) -> EventResponse:
        """Validate, normalize and insert a new event.

        Raises:
            ValidationError: If a field fails its constraint.
            NormalizationError: If the date cannot be parsed.
            UniquenessViolation: If another event already has the slug.
        """
        event = validate_payload(EventCreate, payload)
        fields = event.model_dump(mode="json")
        fields["slug"] = generate_slug(fields["title"])
        fields["date"] = normalize_date(fields["date"])
        fields["time"] = normalize_time(fields["time"])
        _check_normalized(fields)

        created = await self.events.create(fields)
        logger.info(f"Event created: {created.slug} ({created.id})")
        return created

    async def update_event(
        self,
        event_id: str,
        changes: Union[EventUpdate, Mapping[str, Any]],
    ) -> EventResponse:
        """Apply changes to an existing event.

        The slug is regenerated only when the title changes, and date/time
        are renormalized only when they change.

        Raises:
            EventNotFoundError: If the event does not exist.
            ValidationError, NormalizationError, UniquenessViolation: As for create.
        """
        current = await self.get_event(event_id)
        patch = validate_payload(EventUpdate, changes).model_dump(exclude_unset=True)

        merged = current.model_dump(include=set(EDITABLE_FIELDS))
        merged.update(patch)
        fields = validate_payload(EventCreate, merged).model_dump(mode="json")

        fields["slug"] = current.slug
        if fields["title"] != current.title:
            fields["slug"] = generate_slug(fields["title"])
        if fields["date"] != current.date:
            fields["date"] = normalize_date(fields["date"])
        if fields["time"] != current.time:
            fields["time"] = normalize_time(fields["time"])
        _check_normalized(fields)

        updated_fields = {
            name: value for name, value in fields.items()
            if value != getattr(current, name)
        }
        if not updated_fields:
            return current

        updated = await self.events.update(event_id, updated_fields)
        if updated is None:
            raise EventNotFoundError(event_id)
        logger.info(f"Event updated: {updated.slug} ({updated.id})")
        return updated

    async def find_event(self, event_id: str) -> Optional[EventResponse]:
        return await self.events.get(event_id)

    async def get_event(self, event_id: str) -> EventResponse:
        """Return an event by ID.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        event = await self.events.get(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    async def get_event_by_slug(self, slug: str) -> Optional[EventResponse]:
        slug = generate_slug(slug)
        if not slug:
            return None
        return await self.events.get_by_slug(slug)

    async def list_events(self) -> List[EventResponse]:
        return await self.events.list()
