"""Booking service - bookings are created once and never updated."""

import logging
from typing import Any, List, Mapping, Union

from app.core.errors import InfrastructureError, ReferenceNotFoundError
from app.schemas.booking import BookingCreate, BookingResponse
from app.services.repositories import BookingRepository, EventRepository
from app.services.validation import validate_payload

logger = logging.getLogger(__name__)


class BookingService:
    """Service for booking operations."""

    def __init__(self, bookings: BookingRepository, events: EventRepository) -> None:
        self.bookings = bookings
        self.events = events

    async def create_booking(self, payload: Union[BookingCreate, Mapping[str, Any]]) -> BookingResponse:
        """Validate a booking, check that its event exists and store it.

        Raises:
            ValidationError: If the event ID is blank or the email is malformed.
            ReferenceNotFoundError: If the referenced event does not exist.
            InfrastructureError: If the event lookup itself fails.
        """
        booking = validate_payload(BookingCreate, payload)

        try:
            exists = await self.events.exists(booking.event_id)
        except InfrastructureError as e:
            raise InfrastructureError(
                f"Failed to validate event reference {booking.event_id}: {e.message}"
            ) from e
        if not exists:
            raise ReferenceNotFoundError(booking.event_id)

        created = await self.bookings.create(booking.model_dump())
        logger.info(f"Booking created for event {created.event_id}")
        return created

    async def list_bookings_for_event(self, event_id: str) -> List[BookingResponse]:
        return await self.bookings.list_for_event(event_id)
