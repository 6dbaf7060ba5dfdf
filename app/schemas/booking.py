"""
Booking-related Pydantic schemas
"""

import re
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class BookingCreate(BaseModel):
    """Schema for creating a booking"""
    event_id: str = Field(alias="eventId")
    email: str

    class Config:
        populate_by_name = True

    @field_validator("event_id")
    @classmethod
    def require_event_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Event ID is required")
        return value.strip()

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("Email is required")
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Please provide a valid email address")
        return value


class BookingResponse(BaseModel):
    """Stored booking record"""
    id: str
    event_id: str = Field(alias="eventId")
    email: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    class Config:
        populate_by_name = True
