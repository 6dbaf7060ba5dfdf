"""
Event-related Pydantic schemas
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, ValidationInfo, field_validator

# Stored trimmed; the remaining text fields only have to be non-empty after trimming
TRIMMED_FIELDS = {"title", "venue", "location", "time", "audience", "organizer"}

TEXT_FIELDS = (
    "title", "description", "overview", "image", "venue",
    "location", "date", "time", "audience", "organizer",
)


class EventMode(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    HYBRID = "hybrid"


class EventCreate(BaseModel):
    """Schema for creating an event"""
    title: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: EventMode
    audience: str
    agenda: List[str]
    organizer: str
    tags: List[str]

    @field_validator(*TEXT_FIELDS)
    @classmethod
    def require_text(cls, value: str, info: ValidationInfo) -> str:
        if not value.strip():
            raise ValueError(f"{info.field_name.capitalize()} cannot be empty")
        if info.field_name in TRIMMED_FIELDS:
            return value.strip()
        return value

    @field_validator("agenda", "tags")
    @classmethod
    def require_items(cls, value: List[str], info: ValidationInfo) -> List[str]:
        if not value:
            raise ValueError(f"{info.field_name.capitalize()} must be a non-empty array")
        return value


class EventUpdate(BaseModel):
    """Schema for updating an event; only the fields that are set get applied"""
    title: Optional[str] = None
    description: Optional[str] = None
    overview: Optional[str] = None
    image: Optional[str] = None
    venue: Optional[str] = None
    location: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    mode: Optional[EventMode] = None
    audience: Optional[str] = None
    agenda: Optional[List[str]] = None
    organizer: Optional[str] = None
    tags: Optional[List[str]] = None


class EventResponse(BaseModel):
    """Stored event record"""
    id: str
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: EventMode
    audience: str
    agenda: List[str]
    organizer: str
    tags: List[str]
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    class Config:
        populate_by_name = True
        use_enum_values = True
