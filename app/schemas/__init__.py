"""
Pydantic schemas package
"""

from .common import *
from .event import *
from .booking import *

__all__ = [
    "ErrorResponse",
    "EventMode",
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "BookingCreate",
    "BookingResponse",
]
