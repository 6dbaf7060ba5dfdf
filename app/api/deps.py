"""
Dependency providers wiring services to the application's connection manager
"""

from fastapi import Depends, Request

from app.core.db import ConnectionManager, Database
from app.services.booking_service import BookingService
from app.services.event_service import EventService
from app.services.repositories import build_repositories

def get_connection_manager(request: Request) -> ConnectionManager:
    return request.app.state.connections

async def get_database(manager: ConnectionManager = Depends(get_connection_manager)) -> Database:
    return await manager.connect()

def get_event_service(database: Database = Depends(get_database)) -> EventService:
    events, _ = build_repositories(database)
    return EventService(events)

def get_booking_service(database: Database = Depends(get_database)) -> BookingService:
    events, bookings = build_repositories(database)
    return BookingService(bookings, events)
