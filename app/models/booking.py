"""
Booking model
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime

from app.core.db import Base
from app.models.event import new_id

class Booking(Base):
    __tablename__ = "bookings"
    
    id = Column(String(32), primary_key=True, default=new_id)
    # Plain indexed column: bookings outlive deleted events
    event_id = Column("eventId", String(64), nullable=False, index=True)
    email = Column(String(320), nullable=False)
    created_at = Column("createdAt", DateTime, default=datetime.utcnow)
    updated_at = Column("updatedAt", DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
