"""
Event model
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, JSON

from app.core.db import Base

def new_id() -> str:
    return uuid.uuid4().hex

class Event(Base):
    __tablename__ = "events"
    
    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=False)
    overview = Column(Text, nullable=False)
    image = Column(String(1024), nullable=False)
    venue = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    time = Column(String(64), nullable=False)
    mode = Column(String(16), nullable=False)  # online, offline, hybrid
    audience = Column(String(255), nullable=False)
    agenda = Column(JSON, nullable=False)
    organizer = Column(String(255), nullable=False)
    tags = Column(JSON, nullable=False)
    created_at = Column("createdAt", DateTime, default=datetime.utcnow)
    updated_at = Column("updatedAt", DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
