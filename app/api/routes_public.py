"""
Public API routes - no authentication required
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_connection_manager
from app.core.db import ConnectionManager

router = APIRouter()

@router.get("/health")
async def health_check(manager: ConnectionManager = Depends(get_connection_manager)):
    """Health check endpoint; connects on demand"""
    await manager.connect()
    return {"status": "ok", "database": "connected"}
