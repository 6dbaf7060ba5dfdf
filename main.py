"""
Event listings data service - FastAPI application
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from app.core.config import Settings, settings as default_settings
from app.core.db import ConnectionManager
from app.core.errors import DomainError
from app.api import routes_public
from app.utils.responses import domain_error_handler

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def create_app(settings: Settings = default_settings, manager: ConnectionManager = None) -> FastAPI:
    """Build the application; it owns the connection manager for its lifetime"""
    connections = manager or ConnectionManager(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan management"""
        await connections.acquire()
        logger.info("Application startup complete")
        yield
        await connections.release()
        logger.info("Application shutdown")

    app = FastAPI(
        title="Event Listings Data Service",
        description="Event and booking data-access layer",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.connections = connections

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DomainError, domain_error_handler)

    # Include routers
    app.include_router(routes_public.router, tags=["public"])
    return app

app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
