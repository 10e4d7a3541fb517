"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from receptionist.api.exception_handlers import register_exception_handlers
from receptionist.api.middleware import RequestContextMiddleware
from receptionist.api.routes import api_router
from receptionist.logging_config import setup_logging
from receptionist.persistence.database import engine
from receptionist.settings import settings

# Setup logging
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(f"Starting receptionist API ({settings.environment})")
    yield
    # Shutdown
    await engine.dispose()


# Create FastAPI app
app = FastAPI(
    title="Receptionist API",
    description="Voice receptionist dashboard, call-event and lead capture API",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

# Request id, tenant context reset and the last-resort 500 envelope
app.add_middleware(RequestContextMiddleware)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix=settings.api_v1_prefix)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Receptionist API",
        "version": "0.1.0",
        "docs": "/docs",
    }
