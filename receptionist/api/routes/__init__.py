"""API routes."""

from fastapi import APIRouter

from receptionist.api.routes import admin, demo, leads, reporting, retell_webhooks

api_router = APIRouter()

# Public routes (no auth required)
api_router.include_router(retell_webhooks.router, prefix="/retell", tags=["retell-webhooks"])
api_router.include_router(leads.router, prefix="/leads", tags=["leads"])
api_router.include_router(demo.router, tags=["demo"])

# Protected routes (auth required)
api_router.include_router(reporting.router, tags=["reporting"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
