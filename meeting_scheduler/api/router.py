from __future__ import annotations

from fastapi import APIRouter

from meeting_scheduler.api.endpoints import execute, health

api_router = APIRouter()
api_router.include_router(health.router, tags=["system"])
api_router.include_router(execute.router, prefix="/api", tags=["meetings"])
