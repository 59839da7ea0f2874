"""Versioned API router registration."""

from fastapi import APIRouter

from .health import router as health_router
from .upi import router as upi_router


def create_v1_router() -> APIRouter:
    """Create and configure v1 API router"""
    router = APIRouter(prefix="/v1")

    router.include_router(health_router, tags=["health"])
    router.include_router(upi_router, tags=["upi"])

    return router
