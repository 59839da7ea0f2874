"""Health and version endpoints"""
from fastapi import APIRouter, Depends

from ...core.config import Settings, get_settings


router = APIRouter()


@router.get("/health")
@router.get("/healthz")
async def health(settings: Settings = Depends(get_settings)) -> dict:
    """Liveness check"""
    return {"ok": True, "version": settings.app_version}


@router.get("/version")
async def version(settings: Settings = Depends(get_settings)) -> dict:
    """Service name, version and environment"""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.app_env,
    }
