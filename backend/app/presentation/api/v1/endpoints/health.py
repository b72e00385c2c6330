"""Liveness endpoint — no database or identity dependencies."""

from fastapi import APIRouter

from app.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    settings = get_settings()
    return {
        "status": "healthy",
        "service": settings.app_title,
        "version": settings.app_version,
        "environment": settings.app_env,
        "guest_read_access": settings.guest_read_access,
    }
