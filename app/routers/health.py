"""Router exposing basic system endpoints."""
from __future__ import annotations

from fastapi import APIRouter

from app.config import get_settings


router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/status")
async def get_status() -> dict[str, str]:
    """Return a minimal status payload with the configured upstream model."""
    return {"status": "online", "model": get_settings().anthropic_model}
