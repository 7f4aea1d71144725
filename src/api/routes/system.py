from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter

from core.config import settings
from core.deps import RuntimeDep
from db.database import check_db_connection

router = APIRouter(tags=["System"])


@router.get("/health", tags=["Health"])
async def health(runtime: RuntimeDep) -> dict[str, Any]:
    db_ok = await check_db_connection()
    return {
        "success": db_ok,
        "status": "ok" if db_ok else "degraded",
        "database": "up" if db_ok else "down",
        "cache": {"enabled": runtime.cache.enabled, "entries": len(runtime.cache)},
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/", tags=["Root"])
async def root() -> dict[str, Any]:
    return {
        "success": True,
        "name": settings.api_title,
        "version": settings.api_version,
        "api": "/api/v1",
        "docs": None if settings.environment == "production" else "/docs",
    }
