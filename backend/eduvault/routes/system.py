from __future__ import annotations
from fastapi import APIRouter, Depends, Request
from datetime import datetime, timezone
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from eduvault.config import settings
from eduvault.db import get_session

router = APIRouter(tags=["system"])
log = structlog.get_logger()

@router.get("/health")
async def health(request: Request, session: AsyncSession = Depends(get_session)):
    try:
        await session.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        log.warning("health_db_unreachable", error=str(e))
        database = "unavailable"
    return {
        "success": True,
        "status": "ok",
        "database": database,
        "env": settings.environment,
        "time": datetime.now(timezone.utc).isoformat(),
        "request_id": request.headers.get("x-request-id") or request.state.request_id,
    }

@router.get("/version")
async def version():
    return {
        "success": True,
        "name": settings.app_name,
        "version": settings.app_version,
        "git_sha": settings.git_sha,
        "execution_backend": settings.execution_backend,
    }
