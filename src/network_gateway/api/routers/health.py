"""
network_gateway.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) with DB connectivity validation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from network_gateway.api.deps import db_session, settings_dep
from network_gateway.settings import Settings

router = APIRouter()


@router.get("/healthz")
async def healthz(settings: Settings = Depends(settings_dep)) -> dict[str, str]:
    return {"status": "ok", "service": settings.service_name, "env": settings.env}


@router.get("/readyz")
async def readyz(
    request: Request, session: AsyncSession = Depends(db_session)
) -> dict[str, str | int]:
    # Readiness: memory store is reachable and the registry is loaded.
    await session.execute(text("SELECT 1"))
    return {"status": "ready", "networks": len(request.app.state.registry)}


# --- Module Notes -----------------------------------------------------------
# /healthz never touches the database; /readyz fails while the database is
# unreachable so orchestrators stop routing traffic to the instance.
