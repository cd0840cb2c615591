"""
network_gateway.db.init_db

Schema bootstrap.

Responsibilities:
- Create tables on startup if they don't exist.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from network_gateway.db import models  # noqa: F401  # registers models on Base.metadata
from network_gateway.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
