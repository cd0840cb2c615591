"""
network_gateway.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and the network registry.
- Build the ambient runtime context of a request.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.status import HTTP_400_BAD_REQUEST

from network_gateway.network.registry import NetworkRegistry
from network_gateway.network.runtime_context import RuntimeContext
from network_gateway.settings import Settings

RUNTIME_CONTEXT_HEADER = "X-Runtime-Context"


def settings_dep(request: Request) -> Settings:
    # The settings `create_app` was built with, not a fresh read of the environment.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created on startup in `network_gateway.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


def registry_dep(request: Request) -> NetworkRegistry:
    return request.app.state.registry  # type: ignore[attr-defined]


def runtime_context_dep(
    x_runtime_context: str | None = Header(default=None, alias=RUNTIME_CONTEXT_HEADER),
) -> RuntimeContext:
    # A fresh context per request; handlers merge body-supplied values on top of it.
    if not x_runtime_context:
        return RuntimeContext()
    try:
        values = json.loads(x_runtime_context)
    except ValueError as e:
        raise HTTPException(
            status_code=HTTP_400_BAD_REQUEST, detail="Invalid runtime context header"
        ) from e
    if not isinstance(values, dict):
        raise HTTPException(
            status_code=HTTP_400_BAD_REQUEST, detail="Invalid runtime context header"
        )
    return RuntimeContext(values)


# --- Module Notes -----------------------------------------------------------
# App-scoped objects (settings, sessionmaker, registry) are set on `app.state`
# by `create_app` and its lifespan.
