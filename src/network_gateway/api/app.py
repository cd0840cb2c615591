"""
network_gateway.api.app

FastAPI app factory for the Agent Network Gateway service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/exception handlers.
- Initialize and dispose shared infrastructure (DB engine, HTTP client, registry).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_502_BAD_GATEWAY

from network_gateway import __version__
from network_gateway.api.routers.health import router as health_router
from network_gateway.api.routers.networks import router as networks_router
from network_gateway.db.init_db import init_db
from network_gateway.db.session import create_engine, create_sessionmaker
from network_gateway.memory.sql import SqlMemory
from network_gateway.network.config import NetworksFile, build_registry
from network_gateway.network.errors import InvalidMessagesError, ModelProviderError
from network_gateway.network.registry import NetworkRegistry
from network_gateway.observability.logging import configure_logging, get_logger
from network_gateway.observability.middleware import RequestContextMiddleware
from network_gateway.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings, registry: NetworkRegistry | None = None) -> FastAPI:
    """
    `registry` overrides the networks file; tests and embedding applications pass
    networks built in code.
    """

    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.log_json,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        await init_db(engine)

        # One pooled client shared by every model provider.
        http = httpx.AsyncClient(timeout=settings.model_timeout_seconds)
        app.state.http = http

        if registry is not None:
            app.state.registry = registry
        elif settings.networks_file is not None:
            app.state.registry = build_registry(
                NetworksFile.from_yaml(settings.networks_file), settings=settings, http=http
            )
        else:
            app.state.registry = NetworkRegistry()
        app.state.registry.attach_memory(SqlMemory(app.state.sessionmaker))
        log.info("registry_ready", networks=[n.id for n in app.state.registry.get_networks()])

        try:
            yield
        finally:
            await http.aclose()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Agent Network Gateway",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(networks_router)

    @app.exception_handler(ModelProviderError)
    async def _model_provider_error(_: Request, exc: ModelProviderError) -> JSONResponse:
        log.warning(
            "model_provider_error",
            provider=exc.provider,
            status_code=exc.status_code,
            error=str(exc),
        )
        return JSONResponse(status_code=HTTP_502_BAD_GATEWAY, content={"detail": str(exc)})

    @app.exception_handler(InvalidMessagesError)
    async def _invalid_messages(_: Request, exc: InvalidMessagesError) -> JSONResponse:
        return JSONResponse(status_code=HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; request validation lives in `handlers`, orchestration
# in the `network` package.
