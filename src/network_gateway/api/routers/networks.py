"""
network_gateway.api.routers.networks

Network endpoints under `/api/networks`.

Responsibilities:
- Map HTTP requests onto the handlers in `network_gateway.handlers.network`.
- Pass the raw JSON body through so lookup (404) runs before body validation.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from starlette.responses import StreamingResponse

from network_gateway.api.deps import registry_dep, runtime_context_dep
from network_gateway.handlers.network import (
    generate_handler,
    get_network_by_id_handler,
    get_networks_handler,
    stream_generate_handler,
)
from network_gateway.network.registry import NetworkRegistry
from network_gateway.network.results import NetworkResult
from network_gateway.network.runtime_context import RuntimeContext

router = APIRouter(prefix="/api/networks", tags=["networks"])


@router.get("")
async def list_networks(
    registry: NetworkRegistry = Depends(registry_dep),
    runtime_context: RuntimeContext = Depends(runtime_context_dep),
) -> list[dict[str, Any]]:
    return await get_networks_handler(registry=registry, runtime_context=runtime_context)


@router.get("/{network_id}")
async def get_network(
    network_id: str,
    registry: NetworkRegistry = Depends(registry_dep),
    runtime_context: RuntimeContext = Depends(runtime_context_dep),
) -> dict[str, Any]:
    return await get_network_by_id_handler(
        registry=registry, runtime_context=runtime_context, network_id=network_id
    )


@router.post("/{network_id}/generate", response_model=NetworkResult)
async def generate(
    network_id: str,
    body: dict[str, Any] | None = Body(default=None),
    registry: NetworkRegistry = Depends(registry_dep),
    runtime_context: RuntimeContext = Depends(runtime_context_dep),
) -> NetworkResult:
    return await generate_handler(
        registry=registry, runtime_context=runtime_context, body=body, network_id=network_id
    )


@router.post("/{network_id}/stream", response_class=StreamingResponse)
async def stream(
    network_id: str,
    body: dict[str, Any] | None = Body(default=None),
    registry: NetworkRegistry = Depends(registry_dep),
    runtime_context: RuntimeContext = Depends(runtime_context_dep),
) -> StreamingResponse:
    return await stream_generate_handler(
        registry=registry, runtime_context=runtime_context, body=body, network_id=network_id
    )


# --- Module Notes -----------------------------------------------------------
# The body is declared as a plain optional mapping; `NetworkGenerateRequest` is
# validated inside the handler after the network lookup.
