"""
network_gateway.handlers.network

Handlers behind the `/api/networks` endpoints.

Responsibilities:
- List networks and fetch one by id as summaries.
- Run synchronous and streaming generation on a network.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fastapi import HTTPException
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from starlette.responses import StreamingResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from network_gateway.network.network import AgentNetwork
from network_gateway.network.registry import NetworkRegistry
from network_gateway.network.results import NetworkResult
from network_gateway.network.runtime_context import RuntimeContext
from network_gateway.observability.logging import get_logger

log = get_logger(__name__)

NETWORK_NOT_FOUND = "Network not found"
MESSAGES_REQUIRED = 'Argument "messages" is required'


class NetworkGenerateRequest(BaseModel):
    """
    Body of generate/stream requests. Field names follow the public camelCase API;
    snake_case names are accepted too.
    """

    model_config = ConfigDict(populate_by_name=True)

    # Optional at the schema level so a missing field yields the 400 below, not a 422.
    messages: str | list[Any] | None = None
    resource_id: str | None = Field(default=None, alias="resourceId")
    thread_id: str | None = Field(default=None, alias="threadId")
    experimental_output: dict[str, Any] | None = None
    runtime_context: dict[str, Any] | None = Field(default=None, alias="runtimeContext")


def _coerce_body(body: NetworkGenerateRequest | Mapping[str, Any] | None) -> NetworkGenerateRequest:
    if isinstance(body, NetworkGenerateRequest):
        return body
    try:
        return NetworkGenerateRequest.model_validate(dict(body or {}))
    except ValidationError as e:
        detail = e.errors(include_url=False, include_context=False)
        raise HTTPException(status_code=422, detail=detail) from e


def _get_network(registry: NetworkRegistry, network_id: str | None) -> AgentNetwork:
    network = registry.get_network(network_id)
    if network is None:
        log.info("network_not_found", network_id=network_id)
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=NETWORK_NOT_FOUND)
    return network


def _prepare(
    registry: NetworkRegistry,
    runtime_context: RuntimeContext,
    body: NetworkGenerateRequest | Mapping[str, Any] | None,
    network_id: str | None,
) -> tuple[AgentNetwork, NetworkGenerateRequest, RuntimeContext]:
    # Not-found is checked before the body so unknown networks always answer 404.
    network = _get_network(registry, network_id)
    request = _coerce_body(body)
    if request.messages is None:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=MESSAGES_REQUIRED)
    return network, request, runtime_context.merged(request.runtime_context)


async def get_networks_handler(
    *, registry: NetworkRegistry, runtime_context: RuntimeContext
) -> list[dict[str, Any]]:
    return [network.summary() for network in registry.get_networks()]


async def get_network_by_id_handler(
    *,
    registry: NetworkRegistry,
    runtime_context: RuntimeContext,
    network_id: str | None = None,
) -> dict[str, Any]:
    return _get_network(registry, network_id).summary()


async def generate_handler(
    *,
    registry: NetworkRegistry,
    runtime_context: RuntimeContext,
    body: NetworkGenerateRequest | Mapping[str, Any] | None = None,
    network_id: str | None = None,
) -> NetworkResult:
    network, request, merged = _prepare(registry, runtime_context, body, network_id)
    return await network.generate(
        request.messages,
        resource_id=request.resource_id,
        thread_id=request.thread_id,
        output=request.experimental_output,
        runtime_context=merged,
    )


async def stream_generate_handler(
    *,
    registry: NetworkRegistry,
    runtime_context: RuntimeContext,
    body: NetworkGenerateRequest | Mapping[str, Any] | None = None,
    network_id: str | None = None,
) -> StreamingResponse:
    network, request, merged = _prepare(registry, runtime_context, body, network_id)
    stream_result = await network.stream(
        request.messages,
        resource_id=request.resource_id,
        thread_id=request.thread_id,
        output=request.experimental_output,
        runtime_context=merged,
    )
    return stream_result.to_streaming_response()


# --- Module Notes -----------------------------------------------------------
# Handlers are plain async functions so they can be called without FastAPI; the
# router in `api/routers/networks.py` only adapts path, headers and body.
