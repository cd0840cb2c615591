"""
network_gateway.network.results

Result and event types produced by network runs.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class AgentStep(BaseModel):
    step: int
    agent: str
    text: str


class NetworkResult(BaseModel):
    network_id: str
    text: str
    steps: list[AgentStep] = Field(default_factory=list)
    # Parsed structured output when the caller supplied an output schema.
    object: Any | None = None
    resource_id: str | None = None
    thread_id: str | None = None


StreamEventType = Literal["step-start", "agent-delta", "step-finish", "text-delta", "finish", "error"]


class StreamEvent(BaseModel):
    type: StreamEventType
    agent: str | None = None
    step: int | None = None
    text: str | None = None
    object: Any | None = None
