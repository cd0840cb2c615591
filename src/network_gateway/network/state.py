"""
network_gateway.network.state

Typed state schema used by the routing graph.

Responsibilities:
- Define the contract between the `route` and `agent` nodes.
"""

from __future__ import annotations

from typing import Annotated, TypedDict

from network_gateway.network.messages import ChatMessage
from network_gateway.network.reducers import append_items
from network_gateway.network.results import AgentStep


class NetworkState(TypedDict, total=False):
    # Conversation seen by the router and agents (memory history + request + agent replies).
    messages: Annotated[list[ChatMessage], append_items]
    steps: Annotated[list[AgentStep], append_items]

    # Routing controls
    next_agent: str | None
    step_count: int

    final_text: str
