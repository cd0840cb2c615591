"""
network_gateway.network.graph

Builds the LangGraph state machine for one network run.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from network_gateway.network.nodes import RunBindings, agent_node, route_after_route, route_node
from network_gateway.network.state import NetworkState


def build_graph(*, run: RunBindings):
    """
    Returns a compiled LangGraph runnable: route -> (agent -> route)* -> END.
    """

    try:
        from langgraph.graph import END, StateGraph  # type: ignore[import-not-found]
    except ImportError as e:  # pragma: no cover
        raise RuntimeError("LangGraph is not available. Install the project dependencies.") from e

    graph = StateGraph(NetworkState)

    graph.add_node("route", _bind_run(route_node, run))
    graph.add_node("agent", _bind_run(agent_node, run))

    graph.set_entry_point("route")
    graph.add_conditional_edges("route", route_after_route, {"agent": "agent", "finish": END})
    graph.add_edge("agent", "route")

    return graph.compile()


def recursion_limit(max_steps: int) -> int:
    # Each agent step costs two supersteps (agent + route), plus the first route and headroom.
    return 2 * max_steps + 5


def _bind_run(
    fn: Callable[..., Awaitable[NetworkState]],
    run: RunBindings,
) -> Callable[[NetworkState], Awaitable[NetworkState]]:
    async def _wrapped(state: NetworkState) -> NetworkState:
        return await fn(state, run=run)

    return _wrapped


# --- Module Notes -----------------------------------------------------------
# Graphs are built per run because the node closures carry that run's bindings.
