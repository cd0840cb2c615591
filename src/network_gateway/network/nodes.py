"""
network_gateway.network.nodes

LangGraph node implementations for the routing loop.

Responsibilities:
- Ask the routing model whether to delegate or answer.
- Invoke the chosen agent and record its step.
- Emit stream events through the per-run callback.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from network_gateway.network.agent import Agent
from network_gateway.network.messages import ChatMessage
from network_gateway.network.models import LanguageModel
from network_gateway.network.results import AgentStep, StreamEvent
from network_gateway.network.runtime_context import RuntimeContext
from network_gateway.network.state import NetworkState
from network_gateway.observability.logging import get_logger

log = get_logger(__name__)

Emit = Callable[[StreamEvent], Awaitable[None]]


async def no_emit(_: StreamEvent) -> None:
    return None


@dataclass(frozen=True, slots=True)
class RunBindings:
    """Per-run inputs the nodes need but that do not belong in graph state."""

    network_id: str
    instructions: str
    routing_model: LanguageModel
    agents: Mapping[str, Agent]
    runtime_context: RuntimeContext
    max_steps: int
    output_schema: dict[str, Any] | None = None
    streaming: bool = False
    emit: Emit = no_emit


def routing_prompt(run: RunBindings, *, final_only: bool) -> str:
    lines = [run.instructions.strip(), ""]
    if final_only:
        lines.append("Answer the user directly using the conversation so far.")
    else:
        lines.append("You coordinate the following agents:")
        for agent in run.agents.values():
            lines.append(f"- {agent.name}: {agent.resolve_instructions(run.runtime_context)}")
        lines.append("")
        lines.append(
            "To delegate, reply with exactly the name of the agent to call next and nothing else. "
            "When the conversation already contains what the user needs, answer the user directly."
        )
    if run.output_schema is not None:
        lines.append("")
        lines.append(
            "When answering directly, respond only with JSON matching this schema: "
            + json.dumps(run.output_schema, sort_keys=True)
        )
    return "\n".join(lines)


def match_agent(reply: str, agents: Mapping[str, Agent]) -> Agent | None:
    wanted = reply.strip().strip("`\"'.").strip().lower()
    for agent in agents.values():
        if agent.name.lower() == wanted:
            return agent
    return None


async def route_node(state: NetworkState, *, run: RunBindings) -> NetworkState:
    step_count = state.get("step_count", 0)
    final_only = not run.agents or step_count >= run.max_steps

    prompt = [
        ChatMessage(role="system", content=routing_prompt(run, final_only=final_only)),
        *state.get("messages", []),
    ]
    reply = (await run.routing_model.generate(prompt)).strip()

    agent = None if final_only else match_agent(reply, run.agents)
    if agent is not None:
        log.info("network_route", network_id=run.network_id, agent=agent.name, step=step_count + 1)
        return {"next_agent": agent.name}

    log.info("network_answer", network_id=run.network_id, steps=step_count, final_only=final_only)
    await run.emit(StreamEvent(type="text-delta", text=reply))
    return {"next_agent": None, "final_text": reply}


async def agent_node(state: NetworkState, *, run: RunBindings) -> NetworkState:
    agent = run.agents[state["next_agent"]]
    step = state.get("step_count", 0) + 1
    conversation = state.get("messages", [])

    await run.emit(StreamEvent(type="step-start", agent=agent.name, step=step))
    if run.streaming:
        parts: list[str] = []
        async for delta in agent.stream(conversation, runtime_context=run.runtime_context):
            parts.append(delta)
            await run.emit(StreamEvent(type="agent-delta", agent=agent.name, step=step, text=delta))
        text = "".join(parts)
    else:
        text = await agent.generate(conversation, runtime_context=run.runtime_context)
    await run.emit(StreamEvent(type="step-finish", agent=agent.name, step=step, text=text))

    log.info("agent_step_finished", network_id=run.network_id, agent=agent.name, step=step)
    return {
        "messages": [ChatMessage(role="assistant", content=text, name=agent.name)],
        "steps": [AgentStep(step=step, agent=agent.name, text=text)],
        "step_count": step,
        "next_agent": None,
    }


def route_after_route(state: NetworkState) -> str:
    if state.get("next_agent"):
        return "agent"
    return "finish"


# --- Module Notes -----------------------------------------------------------
# Nodes return partial state updates; list fields are appended by the reducers
# declared on `NetworkState`.
