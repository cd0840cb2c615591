"""
network_gateway.network.network

Routing network: a named group of agents coordinated by a routing model.

Responsibilities:
- Run the LangGraph routing loop for synchronous and streaming generation.
- Load and persist thread history through the optional `Memory`.
- Parse structured output when the caller supplies a JSON schema.
- Expose the summary used by listing/lookup endpoints.
"""

from __future__ import annotations

import asyncio
import json
import re
from collections.abc import AsyncIterator, Iterable, Sequence
from typing import TYPE_CHECKING, Any

from starlette.responses import StreamingResponse

from network_gateway.network.agent import Agent
from network_gateway.network.errors import InvalidMessagesError, NetworkConfigError
from network_gateway.network.graph import build_graph, recursion_limit
from network_gateway.network.messages import ChatMessage, normalize_messages
from network_gateway.network.models import LanguageModel, describe_model
from network_gateway.network.nodes import Emit, RunBindings, no_emit
from network_gateway.network.results import NetworkResult, StreamEvent
from network_gateway.network.runtime_context import RuntimeContext
from network_gateway.observability.logging import get_logger

if TYPE_CHECKING:
    from network_gateway.memory.base import Memory

log = get_logger(__name__)


def format_network_id(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip()).lower()


class AgentNetwork:
    def __init__(
        self,
        *,
        name: str,
        instructions: str,
        model: LanguageModel,
        agents: Iterable[Agent] = (),
        memory: Memory | None = None,
        max_steps: int = 5,
        history_limit: int = 50,
    ) -> None:
        if not name or not name.strip():
            raise NetworkConfigError("Network name must not be empty")
        if max_steps < 1:
            raise NetworkConfigError("max_steps must be >= 1")

        self.name = name
        self.instructions = instructions
        self.model = model
        self.memory = memory
        self.max_steps = max_steps
        self.history_limit = history_limit

        self._agents: dict[str, Agent] = {}
        for agent in agents:
            if agent.name in self._agents:
                raise NetworkConfigError(f"Duplicate agent name in network {name!r}: {agent.name}")
            self._agents[agent.name] = agent

    @property
    def id(self) -> str:
        return format_network_id(self.name)

    @property
    def routing_model(self) -> LanguageModel:
        return self.model

    def get_agents(self) -> list[Agent]:
        return list(self._agents.values())

    def summary(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "instructions": self.instructions,
            "agents": [a.summary() for a in self._agents.values()],
            "routingModel": describe_model(self.routing_model),
        }

    async def generate(
        self,
        messages: str | Sequence[Any],
        *,
        resource_id: str | None = None,
        thread_id: str | None = None,
        output: dict[str, Any] | None = None,
        runtime_context: RuntimeContext | None = None,
    ) -> NetworkResult:
        new_messages, conversation = await self._prepare(messages, resource_id, thread_id)
        return await self._execute(
            new_messages,
            conversation,
            resource_id=resource_id,
            thread_id=thread_id,
            output=output,
            runtime_context=runtime_context or RuntimeContext(),
        )

    async def stream(
        self,
        messages: str | Sequence[Any],
        *,
        resource_id: str | None = None,
        thread_id: str | None = None,
        output: dict[str, Any] | None = None,
        runtime_context: RuntimeContext | None = None,
    ) -> NetworkStreamResult:
        # Validation and history loading happen before the stream starts so callers
        # still get a normal error response for bad input.
        new_messages, conversation = await self._prepare(messages, resource_id, thread_id)
        events = self._stream_events(
            new_messages,
            conversation,
            resource_id=resource_id,
            thread_id=thread_id,
            output=output,
            runtime_context=runtime_context or RuntimeContext(),
        )
        return NetworkStreamResult(events, network_id=self.id)

    async def _prepare(
        self,
        messages: str | Sequence[Any],
        resource_id: str | None,
        thread_id: str | None,
    ) -> tuple[list[ChatMessage], list[ChatMessage]]:
        try:
            new_messages = normalize_messages(messages)
        except ValueError as e:
            raise InvalidMessagesError(str(e)) from e

        history: list[ChatMessage] = []
        if self.memory is not None and resource_id and thread_id:
            history = await self.memory.load(
                resource_id=resource_id, thread_id=thread_id, limit=self.history_limit
            )
        return new_messages, [*history, *new_messages]

    async def _execute(
        self,
        new_messages: list[ChatMessage],
        conversation: list[ChatMessage],
        *,
        resource_id: str | None,
        thread_id: str | None,
        output: dict[str, Any] | None,
        runtime_context: RuntimeContext,
        streaming: bool = False,
        emit: Emit = no_emit,
    ) -> NetworkResult:
        run = RunBindings(
            network_id=self.id,
            instructions=self.instructions,
            routing_model=self.routing_model,
            agents=dict(self._agents),
            runtime_context=runtime_context,
            max_steps=self.max_steps,
            output_schema=output,
            streaming=streaming,
            emit=emit,
        )
        graph = build_graph(run=run)

        log.info(
            "network_generate_started",
            network_id=self.id,
            streaming=streaming,
            messages=len(new_messages),
            history=len(conversation) - len(new_messages),
        )
        final_state = await graph.ainvoke(
            {"messages": conversation, "steps": [], "step_count": 0},
            config={"recursion_limit": recursion_limit(self.max_steps)},
        )

        text = final_state.get("final_text", "")
        result = NetworkResult(
            network_id=self.id,
            text=text,
            steps=list(final_state.get("steps", [])),
            object=self._parse_output(text) if output is not None else None,
            resource_id=resource_id,
            thread_id=thread_id,
        )

        if self.memory is not None and resource_id and thread_id:
            await self.memory.save(
                resource_id=resource_id,
                thread_id=thread_id,
                messages=[*new_messages, ChatMessage(role="assistant", content=text)],
                network_id=self.id,
            )

        log.info("network_generate_finished", network_id=self.id, steps=len(result.steps))
        return result

    async def _stream_events(
        self,
        new_messages: list[ChatMessage],
        conversation: list[ChatMessage],
        **kwargs: Any,
    ) -> AsyncIterator[StreamEvent]:
        queue: asyncio.Queue[StreamEvent | None] = asyncio.Queue()

        async def emit(event: StreamEvent) -> None:
            await queue.put(event)

        task = asyncio.create_task(
            self._execute(new_messages, conversation, streaming=True, emit=emit, **kwargs)
        )
        # Sentinel wakes the consumer whether the run finished or failed.
        task.add_done_callback(lambda _: queue.put_nowait(None))
        try:
            while True:
                event = await queue.get()
                if event is None:
                    break
                yield event
            result = await task
            yield StreamEvent(type="finish", text=result.text, object=result.object)
        finally:
            if not task.done():
                task.cancel()

    def _parse_output(self, text: str) -> Any | None:
        candidate = text.strip()
        # Models often wrap JSON in a fenced code block.
        fenced = re.match(r"^```(?:json)?\s*(.*?)\s*```$", candidate, re.DOTALL)
        if fenced:
            candidate = fenced.group(1)
        try:
            return json.loads(candidate)
        except ValueError:
            log.warning("network_output_unparseable", network_id=self.id, text=text[:200])
            return None

    def __repr__(self) -> str:
        return f"AgentNetwork(id={self.id!r}, agents={list(self._agents)})"


class NetworkStreamResult:
    """
    Single-use stream of `StreamEvent`s from one network run.
    """

    def __init__(self, events: AsyncIterator[StreamEvent], *, network_id: str) -> None:
        self.network_id = network_id
        self._events = events
        self._consumed = False

    def __aiter__(self) -> AsyncIterator[StreamEvent]:
        if self._consumed:
            raise RuntimeError("Network stream can only be consumed once")
        self._consumed = True
        return self._events

    @property
    def text_stream(self) -> AsyncIterator[str]:
        return self._text_stream()

    async def _text_stream(self) -> AsyncIterator[str]:
        async for event in self:
            if event.type == "text-delta" and event.text:
                yield event.text

    def to_streaming_response(self) -> StreamingResponse:
        return StreamingResponse(
            self._sse(),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    async def _sse(self) -> AsyncIterator[str]:
        try:
            async for event in self:
                yield f"data: {event.model_dump_json(exclude_none=True)}\n\n"
        except Exception:
            # The status line is already sent; report the failure in-band.
            log.exception("network_stream_failed", network_id=self.network_id)
            error = StreamEvent(type="error", text="Network execution failed")
            yield f"data: {error.model_dump_json(exclude_none=True)}\n\n"
        yield "data: [DONE]\n\n"
