"""
tests.test_agent_network

Routing-graph behavior with scripted models: delegation, step limits, structured output,
memory and streaming events.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Sequence

import pytest

from fakes import RecordingModel, ScriptedModel

from network_gateway.memory.base import InMemoryMemory
from network_gateway.network.agent import Agent
from network_gateway.network.errors import InvalidMessagesError, NetworkConfigError
from network_gateway.network.messages import ChatMessage
from network_gateway.network.models import MockModel
from network_gateway.network.network import AgentNetwork, format_network_id
from network_gateway.network.results import AgentStep
from network_gateway.network.runtime_context import RuntimeContext


class FailingModel(MockModel):
    async def generate(self, messages: Sequence[ChatMessage]) -> str:
        raise RuntimeError("provider down")

    async def stream(self, messages: Sequence[ChatMessage]) -> AsyncIterator[str]:
        raise RuntimeError("provider down")
        yield ""  # pragma: no cover


def test_network_id_is_derived_from_name() -> None:
    assert format_network_id("Research Network") == "research-network"
    assert format_network_id("  Multi   word\tName ") == "multi-word-name"


def test_duplicate_agent_names_are_rejected(make_agent, make_network) -> None:
    with pytest.raises(NetworkConfigError):
        make_network("dupes", [make_agent("same"), make_agent("same")])


@pytest.mark.asyncio
async def test_router_delegates_then_answers(make_agent, make_network) -> None:
    router = ScriptedModel(["agent1", "final answer"])
    worker = RecordingModel(mock_text="agent one says hi")
    network = make_network("net", [make_agent("agent1", worker), make_agent("agent2")], router)

    result = await network.generate(["what's up?"])

    assert result.text == "final answer"
    assert result.steps == [AgentStep(step=1, agent="agent1", text="agent one says hi")]
    assert result.network_id == "net"

    # The agent saw its own instructions followed by the conversation.
    assert worker.calls[0][0].role == "system"
    assert worker.calls[0][1].content == "what's up?"

    # The second routing call sees the agent's reply.
    last = router.calls[1][-1]
    assert (last.role, last.name, last.content) == ("assistant", "agent1", "agent one says hi")


@pytest.mark.asyncio
async def test_router_answer_without_delegation(network) -> None:
    result = await network.generate("hello")
    assert result.text == "Hello, world!"
    assert result.steps == []


@pytest.mark.asyncio
async def test_agent_match_ignores_case_and_quotes(make_agent, make_network) -> None:
    router = ScriptedModel(["`Agent1`.", "done"])
    network = make_network("net", [make_agent("agent1")], router)

    result = await network.generate(["hi"])

    assert [s.agent for s in result.steps] == ["agent1"]


@pytest.mark.asyncio
async def test_max_steps_forces_final_answer(make_agent, make_network) -> None:
    router = ScriptedModel(["agent1", "agent1", "agent1"])
    network = make_network("net", [make_agent("agent1")], router, max_steps=2)

    result = await network.generate(["loop"])

    assert len(result.steps) == 2
    # Third routing call could not delegate, so its reply is the answer.
    assert result.text == "agent1"
    assert "Answer the user directly" in router.calls[2][0].content


@pytest.mark.asyncio
async def test_network_without_agents_answers_directly(make_network) -> None:
    router = ScriptedModel(["plain answer"])
    result = await make_network("solo", [], router).generate(["hi"])
    assert result.text == "plain answer"
    assert "coordinate" not in router.calls[0][0].content


@pytest.mark.asyncio
async def test_structured_output_is_parsed(make_network) -> None:
    router = ScriptedModel(['```json\n{"answer": 42}\n```'])
    schema = {"type": "object", "properties": {"answer": {"type": "integer"}}}

    result = await make_network("net", [], router).generate(["q"], output=schema)

    assert result.object == {"answer": 42}
    assert json.dumps(schema, sort_keys=True) in router.calls[0][0].content


@pytest.mark.asyncio
async def test_unparseable_structured_output_is_none(make_network) -> None:
    router = ScriptedModel(["not json"])
    result = await make_network("net", [], router).generate(["q"], output={"type": "object"})
    assert result.object is None
    assert result.text == "not json"


@pytest.mark.asyncio
async def test_callable_instructions_see_runtime_context(make_network) -> None:
    worker = RecordingModel()
    agent = Agent(
        name="localizer",
        instructions=lambda rc: f"Reply in {rc.get('locale')}",
        model=worker,
    )
    network = make_network("net", [agent], ScriptedModel(["localizer", "done"]))

    await network.generate(["hi"], runtime_context=RuntimeContext({"locale": "fr"}))

    assert worker.calls[0][0].content == "Reply in fr"


@pytest.mark.asyncio
async def test_invalid_messages(network) -> None:
    with pytest.raises(InvalidMessagesError):
        await network.generate([{"role": "robot", "content": "x"}])
    with pytest.raises(InvalidMessagesError):
        await network.generate([42])


@pytest.mark.asyncio
async def test_memory_round_trip(make_network) -> None:
    memory = InMemoryMemory()
    router = ScriptedModel(["first answer", "second answer"])
    network = make_network("net", [], router, memory=memory)

    await network.generate(["one"], resource_id="user-1", thread_id="t-1")
    await network.generate(["two"], resource_id="user-1", thread_id="t-1")

    contents = [m.content for m in router.calls[1][1:]]
    assert contents == ["one", "first answer", "two"]

    history = await memory.load(resource_id="user-1", thread_id="t-1")
    assert [(m.role, m.content) for m in history] == [
        ("user", "one"),
        ("assistant", "first answer"),
        ("user", "two"),
        ("assistant", "second answer"),
    ]


@pytest.mark.asyncio
async def test_memory_requires_resource_and_thread(make_network) -> None:
    memory = InMemoryMemory()
    network = make_network("net", [], memory=memory)

    await network.generate(["one"], thread_id="t-1")

    assert await memory.load(resource_id="", thread_id="t-1") == []


@pytest.mark.asyncio
async def test_stream_events(make_agent, make_network) -> None:
    router = ScriptedModel(["agent1", "done"])
    network = make_network("net", [make_agent("agent1", MockModel(mock_text="a b"))], router)

    stream_result = await network.stream(["hi"])
    events = [e async for e in stream_result]

    assert [(e.type, e.text) for e in events] == [
        ("step-start", None),
        ("agent-delta", "a "),
        ("agent-delta", "b"),
        ("step-finish", "a b"),
        ("text-delta", "done"),
        ("finish", "done"),
    ]
    assert events[0].agent == "agent1" and events[0].step == 1


@pytest.mark.asyncio
async def test_stream_can_only_be_consumed_once(network) -> None:
    stream_result = await network.stream(["hi"])
    assert [t async for t in stream_result.text_stream] == ["Hello, world!"]
    with pytest.raises(RuntimeError):
        stream_result.__aiter__()


@pytest.mark.asyncio
async def test_stream_validates_before_streaming(network) -> None:
    with pytest.raises(InvalidMessagesError):
        await network.stream([object()])


@pytest.mark.asyncio
async def test_streaming_response_sse(network) -> None:
    response = (await network.stream(["hi"])).to_streaming_response()
    chunks = [c async for c in response.body_iterator]

    assert response.media_type == "text/event-stream"
    assert chunks[-1] == "data: [DONE]\n\n"
    payloads = [json.loads(c[len("data: ") :]) for c in chunks[:-1]]
    assert payloads == [
        {"type": "text-delta", "text": "Hello, world!"},
        {"type": "finish", "text": "Hello, world!"},
    ]


@pytest.mark.asyncio
async def test_streaming_failure_is_reported_in_band(make_agent, make_network) -> None:
    network = make_network(
        "net", [make_agent("agent1", FailingModel())], ScriptedModel(["agent1"])
    )
    response = (await network.stream(["hi"])).to_streaming_response()
    chunks = [c async for c in response.body_iterator]

    assert chunks[-1] == "data: [DONE]\n\n"
    assert json.loads(chunks[-2][len("data: ") :]) == {
        "type": "error",
        "text": "Network execution failed",
    }


@pytest.mark.asyncio
async def test_generate_propagates_model_errors(make_network) -> None:
    with pytest.raises(RuntimeError, match="provider down"):
        await make_network("net", [], FailingModel()).generate(["hi"])


def test_summary_describes_models(make_agent) -> None:
    network = AgentNetwork(
        name="Research Network",
        instructions="Research things",
        model=MockModel(provider="openai", model_id="gpt-4o-mini"),
        agents=[make_agent("researcher")],
    )
    assert network.summary() == {
        "id": "research-network",
        "name": "Research Network",
        "instructions": "Research things",
        "agents": [{"name": "researcher", "provider": "mock-provider", "modelId": "mock-model-id"}],
        "routingModel": {"provider": "openai", "modelId": "gpt-4o-mini"},
    }
