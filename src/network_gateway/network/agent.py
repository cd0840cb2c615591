"""
network_gateway.network.agent

A named, independently configured model-backed participant of a network.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Sequence

from network_gateway.network.messages import ChatMessage
from network_gateway.network.models import LanguageModel, describe_model
from network_gateway.network.runtime_context import RuntimeContext

Instructions = str | Callable[[RuntimeContext], str]


class Agent:
    def __init__(self, *, name: str, instructions: Instructions, model: LanguageModel) -> None:
        if not name or not name.strip():
            raise ValueError("Agent name must not be empty")
        self.name = name
        self.instructions = instructions
        self.model = model

    def resolve_instructions(self, runtime_context: RuntimeContext | None = None) -> str:
        # Callable instructions let deployments vary prompts per request (tenant, locale, ...).
        if callable(self.instructions):
            return self.instructions(runtime_context or RuntimeContext())
        return self.instructions

    def _prompt(
        self, messages: Sequence[ChatMessage], runtime_context: RuntimeContext | None
    ) -> list[ChatMessage]:
        system = ChatMessage(role="system", content=self.resolve_instructions(runtime_context))
        return [system, *messages]

    async def generate(
        self,
        messages: Sequence[ChatMessage],
        *,
        runtime_context: RuntimeContext | None = None,
    ) -> str:
        return await self.model.generate(self._prompt(messages, runtime_context))

    def stream(
        self,
        messages: Sequence[ChatMessage],
        *,
        runtime_context: RuntimeContext | None = None,
    ) -> AsyncIterator[str]:
        return self.model.stream(self._prompt(messages, runtime_context))

    def summary(self) -> dict[str, str]:
        return {"name": self.name, **describe_model(self.model)}

    def __repr__(self) -> str:
        return f"Agent(name={self.name!r}, model={self.model.provider}/{self.model.model_id})"
