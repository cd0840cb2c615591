"""
tests.fakes

Model doubles that record prompts and script routing replies.
"""

from __future__ import annotations

from collections import deque
from collections.abc import AsyncIterator, Iterable, Sequence
from typing import Any

from network_gateway.network.messages import ChatMessage
from network_gateway.network.models import MockModel


class RecordingModel(MockModel):
    """
    `MockModel` that keeps every prompt it receives in `calls`.
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.calls: list[list[ChatMessage]] = []

    async def generate(self, messages: Sequence[ChatMessage]) -> str:
        self.calls.append(list(messages))
        return await super().generate(messages)

    async def stream(self, messages: Sequence[ChatMessage]) -> AsyncIterator[str]:
        self.calls.append(list(messages))
        async for chunk in super().stream(messages):
            yield chunk


class ScriptedModel(RecordingModel):
    """
    Replays `replies` in order, then falls back to `mock_text`.
    """

    def __init__(self, replies: Iterable[str], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._replies: deque[str] = deque(replies)

    def _next(self) -> str:
        return self._replies.popleft() if self._replies else self.mock_text

    async def generate(self, messages: Sequence[ChatMessage]) -> str:
        self.calls.append(list(messages))
        return self._next()

    async def stream(self, messages: Sequence[ChatMessage]) -> AsyncIterator[str]:
        self.calls.append(list(messages))
        yield self._next()
