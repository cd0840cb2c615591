"""
network_gateway.network.messages

Chat message model shared by agents, model providers and memory.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any, Literal

from pydantic import BaseModel, ValidationError

Role = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    role: Role
    content: str
    # Agent name for assistant replies produced inside a network.
    name: str | None = None

    def to_provider_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.name:
            # Providers restrict participant names to [a-zA-Z0-9_-].
            payload["name"] = re.sub(r"[^a-zA-Z0-9_-]", "_", self.name)
        return payload


def normalize_messages(messages: str | Iterable[Any]) -> list[ChatMessage]:
    """
    Accept the loose shapes HTTP clients send and return typed messages.

    - a bare string is one user message
    - list items may be strings (user messages), dicts with role/content, or `ChatMessage`
    """

    if isinstance(messages, str):
        return [ChatMessage(role="user", content=messages)]

    out: list[ChatMessage] = []
    for i, item in enumerate(messages):
        if isinstance(item, ChatMessage):
            out.append(item)
        elif isinstance(item, str):
            out.append(ChatMessage(role="user", content=item))
        elif isinstance(item, Mapping):
            try:
                out.append(ChatMessage.model_validate(dict(item)))
            except ValidationError as e:
                raise ValueError(f"Invalid message at index {i}: {e.errors()[0]['msg']}") from e
        else:
            raise ValueError(f"Invalid message at index {i}: unsupported type {type(item).__name__}")
    return out


# --- Module Notes -----------------------------------------------------------
# Message names are sanitized only when sent to a provider; stored history keeps
# the agent name as given.
