"""
network_gateway.network.models

Language model providers used by agents and routing networks.

Responsibilities:
- Define the `LanguageModel` protocol (descriptor + generate + stream).
- Provide a deterministic mock model for local dev.
- Provide an OpenAI-compatible chat completions client over `httpx`.
- Build models from YAML definitions.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import httpx

from network_gateway.network.errors import ModelProviderError, NetworkConfigError
from network_gateway.network.messages import ChatMessage
from network_gateway.observability.logging import get_logger

if TYPE_CHECKING:
    from network_gateway.network.config import ModelDefinition
    from network_gateway.settings import Settings

log = get_logger(__name__)


@runtime_checkable
class LanguageModel(Protocol):
    provider: str
    model_id: str

    async def generate(self, messages: Sequence[ChatMessage]) -> str: ...

    def stream(self, messages: Sequence[ChatMessage]) -> AsyncIterator[str]: ...


def describe_model(model: LanguageModel) -> dict[str, str]:
    return {"provider": model.provider, "modelId": model.model_id}


class MockModel:
    """
    Always answers with `mock_text`; streams it word by word.
    """

    def __init__(
        self,
        *,
        mock_text: str = "Hello, world!",
        provider: str = "mock-provider",
        model_id: str = "mock-model-id",
    ) -> None:
        self.provider = provider
        self.model_id = model_id
        self.mock_text = mock_text

    async def generate(self, messages: Sequence[ChatMessage]) -> str:
        return self.mock_text

    async def stream(self, messages: Sequence[ChatMessage]) -> AsyncIterator[str]:
        words = self.mock_text.split(" ")
        for i, word in enumerate(words):
            yield word if i == len(words) - 1 else f"{word} "


class OpenAIChatModel:
    """
    OpenAI-compatible `/chat/completions` client.

    The `httpx.AsyncClient` is owned by the caller (app lifespan) so connections are pooled
    across agents and requests.
    """

    provider = "openai"

    def __init__(
        self,
        *,
        model_id: str,
        http: httpx.AsyncClient,
        base_url: str = "https://api.openai.com/v1",
        api_key: str = "",
        temperature: float | None = None,
        timeout: float = 60.0,
    ) -> None:
        self.model_id = model_id
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._temperature = temperature
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def _payload(self, messages: Sequence[ChatMessage], *, stream: bool) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model_id,
            "messages": [m.to_provider_dict() for m in messages],
            "stream": stream,
        }
        if self._temperature is not None:
            payload["temperature"] = self._temperature
        return payload

    def _error(self, message: str, status_code: int | None = None) -> ModelProviderError:
        return ModelProviderError(message, provider=self.provider, status_code=status_code)

    async def generate(self, messages: Sequence[ChatMessage]) -> str:
        try:
            r = await self._http.post(
                f"{self._base_url}/chat/completions",
                json=self._payload(messages, stream=False),
                headers=self._headers(),
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            raise self._error(f"{self.model_id} request failed: {e}") from e

        if r.status_code >= 400:
            raise self._error(
                f"{self.model_id} returned HTTP {r.status_code}: {r.text[:200]}", r.status_code
            )
        try:
            return r.json()["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise self._error(f"{self.model_id} returned an unexpected payload") from e

    async def stream(self, messages: Sequence[ChatMessage]) -> AsyncIterator[str]:
        try:
            async with self._http.stream(
                "POST",
                f"{self._base_url}/chat/completions",
                json=self._payload(messages, stream=True),
                headers=self._headers(),
                timeout=self._timeout,
            ) as r:
                if r.status_code >= 400:
                    body = (await r.aread()).decode(errors="replace")
                    raise self._error(
                        f"{self.model_id} returned HTTP {r.status_code}: {body[:200]}",
                        r.status_code,
                    )
                async for line in r.aiter_lines():
                    delta = _parse_sse_delta(line)
                    if delta:
                        yield delta
        except httpx.HTTPError as e:
            raise self._error(f"{self.model_id} stream failed: {e}") from e


def _parse_sse_delta(line: str) -> str | None:
    # SSE frames look like `data: {...}`; keep-alives and `[DONE]` carry no text.
    if not line.startswith("data:"):
        return None
    data = line[len("data:") :].strip()
    if not data or data == "[DONE]":
        return None
    try:
        chunk = json.loads(data)
        return chunk["choices"][0]["delta"].get("content")
    except (ValueError, KeyError, IndexError, TypeError, AttributeError):
        log.warning("sse_chunk_unparseable", data=data[:200])
        return None


def build_model(
    definition: ModelDefinition,
    *,
    settings: Settings,
    http: httpx.AsyncClient | None,
) -> LanguageModel:
    if definition.provider == "mock":
        return MockModel(
            mock_text=definition.mock_text or "Hello, world!",
            model_id=definition.model_id or "mock-model-id",
        )
    if definition.provider == "openai":
        if http is None:
            raise NetworkConfigError("openai models require an HTTP client")
        if not definition.model_id:
            raise NetworkConfigError("openai models require 'model_id'")
        return OpenAIChatModel(
            model_id=definition.model_id,
            http=http,
            base_url=definition.base_url or settings.openai_base_url,
            api_key=settings.openai_api_key,
            temperature=definition.temperature,
            timeout=settings.model_timeout_seconds,
        )
    raise NetworkConfigError(f"Unknown model provider: {definition.provider}")


# --- Module Notes -----------------------------------------------------------
# Provider errors are raised as `ModelProviderError`; the API layer maps them to 502.
