"""
network_gateway.network.runtime_context

Key/value bag passed alongside a network run.

Responsibilities:
- Hold ambient request values (tenant, locale, feature flags, ...) for agents.
- Build merged copies where per-request overrides win on key collision.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any


class RuntimeContext:
    def __init__(
        self, entries: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None
    ) -> None:
        self._values: dict[str, Any] = dict(entries or {})

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def has(self, key: str) -> bool:
        return key in self._values

    def delete(self, key: str) -> bool:
        return self._values.pop(key, _MISSING) is not _MISSING

    def clear(self) -> None:
        self._values.clear()

    def keys(self) -> Iterator[str]:
        return iter(list(self._values))

    def values(self) -> Iterator[Any]:
        return iter(list(self._values.values()))

    def entries(self) -> Iterator[tuple[str, Any]]:
        return iter(list(self._values.items()))

    def size(self) -> int:
        return len(self._values)

    def for_each(self, fn: Callable[[Any, str], None]) -> None:
        for key, value in list(self._values.items()):
            fn(value, key)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def merged(self, overrides: Mapping[str, Any] | None) -> RuntimeContext:
        """
        Return a new context holding this context's entries followed by `overrides`.

        `self` is left untouched, so the ambient context of a request can be reused.
        """

        return RuntimeContext([*self.entries(), *(overrides or {}).items()])

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return self.entries()

    def __repr__(self) -> str:
        return f"RuntimeContext({self._values!r})"


_MISSING = object()
