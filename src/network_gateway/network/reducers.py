"""
network_gateway.network.reducers

Reducers define how LangGraph merges partial state updates returned by nodes.
"""

from __future__ import annotations

from typing import Any


def append_items(left: list[Any] | None, right: list[Any] | None) -> list[Any]:
    """
    Append-only reducer: nodes return `{"messages": [new]}` and this concatenates.
    """

    if not left:
        return list(right or [])
    if not right:
        return list(left)
    return [*left, *right]
