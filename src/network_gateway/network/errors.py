"""
network_gateway.network.errors

Exceptions raised by the orchestration layer.
"""

from __future__ import annotations


class NetworkError(Exception):
    pass


class NetworkConfigError(NetworkError):
    """Invalid network/agent definition (duplicate names, unknown provider, ...)."""


class ModelProviderError(NetworkError):
    """A model provider call failed or returned an unusable payload."""

    def __init__(self, message: str, *, provider: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class InvalidMessagesError(NetworkError, ValueError):
    """Request messages could not be normalized into chat messages."""


# --- Module Notes -----------------------------------------------------------
# HTTP status mapping for these errors lives in `api/app.py`.
