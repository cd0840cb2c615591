"""
network_gateway.api

API package for the Agent Network Gateway service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: request parsing + delegation to `handlers`.
