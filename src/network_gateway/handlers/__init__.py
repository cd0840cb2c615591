"""
network_gateway.handlers

Framework-light request handlers.

Responsibilities:
- Validate required inputs, resolve networks from the registry, merge runtime context.
- Delegate to `AgentNetwork.generate` / `AgentNetwork.stream`.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Handlers only depend on `fastapi.HTTPException`; routers adapt HTTP requests to them.
