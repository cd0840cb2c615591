"""
network_gateway.db

Persistence package (async SQLAlchemy).

Responsibilities:
- Declarative base, ORM models, engine/session helpers.
- Repository classes used by the thread memory.
"""

# Package marker.
