"""
network_gateway.db.repositories

Repository layer (async SQLAlchemy).
"""

# Package marker.
