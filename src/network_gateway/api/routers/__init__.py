"""
network_gateway.api.routers

HTTP routers mounted by `network_gateway.api.app.create_app`.
"""
