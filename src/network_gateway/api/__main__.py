"""
network_gateway.api.__main__

Entrypoint for `python -m network_gateway.api` (also installed as `network-gateway`).
"""

from __future__ import annotations

import uvicorn

from network_gateway.api.app import create_app
from network_gateway.observability.logging import get_logger
from network_gateway.settings import get_settings

log = get_logger(__name__)


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    log.info(
        "serving",
        host=settings.api_host,
        port=settings.api_port,
        networks_file=str(settings.networks_file) if settings.networks_file else None,
    )
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog owns logging configuration
    )


if __name__ == "__main__":
    main()
