"""Run the member service with uvicorn.

Usage::

    python -m member_service

Host and port come from ``HTTP_HOST`` and ``PORT`` (defaults ``0.0.0.0`` and
``3000``).
"""

from __future__ import annotations

import logging

from uvicorn import Config, Server

from .config import get_settings
from .main import app

logger = logging.getLogger("member_service")


def main() -> None:
    settings = get_settings()
    logger.info("member service listening on %s:%d", settings.http_host, settings.http_port)
    logger.info("health check: http://localhost:%d/health", settings.http_port)
    for route in app.router.routes:
        methods = sorted(getattr(route, "methods", None) or [])
        if getattr(route, "path", "").startswith("/members"):
            logger.info("  %-6s %s", ",".join(methods), route.path)

    config = Config(
        app=app,
        host=settings.http_host,
        port=settings.http_port,
        log_level=settings.log_level.lower(),
    )
    Server(config).run()


if __name__ == "__main__":
    main()
