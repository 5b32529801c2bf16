"""FastAPI application wiring for the member service."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .api.errors import register_exception_handlers
from .api.routes import router as members_router
from .config import Settings, get_settings
from .domain.service import MemberService
from .logging_config import setup_logging
from .notifications.notifier import LoggingNotifier, Notifier
from .repository import InMemoryMemberRepository


def create_app(
    settings: Settings | None = None,
    *,
    repository: InMemoryMemberRepository | None = None,
    notifier: Notifier | None = None,
) -> FastAPI:
    """Compose the store, notifier and service into a configured application.

    Collaborators that are not passed in are built from ``settings``.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    repository = repository or InMemoryMemberRepository()
    notifier = notifier or LoggingNotifier(latency_seconds=settings.notifier_latency_ms / 1000)

    app = FastAPI(title=settings.app_name, version=settings.version)
    app.state.settings = settings
    app.state.member_service = MemberService(repository, notifier)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )
    register_exception_handlers(app, expose_details=settings.is_development)

    @app.get("/health", tags=["health"])
    def health() -> dict[str, Any]:
        """Return a minimal liveness indicator."""
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "message": "Member Management System is running",
        }

    # Prometheus metrics endpoint for Prometheus scrapes
    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(members_router)
    return app


app = create_app()
