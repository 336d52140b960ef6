"""FastAPI application for Hookshot."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from hookshot.builder import DeliveryBuilder
from hookshot.config import Settings
from hookshot.logging import configure_logging, get_logger
from hookshot.registry import HookRegistry

from .adapter import WebhookAdapter

logger = get_logger(__name__)

# The endpoint answers regardless of method
WEBHOOK_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def create_app(registry: HookRegistry, settings: Settings | None = None) -> FastAPI:
    """Create a FastAPI application serving a hook registry.

    Register every hook before the application starts. With
    ``freeze_registry`` enabled (the default) the registry is frozen during
    startup and later registrations raise ``RegistryFrozenError``.

    Args:
        registry: Hooks to dispatch deliveries to.
        settings: Optional settings. Uses environment if None.

    Returns:
        Configured FastAPI application.

    Example:
        ```python
        import uvicorn
        from hookshot import Hook, HookRegistry
        from hookshot.api import create_app

        registry = HookRegistry()
        registry.register(Hook("push", "secret", on_push))
        uvicorn.run(create_app(registry), host="0.0.0.0", port=4567)
        ```
    """
    if settings is None:
        settings = Settings()

    builder = DeliveryBuilder(
        detectors=settings.build_detectors(),
        parse=settings.parse_payload,
    )
    adapter = WebhookAdapter(registry, builder)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Configure logging and freeze the registry on startup."""
        configure_logging(level=settings.log_level, format=settings.log_format)
        if settings.freeze_registry:
            registry.freeze()
        logger.info(
            "Starting Hookshot",
            endpoint=settings.endpoint_path,
            hooks=sorted(registry),
            log_level=settings.log_level,
        )
        yield
        logger.info("Stopping Hookshot")

    app = FastAPI(
        title="Hookshot",
        description="Webhook listener for GitHub, GitLab and Docker Hub.",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.adapter = adapter

    @app.api_route(settings.endpoint_path, methods=WEBHOOK_METHODS, include_in_schema=False)
    async def receive_webhook(request: Request) -> PlainTextResponse:
        """Hand the request to the adapter."""
        response = await adapter.handle(request.headers, request.body)
        return PlainTextResponse(response.body, status_code=response.status_code)

    return app
