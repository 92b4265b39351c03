"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application: it builds the
notification sink, registers the event handlers, seals the registry and
wires the dispatch engine into the webhook route.

Design Decisions:
- Settings and handlers can be injected, so tests never touch globals
- Registration happens once, in create_app, before any request is served
- Unknown routes and methods answer 404; internal errors never leak detail
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Iterable, Optional

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from github_relay import __version__
from github_relay.config import Settings, get_settings
from github_relay.events import NotificationHandler, Notifier, default_handlers
from github_relay.logging_config import get_logger, setup_logging
from github_relay.services.debug_store import DebugPayloadStore
from github_relay.services.discord import DiscordWebhookClient
from github_relay.webhook import router as webhook_router
from github_relay.webhook.dispatcher import DispatchEngine
from github_relay.webhook.registry import EventRegistry

# Initialize logging first
setup_logging()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events for the application.
    """
    settings: Settings = app.state.settings
    engine: DispatchEngine = app.state.engine

    logger.info(
        "Starting GitHub relay",
        host=settings.app.host,
        port=settings.app.port,
        event_types=list(engine.registry.event_types)
    )

    if not settings.verification_enabled:
        logger.warning("No GitHub webhook secret configured - signature verification disabled")

    if engine.debug_store is not None:
        engine.debug_store.prepare()

    yield

    # Shutdown
    await engine.drain()
    logger.info("Shutting down GitHub relay")


def create_app(
    settings: Optional[Settings] = None,
    handlers: Optional[Iterable[NotificationHandler]] = None,
    notifier: Optional[Notifier] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings; defaults to get_settings()
        handlers: Handlers to register; defaults to default_handlers()
        notifier: Notification sink for the default handlers; defaults to a
            DiscordWebhookClient

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    if handlers is None:
        notifier = notifier or DiscordWebhookClient(settings)
        handlers = default_handlers(settings, notifier)

    registry = EventRegistry()
    registry.register(handlers)

    debug_store = DebugPayloadStore(settings.app.debug_dir) if settings.app.debug else None
    engine = DispatchEngine(registry, secret=settings.github.secret, debug_store=debug_store)

    app = FastAPI(
        title="GitHub Relay",
        description="Relays GitHub webhook events to Discord",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None
    )
    app.state.settings = settings
    app.state.engine = engine

    # Register routes
    app.include_router(webhook_router)

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(
        request: Request,
        exc: StarletteHTTPException
    ) -> JSONResponse:
        """Report wrong methods on known paths as unknown routes."""
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"detail": "Not Found"}
            )
        return await http_exception_handler(request, exc)

    # Add global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            error_type=type(exc).__name__
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"}
        )

    @app.get("/health")
    async def health_check():
        """
        Health check endpoint.

        Returns basic health status for load balancers and monitors.
        """
        return {
            "status": "healthy",
            "service": "github-relay",
            "version": __version__
        }

    return app


# Create the application instance
app = create_app()
