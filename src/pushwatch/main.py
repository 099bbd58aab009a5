"""The main application factory for the pushwatch service."""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import metadata, version

import structlog
from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from safir.fastapi import ClientRequestError, client_request_error_handler
from safir.logging import Profile, configure_logging, configure_uvicorn_logging
from safir.middleware.x_forwarded import XForwardedMiddleware
from safir.slack.webhook import SlackRouteErrorHandler

from .dependencies.config import config_dependency
from .dependencies.context import context_dependency
from .handlers.external import external_router
from .handlers.github import github_router
from .handlers.internal import internal_router

__all__ = ["create_app", "create_openapi", "lifespan"]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Set up and tear down the the base application."""
    await context_dependency.initialize()
    context_dependency.process_context.manager.autostart()

    yield

    await context_dependency.aclose()


def create_app(*, load_config: bool = True) -> FastAPI:
    """Create the FastAPI application.

    This is in a function rather than using a global variable (as is more
    typical for FastAPI) because some routing depends on configuration
    settings and we therefore want to recreate the application between tests.

    Parameters
    ----------
    load_config
        If set to `False`, do not try to load the configuration. This is used
        primarily for OpenAPI schema generation, where constructing the app is
        required but the configuration won't matter.
    """
    if load_config:
        config = config_dependency.config

        # Configure logging.
        configure_logging(
            name="pushwatch", profile=config.profile, log_level=config.log_level
        )
        if config.profile == Profile.production:
            configure_uvicorn_logging(config.log_level)

        # Enable Slack alerting for uncaught exceptions.
        if config.slack_alerts and config.alert_hook:
            logger = structlog.get_logger("pushwatch")
            SlackRouteErrorHandler.initialize(
                str(config.alert_hook), "pushwatch", logger
            )
            logger.debug("Initialized Slack webhook")

        path_prefix = config.path_prefix
        enable_github = config.github_webhook_secret is not None
    else:
        path_prefix = "/pushwatch"
        enable_github = True

    app = FastAPI(
        title="pushwatch",
        description=metadata("pushwatch")["Summary"],
        version=version("pushwatch"),
        openapi_url=f"{path_prefix}/openapi.json",
        docs_url=f"{path_prefix}/docs",
        redoc_url=f"{path_prefix}/redoc",
        lifespan=lifespan,
    )

    # Attach the routers.
    app.include_router(internal_router)
    app.include_router(external_router, prefix=path_prefix)
    if enable_github:
        app.include_router(github_router, prefix=f"{path_prefix}/github")

    # Add middleware.
    app.add_middleware(XForwardedMiddleware)

    # Enable the generic exception handler for client errors.
    app.exception_handler(ClientRequestError)(client_request_error_handler)

    return app


def create_openapi() -> str:
    """Create the OpenAPI spec for static documentation."""
    app = create_app(load_config=False)
    return json.dumps(
        get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
    )
