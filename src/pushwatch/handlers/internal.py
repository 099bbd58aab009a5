"""Internal HTTP handlers served at the root path, ``/``.

Only the health check lives here. Everything git servers and operators use is
under the configured path prefix in `pushwatch.handlers.external` and
`pushwatch.handlers.github`, and this route is not exposed by the ingress.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from safir.metadata import Metadata, get_metadata
from safir.slack.webhook import SlackRouteErrorHandler

from ..config import Configuration
from ..dependencies.config import config_dependency

internal_router = APIRouter(route_class=SlackRouteErrorHandler)
"""FastAPI router for all internal handlers."""

__all__ = ["internal_router"]


@internal_router.get(
    "/",
    description=(
        "Health check returning the name and version of pushwatch. Does not"
        " consult the watcher registry, so it answers even before any action"
        " has started."
    ),
    response_model_exclude_none=True,
    summary="Health check",
)
async def get_index(
    config: Annotated[Configuration, Depends(config_dependency)],
) -> Metadata:
    return get_metadata(package_name="pushwatch", application_name=config.name)
