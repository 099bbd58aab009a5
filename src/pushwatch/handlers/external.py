"""Handlers for the app's external root, ``/pushwatch/``."""

import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import JSONResponse
from safir.metadata import get_metadata
from safir.models import ErrorModel
from safir.slack.webhook import SlackRouteErrorHandler

from ..config import Configuration
from ..dependencies.config import config_dependency
from ..dependencies.context import (
    RequestContext,
    anonymous_context_dependency,
    context_dependency,
)
from ..models.action import (
    ActionConfig,
    ActionData,
    ActionSummary,
    TriggerRecord,
)
from ..models.index import Index

external_router = APIRouter(route_class=SlackRouteErrorHandler)
"""FastAPI router for all external handlers."""

__all__ = ["external_router"]


class FormattedJSONResponse(JSONResponse):
    """The same as ``fastapi.JSONResponse`` except formatted for humans."""

    def render(self, content: Any) -> bytes:
        """Render a data structure into JSON formatted for humans."""
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=False,
            indent=4,
            sort_keys=True,
        ).encode()


@external_router.get(
    "/",
    description="Metadata about the running version of pushwatch",
    response_model=Index,
    response_model_exclude_none=True,
    summary="Application metadata",
)
async def get_index(
    config: Annotated[Configuration, Depends(config_dependency)],
) -> Index:
    metadata = get_metadata(
        package_name="pushwatch",
        application_name=config.name,
    )
    return Index(metadata=metadata)


@external_router.get(
    "/actions", response_model=list[str], summary="List actions"
)
async def get_actions(
    context: Annotated[RequestContext, Depends(context_dependency)],
) -> list[str]:
    return context.manager.list_actions()


@external_router.put(
    "/actions",
    response_class=FormattedJSONResponse,
    response_model=ActionData,
    response_model_exclude_none=True,
    status_code=201,
    summary="Create or replace an action",
)
async def put_action(
    action_config: ActionConfig,
    response: Response,
    context: Annotated[RequestContext, Depends(context_dependency)],
) -> ActionData:
    context.logger.info(
        "Creating action",
        action=action_config.name,
        config=action_config.model_dump(exclude_unset=True),
    )
    action = context.manager.start_action(action_config)
    action_url = context.request.url_for("get_action", action=action.name)
    response.headers["Location"] = str(action_url)
    return action.dump()


@external_router.get(
    "/actions/{action}",
    response_class=FormattedJSONResponse,
    response_model=ActionData,
    response_model_exclude_none=True,
    responses={404: {"description": "Action not found", "model": ErrorModel}},
    summary="Status of action",
)
async def get_action(
    action: str,
    context: Annotated[RequestContext, Depends(context_dependency)],
) -> ActionData:
    return context.manager.get_action(action).dump()


@external_router.delete(
    "/actions/{action}",
    responses={404: {"description": "Action not found", "model": ErrorModel}},
    status_code=204,
    summary="Stop an action",
)
async def delete_action(
    action: str,
    context: Annotated[RequestContext, Depends(context_dependency)],
) -> None:
    context.logger.info("Deleting action", action=action)
    context.manager.stop_action(action)


@external_router.post(
    "/actions/{action}/enable",
    responses={404: {"description": "Action not found", "model": ErrorModel}},
    status_code=204,
    summary="Enable triggering of an action",
)
async def enable_action(
    action: str,
    context: Annotated[RequestContext, Depends(context_dependency)],
) -> None:
    context.manager.set_action_enabled(action, enabled=True)


@external_router.post(
    "/actions/{action}/disable",
    responses={404: {"description": "Action not found", "model": ErrorModel}},
    status_code=204,
    summary="Disable triggering of an action",
)
async def disable_action(
    action: str,
    context: Annotated[RequestContext, Depends(context_dependency)],
) -> None:
    context.manager.set_action_enabled(action, enabled=False)


@external_router.get(
    "/actions/{action}/triggers",
    response_class=FormattedJSONResponse,
    response_model=list[TriggerRecord],
    responses={404: {"description": "Action not found", "model": ErrorModel}},
    summary="Recent triggers of action",
)
async def get_triggers(
    action: str,
    context: Annotated[RequestContext, Depends(context_dependency)],
) -> list[TriggerRecord]:
    return context.manager.get_action(action).list_triggers()


@external_router.get(
    "/summary",
    response_class=FormattedJSONResponse,
    response_model=list[ActionSummary],
    summary="Summary of statistics for all actions",
)
async def get_summary(
    context: Annotated[RequestContext, Depends(context_dependency)],
) -> list[ActionSummary]:
    return context.manager.summarize_actions()


@external_router.post(
    "/notify",
    description=(
        "Notify pushwatch that branches of a repository were pushed. Every"
        " action with a matching target is triggered. The request is always"
        " accepted, whether or not anything matched. This route does not"
        " require authentication so that git servers can call it."
    ),
    status_code=202,
    summary="Push notification",
)
def post_notify(
    uri: Annotated[str, Query(title="Repository URI", min_length=1)],
    context: Annotated[RequestContext, Depends(anonymous_context_dependency)],
    branches: Annotated[
        str,
        Query(
            title="Pushed branches",
            description="Comma-separated, may be omitted",
        ),
    ] = "",
) -> None:
    # Sync so that FastAPI runs the broadcast in a thread pool, since the
    # watcher registry may block on its lock.
    pushed = [b.strip() for b in branches.split(",") if b.strip()]
    context.rebind_logger(uri=uri)
    context.factory.create_dispatcher().notify(uri, pushed)
