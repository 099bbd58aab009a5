"""Handlers for requests from GitHub, ``/pushwatch/github``."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from gidgethub import routing
from gidgethub.sansio import Event
from safir.slack.webhook import SlackRouteErrorHandler
from starlette.concurrency import run_in_threadpool

from ..config import Configuration
from ..dependencies.config import config_dependency
from ..dependencies.context import RequestContext, anonymous_context_dependency

__all__ = ["github_router"]

github_router = APIRouter(route_class=SlackRouteErrorHandler)
"""Registers incoming HTTP GitHub webhook requests."""

gidgethub_router = routing.Router()
"""Registers handlers for specific GitHub webhook payloads."""

_BRANCH_REF_PREFIX = "refs/heads/"


@github_router.post(
    "/webhook",
    summary="GitHub webhooks",
    description="This endpoint receives push webhook events from GitHub.",
    status_code=202,
)
async def post_webhook(
    context: Annotated[RequestContext, Depends(anonymous_context_dependency)],
    config: Annotated[Configuration, Depends(config_dependency)],
) -> None:
    """Process GitHub webhook events.

    Rejects webhooks from organizations that are not explicitly allowed via
    the pushwatch config. This should be exposed via an anonymous ingress.
    """
    if config.github_webhook_secret is None:
        raise RuntimeError("GitHub webhook secret is not configured")
    body = await context.request.body()
    event = Event.from_http(
        context.request.headers, body, secret=config.github_webhook_secret
    )

    owner = event.data.get("organization", {}).get("login")
    if owner not in config.accepted_github_orgs:
        context.logger.debug(
            "Ignoring GitHub event for unaccepted org",
            owner=owner,
            accepted_orgs=config.accepted_github_orgs,
        )
        raise HTTPException(
            status_code=403,
            detail=(
                "pushwatch is not configured to accept webhooks from this"
                " GitHub org."
            ),
        )

    # Bind the X-GitHub-Delivery header to the logger context; this
    # identifies the webhook request in GitHub's API and UI for
    # diagnostics
    context.rebind_logger(github_delivery=event.delivery_id)
    context.logger.debug("Received GitHub webhook", payload=event.data)
    await gidgethub_router.dispatch(event=event, context=context)


@gidgethub_router.register("push")
async def handle_push(event: Event, context: RequestContext) -> None:
    """Handle a push event."""
    ref = event.data["ref"]
    uri = event.data["repository"]["clone_url"]
    context.rebind_logger(ref=ref, uri=uri)

    if not ref.startswith(_BRANCH_REF_PREFIX):
        context.logger.debug("github webhook ignored: ref is not a branch")
        return
    if event.data.get("deleted"):
        context.logger.debug("github webhook ignored: branch was deleted")
        return

    branch = ref.removeprefix(_BRANCH_REF_PREFIX)
    dispatcher = context.factory.create_dispatcher()
    await run_in_threadpool(dispatcher.notify, uri, [branch])
    context.logger.info("github webhook handled")
