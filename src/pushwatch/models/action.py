"""Models for actions triggered by push notifications."""

from datetime import datetime

from pydantic import BaseModel, Field

from .notification import TriggerCause
from .target import MatchTarget

__all__ = [
    "ActionConfig",
    "ActionData",
    "ActionSummary",
    "TriggerRecord",
]


class ActionConfig(BaseModel):
    """Configuration for an action triggered by pushes.

    The targets are evaluated in order and only the first one that matches a
    notification counts, so an action is triggered at most once per push.
    """

    name: str = Field(
        ..., title="Name of the action", examples=["docs-build"], min_length=1
    )

    enabled: bool = Field(
        True,
        title="Whether the action is triggerable",
        description=(
            "Disabled actions keep watching but drop matching notifications"
        ),
    )

    targets: list[MatchTarget] = Field(
        [],
        title="Match targets",
        description="Repositories and branches that trigger this action",
        examples=[
            [
                {
                    "uri": "https://github.com/lsst-sqre/pushwatch.git",
                    "branches": "main,tickets/*",
                }
            ]
        ],
    )


class TriggerRecord(BaseModel):
    """A single time an action was triggered."""

    cause: TriggerCause = Field(..., title="Cause of the trigger")

    triggered_at: datetime = Field(
        ...,
        title="When the action was triggered",
        examples=["2024-07-21T19:43:40.446072+00:00"],
    )


class ActionData(BaseModel):
    """Information about an action."""

    name: str = Field(..., title="Name of the action", examples=["docs-build"])

    config: ActionConfig = Field(..., title="Configuration for the action")

    triggerable: bool = Field(
        ..., title="Whether a matching push will trigger the action"
    )

    trigger_count: int = Field(
        ..., title="Total number of times triggered", examples=[12]
    )

    triggers: list[TriggerRecord] = Field(
        ...,
        title="Recent triggers",
        description="Bounded history of triggers, oldest first",
    )


class ActionSummary(BaseModel):
    """Summary statistics about an action."""

    name: str = Field(..., title="Name of the action", examples=["docs-build"])

    enabled: bool = Field(..., title="Whether the action is enabled")

    target_count: int = Field(
        ..., title="Number of match targets", examples=[2]
    )

    trigger_count: int = Field(
        ..., title="Total number of times triggered", examples=[12]
    )

    last_triggered: datetime | None = Field(
        ...,
        title="When the action was last triggered",
        description="Will be null if the action has never been triggered",
        examples=["2024-07-21T19:43:40.446072+00:00"],
    )
