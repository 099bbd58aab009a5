"""Models for push notifications and the causes they produce."""

from pydantic import BaseModel, ConfigDict, Field

from ..constants import NO_BRANCH_DISPLAY

__all__ = ["PushNotification", "TriggerCause"]


class PushNotification(BaseModel):
    """A push to a repository, as decoded from an inbound request."""

    uri: str = Field(
        ...,
        title="Repository URI",
        examples=["https://github.com/lsst-sqre/pushwatch.git"],
    )

    branches: list[str] = Field(
        [],
        title="Pushed branches",
        description="May be empty if the notifier did not name any branch",
        examples=[["main", "tickets/DM-12345"]],
    )


class TriggerCause(BaseModel):
    """Why an action was triggered.

    Produced once for each watcher whose targets match a notification and
    handed to the owning action.
    """

    model_config = ConfigDict(frozen=True)

    uri: str = Field(
        ...,
        title="URI of the notified repository",
        examples=["https://github.com/lsst-sqre/pushwatch.git"],
    )

    branch: str = Field(
        "",
        title="Matched branch",
        description="Empty if the matching target did not restrict branches",
        examples=["main"],
    )

    @property
    def branch_for_display(self) -> str:
        """Matched branch, or ``(none)`` if there is no specific branch."""
        if not self.branch.strip():
            return NO_BRANCH_DISPLAY
        return self.branch

    @property
    def short_description(self) -> str:
        return (
            f"Triggered by push to {self.uri}"
            f" (branch={self.branch_for_display})"
        )
