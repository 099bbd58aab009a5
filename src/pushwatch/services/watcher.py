"""Watchers evaluate push notifications on behalf of a triggerable owner."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from structlog.stdlib import BoundLogger

from ..models.notification import PushNotification, TriggerCause
from ..models.target import MatchTarget

__all__ = ["OwnerSource", "Watcher", "WatcherOwner"]


class WatcherOwner(Protocol):
    """Anything that can host a watcher and be triggered by it."""

    @property
    def name(self) -> str: ...

    @property
    def triggerable(self) -> bool: ...

    def get_watcher(self) -> Watcher | None: ...

    def schedule(self, cause: TriggerCause) -> object: ...


class OwnerSource(Protocol):
    """Enumerates the owners that may currently host a watcher."""

    def list_active_owners(self) -> list[WatcherOwner] | None:
        """Return the active owners, or `None` if not ready to enumerate."""
        ...


class Watcher:
    """Match targets of a single owner.

    Parameters
    ----------
    targets
        Match targets, in the order in which they should be evaluated.
    owner
        Owner to trigger when a notification matches.
    logger
        Logger to use for dispatch messages.
    """

    def __init__(
        self,
        *,
        targets: Iterable[MatchTarget],
        owner: WatcherOwner,
        logger: BoundLogger,
    ) -> None:
        self.targets = tuple(targets)
        self.owner = owner
        self._logger = logger

    def __repr__(self) -> str:
        return f"Watcher(owner={self.owner.name!r}, targets={self.targets!r})"

    def evaluate(self, notification: PushNotification) -> TriggerCause | None:
        """Find the cause from the first target matching a notification.

        Parameters
        ----------
        notification
            Inbound push notification.

        Returns
        -------
        TriggerCause or None
            Cause from the first matching target, or `None` if no target
            matches.
        """
        for target in self.targets:
            cause = target.matches(notification)
            if cause:
                return cause
        return None

    def dispatch(self, notification: PushNotification) -> TriggerCause | None:
        """Trigger the owner if the notification matches.

        The owner is scheduled at most once, no matter how many targets
        match.

        Parameters
        ----------
        notification
            Inbound push notification.

        Returns
        -------
        TriggerCause or None
            Cause the owner was scheduled with, or `None` if the notification
            didn't match or the owner could not be triggered.
        """
        cause = self.evaluate(notification)
        if not cause:
            return None
        if not self.owner.triggerable:
            self._logger.warning(
                "Push notification matches, but action is not triggerable",
                action=self.owner.name,
                uri=cause.uri,
                branch=cause.branch,
            )
            return None
        self.owner.schedule(cause)
        return cause
