"""Broadcast push notifications to every watcher."""

from __future__ import annotations

from collections.abc import Iterable

from structlog.stdlib import BoundLogger

from ..models.notification import PushNotification
from .registry import WatcherRegistry

__all__ = ["Dispatcher"]


class Dispatcher:
    """Entry point for inbound push notifications.

    Parameters
    ----------
    registry
        Registry of active watchers.
    logger
        Logger to use, normally bound to the inbound request.
    """

    def __init__(
        self, *, registry: WatcherRegistry, logger: BoundLogger
    ) -> None:
        self._registry = registry
        self._logger = logger

    def notify(self, uri: str, branches: Iterable[str]) -> None:
        """Trigger every watcher matching a push.

        Failures of individual watchers are logged and do not stop the
        broadcast, and nothing is raised to the caller.

        Parameters
        ----------
        uri
            URI of the pushed repository.
        branches
            Pushed branches. May be empty.
        """
        notification = PushNotification(uri=uri, branches=list(branches))
        logger = self._logger.bind(
            uri=notification.uri, branches=notification.branches
        )
        try:
            watchers = self._registry.snapshot()
        except Exception:
            logger.exception("Ignoring push notification, scan failed")
            return
        if watchers is None:
            logger.warning("Ignoring push notification, actions not ready")
            return

        triggered = 0
        for watcher in watchers:
            try:
                cause = watcher.dispatch(notification)
            except Exception:
                logger.exception(
                    "Failed to dispatch push notification",
                    action=watcher.owner.name,
                )
                continue
            if cause:
                triggered += 1
        logger.info(
            "Processed push notification",
            watchers=len(watchers),
            triggered=triggered,
        )
