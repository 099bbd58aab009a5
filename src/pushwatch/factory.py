"""Component factory and process-wide status for pushwatch."""

from __future__ import annotations

import structlog
from structlog.stdlib import BoundLogger

from .services.dispatcher import Dispatcher
from .services.manager import ActionManager
from .services.registry import WatcherRegistry

__all__ = ["Factory", "ProcessContext"]


class ProcessContext:
    """Per-process application context.

    This object caches all of the per-process singletons that can be reused
    for every request.

    Attributes
    ----------
    registry
        Registry of the watchers of all running actions.
    manager
        Manager for all actions. Attached to the registry as the source of
        its scans.
    """

    def __init__(self) -> None:
        self.logger = structlog.get_logger("pushwatch")
        self.registry = WatcherRegistry(self.logger)
        self.manager = ActionManager(
            registry=self.registry, logger=self.logger
        )
        self.registry.attach(self.manager)

    def close(self) -> None:
        """Clean up a process context.

        Called before shutdown to stop all actions.
        """
        self.registry.attach(None)
        self.manager.close()


class Factory:
    """Component factory for pushwatch.

    Uses the contents of a `ProcessContext` to construct the components of an
    application on demand.

    Parameters
    ----------
    context
        Shared process context.
    logger
        Logger to use for newly-created components.
    """

    def __init__(
        self, context: ProcessContext, logger: BoundLogger | None = None
    ) -> None:
        self._context = context
        self._logger = logger if logger else structlog.get_logger("pushwatch")

    def create_dispatcher(self) -> Dispatcher:
        """Create a dispatcher for an inbound push notification."""
        return Dispatcher(registry=self._context.registry, logger=self._logger)

    def set_logger(self, logger: BoundLogger) -> None:
        """Replace the internal logger.

        Used by the context dependency to update the logger for all
        newly-created components when it's rebound with additional context.

        Parameters
        ----------
        logger
            New logger.
        """
        self._logger = logger
