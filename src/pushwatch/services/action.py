"""An action triggered by push notifications."""

from __future__ import annotations

from collections import deque
from threading import Lock

from safir.datetime import current_datetime
from structlog.stdlib import BoundLogger

from ..exceptions import ActionNotTriggerableError
from ..models.action import (
    ActionConfig,
    ActionData,
    ActionSummary,
    TriggerRecord,
)
from ..models.notification import TriggerCause
from .registry import WatcherRegistry
from .watcher import Watcher

__all__ = ["Action"]


class Action:
    """Owner of a watcher, recording each time it is triggered.

    Parameters
    ----------
    action_config
        Configuration for this action.
    registry
        Registry to add the watcher of this action to while it is running.
    history_length
        Number of trigger records to retain.
    logger
        Global logger.
    """

    def __init__(
        self,
        *,
        action_config: ActionConfig,
        registry: WatcherRegistry,
        history_length: int,
        logger: BoundLogger,
    ) -> None:
        self.name = action_config.name
        self._config = action_config
        self._registry = registry
        self._logger = logger.bind(action=self.name)
        self._enabled = action_config.enabled
        self._watcher: Watcher | None = None
        self._lock = Lock()
        self._triggers: deque[TriggerRecord] = deque(maxlen=history_length)
        self._trigger_count = 0

    @property
    def config(self) -> ActionConfig:
        """Configuration of the action, reflecting its enabled state."""
        return self._config.model_copy(update={"enabled": self._enabled})

    @property
    def triggerable(self) -> bool:
        """Whether a matching notification will trigger this action."""
        return self._enabled and self._watcher is not None

    def get_watcher(self) -> Watcher | None:
        """Return the watcher of this action if it is running."""
        return self._watcher

    def start(self) -> None:
        """Start watching for matching push notifications."""
        if self._watcher:
            return
        self._watcher = Watcher(
            targets=self._config.targets, owner=self, logger=self._logger
        )
        self._registry.register(self._watcher)
        self._logger.info(
            "Started action", targets=len(self._watcher.targets)
        )

    def stop(self) -> None:
        """Stop watching for push notifications."""
        watcher = self._watcher
        if not watcher:
            return
        self._watcher = None
        self._registry.unregister(watcher)
        self._logger.info("Stopped action")

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable triggering of the action."""
        self._enabled = enabled
        self._logger.info("Changed action state", enabled=enabled)

    def schedule(self, cause: TriggerCause) -> TriggerRecord:
        """Trigger the action.

        Parameters
        ----------
        cause
            Why the action was triggered.

        Returns
        -------
        TriggerRecord
            Record of the trigger.

        Raises
        ------
        ActionNotTriggerableError
            Raised if the action was stopped or disabled.
        """
        if not self.triggerable:
            raise ActionNotTriggerableError(self.name)
        record = TriggerRecord(
            cause=cause, triggered_at=current_datetime(microseconds=True)
        )
        with self._lock:
            self._triggers.append(record)
            self._trigger_count += 1
        self._logger.info(
            cause.short_description, uri=cause.uri, branch=cause.branch
        )
        return record

    def list_triggers(self) -> list[TriggerRecord]:
        """Return the retained trigger records, oldest first."""
        with self._lock:
            return list(self._triggers)

    def dump(self) -> ActionData:
        """Return information about the action."""
        with self._lock:
            triggers = list(self._triggers)
            count = self._trigger_count
        return ActionData(
            name=self.name,
            config=self.config,
            triggerable=self.triggerable,
            trigger_count=count,
            triggers=triggers,
        )

    def summary(self) -> ActionSummary:
        """Return summary statistics about the action."""
        with self._lock:
            last = self._triggers[-1].triggered_at if self._triggers else None
            count = self._trigger_count
        return ActionSummary(
            name=self.name,
            enabled=self._enabled,
            target_count=len(self._config.targets),
            trigger_count=count,
            last_triggered=last,
        )
