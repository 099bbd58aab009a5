"""Manager for all the configured actions."""

from __future__ import annotations

from threading import Lock

from structlog.stdlib import BoundLogger

from ..dependencies.config import config_dependency
from ..exceptions import ActionNotFoundError
from ..models.action import ActionConfig, ActionSummary
from .action import Action
from .registry import WatcherRegistry
from .watcher import WatcherOwner

__all__ = ["ActionManager"]


class ActionManager:
    """Manages all of the configured actions.

    This should be a process singleton. It is responsible for starting,
    replacing, and stopping actions, and it is the source the watcher
    registry enumerates when it needs to rescan.

    Actions are started and stopped outside of the manager lock, since
    starting or stopping an action takes the registry lock and the registry
    calls back into the manager while holding it.

    Parameters
    ----------
    registry
        Registry of active watchers.
    logger
        Global logger to use for process-wide logging.
    """

    def __init__(
        self, *, registry: WatcherRegistry, logger: BoundLogger
    ) -> None:
        self._config = config_dependency.config
        self._registry = registry
        self._logger = logger
        self._actions: dict[str, Action] = {}
        self._lock = Lock()

    def close(self) -> None:
        """Stop all actions."""
        with self._lock:
            actions = list(self._actions.values())
            self._actions.clear()
        for action in actions:
            action.stop()

    def autostart(self) -> None:
        """Automatically start configured actions.

        This function should be called from the startup hook of the FastAPI
        application.
        """
        for action_config in self._config.autostart:
            self.start_action(action_config)

    def start_action(self, action_config: ActionConfig) -> Action:
        """Create and start a new action, replacing any with the same name.

        Parameters
        ----------
        action_config
            Configuration for that action.

        Returns
        -------
        Action
            Newly-created action.
        """
        action = Action(
            action_config=action_config,
            registry=self._registry,
            history_length=self._config.trigger_history_length,
            logger=self._logger,
        )
        # The action must be enumerable before its watcher is registered, so
        # that the invalidation from registering forces a scan that finds it.
        with self._lock:
            old = self._actions.get(action.name)
            self._actions[action.name] = action
        action.start()
        if old:
            old.stop()
        return action

    def get_action(self, name: str) -> Action:
        """Retrieve an action by name.

        Parameters
        ----------
        name
            Name of the action.

        Returns
        -------
        Action
            Action with that name.

        Raises
        ------
        ActionNotFoundError
            Raised if no action was found with that name.
        """
        with self._lock:
            action = self._actions.get(name)
        if action is None:
            raise ActionNotFoundError(name)
        return action

    def list_actions(self) -> list[str]:
        """List all actions.

        Returns
        -------
        list of str
            Names of all actions in sorted order.
        """
        with self._lock:
            return sorted(self._actions.keys())

    def list_active_owners(self) -> list[WatcherOwner]:
        with self._lock:
            return list(self._actions.values())

    def summarize_actions(self) -> list[ActionSummary]:
        """Summarize the status of all actions.

        Returns
        -------
        list of ActionSummary
            Action summary data sorted by action name.
        """
        with self._lock:
            actions = sorted(self._actions.items())
        return [a.summary() for _, a in actions]

    def set_action_enabled(self, name: str, *, enabled: bool) -> None:
        """Enable or disable triggering of an action.

        Raises
        ------
        ActionNotFoundError
            Raised if no action was found with that name.
        """
        self.get_action(name).set_enabled(enabled)

    def stop_action(self, name: str) -> None:
        """Stop an action.

        Parameters
        ----------
        name
            Name of action to stop.

        Raises
        ------
        ActionNotFoundError
            Raised if no action was found with that name.
        """
        with self._lock:
            action = self._actions.pop(name, None)
        if action is None:
            raise ActionNotFoundError(name)
        action.stop()
