"""Registry of the watchers that receive push notifications."""

from __future__ import annotations

from threading import Lock

from structlog.stdlib import BoundLogger

from .watcher import OwnerSource, Watcher

__all__ = ["WatcherRegistry"]


class WatcherRegistry:
    """Tracks active watchers and caches the list to broadcast to.

    This should be a process singleton. Finding the watchers requires a scan
    of every owner, so the result is cached until the next time a watcher is
    registered or unregistered.

    A single lock guards both the active set and the cache, and the scan
    runs while holding it, so only one thread scans at a time and other
    callers get the completed result. The registry calls into its owner
    source while holding the lock, so the source must not register or
    unregister watchers while holding a lock of its own.

    Parameters
    ----------
    logger
        Global logger to use for process-wide logging.
    """

    def __init__(self, logger: BoundLogger) -> None:
        self._logger = logger
        self._lock = Lock()
        self._source: OwnerSource | None = None
        self._active: dict[Watcher, None] = {}
        self._cache: tuple[Watcher, ...] | None = None

    def attach(self, source: OwnerSource | None) -> None:
        """Set the source used to enumerate owners when scanning.

        Parameters
        ----------
        source
            Owner source, or `None` to detach the current one.
        """
        with self._lock:
            self._source = source
            self._cache = None

    def register(self, watcher: Watcher) -> None:
        """Add a watcher to the active set."""
        with self._lock:
            self._active[watcher] = None
            self._cache = None

    def unregister(self, watcher: Watcher) -> None:
        """Remove a watcher from the active set.

        Does nothing if the watcher was not registered.
        """
        with self._lock:
            self._active.pop(watcher, None)
            self._cache = None

    def invalidate(self) -> None:
        """Force the next snapshot to rescan."""
        with self._lock:
            self._cache = None

    def is_registered(self, watcher: Watcher) -> bool:
        with self._lock:
            return watcher in self._active

    def snapshot(self) -> tuple[Watcher, ...] | None:
        """Return the watchers to broadcast a notification to.

        Returns
        -------
        tuple of Watcher or None
            Active watchers in owner order, or `None` if owners cannot be
            enumerated yet. Callers should skip the broadcast in that case.
        """
        with self._lock:
            if self._cache is None:
                self._cache = self._scan()
            return self._cache

    def _scan(self) -> tuple[Watcher, ...] | None:
        """Build the list of watchers from the owner source.

        Must be called with the lock held.
        """
        if self._source is None:
            return None
        owners = self._source.list_active_owners()
        if owners is None:
            return None
        scanned = []
        for owner in owners:
            watcher = owner.get_watcher()
            if watcher is not None and watcher in self._active:
                scanned.append(watcher)
        self._logger.debug(
            "Scanned for watchers", owners=len(owners), watchers=len(scanned)
        )
        return tuple(scanned)
