"""Tests for broadcasting notifications to watchers."""

from __future__ import annotations

from unittest.mock import MagicMock

from pushwatch.models.notification import TriggerCause
from pushwatch.services.dispatcher import Dispatcher
from pushwatch.services.registry import WatcherRegistry
from pushwatch.services.watcher import Watcher

from ..support.constants import TEST_REPO_URI
from ..support.owner import MockOwner, MockOwnerSource, make_watcher


def setup_owners(
    registry: WatcherRegistry, owners: list[MockOwner], branches: list[str]
) -> None:
    for owner, pattern in zip(owners, branches, strict=True):
        registry.register(make_watcher(owner, (TEST_REPO_URI, pattern)))
    registry.attach(MockOwnerSource(owners))


def test_notify(registry: WatcherRegistry) -> None:
    owners = [MockOwner("master"), MockOwner("develop")]
    setup_owners(registry, owners, ["master", "develop"])
    dispatcher = Dispatcher(registry=registry, logger=MagicMock())

    dispatcher.notify(TEST_REPO_URI, ["master"])
    assert owners[0].causes == [
        TriggerCause(uri=TEST_REPO_URI, branch="master")
    ]
    assert owners[1].causes == []

    dispatcher.notify("https://example.com/repo", ["master", "develop"])
    assert len(owners[0].causes) == 1
    assert owners[1].causes == []

    dispatcher.notify(TEST_REPO_URI, ["develop", "master"])
    assert len(owners[0].causes) == 2
    assert owners[1].causes == [
        TriggerCause(uri=TEST_REPO_URI, branch="develop")
    ]


def test_no_branches(registry: WatcherRegistry) -> None:
    owners = [MockOwner("any"), MockOwner("main")]
    setup_owners(registry, owners, ["", "main"])
    dispatcher = Dispatcher(registry=registry, logger=MagicMock())

    dispatcher.notify(TEST_REPO_URI, [])
    assert owners[0].causes == [TriggerCause(uri=TEST_REPO_URI, branch="")]
    assert owners[1].causes == []


def test_unavailable(registry: WatcherRegistry) -> None:
    logger = MagicMock()
    bound = logger.bind.return_value
    dispatcher = Dispatcher(registry=registry, logger=logger)

    dispatcher.notify(TEST_REPO_URI, ["main"])
    bound.warning.assert_called_once()
    bound.info.assert_not_called()


def test_isolate_failures(registry: WatcherRegistry) -> None:
    owners = [
        MockOwner("broken", error=RuntimeError("scheduling failed")),
        MockOwner("disabled", triggerable=False),
        MockOwner("working"),
    ]
    setup_owners(registry, owners, ["main", "main", "main"])
    logger = MagicMock()
    bound = logger.bind.return_value
    dispatcher = Dispatcher(registry=registry, logger=logger)

    dispatcher.notify(TEST_REPO_URI, ["main"])
    assert owners[2].causes == [TriggerCause(uri=TEST_REPO_URI, branch="main")]
    bound.exception.assert_called_once()
    assert bound.exception.call_args.kwargs == {"action": "broken"}
    assert bound.info.call_args.kwargs == {"watchers": 3, "triggered": 1}


class BrokenOwner(MockOwner):
    """Owner that fails when the registry asks for its watcher."""

    def get_watcher(self) -> Watcher | None:
        raise RuntimeError("owner torn down")


def test_scan_failure(registry: WatcherRegistry) -> None:
    working = MockOwner("working")
    registry.register(make_watcher(working, (TEST_REPO_URI, "main")))
    source = MockOwnerSource([BrokenOwner("broken"), working])
    registry.attach(source)
    logger = MagicMock()
    bound = logger.bind.return_value
    dispatcher = Dispatcher(registry=registry, logger=logger)

    dispatcher.notify(TEST_REPO_URI, ["main"])
    bound.exception.assert_called_once()
    bound.info.assert_not_called()
    assert working.causes == []

    # Nothing was cached, so the next notification scans again.
    source.owners = [working]
    dispatcher.notify(TEST_REPO_URI, ["main"])
    assert working.causes == [TriggerCause(uri=TEST_REPO_URI, branch="main")]
    assert source.scans == 2
