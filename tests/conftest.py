"""Test fixtures for pushwatch tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Iterator
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from pushwatch import main
from pushwatch.dependencies.config import config_dependency
from pushwatch.services.registry import WatcherRegistry

from .support.config import config_path
from .support.constants import TEST_BASE_URL


@pytest.fixture(autouse=True)
def _configure() -> None:
    """Set minimal configuration settings.

    This is an autouse fixture, so it will ensure that each test starts with
    the minimal test configuration.
    """
    config_dependency.set_path(config_path("base"))


@pytest.fixture
def _enable_github() -> Iterator[None]:
    """Enable the GitHub webhook route."""
    config_dependency.set_path(config_path("github"))
    yield
    config_dependency.set_path(config_path("base"))


@pytest.fixture
def _autostart() -> Iterator[None]:
    """Start actions from the configuration file."""
    config_dependency.set_path(config_path("autostart"))
    yield
    config_dependency.set_path(config_path("base"))


@pytest.fixture
def registry() -> WatcherRegistry:
    return WatcherRegistry(MagicMock())


@pytest_asyncio.fixture
async def app() -> AsyncGenerator[FastAPI]:
    """Return a configured test application.

    Wraps the application in a lifespan manager so that startup and shutdown
    events are sent during test execution.
    """
    app = main.create_app()
    async with LifespanManager(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Return an ``httpx.AsyncClient`` configured to talk to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url=TEST_BASE_URL,
        headers={"X-Auth-Request-User": "someuser"},
    ) as client:
        yield client


@pytest_asyncio.fixture
async def anon_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Return an anonymous ``httpx.AsyncClient`` configured to talk to the
    test app.
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url=TEST_BASE_URL,
    ) as client:
        yield client
