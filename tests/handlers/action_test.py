"""Test the handlers for actions."""

from __future__ import annotations

from typing import Any
from unittest.mock import ANY

import pytest
from httpx import AsyncClient

from ..support.constants import TEST_BASE_URL, TEST_REPO_URI


@pytest.mark.asyncio
async def test_empty(client: AsyncClient) -> None:
    r = await client.get("/pushwatch/actions")
    assert r.status_code == 200
    assert r.json() == []

    r = await client.get("/pushwatch/summary")
    assert r.status_code == 200
    assert r.json() == []


@pytest.mark.asyncio
async def test_start_stop(client: AsyncClient) -> None:
    config = {
        "name": "test",
        "targets": [{"uri": f" {TEST_REPO_URI} ", "branches": "main, dev*"}],
    }
    r = await client.put("/pushwatch/actions", json=config)
    assert r.status_code == 201
    expected: dict[str, Any] = {
        "name": "test",
        "config": {
            "name": "test",
            "enabled": True,
            "targets": [{"uri": TEST_REPO_URI, "branches": "main, dev*"}],
        },
        "triggerable": True,
        "trigger_count": 0,
        "triggers": [],
    }
    assert r.json() == expected
    assert r.headers["Location"] == f"{TEST_BASE_URL}/pushwatch/actions/test"

    r = await client.get("/pushwatch/actions")
    assert r.status_code == 200
    assert r.json() == ["test"]

    r = await client.get("/pushwatch/actions/test")
    assert r.status_code == 200
    assert r.json() == expected

    r = await client.get("/pushwatch/summary")
    assert r.status_code == 200
    assert r.json() == [
        {
            "name": "test",
            "enabled": True,
            "target_count": 1,
            "trigger_count": 0,
            "last_triggered": None,
        }
    ]

    r = await client.delete("/pushwatch/actions/test")
    assert r.status_code == 204

    r = await client.get("/pushwatch/actions")
    assert r.status_code == 200
    assert r.json() == []


@pytest.mark.asyncio
async def test_enable_disable(client: AsyncClient) -> None:
    r = await client.put("/pushwatch/actions", json={"name": "test"})
    assert r.status_code == 201
    assert r.json()["triggerable"] is True

    r = await client.post("/pushwatch/actions/test/disable")
    assert r.status_code == 204
    r = await client.get("/pushwatch/actions/test")
    assert r.json()["triggerable"] is False
    assert r.json()["config"]["enabled"] is False

    r = await client.post("/pushwatch/actions/test/enable")
    assert r.status_code == 204
    r = await client.get("/pushwatch/actions/test")
    assert r.json()["triggerable"] is True


@pytest.mark.asyncio
async def test_invalid(client: AsyncClient) -> None:
    r = await client.put(
        "/pushwatch/actions",
        json={"name": "test", "targets": [{"uri": "  ", "branches": "main"}]},
    )
    assert r.status_code == 422

    r = await client.put("/pushwatch/actions", json={"name": ""})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_errors(client: AsyncClient) -> None:
    r = await client.get("/pushwatch/actions/unknown")
    assert r.status_code == 404
    assert r.json() == {
        "detail": [
            {
                "loc": ["path", "action"],
                "msg": "Action unknown not found",
                "type": "action_not_found",
            }
        ]
    }

    for method, route in (
        ("DELETE", "/pushwatch/actions/unknown"),
        ("POST", "/pushwatch/actions/unknown/enable"),
        ("POST", "/pushwatch/actions/unknown/disable"),
        ("GET", "/pushwatch/actions/unknown/triggers"),
    ):
        r = await client.request(method, route)
        assert r.status_code == 404, f"{method} {route}"
        assert r.json()["detail"][0]["type"] == "action_not_found"


@pytest.mark.asyncio
async def test_triggers(client: AsyncClient, anon_client: AsyncClient) -> None:
    config = {
        "name": "test",
        "targets": [{"uri": TEST_REPO_URI, "branches": "main"}],
    }
    r = await client.put("/pushwatch/actions", json=config)
    assert r.status_code == 201

    r = await anon_client.post(
        "/pushwatch/notify", params={"uri": TEST_REPO_URI, "branches": "main"}
    )
    assert r.status_code == 202

    r = await client.get("/pushwatch/actions/test/triggers")
    assert r.status_code == 200
    assert r.json() == [
        {
            "cause": {"uri": TEST_REPO_URI, "branch": "main"},
            "triggered_at": ANY,
        }
    ]
    r = await client.get("/pushwatch/summary")
    assert r.json()[0]["trigger_count"] == 1
    assert r.json()[0]["last_triggered"] is not None
