"""Shared fixtures: an in-memory npm registry behind a mocked HTTPClient."""

from __future__ import annotations

from typing import Any, Callable, Mapping
from unittest.mock import AsyncMock, MagicMock

import pytest

from depbreakpoint.utils.http import HTTPClient

from tests.registry import FakeRegistry


@pytest.fixture
def fake_registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def registry_client(fake_registry: FakeRegistry) -> MagicMock:
    """A ``MagicMock(spec=HTTPClient)`` whose ``get_json`` reads the fake registry."""
    client = MagicMock(spec=HTTPClient)
    client.get_json = AsyncMock(side_effect=fake_registry.get_json)
    client.close = AsyncMock()
    return client


@pytest.fixture
def make_registry(
    fake_registry: FakeRegistry,
    registry_client: MagicMock,
) -> Callable[[Mapping[str, Any]], MagicMock]:
    """Populate the fake registry and return the mocked client."""

    def _make(packages: Mapping[str, Any]) -> MagicMock:
        for name, value in packages.items():
            fake_registry.add(name, value)
        return registry_client

    return _make
