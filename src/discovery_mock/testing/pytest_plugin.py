"""pytest fixtures that run the discovery mock for a test session.

Enable with ``pytest_plugins = ["discovery_mock.testing.pytest_plugin"]`` in
the root ``conftest.py``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from ..http.impl.service import MockDiscoveryServer
from ..registry.memory_registry import InMemoryRegistry

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session")
def discovery_server() -> Iterator[MockDiscoveryServer]:
    """A running mock shared by every test in the session."""
    server = MockDiscoveryServer()
    server.start()
    logger.info("Started discovery mock for test session at %s", server.base_url)
    try:
        yield server
    finally:
        server.stop()


@pytest.fixture
def discovery_registry(
    discovery_server: MockDiscoveryServer,
) -> Iterator[InMemoryRegistry]:
    """The shared mock's registry, emptied before and after each test."""
    discovery_server.reset()
    try:
        yield discovery_server.registry
    finally:
        discovery_server.reset()
