"""Shared pytest fixtures for boxwire tests."""

import pytest

from boxwire.container import Container
from boxwire.dependencies import DependenciesExtractor
from boxwire.lock_mode import LockMode
from boxwire.types import Lifetime


@pytest.fixture()
def container() -> Container:
    """Default container: services by default, thread lock, no cycle detection."""
    return Container()


@pytest.fixture()
def container_detect_cycles() -> Container:
    """Container that fails fast on circular dependencies."""
    return Container(detect_cycles=True)


@pytest.fixture()
def container_transient() -> Container:
    """Container with components as the default lifetime."""
    return Container(default_lifetime=Lifetime.TRANSIENT)


@pytest.fixture()
def container_unlocked() -> Container:
    """Container without locking, for single-threaded hosts."""
    return Container(lock_mode=LockMode.NONE)


@pytest.fixture()
def dependencies_extractor() -> DependenciesExtractor:
    """DependenciesExtractor instance."""
    return DependenciesExtractor()
