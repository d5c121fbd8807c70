"""Shared pytest fixtures for stackwire tests."""

import pytest

from stackwire.container import Container
from stackwire.lock_mode import LockMode
from stackwire.policies import RegistrationPolicy


@pytest.fixture()
def container() -> Container:
    """Default container with thread locking and last-write-wins registration."""
    return Container()


@pytest.fixture()
def container_unlocked() -> Container:
    """Container with LockMode.NONE."""
    return Container(lock_mode=LockMode.NONE)


@pytest.fixture()
def container_strict() -> Container:
    """Container that rejects duplicate registrations."""
    return Container(registration_policy=RegistrationPolicy.ERROR)
