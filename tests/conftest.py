"""Test configuration and fixtures."""

from __future__ import annotations

import pytest

from ros2_provisioner.config import ProvisionConfig

from .fakes import PROFILE_PATH, FakeHost


@pytest.fixture
def host() -> FakeHost:
    """Provide a fresh Ubuntu noble host with nothing provisioned."""
    return FakeHost()


@pytest.fixture
def config() -> ProvisionConfig:
    """Provide the default config pointed at the fake profile path."""
    return ProvisionConfig(profile_path=PROFILE_PATH, key_fetch_backoff_s=0.0)
