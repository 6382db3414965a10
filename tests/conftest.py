"""Global pytest fixtures for Canvelete."""

from __future__ import annotations

import pytest

from canvelete.adapters.config_store import InMemoryConfigStore
from canvelete.adapters.profile_store import InMemoryProfileStore
from canvelete.service_layer.credentials import CredentialService

TEST_API_KEY = "cvt_test_0123456789abcdef"


@pytest.fixture
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path_factory) -> None:
    """Keep the developer's real credentials and config directory out of a test."""
    monkeypatch.delenv("CANVELETE_API_KEY", raising=False)
    monkeypatch.delenv("CANVELETE_BASE_URL", raising=False)
    monkeypatch.setenv("CANVELETE_CONFIG_DIR", str(tmp_path_factory.mktemp("config")))
    monkeypatch.setenv("CANVELETE_LOG_PATH", str(tmp_path_factory.mktemp("logs") / "latest.log"))


@pytest.fixture
def config_store() -> InMemoryConfigStore:
    """Empty configuration (every key at its default)."""
    return InMemoryConfigStore()


@pytest.fixture
def profile_store() -> InMemoryProfileStore:
    """No profiles; the active pointer is ``default``."""
    return InMemoryProfileStore()


@pytest.fixture
def credentials(config_store, profile_store) -> CredentialService:
    """Credential service over the in-memory stores and an empty environment."""
    return CredentialService(config_store, profile_store, environ={})
