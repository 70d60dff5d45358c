"""Shared fixtures for UniFi API client tests."""

import os
from typing import Any, Dict

import pytest

from unifi_api.api.client import UnifiClient
from unifi_api.config import ControllerConfig

BASE_URL = "https://test.local:8443"


def ok(data: Any = None, **meta: Any) -> Dict[str, Any]:
    """Build a successful controller response envelope."""
    body: Dict[str, Any] = {"meta": {"rc": "ok", **meta}}
    if data is not None:
        body["data"] = data
    return body


@pytest.fixture
def config() -> ControllerConfig:
    """Minimal valid configuration for a self-hosted controller."""
    return ControllerConfig(host="test.local", username="admin", password="secret")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep host UNIFI_* variables and .env files out of settings tests."""
    for key in list(os.environ):
        if key.startswith("UNIFI_") or key == "CONFIG_PATH":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def client(config) -> UnifiClient:
    return UnifiClient(config)


@pytest.fixture
def authed_client(client) -> UnifiClient:
    """A client whose session is already established."""
    client.session.is_authenticated = True
    client.session.cookies = "unifises=abc123"
    return client
