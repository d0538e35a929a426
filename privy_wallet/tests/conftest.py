"""
Shared fixtures for privy_wallet tests.

Keys are generated per test session; no network access is needed, HTTP is
served by httpx.MockTransport.
"""
import json

import httpx
import pytest

from privy_wallet import config
from privy_wallet.config import Settings
from privy_wallet.core.signing.keys import generate_authorization_key

APP_ID = "app1"
APP_SECRET = "app-secret"
BASE_URL = "https://api.example/v1"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate tests from PRIVY_* variables and the settings singleton."""
    for key in (
        "PRIVY_APP_ID",
        "PRIVY_APP_SECRET",
        "PRIVY_AUTHORIZATION_KEY",
        "PRIVY_API_URL",
        "PRIVY_TIMEOUT",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(config, "_settings", None)


@pytest.fixture(scope="session")
def authorization_key():
    """(wallet-auth key string, base64 SPKI public key)"""
    return generate_authorization_key()


@pytest.fixture(scope="session")
def second_authorization_key():
    return generate_authorization_key()


@pytest.fixture
def settings():
    """Settings that ignore any .env file in the working directory."""
    return Settings(_env_file=None)


@pytest.fixture
def make_client(settings):
    """
    Build a PrivyAPIClient whose HTTP traffic goes to a handler function.

    Usage:
        client = make_client(handler, authorization_context=...)
    """
    from privy_wallet.api_client import PrivyAPIClient

    clients = []

    def _make(handler, **kwargs):
        kwargs.setdefault("app_id", APP_ID)
        kwargs.setdefault("app_secret", APP_SECRET)
        kwargs.setdefault("base_url", BASE_URL)
        kwargs.setdefault("settings", settings)
        client = PrivyAPIClient(transport=httpx.MockTransport(handler), **kwargs)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def json_response():
    """Factory for JSON httpx responses."""
    def _response(status_code: int, data) -> httpx.Response:
        return httpx.Response(
            status_code,
            content=json.dumps(data).encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )
    return _response
