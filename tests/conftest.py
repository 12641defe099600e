"""Shared pytest fixtures: clients wired to a session that never touches the network."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from instagram_connector.client import InstagramAuthClient, InstagramClient

from .helpers import ACCESS_TOKEN, API_CALLBACK, API_KEY, API_SECRET, make_response, ok_payload


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "INSTAGRAM_API_KEY",
        "INSTAGRAM_API_SECRET",
        "INSTAGRAM_API_CALLBACK",
        "INSTAGRAM_CONNECT_TIMEOUT",
        "INSTAGRAM_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def session():
    s = requests.Session()
    s.request = MagicMock(return_value=make_response(ok_payload()))
    return s


@pytest.fixture
def public_client(session):
    client = InstagramClient.from_api_key(API_KEY, session=session)
    client.set_access_token(ACCESS_TOKEN)
    return client


@pytest.fixture
def auth_client(session):
    client = InstagramAuthClient.from_credentials(API_KEY, API_SECRET, API_CALLBACK, session=session)
    client.set_access_token(ACCESS_TOKEN)
    return client
