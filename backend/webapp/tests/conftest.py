"""Shared fixtures for webapp tests."""

from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from shared.auth.settings import AuthSettings
from webapp.server.app import create_app
from webapp.server.settings import WebAppSettings

TEST_ORIGIN = "http://localhost:5173"


@pytest.fixture
def auth_settings(tmp_path) -> AuthSettings:
    return AuthSettings(
        database_path=str(tmp_path / "storage.db"),
        password_hasher="simple",
        session_cleanup_interval_seconds=0,
    )


@pytest.fixture
def app(auth_settings, clock):
    return create_app(
        settings=WebAppSettings(cors_origins=[TEST_ORIGIN]),
        auth_settings=auth_settings,
        clock=clock,
    )


@pytest.fixture
def client(app):
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
