"""Fixtures das rotas: app com factory/dispatcher falsos e secret de teste."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from app.app import create_app
from config.settings import AuthSettings
from tests.fakes.fake_whatsapp_client import FakeClientFactory, RecordingDispatcher
from tests.fakes.gateway import API_SECRET, Gateway


@pytest.fixture
def gateway() -> Iterator[Gateway]:
    factory = FakeClientFactory()
    dispatcher = RecordingDispatcher()
    app = create_app(
        client_factory=factory,
        dispatcher=dispatcher,
        auth_settings=AuthSettings(api_secret=API_SECRET),
    )
    with TestClient(app) as client:
        yield Gateway(client=client, factory=factory, dispatcher=dispatcher)
    assert dispatcher.drained is True


@pytest.fixture
def unconfigured_client() -> Iterator[TestClient]:
    """App sem API_SECRET: toda rota protegida responde 401."""
    app = create_app(
        client_factory=FakeClientFactory(),
        dispatcher=RecordingDispatcher(),
        auth_settings=AuthSettings(api_secret=""),
    )
    with TestClient(app) as client:
        yield client
