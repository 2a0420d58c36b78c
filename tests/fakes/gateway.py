"""Helper das rotas: TestClient com factory/dispatcher falsos."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

from fastapi.testclient import TestClient

from tests.fakes.fake_whatsapp_client import FakeClientFactory, RecordingDispatcher

API_SECRET = "test-secret-0123456789"
AUTH_HEADERS = {"Authorization": f"Bearer {API_SECRET}"}


@dataclass
class Gateway:
    client: TestClient
    factory: FakeClientFactory
    dispatcher: RecordingDispatcher

    def start(self, payload: dict[str, Any]) -> dict[str, Any]:
        response = self.client.post("/session/start", json=payload, headers=AUTH_HEADERS)
        assert response.status_code == 200, response.text
        return response.json()

    def status(self, session_id: str) -> dict[str, Any]:
        return self.client.get(f"/session/{session_id}/status", headers=AUTH_HEADERS).json()

    def wait_status(self, session_id: str, status: str) -> dict[str, Any]:
        """Aguarda a task de conexão, que roda no loop do TestClient."""
        body: dict[str, Any] = {}
        for _ in range(100):
            body = self.status(session_id)
            if body.get("status") == status:
                return body
            time.sleep(0.01)
        raise AssertionError(f"status {status!r} não alcançado: {body}")
