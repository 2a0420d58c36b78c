"""Testes dos endpoints públicos de status."""

from __future__ import annotations

from tests.fakes.gateway import AUTH_HEADERS, Gateway


def test_root_reports_service_and_session_count(gateway: Gateway) -> None:
    gateway.start({"sessionId": "s1"})

    response = gateway.client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["service"] == "whatsapp-gateway"
    assert body["sessions"] == 1
    assert body["uptime"] >= 0


def test_health_lists_sessions_without_auth(gateway: Gateway) -> None:
    gateway.start({"sessionId": "s1", "phone": "5511999990000"})
    gateway.wait_status("s1", "awaiting_scan")

    response = gateway.client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["sessions"] == [
        {"sessionId": "s1", "status": "awaiting_scan", "phone": "5511999990000"}
    ]
    assert body["memory"]["max_rss_bytes"] > 0
    assert "uptime" in body


def test_health_is_public_but_sessions_is_not(gateway: Gateway) -> None:
    assert gateway.client.get("/health").status_code == 200
    assert gateway.client.get("/sessions").status_code == 401
    assert gateway.client.get("/sessions", headers=AUTH_HEADERS).status_code == 200
