"""Testes do modelo Session e dos identificadores de sessão."""

from __future__ import annotations

import logging

import pytest

from app.sessions import Session, contacts_match, derive_session_id, normalize_phone
from fsm import SessionState


class TestSession:
    def test_new_session_starts_initializing(self) -> None:
        session = Session(session_id="s1", phone="5511999990000")

        assert session.state == SessionState.INITIALIZING
        assert session.is_terminal is False
        assert session.adapter is None
        assert session.created_at.tzinfo is not None

    def test_advance_applies_valid_transition(self, caplog: pytest.LogCaptureFixture) -> None:
        session = Session(session_id="s1")

        with caplog.at_level(logging.INFO, logger="app.sessions.models"):
            assert session.advance(SessionState.AWAITING_SCAN, "qr") is True

        assert session.state == SessionState.AWAITING_SCAN
        changed = [r for r in caplog.records if r.getMessage() == "session_state_changed"]
        assert len(changed) == 1
        assert changed[0].to_state == "awaiting_scan"

    def test_advance_rejects_invalid_transition(self) -> None:
        session = Session(session_id="s1")
        session.advance(SessionState.DISCONNECTED, "state:CONFLICT")

        assert session.advance(SessionState.CONNECTED, "state:CONNECTED") is False
        assert session.state == SessionState.DISCONNECTED
        assert session.is_terminal is True

    def test_summary_and_status_dict(self) -> None:
        session = Session(session_id="s1", phone="5511999990000")

        assert session.summary().to_dict() == {
            "sessionId": "s1",
            "status": "initializing",
            "phone": "5511999990000",
        }
        status = session.to_status_dict()
        assert status["exists"] is True
        assert status["status"] == "initializing"
        assert status["sessionId"] == "s1"
        assert status["phone"] == "5511999990000"

    def test_status_dict_omits_missing_phone(self) -> None:
        assert "phone" not in Session(session_id="s2").to_status_dict()


class TestIdentifiers:
    def test_normalize_phone_keeps_digits(self) -> None:
        assert normalize_phone("+55 (11) 99999-0000") == "5511999990000"
        assert normalize_phone(None) == ""

    def test_derive_session_id(self) -> None:
        assert derive_session_id("+55 11 99999-0000") == "5511999990000"
        assert derive_session_id("5511999990000", "user-42") == "user-42_5511999990000"
        assert derive_session_id("sem digitos") == ""

    def test_derive_session_id_strips_unsafe_owner_chars(self) -> None:
        assert derive_session_id("5511", "a/b c") == "abc_5511"

    def test_contacts_match_by_digits(self) -> None:
        assert contacts_match("+55 11 99999-0000", "5511999990000") is True
        assert contacts_match("5511999990000", "5511999990001") is False
        assert contacts_match(None, "") is False
