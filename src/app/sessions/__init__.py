"""Módulo de sessões WhatsApp-Web.

Exporta o modelo de sessão e o registry em memória.
"""

from app.sessions.identifiers import contacts_match, derive_session_id, normalize_phone
from app.sessions.models import Session
from app.sessions.registry import SessionRegistry

__all__ = [
    "Session",
    "SessionRegistry",
    "contacts_match",
    "derive_session_id",
    "normalize_phone",
]
