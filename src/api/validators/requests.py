"""Modelos e validação dos corpos de request da API.

Todos os campos são opcionais no modelo: a obrigatoriedade é checada aqui
para responder 400 com `{"error": ...}` em vez do 422 padrão do FastAPI.
"""

from __future__ import annotations

import httpx
from pydantic import BaseModel, ConfigDict, Field

from app.sessions.identifiers import derive_session_id
from utils.errors import ValidationError

SESSION_ID_REQUIRED = "sessionId é obrigatório"
WEBHOOK_URL_SCHEME = "webhookUrl deve começar com http:// ou https://"
WEBHOOK_URL_INVALID = "webhookUrl inválida"


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class StartSessionRequest(_RequestModel):
    """POST /session/start."""

    session_id: str | None = Field(default=None, alias="sessionId")
    phone: str | None = None
    user_id: str | None = None
    webhook_url: str | None = Field(default=None, alias="webhookUrl")


class SendMessageRequest(_RequestModel):
    """POST /message/send."""

    session_id: str | None = Field(default=None, alias="sessionId")
    phone: str | None = None
    to: str | None = None
    message: str | None = None


class SendFileRequest(_RequestModel):
    """POST /message/send-file."""

    session_id: str | None = Field(default=None, alias="sessionId")
    to: str | None = None
    file_base64: str | None = None
    filename: str | None = None
    caption: str | None = None


def resolve_start_session_id(request: StartSessionRequest) -> str:
    """sessionId informado ou derivado de phone (+ user_id).

    Raises:
        ValidationError: nem sessionId nem phone com dígitos.
    """
    session_id = (request.session_id or "").strip()
    if session_id:
        return session_id

    derived = derive_session_id(request.phone, request.user_id)
    if not derived:
        raise ValidationError(SESSION_ID_REQUIRED)
    return derived


def validate_webhook_url(url: str | None) -> str | None:
    """Override de webhook da sessão: URL http(s) absoluta com host.

    Raises:
        ValidationError: esquema diferente de http(s), sem host ou URL
            que o httpx não consegue interpretar (ex: porta inválida).
    """
    if not url:
        return None
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        raise ValidationError(WEBHOOK_URL_SCHEME)
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise ValidationError(WEBHOOK_URL_INVALID) from exc
    if not parsed.host:
        raise ValidationError(WEBHOOK_URL_INVALID)
    return url


def require_field(value: str | None, name: str) -> str:
    """Campo textual obrigatório (não vazio).

    Raises:
        ValidationError: campo ausente ou vazio.
    """
    if value is None or not value.strip():
        raise ValidationError(f"{name} é obrigatório")
    return value
