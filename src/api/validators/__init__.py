"""Validators — modelos de request e checagens de obrigatoriedade."""

from api.validators.requests import (
    SESSION_ID_REQUIRED,
    SendFileRequest,
    SendMessageRequest,
    StartSessionRequest,
    require_field,
    resolve_start_session_id,
    validate_webhook_url,
)

__all__ = [
    "SESSION_ID_REQUIRED",
    "SendFileRequest",
    "SendMessageRequest",
    "StartSessionRequest",
    "require_field",
    "resolve_start_session_id",
    "validate_webhook_url",
]
