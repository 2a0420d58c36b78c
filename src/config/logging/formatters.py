"""Formatters de logging estruturado (JSON, uma linha por evento)."""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Campos obrigatórios em todo log estruturado
REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "session_id",
    "service",
)

# Mapeamento de nomes de campos para formato padrão
FIELD_RENAME_MAP = {
    "asctime": "timestamp",
    "levelname": "level",
    "name": "logger",
}

# ISO-8601 com offset, igual ao timestamp dos eventos de webhook
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {"timestamp": "2026-02-02T10:30:00+0000", "level": "INFO",
         "logger": "app.sessions.registry", "message": "session_created",
         "correlation_id": "abc-123", "session_id": "s1",
         "service": "whatsapp_gateway"}
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)

    return JsonFormatter(
        format_string,
        datefmt=TIMESTAMP_FORMAT,
        rename_fields=FIELD_RENAME_MAP,
        json_ensure_ascii=False,
    )
