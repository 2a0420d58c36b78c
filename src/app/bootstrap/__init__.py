"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging e valida settings.
A construção dos serviços fica em `app.bootstrap.dependencies`.

Uso:
    from app.bootstrap import initialize_app, validate_runtime_settings

    initialize_app()
    validate_runtime_settings()
"""

from __future__ import annotations

import logging
import os

from app.observability import get_correlation_id, get_session_context
from config.logging import configure_logging
from config.settings import (
    get_auth_settings,
    get_base_settings,
    get_webhook_settings,
    get_whatsapp_settings,
)
from fsm import validate_transition_map

# Nível de log padrão (pode ser sobrescrito por env)
DEFAULT_LOG_LEVEL = "INFO"
STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa logging estruturado JSON com correlation_id e session_id.

    Deve ser chamada uma vez no início do serviço.
    """
    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    configure_logging(
        level=log_level,
        service_name=get_base_settings().service_name,
        correlation_id_getter=get_correlation_id,
        session_id_getter=get_session_context,
    )


def collect_settings_errors() -> list[str]:
    """Erros de todas as settings e do grafo de estados, prefixados pelo grupo."""
    errors: list[str] = []
    groups = (
        ("base", get_base_settings().validate()),
        ("auth", get_auth_settings().validate()),
        ("webhook", get_webhook_settings().validate()),
        ("whatsapp", get_whatsapp_settings().validate()),
        ("fsm", validate_transition_map()),
    )
    for group, group_errors in groups:
        errors.extend(f"{group}: {error}" for error in group_errors)
    return errors


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.

    Raises:
        RuntimeError: configuração inválida em ambiente estrito.
    """
    environment = get_base_settings().environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors = collect_settings_errors()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")
