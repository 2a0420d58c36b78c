"""Settings do webhook de saída.

Destino único (com override por sessão) para eventos qr/connected/
disconnected/message. Sem WEBHOOK_URL o dispatch vira no-op.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class WebhookSettings:
    """Configurações do dispatcher de webhook.

    Attributes:
        url: URL padrão do receptor (vazio desabilita o dispatch)
        timeout_seconds: Timeout fixo de cada POST
        max_in_flight: Entregas simultâneas antes de descartar eventos
    """

    url: str = ""
    timeout_seconds: float = 10.0
    max_in_flight: int = 100

    @property
    def is_enabled(self) -> bool:
        """Retorna True se há receptor padrão configurado."""
        return bool(self.url)

    def validate(self) -> list[str]:
        """Valida configurações do webhook.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if self.url and not self.url.startswith(("http://", "https://")):
            errors.append("WEBHOOK_URL deve começar com http:// ou https://")

        if self.timeout_seconds <= 0:
            errors.append("WEBHOOK_TIMEOUT_SECONDS deve ser > 0")

        if self.max_in_flight < 1:
            errors.append("WEBHOOK_MAX_IN_FLIGHT deve ser >= 1")

        return errors


def _load_from_env() -> WebhookSettings:
    """Carrega WebhookSettings a partir de variáveis de ambiente."""
    return WebhookSettings(
        url=os.getenv("WEBHOOK_URL", "").strip(),
        timeout_seconds=float(os.getenv("WEBHOOK_TIMEOUT_SECONDS", "10")),
        max_in_flight=int(os.getenv("WEBHOOK_MAX_IN_FLIGHT", "100")),
    )


@lru_cache(maxsize=1)
def get_webhook_settings() -> WebhookSettings:
    """Retorna instância cacheada de WebhookSettings."""
    return _load_from_env()
