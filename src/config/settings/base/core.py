"""Settings base do gateway.

Configurações comuns ao processo HTTP e aos componentes de sessão.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "staging", "production"]

DEFAULT_PORT = 3000


@dataclass(frozen=True)
class BaseSettings:
    """Configurações base do sistema.

    Attributes:
        environment: Ambiente de execução (development|staging|production)
        service_name: Nome do serviço para logs e para o endpoint raiz
        debug: Modo debug ativo
        port: Porta HTTP em que o processo escuta
        max_body_bytes: Tamanho máximo aceito para o corpo dos requests
    """

    # Ambiente
    environment: Environment = "development"
    service_name: str = "whatsapp-gateway"
    debug: bool = False

    # HTTP
    port: int = DEFAULT_PORT
    max_body_bytes: int = 50 * 1024 * 1024  # 50MB (arquivos em base64)

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento."""
        return self.environment == "development"

    def validate(self) -> list[str]:
        """Valida configurações base.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []

        valid_envs = {"development", "staging", "production"}
        if self.environment not in valid_envs:
            errors.append(f"ENVIRONMENT inválido: {self.environment}")

        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")

        if not 0 < self.port < 65536:
            errors.append(f"PORT fora do intervalo válido: {self.port}")

        if self.max_body_bytes <= 0:
            errors.append("MAX_BODY_BYTES deve ser > 0")

        return errors


def _parse_environment(env_str: str) -> Environment:
    """Converte string de ambiente para tipo Environment."""
    env_lower = env_str.lower()
    if env_lower in ("production", "prod"):
        return "production"
    if env_lower in ("staging", "stage"):
        return "staging"
    return "development"


def _load_base_from_env() -> BaseSettings:
    """Carrega BaseSettings de variáveis de ambiente."""
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "whatsapp-gateway"),
        debug=os.getenv("DEBUG", "").lower() in ("true", "1", "yes"),
        port=int(os.getenv("PORT", str(DEFAULT_PORT))),
        max_body_bytes=int(os.getenv("MAX_BODY_BYTES", str(50 * 1024 * 1024))),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()
