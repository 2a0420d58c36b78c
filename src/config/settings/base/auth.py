"""Settings de autenticação da API.

O secret do bearer token não tem valor padrão: sem API_SECRET todas as
rotas protegidas respondem 401, e staging/production não sobem.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

MIN_SECRET_LENGTH = 16


@dataclass(frozen=True)
class AuthSettings:
    """Configurações de autenticação.

    Attributes:
        api_secret: Secret esperado em `Authorization: Bearer <secret>`
    """

    api_secret: str = field(default="", repr=False)

    @property
    def is_configured(self) -> bool:
        """Retorna True se há secret configurado."""
        return bool(self.api_secret)

    def validate(self) -> list[str]:
        """Valida configurações de autenticação.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if not self.api_secret:
            errors.append("API_SECRET não configurado")
        elif len(self.api_secret) < MIN_SECRET_LENGTH:
            errors.append(f"API_SECRET deve ter ao menos {MIN_SECRET_LENGTH} caracteres")

        return errors


def _load_auth_from_env() -> AuthSettings:
    """Carrega AuthSettings de variáveis de ambiente."""
    return AuthSettings(api_secret=os.getenv("API_SECRET", "").strip())


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Retorna instância cacheada de AuthSettings."""
    return _load_auth_from_env()
