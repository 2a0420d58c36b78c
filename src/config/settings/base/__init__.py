"""Agregador de settings base.

Re-exporta todas as settings base para uso externo.
"""

from __future__ import annotations

from config.settings.base.auth import (
    AuthSettings,
    get_auth_settings,
)
from config.settings.base.core import (
    BaseSettings,
    Environment,
    get_base_settings,
)

__all__ = [
    # Auth
    "AuthSettings",
    # Core
    "BaseSettings",
    # Types
    "Environment",
    "get_auth_settings",
    "get_base_settings",
]
