"""Rotas HTTP da API.

Responsabilidades:
- Definir endpoints HTTP (status, sessões, mensagens)
- Autenticação por bearer token
- Delegação para o SessionRegistry

Estrutura:
- routes/health/: status público
- routes/sessions/: ciclo de vida das sessões
- routes/messages/: envio de texto e arquivos
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
