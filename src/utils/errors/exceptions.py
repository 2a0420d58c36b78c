"""Exceções de domínio do gateway.

Cada erro síncrono carrega o status HTTP correspondente; o handler único
registrado em app.app converte para `{"error": <mensagem>}`.
Erros de background (conexão, entrega de webhook) nunca chegam ao caller HTTP.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base para erros do gateway com status HTTP associado."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(GatewayError):
    """Campo obrigatório ausente ou inválido no request."""

    status_code = 400


class UnauthorizedError(GatewayError):
    """Bearer token ausente ou divergente do secret configurado."""

    status_code = 401


class NotFoundError(GatewayError):
    """Sessão desconhecida no registry."""

    status_code = 404


class DeliveryError(GatewayError):
    """Cliente subjacente rejeitou envio, logout ou close."""

    status_code = 500


class ClientConnectionError(GatewayError):
    """Falha ao construir o cliente subjacente (browser, perfil bloqueado, bridge)."""

    status_code = 503


class DispatchError(GatewayError):
    """POST do webhook falhou. Apenas logado, nunca propagado."""

    status_code = 502
