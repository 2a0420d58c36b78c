"""Protocolos do cliente WhatsApp-Web subjacente.

O cliente real (browser + protocolo) é uma caixa-preta; o gateway usa
apenas as operações abaixo. Qualquer exceção levantada por essas operações
é traduzida pelo ConnectionAdapter para erros de domínio.
"""

from __future__ import annotations

from typing import Any, Protocol


class ClientEventHandler(Protocol):
    """Destino dos três canais de callback do cliente.

    Callbacks de uma mesma sessão são aguardados na ordem em que o cliente
    os emite.
    """

    async def on_qr(self, qr_code: str) -> None: ...

    async def on_state_change(self, state: str) -> None: ...

    async def on_message(self, message: dict[str, Any]) -> None: ...


class WhatsAppClientProtocol(Protocol):
    """Contrato mínimo de um cliente conectado."""

    async def send_text(self, chat_id: str, body: str) -> str:
        """Envia texto e retorna o id da mensagem."""
        ...

    async def send_file(
        self,
        chat_id: str,
        file_base64: str,
        filename: str,
        caption: str,
    ) -> str:
        """Envia arquivo (base64) e retorna o id da mensagem."""
        ...

    async def decrypt_media(self, message: dict[str, Any]) -> bytes:
        """Baixa e decifra o anexo de uma mensagem recebida."""
        ...

    async def logout(self) -> None: ...

    async def close(self) -> None: ...


class WhatsAppClientFactoryProtocol(Protocol):
    """Constrói clientes; a construção pode levar minutos (browser + handshake)."""

    async def create(
        self,
        session_id: str,
        handler: ClientEventHandler,
    ) -> WhatsAppClientProtocol: ...
