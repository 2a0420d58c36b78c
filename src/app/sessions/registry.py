"""Registry de sessões — mapa autoritativo sessionId → Session.

Garante no máximo uma sessão (e um adapter) por identificador. Inserção e
remoção são passos síncronos no event loop, sem locks: dois `start`
concorrentes para o mesmo id resolvem para a mesma entrada.

A construção do cliente (handshake longo) roda em background; falhas são
logadas e removem a entrada, nunca chegam ao caller HTTP.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

from app.coordinators.whatsapp.connection import ConnectionAdapter
from app.observability import reset_session_context, set_session_context
from app.sessions.identifiers import contacts_match
from app.sessions.models import Session
from config.settings import DEFAULT_CHAT_SUFFIX
from fsm import SessionState
from utils.errors import NotFoundError, ValidationError

if TYPE_CHECKING:
    from app.protocols.models import SessionHints, SessionSummary
    from app.protocols.webhook_dispatcher import WebhookDispatcherProtocol
    from app.protocols.whatsapp_client import WhatsAppClientFactoryProtocol

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Serviço de ciclo de vida das sessões, instanciado no lifespan."""

    __slots__ = ("_chat_suffix", "_dispatcher", "_factory", "_sessions", "_tasks")

    def __init__(
        self,
        client_factory: WhatsAppClientFactoryProtocol,
        dispatcher: WebhookDispatcherProtocol,
        *,
        chat_suffix: str = DEFAULT_CHAT_SUFFIX,
    ) -> None:
        """Inicializa registry.

        Args:
            client_factory: Factory do cliente WhatsApp-Web
            dispatcher: Dispatcher de eventos para o webhook
            chat_suffix: Sufixo anexado a destinos sem '@'
        """
        self._factory = client_factory
        self._dispatcher = dispatcher
        self._chat_suffix = chat_suffix
        self._sessions: dict[str, Session] = {}
        self._tasks: set[asyncio.Task[Any]] = set()

    # ──────────────────────────────────────────────────────────────────────
    # Criação
    # ──────────────────────────────────────────────────────────────────────

    def create_session(
        self,
        session_id: str,
        hints: SessionHints | None = None,
    ) -> Session:
        """Retorna a sessão existente ou cria uma nova em `initializing`.

        O adapter é construído em background; o handle retorna antes da
        conexão completar.

        Raises:
            ValidationError: session_id vazio.
        """
        session_id = (session_id or "").strip()
        if not session_id:
            raise ValidationError("sessionId é obrigatório")

        existing = self._sessions.get(session_id)
        if existing is not None:
            logger.info(
                "session_already_exists",
                extra={"session_id": session_id, "status": existing.state.value},
            )
            return existing

        session = Session(
            session_id=session_id,
            phone=hints.phone if hints else None,
            user_id=hints.user_id if hints else None,
            webhook_url=hints.webhook_url if hints else None,
        )
        session.adapter = ConnectionAdapter(
            session,
            self._factory,
            self._dispatcher,
            on_terminated=self._on_adapter_terminated,
            chat_suffix=self._chat_suffix,
        )
        self._sessions[session_id] = session

        logger.info(
            "session_created",
            extra={
                "session_id": session_id,
                "has_phone": bool(session.phone),
                "has_webhook_override": bool(session.webhook_url),
            },
        )
        self._spawn(self._establish(session), session_id)
        return session

    async def _establish(self, session: Session) -> None:
        """Constrói o cliente; falha remove a entrada."""
        token = set_session_context(session.session_id)
        try:
            adapter = session.adapter
            if adapter is None:
                return
            try:
                await adapter.connect()
            except Exception as exc:
                if session.is_terminal:
                    # encerrada pelo caller durante o handshake
                    logger.info(
                        "session_connect_abandoned",
                        extra={"session_id": session.session_id},
                    )
                    self._discard(session)
                    return
                logger.error(
                    "session_connect_failed",
                    extra={
                        "session_id": session.session_id,
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    },
                )
                self._discard(session)
                return

            logger.info(
                "session_client_ready",
                extra={"session_id": session.session_id, "status": session.state.value},
            )
        finally:
            reset_session_context(token)

    # ──────────────────────────────────────────────────────────────────────
    # Consulta
    # ──────────────────────────────────────────────────────────────────────

    def lookup(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def lookup_by_contact(self, contact: str) -> Session | None:
        """Busca linear pelo telefone.

        Com várias sessões para o mesmo contato, retorna a primeira em ordem
        de inserção; o desempate não é contratual.
        """
        for session in self._sessions.values():
            if contacts_match(session.phone, contact):
                return session
        return None

    def list(self) -> list[SessionSummary]:
        return [session.summary() for session in list(self._sessions.values())]

    def count(self) -> int:
        return len(self._sessions)

    # ──────────────────────────────────────────────────────────────────────
    # Encerramento
    # ──────────────────────────────────────────────────────────────────────

    async def terminate(self, session_id: str) -> None:
        """Logout explícito: desfaz pareamento, fecha cliente e remove.

        Raises:
            NotFoundError: sessão inexistente.
            DeliveryError: logout/close falhou; a entrada permanece.
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError("Sessão não encontrada")

        adapter = session.adapter
        if adapter is not None:
            await adapter.logout()
            await adapter.close()

        session.advance(SessionState.DISCONNECTED, "logout")
        self._discard(session)
        logger.info("session_terminated", extra={"session_id": session_id})

    async def shutdown(self, timeout_seconds: float = 10.0) -> None:
        """Fecha todos os clientes sem logout (pareamento sobrevive)."""
        sessions = list(self._sessions.values())
        self._sessions.clear()

        for session in sessions:
            adapter = session.adapter
            if adapter is None:
                continue
            try:
                await adapter.close()
            except Exception as exc:
                logger.warning(
                    "session_close_failed",
                    extra={"session_id": session.session_id, "error_type": type(exc).__name__},
                )

        await self._drain_tasks(timeout_seconds)
        logger.info("session_registry_shutdown", extra={"closed_sessions": len(sessions)})

    def _on_adapter_terminated(self, session: Session) -> None:
        """Callback do adapter após DISCONNECTED/CONFLICT."""
        self._discard(session)
        logger.info(
            "session_removed",
            extra={"session_id": session.session_id, "reason": "client_disconnected"},
        )

    def _discard(self, session: Session) -> None:
        """Remove a entrada se ainda for a mesma sessão; remoção dupla é no-op."""
        if self._sessions.get(session.session_id) is session:
            del self._sessions[session.session_id]

    # ──────────────────────────────────────────────────────────────────────
    # Tasks em background
    # ──────────────────────────────────────────────────────────────────────

    def _spawn(self, coroutine: Any, session_id: str) -> None:
        task = asyncio.create_task(coroutine, name=f"session:{session_id}")
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        with contextlib.suppress(asyncio.CancelledError):
            exc = task.exception()
            if exc is not None:
                logger.error(
                    "session_task_failed",
                    extra={
                        "task": task.get_name(),
                        "error_type": type(exc).__name__,
                        "active_tasks": len(self._tasks),
                    },
                )

    async def _drain_tasks(self, timeout_seconds: float) -> None:
        if not self._tasks:
            return

        pending_now = list(self._tasks)
        _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
        if not pending:
            return

        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        logger.warning("session_tasks_cancelled", extra={"cancelled_tasks": len(pending)})
