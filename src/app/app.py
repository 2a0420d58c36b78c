"""Entrypoint do gateway WhatsApp-Web multi-sessão.

Este módulo é o ponto de entrada principal do serviço.
Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 3000

Uso (desenvolvimento):
    python -m app.app
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.middleware import BodySizeLimitMiddleware
from api.routes import create_api_router
from app.bootstrap import initialize_app, validate_runtime_settings
from app.bootstrap.dependencies import (
    create_client_factory,
    create_session_registry,
    create_webhook_dispatcher,
)
from app.observability import reset_correlation_id, set_correlation_id
from config.logging import get_logger
from config.settings import get_base_settings, get_webhook_settings
from utils.errors import GatewayError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from fastapi import Response

    from app.protocols.webhook_dispatcher import WebhookDispatcherProtocol
    from app.protocols.whatsapp_client import WhatsAppClientFactoryProtocol
    from config.settings import AuthSettings

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)

CORRELATION_HEADER = "x-correlation-id"
INVALID_PAYLOAD_MESSAGE = "Payload inválido"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Cria dispatcher, factory do cliente e registry

    Shutdown:
    - Fecha clientes de todas as sessões (sem logout)
    - Aguarda entregas de webhook pendentes
    """
    service_name = get_base_settings().service_name
    logger.info("app_starting", extra={"service": service_name})
    validate_runtime_settings()

    state = app.state
    dispatcher = state.dispatcher or create_webhook_dispatcher()
    client_factory = state.client_factory or create_client_factory()
    state.dispatcher = dispatcher
    state.client_factory = client_factory
    state.registry = create_session_registry(client_factory, dispatcher)
    state.started_at = time.monotonic()

    yield

    logger.info(
        "app_shutting_down",
        extra={"service": service_name, "sessions": state.registry.count()},
    )
    await state.registry.shutdown()
    await dispatcher.drain(timeout_seconds=30.0)


async def _handle_gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
    """Converte GatewayError em `{"error": ...}` com o status da classe."""
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            extra={
                "path": request.url.path,
                "status_code": exc.status_code,
                "error_type": type(exc).__name__,
                "error": exc.message,
            },
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _handle_request_validation(request: Request, exc: Exception) -> JSONResponse:
    """Corpo ilegível ou com tipos errados responde 400, não 422."""
    logger.info("request_invalid_payload", extra={"path": request.url.path})
    return JSONResponse(status_code=400, content={"error": INVALID_PAYLOAD_MESSAGE})


def create_app(
    *,
    client_factory: WhatsAppClientFactoryProtocol | None = None,
    dispatcher: WebhookDispatcherProtocol | None = None,
    auth_settings: AuthSettings | None = None,
) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Args:
        client_factory: Factory do cliente. Se None, usa a bridge WebSocket.
        dispatcher: Dispatcher de webhook. Se None, carrega do ambiente.
        auth_settings: Settings de autenticação. Se None, carrega do ambiente.

    Returns:
        Aplicação FastAPI configurada.
    """
    base_settings = get_base_settings()
    fastapi_app = FastAPI(
        title="WhatsApp Gateway",
        description="Gateway multi-sessão WhatsApp-Web com relay de eventos por webhook",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None if base_settings.is_production else "/docs",
        redoc_url=None,
    )
    fastapi_app.state.client_factory = client_factory
    fastapi_app.state.dispatcher = dispatcher
    fastapi_app.state.auth_settings = auth_settings
    fastapi_app.state.started_at = time.monotonic()

    fastapi_app.add_middleware(
        BodySizeLimitMiddleware,
        max_body_bytes=base_settings.max_body_bytes,
    )

    # Sistemas clientes chamam de qualquer origem
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @fastapi_app.middleware("http")
    async def request_context(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        token = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response = await call_next(request)
        finally:
            reset_correlation_id(token)
        return response

    fastapi_app.add_exception_handler(GatewayError, _handle_gateway_error)
    fastapi_app.add_exception_handler(RequestValidationError, _handle_request_validation)

    # Registra todas as rotas
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": base_settings.service_name})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta."""
    import uvicorn

    base_settings = get_base_settings()
    webhook_settings = get_webhook_settings()
    logger.info(
        "service_starting",
        extra={
            "service": base_settings.service_name,
            "port": base_settings.port,
            "environment": base_settings.environment,
            "webhook_configured": webhook_settings.is_enabled,
            "webhook_host": urlsplit(webhook_settings.url).hostname if webhook_settings.is_enabled else None,
        },
    )
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=base_settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
