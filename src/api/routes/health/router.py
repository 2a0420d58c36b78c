"""Endpoints públicos de status (sem autenticação)."""

from __future__ import annotations

import resource
import sys
import time
from typing import Any

from fastapi import APIRouter, Depends, Request

from api.routes.dependencies import get_registry
from app.sessions import SessionRegistry
from config.settings import get_base_settings

router = APIRouter()


def _uptime_seconds(request: Request) -> float:
    started_at = getattr(request.app.state, "started_at", None)
    if started_at is None:
        return 0.0
    return round(time.monotonic() - started_at, 3)


def _memory_usage() -> dict[str, Any]:
    """Uso de memória do processo (pico de RSS)."""
    usage = resource.getrusage(resource.RUSAGE_SELF)
    # ru_maxrss: KB no Linux, bytes no macOS
    max_rss_bytes = usage.ru_maxrss if sys.platform == "darwin" else usage.ru_maxrss * 1024
    return {"max_rss_bytes": max_rss_bytes}


@router.get("/")
async def root(
    request: Request,
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Status resumido do serviço."""
    return {
        "status": "ok",
        "service": get_base_settings().service_name,
        "sessions": registry.count(),
        "uptime": _uptime_seconds(request),
    }


@router.get("/health")
async def health_check(
    request: Request,
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Liveness probe com snapshot das sessões."""
    return {
        "status": "ok",
        "sessions": [summary.to_dict() for summary in registry.list()],
        "memory": _memory_usage(),
        "uptime": _uptime_seconds(request),
    }
