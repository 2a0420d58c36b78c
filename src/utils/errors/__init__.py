"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    ClientConnectionError,
    DeliveryError,
    DispatchError,
    GatewayError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)

__all__ = [
    "ClientConnectionError",
    "DeliveryError",
    "DispatchError",
    "GatewayError",
    "NotFoundError",
    "UnauthorizedError",
    "ValidationError",
]
