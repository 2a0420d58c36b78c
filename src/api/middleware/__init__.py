"""Middlewares ASGI da API."""

from api.middleware.body_limit import PAYLOAD_TOO_LARGE_MESSAGE, BodySizeLimitMiddleware

__all__ = ["PAYLOAD_TOO_LARGE_MESSAGE", "BodySizeLimitMiddleware"]
