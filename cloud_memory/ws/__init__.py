"""WebSocket transport for the memory server."""

from .app import HealthResponse, create_app, handle_message, serve
from .connections import ConnectionManager

__all__ = [
    "ConnectionManager",
    "HealthResponse",
    "create_app",
    "handle_message",
    "serve",
]
