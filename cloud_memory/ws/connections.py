"""WebSocket connection manager."""

import logging
import uuid
from typing import Any

from fastapi import WebSocket

from ..core import CONNECTION_ID_LENGTH

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks open WebSocket connections by a short connection id."""

    def __init__(self):
        # Map: connection_id -> WebSocket
        self.active_connections: dict[str, WebSocket] = {}

    async def connect(self, websocket: WebSocket) -> str:
        """Accept and register a WebSocket connection. Returns its id."""
        await websocket.accept()
        connection_id = uuid.uuid4().hex[:CONNECTION_ID_LENGTH]
        self.active_connections[connection_id] = websocket
        logger.info(f"New WebSocket connection established: {connection_id}")
        return connection_id

    def disconnect(self, connection_id: str):
        """Remove a WebSocket connection."""
        if connection_id in self.active_connections:
            del self.active_connections[connection_id]
            logger.info(f"WebSocket connection closed: {connection_id}")

    async def send_json(self, connection_id: str, message: dict[str, Any]) -> bool:
        """Send a message to one connection. Drops the connection if sending fails."""
        websocket = self.active_connections.get(connection_id)
        if websocket is None:
            return False

        try:
            await websocket.send_json(message)
            return True
        except Exception as e:
            logger.error(f"Error sending to {connection_id}: {e}")
            self.disconnect(connection_id)
            return False

    def count(self) -> int:
        """Return number of active connections."""
        return len(self.active_connections)
