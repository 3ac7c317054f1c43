"""FastAPI WebSocket server speaking JSON-RPC to the dispatcher."""

import json
import logging

import uvicorn
from fastapi import FastAPI, WebSocket
from pydantic import BaseModel

from ..core import SERVER_VERSION
from ..dispatcher import Dispatcher
from ..rpc import ErrorCode, InvalidRequestError, RPCRequest, RPCResponse
from .connections import ConnectionManager

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    profile: str
    active_connections: int
    entities: int
    relations: int


async def handle_message(dispatcher: Dispatcher, raw: str | bytes) -> RPCResponse:
    """Turn one WebSocket frame into exactly one JSON-RPC response."""
    try:
        request = RPCRequest.parse(raw)
    except InvalidRequestError as e:
        logger.warning(f"Invalid request: {e}")
        return RPCResponse.error_response(e.request_id, ErrorCode.INVALID_REQUEST, str(e))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Unparseable request: {e}")
        return RPCResponse.error_response(None, ErrorCode.PARSE_ERROR, f"Parse error: {e}")

    logger.info(f"Received request: {request.method}")

    try:
        result = await dispatcher.handle_request(request.to_dict())
    except Exception as e:
        logger.error(f"Error handling request {request.method}: {e}", exc_info=True)
        return RPCResponse.error_response(request.id, ErrorCode.INTERNAL_ERROR, str(e))

    return RPCResponse.success(request.id, result)


def create_app(dispatcher: Dispatcher) -> FastAPI:
    """Build the WebSocket application around an already loaded store."""
    connection_manager = ConnectionManager()

    app = FastAPI(
        title="Cloud Memory Server",
        description="Knowledge graph memory over WebSocket JSON-RPC",
        version=SERVER_VERSION,
    )
    app.state.dispatcher = dispatcher
    app.state.connection_manager = connection_manager

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        stats = dispatcher.store.stats()
        return {
            "status": "ok",
            "version": SERVER_VERSION,
            "profile": dispatcher.profile,
            "active_connections": connection_manager.count(),
            "entities": stats["entities"],
            "relations": stats["relations"],
        }

    @app.websocket("/")
    async def websocket_endpoint(websocket: WebSocket):
        """
        JSON-RPC endpoint. Clients connect with: ws://host:port/
        Every frame gets one response; errors never close the connection.
        """
        connection_id = await connection_manager.connect(websocket)

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break

                # binary frames carry the same JSON text
                data = message.get("text")
                if data is None:
                    data = message.get("bytes") or b""
                response = await handle_message(dispatcher, data)
                if not await connection_manager.send_json(connection_id, response.to_dict()):
                    break

        except Exception as e:
            logger.error(f"WebSocket error for {connection_id}: {e}")
        finally:
            connection_manager.disconnect(connection_id)

    return app


async def serve(dispatcher: Dispatcher, host: str, port: int, log_level: str = "info"):
    """Run the WebSocket server until it is stopped."""
    app = create_app(dispatcher)

    logger.info(f"Cloud Memory Server running on port {port}")
    logger.info(f"WebSocket URL: ws://{host}:{port}/")
    logger.info(f"Memory will be persisted to: {dispatcher.store.path}")

    config_uvi = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_level=log_level.lower(),
    )
    server_uvi = uvicorn.Server(config_uvi)
    await server_uvi.serve()
