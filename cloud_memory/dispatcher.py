"""
Tool dispatch for the memory server.

Maps operation names to GraphStore calls, checks required arguments and turns
results and failures into MCP-shaped responses. Transports (stdio, WebSocket)
only move these responses around.
"""

import logging
from collections.abc import Iterable
from typing import Any

from .config import MemoryConfig
from .core import (
    ADD_OBSERVATIONS,
    CREATE_ENTITIES,
    CREATE_RELATIONS,
    GRAPH_RESOURCE_MIME_TYPE,
    GRAPH_RESOURCE_NAME,
    GRAPH_RESOURCE_URI,
    PROFILE_FULL,
    PROFILE_TOOLS,
    PROTOCOL_VERSION,
    READ_GRAPH,
    SEARCH_NODES,
    SERVER_NAME,
    SERVER_VERSION,
    GraphStore,
    MemoryServerError,
    MissingArgumentError,
    UnknownMethodError,
    UnknownResourceError,
    UnknownToolError,
    to_json,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Tool Definitions
# ============================================================================

TOOL_DEFINITIONS: dict[str, dict[str, Any]] = {
    CREATE_ENTITIES: {
        "name": CREATE_ENTITIES,
        "description": "Create entities in the knowledge graph memory. An existing entity with the same name is replaced.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "entities": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "name": {"type": "string", "description": "Unique entity name"},
                            "entityType": {"type": "string", "description": "Entity classification"},
                            "observations": {"type": "array", "items": {"type": "string"}},
                        },
                        "required": ["name", "entityType"],
                    },
                },
            },
            "required": ["entities"],
        },
    },
    CREATE_RELATIONS: {
        "name": CREATE_RELATIONS,
        "description": "Create directed relations between entities in the knowledge graph",
        "inputSchema": {
            "type": "object",
            "properties": {
                "relations": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "from": {"type": "string", "description": "Source entity name"},
                            "to": {"type": "string", "description": "Target entity name"},
                            "relationType": {"type": "string", "description": "Relationship type"},
                        },
                        "required": ["from", "to", "relationType"],
                    },
                },
            },
            "required": ["relations"],
        },
    },
    ADD_OBSERVATIONS: {
        "name": ADD_OBSERVATIONS,
        "description": "Add observations to existing entities. Unknown entity names are skipped.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "observations": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "entityName": {"type": "string", "description": "Entity to extend"},
                            "contents": {"type": "array", "items": {"type": "string"}},
                        },
                        "required": ["entityName", "contents"],
                    },
                },
            },
            "required": ["observations"],
        },
    },
    SEARCH_NODES: {
        "name": SEARCH_NODES,
        "description": "Search for nodes in the knowledge graph",
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Case-insensitive substring to match"},
            },
            "required": ["query"],
        },
    },
    READ_GRAPH: {
        "name": READ_GRAPH,
        "description": "Read the entire knowledge graph",
        "inputSchema": {"type": "object", "properties": {}},
    },
}

GRAPH_RESOURCE = {
    "uri": GRAPH_RESOURCE_URI,
    "name": GRAPH_RESOURCE_NAME,
    "description": "Full knowledge graph snapshot",
    "mimeType": GRAPH_RESOURCE_MIME_TYPE,
}


def text_result(text: str, is_error: bool = False) -> dict[str, Any]:
    """Wrap text in an MCP tool result."""
    result: dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if is_error:
        result["isError"] = True
    return result


def check_required(tool: str, arguments: dict[str, Any]):
    """Raise MissingArgumentError for absent top-level or per-item required fields."""
    schema = TOOL_DEFINITIONS[tool]["inputSchema"]
    for field in schema.get("required", []):
        if field not in arguments:
            raise MissingArgumentError(tool, field)

        item_required = schema["properties"][field].get("items", {}).get("required", [])
        if not item_required or not isinstance(arguments[field], list):
            continue
        for index, item in enumerate(arguments[field]):
            for item_field in item_required:
                if not isinstance(item, dict) or item_field not in item:
                    raise MissingArgumentError(tool, f"{field}[{index}].{item_field}")


class Dispatcher:
    """Routes named operations to a GraphStore for one deployment profile."""

    def __init__(self, store: GraphStore, tools: Iterable[str] = PROFILE_TOOLS[PROFILE_FULL],
                 resources_enabled: bool = True, profile: str = PROFILE_FULL):
        self.store = store
        self.tools = tuple(tools)
        self.resources_enabled = resources_enabled
        self.profile = profile

        self._handlers = {
            CREATE_ENTITIES: self._create_entities,
            CREATE_RELATIONS: self._create_relations,
            ADD_OBSERVATIONS: self._add_observations,
            SEARCH_NODES: self._search_nodes,
            READ_GRAPH: self._read_graph,
        }

    @classmethod
    def from_config(cls, store: GraphStore, config: MemoryConfig) -> "Dispatcher":
        return cls(
            store,
            tools=config.enabled_tools,
            resources_enabled=config.resources_enabled,
            profile=config.profile,
        )

    # ========================================================================
    # Listing
    # ========================================================================

    def list_tools(self) -> list[dict[str, Any]]:
        return [TOOL_DEFINITIONS[name] for name in self.tools]

    def list_resources(self) -> list[dict[str, Any]]:
        return [GRAPH_RESOURCE] if self.resources_enabled else []

    # ========================================================================
    # Tools
    # ========================================================================

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> dict[str, Any]:
        """Run a tool. Never raises: failures come back as error results."""
        try:
            text = await self.execute(name, arguments or {})
            return text_result(text)

        except MemoryServerError as e:
            logger.warning(f"Tool error in {name}: {e}")
            return text_result(f"Error: {e}", is_error=True)

        except Exception as e:
            logger.error(f"Unexpected error in {name}: {e}", exc_info=True)
            return text_result(f"Error: {e}", is_error=True)

    async def execute(self, name: str, arguments: dict[str, Any]) -> str:
        """Run a tool and return its text. Raises on unknown tools and missing arguments."""
        if name not in self.tools:
            raise UnknownToolError(name)

        check_required(name, arguments)
        return await self._handlers[name](arguments)

    async def _create_entities(self, arguments: dict[str, Any]) -> str:
        count = await self.store.create_entities(arguments["entities"])
        return f"Created {count} entities successfully"

    async def _create_relations(self, arguments: dict[str, Any]) -> str:
        count = await self.store.create_relations(arguments["relations"])
        return f"Created {count} relations successfully"

    async def _add_observations(self, arguments: dict[str, Any]) -> str:
        count = await self.store.add_observations(arguments["observations"])
        return f"Added observations to {count} entities successfully"

    async def _search_nodes(self, arguments: dict[str, Any]) -> str:
        results = self.store.search_nodes(arguments["query"])
        return f"Found {len(results)} matching nodes:\n\n{to_json(results)}"

    async def _read_graph(self, arguments: dict[str, Any]) -> str:
        stats, graph = self.store.read_graph()
        return (
            "Knowledge Graph Contents:\n\n"
            f"Statistics:\n{to_json(stats)}\n\n"
            f"Full Graph:\n{to_json(graph)}"
        )

    # ========================================================================
    # Resources
    # ========================================================================

    def read_resource(self, uri: str) -> str:
        """Return the JSON text of a resource. Raises UnknownResourceError."""
        if not self.resources_enabled or uri != GRAPH_RESOURCE_URI:
            raise UnknownResourceError(uri)
        return to_json(self.store.graph)

    # ========================================================================
    # JSON-RPC methods
    # ========================================================================

    async def handle_request(self, request: dict[str, Any]) -> dict[str, Any]:
        """
        Answer one MCP-style JSON-RPC request and return its result payload.

        Failures are reported inside the result as {"error": {"message": ...}}.
        """
        method = request.get("method")

        try:
            params = request.get("params") or {}

            if method == "initialize":
                capabilities: dict[str, Any] = {"tools": {}}
                if self.resources_enabled:
                    capabilities["resources"] = {}
                return {
                    "protocolVersion": PROTOCOL_VERSION,
                    "capabilities": capabilities,
                    "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
                }

            elif method == "tools/list":
                return {"tools": self.list_tools()}

            elif method == "tools/call":
                name = params.get("name")
                if not name:
                    raise MemoryServerError("Missing tool name")
                text = await self.execute(name, params.get("arguments") or {})
                return text_result(text)

            elif method == "resources/list":
                if not self.resources_enabled:
                    raise UnknownMethodError(method)
                return {"resources": self.list_resources()}

            elif method == "resources/read":
                if not self.resources_enabled:
                    raise UnknownMethodError(method)
                uri = params.get("uri", "")
                return {
                    "contents": [{
                        "uri": uri,
                        "mimeType": GRAPH_RESOURCE_MIME_TYPE,
                        "text": self.read_resource(uri),
                    }]
                }

            else:
                raise UnknownMethodError(method)

        except MemoryServerError as e:
            logger.warning(f"Request error in {method}: {e}")
            return {"error": {"message": str(e)}}

        except Exception as e:
            logger.error(f"Unexpected error in {method}: {e}", exc_info=True)
            return {"error": {"message": str(e)}}
