"""Constants for the knowledge graph memory server."""

# Server identity
SERVER_NAME = "cloud-memory"
SERVER_VERSION = "1.0.0"
PROTOCOL_VERSION = "2024-11-05"

# Persistence
DEFAULT_MEMORY_FILE = "./memory.json"
JSON_INDENT = 2

# Transport
TRANSPORTS = ("websocket", "stdio")
DEFAULT_TRANSPORT = "websocket"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
CONNECTION_ID_LENGTH = 8

# Tool names
CREATE_ENTITIES = "create_entities"
CREATE_RELATIONS = "create_relations"
ADD_OBSERVATIONS = "add_observations"
SEARCH_NODES = "search_nodes"
READ_GRAPH = "read_graph"

# Profiles: which tools (and whether the graph resource) each deployment exposes
PROFILE_FULL = "full"
PROFILE_REDUCED = "reduced"
DEFAULT_PROFILE = PROFILE_FULL

PROFILE_TOOLS = {
    PROFILE_FULL: (CREATE_ENTITIES, CREATE_RELATIONS, ADD_OBSERVATIONS, SEARCH_NODES, READ_GRAPH),
    PROFILE_REDUCED: (CREATE_ENTITIES, SEARCH_NODES, READ_GRAPH),
}
PROFILE_RESOURCES = {
    PROFILE_FULL: True,
    PROFILE_REDUCED: False,
}
PROFILE_SEARCH_RELATIONS = {
    PROFILE_FULL: True,
    PROFILE_REDUCED: False,
}
PROFILES = tuple(PROFILE_TOOLS)

# Resources
GRAPH_RESOURCE_URI = "memory://graph"
GRAPH_RESOURCE_NAME = "Knowledge Graph"
GRAPH_RESOURCE_MIME_TYPE = "application/json"
