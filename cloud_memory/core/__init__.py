"""Core knowledge graph components."""

from .types import Entity, Relation, Graph, GraphStats, EntityInput, RelationInput, ObservationInput
from .constants import *
from .exceptions import *
from .persistence import GraphPersistence
from .store import GraphStore
from .utils import empty_graph, utc_timestamp, to_json, contains_text, validate_profile, validate_transport

__all__ = [
    # Types
    "Entity",
    "Relation",
    "Graph",
    "GraphStats",
    "EntityInput",
    "RelationInput",
    "ObservationInput",
    # Constants
    "SERVER_NAME",
    "SERVER_VERSION",
    "PROTOCOL_VERSION",
    "DEFAULT_MEMORY_FILE",
    "JSON_INDENT",
    "TRANSPORTS",
    "DEFAULT_TRANSPORT",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "CONNECTION_ID_LENGTH",
    "CREATE_ENTITIES",
    "CREATE_RELATIONS",
    "ADD_OBSERVATIONS",
    "SEARCH_NODES",
    "READ_GRAPH",
    "PROFILE_FULL",
    "PROFILE_REDUCED",
    "DEFAULT_PROFILE",
    "PROFILE_TOOLS",
    "PROFILE_RESOURCES",
    "PROFILE_SEARCH_RELATIONS",
    "PROFILES",
    "GRAPH_RESOURCE_URI",
    "GRAPH_RESOURCE_NAME",
    "GRAPH_RESOURCE_MIME_TYPE",
    # Exceptions
    "MemoryServerError",
    "UnknownToolError",
    "UnknownResourceError",
    "UnknownMethodError",
    "MissingArgumentError",
    "ConfigError",
    # Classes
    "GraphPersistence",
    "GraphStore",
    # Utils
    "empty_graph",
    "utc_timestamp",
    "to_json",
    "contains_text",
    "validate_profile",
    "validate_transport",
]
