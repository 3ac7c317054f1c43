"""Utility functions for knowledge graph operations."""

import json
from datetime import datetime, timezone
from typing import Any

from .constants import JSON_INDENT, PROFILES, TRANSPORTS
from .exceptions import ConfigError
from .types import Graph


def empty_graph() -> Graph:
    """Return a fresh, empty graph."""
    return {"entities": {}, "relations": [], "observations": {}}


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision, e.g. 2024-05-01T12:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_json(data: Any) -> str:
    """Pretty-print data the way snapshots and tool results are rendered."""
    return json.dumps(data, indent=JSON_INDENT, ensure_ascii=False)


def contains_text(value: Any, query: str) -> bool:
    """Case-insensitive containment. query must already be lowercased."""
    return isinstance(value, str) and query in value.lower()


def validate_profile(profile: str):
    """Validate profile name. Raises ConfigError if invalid."""
    if profile not in PROFILES:
        raise ConfigError(f"Invalid profile '{profile}', must be one of {PROFILES}")


def validate_transport(transport: str):
    """Validate transport name. Raises ConfigError if invalid."""
    if transport not in TRANSPORTS:
        raise ConfigError(f"Invalid transport '{transport}', must be one of {TRANSPORTS}")
