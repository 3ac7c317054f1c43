"""Shared test fixtures and factories."""

import json
from pathlib import Path

import pytest

from cloud_memory.core import PROFILE_REDUCED, PROFILE_TOOLS, GraphStore
from cloud_memory.dispatcher import Dispatcher


def read_snapshot(path: Path) -> dict:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def write_snapshot(path: Path, graph: dict):
    path.write_text(json.dumps(graph, indent=2), encoding="utf-8")


@pytest.fixture
def memory_file(tmp_path: Path) -> Path:
    return tmp_path / "memory.json"


@pytest.fixture
async def store(memory_file: Path) -> GraphStore:
    """Store loaded from a fresh (missing) snapshot file."""
    graph_store = GraphStore(memory_file)
    await graph_store.load()
    return graph_store


@pytest.fixture
def dispatcher(store: GraphStore) -> Dispatcher:
    return Dispatcher(store)


@pytest.fixture
def reduced_dispatcher(store: GraphStore) -> Dispatcher:
    return Dispatcher(
        store,
        tools=PROFILE_TOOLS[PROFILE_REDUCED],
        resources_enabled=False,
        profile=PROFILE_REDUCED,
    )


@pytest.fixture
def sample_graph() -> dict:
    """Two entities (3 and 1 observations) and four relations, one dangling."""
    return {
        "entities": {
            "Alice": {
                "name": "Alice",
                "entityType": "person",
                "observations": ["likes tea", "works remotely", "Speaks FRENCH"],
                "createdAt": "2024-05-01T10:00:00.000Z",
            },
            "Acme": {
                "name": "Acme",
                "entityType": "organization",
                "observations": ["founded in 1999"],
                "createdAt": "2024-05-01T10:00:01.000Z",
            },
        },
        "relations": [
            {"from": "Alice", "to": "Acme", "relationType": "works_at", "createdAt": "2024-05-01T10:00:02.000Z"},
            {"from": "Acme", "to": "Alice", "relationType": "employs", "createdAt": "2024-05-01T10:00:03.000Z"},
            {"from": "Alice", "to": "Bob", "relationType": "knows", "createdAt": "2024-05-01T10:00:04.000Z"},
            {"from": "Alice", "to": "Acme", "relationType": "works_at", "createdAt": "2024-05-01T10:00:05.000Z"},
        ],
        "observations": {},
    }


@pytest.fixture
async def sample_store(memory_file: Path, sample_graph: dict) -> GraphStore:
    write_snapshot(memory_file, sample_graph)
    graph_store = GraphStore(memory_file)
    await graph_store.load()
    return graph_store
