"""Type definitions for the knowledge graph."""

from typing import TypedDict, NotRequired


class Entity(TypedDict):
    """Named, typed node carrying free-text observations."""
    name: str
    entityType: str
    observations: list[str]
    createdAt: str


# 'from' is a keyword, so the functional form is required
Relation = TypedDict("Relation", {
    "from": str,
    "to": str,
    "relationType": str,
    "createdAt": str,
})


class Graph(TypedDict):
    """Complete graph structure, identical to the on-disk snapshot."""
    entities: dict[str, Entity]
    relations: list[Relation]
    observations: dict  # reserved, never read or written


class GraphStats(TypedDict):
    """Counts reported by read_graph."""
    entities: int
    relations: int
    totalObservations: int


class EntityInput(TypedDict):
    """Entity as supplied to create_entities."""
    name: str
    entityType: str
    observations: NotRequired[list[str]]


RelationInput = TypedDict("RelationInput", {
    "from": str,
    "to": str,
    "relationType": str,
})


class ObservationInput(TypedDict):
    """Observations to append to one entity."""
    entityName: str
    contents: list[str]
