"""In-memory knowledge graph mirrored to a JSON snapshot after every mutation."""

import logging
from pathlib import Path
from typing import Any

from .persistence import GraphPersistence
from .types import EntityInput, Graph, GraphStats, ObservationInput, RelationInput
from .utils import contains_text, empty_graph, utc_timestamp

logger = logging.getLogger(__name__)


class GraphStore:
    """
    Knowledge graph held fully in memory.

    Every mutating operation changes the graph synchronously and then awaits a
    full snapshot write. Nothing suspends between reading and writing the graph,
    so handlers running on one event loop never interleave their mutations.
    """

    def __init__(self, path: Path, search_relations: bool = True):
        self.persistence = GraphPersistence(path)
        self.search_relations = search_relations
        self.graph: Graph = empty_graph()

    @property
    def path(self) -> Path:
        return self.persistence.path

    # ========================================================================
    # Loading and Saving
    # ========================================================================

    async def load(self):
        """Load the snapshot, or start empty and write an empty snapshot."""
        graph = self.persistence.load()
        if graph is None:
            self.graph = empty_graph()
            await self.save()
            return

        self.graph = graph
        logger.info(
            f"Loaded graph: {len(self.graph.get('entities', {}))} entities, "
            f"{len(self.graph.get('relations', []))} relations"
        )

    async def save(self) -> bool:
        """Persist the whole graph. Failures are logged by the persistence layer, never raised."""
        return await self.persistence.save(self.graph)

    # ========================================================================
    # Write Operations
    # ========================================================================

    async def create_entities(self, entities: list[EntityInput]) -> int:
        """Upsert entities by name, replacing any existing entity entirely."""
        store = self.graph["entities"]
        for entity in entities:
            name = entity["name"]
            store[name] = {
                "name": name,
                "entityType": entity["entityType"],
                "observations": list(entity.get("observations") or []),
                "createdAt": utc_timestamp(),
            }

        await self.save()
        logger.debug(f"Created {len(entities)} entities")
        return len(entities)

    async def create_relations(self, relations: list[RelationInput]) -> int:
        """Append relations. Endpoints are not checked against existing entities."""
        store = self.graph["relations"]
        for relation in relations:
            store.append({
                "from": relation["from"],
                "to": relation["to"],
                "relationType": relation["relationType"],
                "createdAt": utc_timestamp(),
            })

        await self.save()
        logger.debug(f"Created {len(relations)} relations")
        return len(relations)

    async def add_observations(self, observations: list[ObservationInput]) -> int:
        """
        Append observation strings to existing entities.

        Items naming an unknown entity are skipped silently but still counted.
        """
        entities = self.graph["entities"]
        for item in observations:
            entity = entities.get(item["entityName"])
            if entity is None:
                logger.debug(f"Skipping observations for unknown entity '{item['entityName']}'")
                continue
            entity["observations"].extend(item["contents"])

        await self.save()
        return len(observations)

    # ========================================================================
    # Read Operations
    # ========================================================================

    def search_nodes(self, query: str) -> list[dict[str, Any]]:
        """Linear, case-insensitive substring search over entities (and relations if enabled)."""
        needle = query.lower()
        results = []

        for name, entity in self.graph["entities"].items():
            if (contains_text(name, needle)
                    or contains_text(entity.get("entityType"), needle)
                    or any(contains_text(obs, needle) for obs in entity.get("observations", []))):
                results.append({"type": "entity", **entity})

        if self.search_relations:
            for relation in self.graph["relations"]:
                if (contains_text(relation.get("from"), needle)
                        or contains_text(relation.get("to"), needle)
                        or contains_text(relation.get("relationType"), needle)):
                    results.append({"type": "relation", **relation})

        return results

    def stats(self) -> GraphStats:
        entities = self.graph["entities"]
        return {
            "entities": len(entities),
            "relations": len(self.graph["relations"]),
            "totalObservations": sum(len(e.get("observations", [])) for e in entities.values()),
        }

    def read_graph(self) -> tuple[GraphStats, Graph]:
        """Return statistics and the live graph snapshot."""
        return self.stats(), self.graph
