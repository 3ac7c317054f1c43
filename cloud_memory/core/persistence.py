"""Snapshot persistence: the whole graph lives in one pretty-printed JSON file."""

import asyncio
import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from .types import Graph
from .utils import to_json

logger = logging.getLogger(__name__)


class GraphPersistence:
    """Reads and rewrites the graph snapshot file with atomic writes."""

    def __init__(self, path: Path):
        self.path = path

        # Thread safety
        self._write_lock = threading.Lock()
        # Saves reach the file in the order they were requested
        self._save_lock = asyncio.Lock()

    def load(self) -> Graph | None:
        """
        Load the snapshot from disk.
        Returns the parsed object verbatim, or None if the file is missing,
        unreadable or does not hold a JSON object.
        """
        if not self.path.exists():
            logger.info(f"No existing memory file at {self.path}, starting fresh")
            return None

        try:
            with open(self.path, encoding="utf-8") as f:
                graph = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load memory from {self.path}: {e}")
            return None

        if not isinstance(graph, dict):
            logger.error(f"Failed to load memory from {self.path}: expected a JSON object, got {type(graph).__name__}")
            return None

        logger.info(f"Memory loaded from {self.path}")
        return graph

    def dump(self, graph: Graph) -> str:
        """Serialize the graph exactly as it is written to disk."""
        return to_json(graph)

    def write(self, payload: str) -> bool:
        """
        Replace the snapshot file with payload.
        Returns True on success, False on failure.
        """
        temp_path: Path | None = None
        try:
            with self._write_lock:
                self.path.parent.mkdir(parents=True, exist_ok=True)

                fd, temp_name = tempfile.mkstemp(
                    dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
                )
                temp_path = Path(temp_name)
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())

                # rename is atomic on POSIX
                temp_path.replace(self.path)

            logger.debug(f"Memory saved to {self.path}")
            return True

        except OSError as e:
            logger.error(f"Failed to save memory to {self.path}: {e}")
            if temp_path is not None:
                self._discard(temp_path)
            return False

    def _discard(self, temp_path: Path):
        try:
            temp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove temp file {temp_path}: {e}")

    async def save(self, graph: Graph) -> bool:
        """
        Snapshot the graph as it is now, then write it without blocking the event loop.
        Returns True on success, False on failure.
        """
        payload = self.dump(graph)
        async with self._save_lock:
            return await asyncio.to_thread(self.write, payload)
