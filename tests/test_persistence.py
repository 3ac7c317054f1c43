"""Tests for snapshot file handling."""

import asyncio
import json
from pathlib import Path

from cloud_memory.core import GraphPersistence, empty_graph


def test_load_missing_file_returns_none(tmp_path: Path):
    persistence = GraphPersistence(tmp_path / "missing.json")

    assert persistence.load() is None


def test_load_non_utf8_returns_none(tmp_path: Path):
    path = tmp_path / "memory.json"
    path.write_bytes(b"\xff\xfe\x00garbage")

    assert GraphPersistence(path).load() is None


def test_write_creates_parent_directories(tmp_path: Path):
    path = tmp_path / "nested" / "dir" / "memory.json"
    persistence = GraphPersistence(path)

    assert persistence.write(persistence.dump(empty_graph())) is True
    assert json.loads(path.read_text(encoding="utf-8")) == empty_graph()
    assert [p.name for p in path.parent.iterdir()] == ["memory.json"]


def test_dump_is_pretty_printed_utf8(tmp_path: Path):
    persistence = GraphPersistence(tmp_path / "memory.json")
    graph = empty_graph()
    graph["entities"]["Café"] = {"name": "Café", "entityType": "place", "observations": [], "createdAt": "t"}

    payload = persistence.dump(graph)

    assert "Café" in payload
    assert payload.startswith('{\n  "entities": {\n    "Café": {')


def test_write_overwrites_whole_file(tmp_path: Path):
    path = tmp_path / "memory.json"
    path.write_text("x" * 10_000, encoding="utf-8")
    persistence = GraphPersistence(path)

    persistence.write(persistence.dump(empty_graph()))

    assert json.loads(path.read_text(encoding="utf-8")) == empty_graph()


async def test_save_serializes_state_at_call_time(tmp_path: Path):
    path = tmp_path / "memory.json"
    persistence = GraphPersistence(path)
    graph = empty_graph()

    pending = persistence.save(graph)
    graph["entities"]["late"] = {"name": "late", "entityType": "t", "observations": [], "createdAt": "t"}
    assert await pending is True

    # the coroutine had not started yet, so the late mutation is included
    assert "late" in json.loads(path.read_text(encoding="utf-8"))["entities"]


def test_load_non_object_returns_none(tmp_path: Path):
    path = tmp_path / "memory.json"

    for content in ("[1, 2]", '"x"', "42", "null"):
        path.write_text(content, encoding="utf-8")
        assert GraphPersistence(path).load() is None


def test_failed_write_leaves_no_temp_files(tmp_path: Path, monkeypatch):
    path = tmp_path / "memory.json"
    persistence = GraphPersistence(path)

    def refuse(self, target):
        raise PermissionError("read-only target")

    monkeypatch.setattr(Path, "replace", refuse)

    assert persistence.write(persistence.dump(empty_graph())) is False
    assert list(tmp_path.iterdir()) == []


def test_cleanup_failure_is_swallowed(tmp_path: Path, monkeypatch):
    persistence = GraphPersistence(tmp_path / "memory.json")

    def refuse(self, *args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(Path, "replace", refuse)
    monkeypatch.setattr(Path, "unlink", refuse)

    assert persistence.write(persistence.dump(empty_graph())) is False


async def test_overlapping_saves_land_in_call_order(tmp_path: Path):
    path = tmp_path / "memory.json"
    persistence = GraphPersistence(path)
    graph = empty_graph()
    snapshots = []

    for i in range(20):
        graph["entities"][f"e{i}"] = {
            "name": f"e{i}", "entityType": "t", "observations": ["x" * 2000], "createdAt": "t",
        }
        snapshots.append(persistence.save(graph))
        # a save serializes when its task starts, so later rounds mutate a copy
        graph = json.loads(persistence.dump(graph))

    assert all(await asyncio.gather(*snapshots))

    written = json.loads(path.read_text(encoding="utf-8"))
    assert list(written["entities"]) == [f"e{i}" for i in range(20)]
    assert [p.name for p in tmp_path.iterdir()] == ["memory.json"]
