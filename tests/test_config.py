"""Tests for environment configuration, CLI overrides and request framing."""

import json
from pathlib import Path

import pytest

from cloud_memory.cli import apply_args, build_parser
from cloud_memory.config import MemoryConfig, parse_flag
from cloud_memory.core import ConfigError
from cloud_memory.rpc import InvalidRequestError, RPCRequest

ENV_VARS = (
    "MEMORY_FILE_PATH",
    "MEMORY_TRANSPORT",
    "HOST",
    "PORT",
    "MEMORY_PROFILE",
    "MEMORY_SEARCH_RELATIONS",
    "MEMORY_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    # setenv first so monkeypatch undoes what apply_args writes to os.environ
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


# =============================================================================
# MemoryConfig
# =============================================================================


class TestFromEnv:
    def test_defaults(self):
        config = MemoryConfig.from_env()

        assert config.memory_file == Path("./memory.json")
        assert config.transport == "websocket"
        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.profile == "full"
        assert config.search_relations is None
        assert config.log_level == "INFO"

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("MEMORY_FILE_PATH", str(tmp_path / "graph.json"))
        monkeypatch.setenv("MEMORY_TRANSPORT", "STDIO")
        monkeypatch.setenv("PORT", "8123")
        monkeypatch.setenv("MEMORY_PROFILE", "reduced")
        monkeypatch.setenv("MEMORY_LOG_LEVEL", "debug")

        config = MemoryConfig.from_env()

        assert config.memory_file == tmp_path / "graph.json"
        assert config.transport == "stdio"
        assert config.port == 8123
        assert config.profile == "reduced"
        assert config.log_level == "DEBUG"

    def test_invalid_port(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PORT", "eighty")

        with pytest.raises(ConfigError, match="PORT"):
            MemoryConfig.from_env()

    def test_invalid_profile(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("MEMORY_PROFILE", "tiny")

        with pytest.raises(ConfigError):
            MemoryConfig.from_env()

    def test_invalid_transport(self):
        with pytest.raises(ConfigError):
            MemoryConfig(transport="carrier-pigeon")


class TestProfileSettings:
    def test_full_profile(self):
        config = MemoryConfig()

        assert len(config.enabled_tools) == 5
        assert config.resources_enabled is True
        assert config.relation_search_enabled is True

    def test_reduced_profile(self):
        config = MemoryConfig(profile="reduced")

        assert config.enabled_tools == ("create_entities", "search_nodes", "read_graph")
        assert config.resources_enabled is False
        assert config.relation_search_enabled is False

    def test_relation_search_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("MEMORY_PROFILE", "reduced")
        monkeypatch.setenv("MEMORY_SEARCH_RELATIONS", "yes")

        assert MemoryConfig.from_env().relation_search_enabled is True
        assert MemoryConfig(search_relations=False).relation_search_enabled is False


class TestParseFlag:
    @pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
    def test_true_values(self, value: str):
        assert parse_flag(value) is True

    @pytest.mark.parametrize("value", ["0", "False", "no", "off"])
    def test_false_values(self, value: str):
        assert parse_flag(value) is False

    def test_unset_is_none(self):
        assert parse_flag(None) is None
        assert parse_flag("  ") is None

    def test_invalid_value(self):
        with pytest.raises(ConfigError, match="maybe"):
            parse_flag("maybe")


# =============================================================================
# CLI
# =============================================================================


class TestCli:
    def test_args_override_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PORT", "9000")
        args = build_parser().parse_args([
            "--transport", "stdio",
            "--port", "4000",
            "--profile", "reduced",
            "--memory-file", "/tmp/graph.json",
            "--log-level", "warning",
        ])

        apply_args(args)
        config = MemoryConfig.from_env()

        assert config.transport == "stdio"
        assert config.port == 4000
        assert config.profile == "reduced"
        assert config.memory_file == Path("/tmp/graph.json")
        assert config.log_level == "WARNING"

    def test_no_args_leaves_environment(self):
        apply_args(build_parser().parse_args([]))

        assert MemoryConfig.from_env() == MemoryConfig()

    def test_rejects_unknown_profile(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--profile", "tiny"])


# =============================================================================
# Request framing
# =============================================================================


class TestRPCRequest:
    def test_parse_request(self):
        request = RPCRequest.parse(json.dumps({"jsonrpc": "2.0", "id": "a", "method": "tools/list"}))

        assert request.method == "tools/list"
        assert request.id == "a"
        assert request.params == {}

    def test_params_must_be_object(self):
        with pytest.raises(InvalidRequestError) as exc_info:
            RPCRequest.parse(json.dumps({"id": 3, "method": "tools/call", "params": [1]}))

        assert exc_info.value.request_id == 3

    def test_unparseable(self):
        with pytest.raises(json.JSONDecodeError):
            RPCRequest.parse("{")
