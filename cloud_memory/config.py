"""Server configuration."""

import os
from dataclasses import dataclass
from pathlib import Path

from .core import (
    DEFAULT_HOST,
    DEFAULT_MEMORY_FILE,
    DEFAULT_PORT,
    DEFAULT_PROFILE,
    DEFAULT_TRANSPORT,
    PROFILE_RESOURCES,
    PROFILE_SEARCH_RELATIONS,
    PROFILE_TOOLS,
    ConfigError,
    validate_profile,
    validate_transport,
)

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


def parse_flag(value: str | None) -> bool | None:
    """Parse an optional boolean environment value. Empty or unset means None."""
    if value is None or not value.strip():
        return None
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean value '{value}'")


@dataclass(frozen=True)
class MemoryConfig:
    """Memory server configuration."""
    memory_file: Path = Path(DEFAULT_MEMORY_FILE)
    transport: str = DEFAULT_TRANSPORT
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    profile: str = DEFAULT_PROFILE
    search_relations: bool | None = None  # None follows the profile
    log_level: str = "INFO"

    def __post_init__(self):
        validate_transport(self.transport)
        validate_profile(self.profile)

    @classmethod
    def from_env(cls) -> "MemoryConfig":
        """Create configuration from environment variables."""
        try:
            port = int(os.getenv("PORT", str(DEFAULT_PORT)))
        except ValueError as e:
            raise ConfigError(f"Invalid PORT: {e}") from e

        return cls(
            memory_file=Path(os.getenv("MEMORY_FILE_PATH", DEFAULT_MEMORY_FILE)),
            transport=os.getenv("MEMORY_TRANSPORT", DEFAULT_TRANSPORT).lower(),
            host=os.getenv("HOST", DEFAULT_HOST),
            port=port,
            profile=os.getenv("MEMORY_PROFILE", DEFAULT_PROFILE).lower(),
            search_relations=parse_flag(os.getenv("MEMORY_SEARCH_RELATIONS")),
            log_level=os.getenv("MEMORY_LOG_LEVEL", "INFO").upper(),
        )

    @property
    def enabled_tools(self) -> tuple[str, ...]:
        return PROFILE_TOOLS[self.profile]

    @property
    def resources_enabled(self) -> bool:
        return PROFILE_RESOURCES[self.profile]

    @property
    def relation_search_enabled(self) -> bool:
        if self.search_relations is None:
            return PROFILE_SEARCH_RELATIONS[self.profile]
        return self.search_relations
