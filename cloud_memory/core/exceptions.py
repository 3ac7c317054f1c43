"""Custom exceptions for knowledge graph memory operations."""


class MemoryServerError(Exception):
    """Base exception for memory server operations."""
    pass


class UnknownToolError(MemoryServerError):
    """Raised when a tool is not known or not enabled in the active profile."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class UnknownResourceError(MemoryServerError):
    """Raised when a resource URI is not served."""
    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"Unknown resource: {uri}")


class UnknownMethodError(MemoryServerError):
    """Raised when a JSON-RPC method is not supported."""
    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Unknown method: {method}")


class MissingArgumentError(MemoryServerError):
    """Raised when a tool call lacks a required argument."""
    def __init__(self, tool: str, field: str):
        self.tool = tool
        self.field = field
        super().__init__(f"Missing required argument '{field}' for tool {tool}")


class ConfigError(MemoryServerError):
    """Raised for invalid configuration values."""
    pass
