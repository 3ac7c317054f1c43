"""Knowledge graph memory server with JSON snapshot persistence."""

from .config import MemoryConfig
from .core import SERVER_VERSION, GraphStore
from .dispatcher import Dispatcher

__version__ = SERVER_VERSION

__all__ = [
    "Dispatcher",
    "GraphStore",
    "MemoryConfig",
]
