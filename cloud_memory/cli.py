"""
Command line entry point for the memory server.

Usage:
    cloud-memory [--transport {websocket,stdio}] [--port PORT] [--host HOST]
                 [--profile {full,reduced}] [--memory-file PATH] [--log-level LEVEL]

Environment variables:
    MEMORY_FILE_PATH: Snapshot file (default: ./memory.json)
    MEMORY_TRANSPORT: websocket or stdio (default: websocket)
    HOST: WebSocket bind host (default: 0.0.0.0)
    PORT: WebSocket port (default: 3000)
    MEMORY_PROFILE: full or reduced tool surface (default: full)
    MEMORY_SEARCH_RELATIONS: match relations in search_nodes (default: on for full, off for reduced)
    MEMORY_LOG_LEVEL: Logging level (default: INFO)
"""

import argparse
import asyncio
import logging
import os
import sys

from .config import MemoryConfig
from .core import PROFILES, TRANSPORTS, ConfigError, GraphStore
from .dispatcher import Dispatcher

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Knowledge graph memory server")
    parser.add_argument("--transport", choices=TRANSPORTS, default=None, help="Transport (default: websocket)")
    parser.add_argument("--port", type=int, default=None, help="WebSocket port (default: 3000)")
    parser.add_argument("--host", default=None, help="WebSocket host (default: 0.0.0.0)")
    parser.add_argument("--profile", choices=PROFILES, default=None, help="Tool surface (default: full)")
    parser.add_argument("--memory-file", default=None, help="Snapshot file (default: ./memory.json)")
    parser.add_argument("--log-level", default=None, help="Log level (default: INFO)")
    return parser


def apply_args(args: argparse.Namespace):
    """Set environment variables from args if provided."""
    if args.transport:
        os.environ["MEMORY_TRANSPORT"] = args.transport
    if args.port:
        os.environ["PORT"] = str(args.port)
    if args.host:
        os.environ["HOST"] = args.host
    if args.profile:
        os.environ["MEMORY_PROFILE"] = args.profile
    if args.memory_file:
        os.environ["MEMORY_FILE_PATH"] = args.memory_file
    if args.log_level:
        os.environ["MEMORY_LOG_LEVEL"] = args.log_level.upper()


def configure_logging(level: str):
    """Log to stderr; stdout belongs to the stdio transport."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )


async def build_dispatcher(config: MemoryConfig) -> Dispatcher:
    """Load the store once and hand it to a dispatcher for the configured profile."""
    store = GraphStore(config.memory_file, search_relations=config.relation_search_enabled)
    await store.load()
    return Dispatcher.from_config(store, config)


async def run(config: MemoryConfig):
    dispatcher = await build_dispatcher(config)

    if config.transport == "stdio":
        from . import stdio
        await stdio.serve(dispatcher)
    else:
        from . import ws
        await ws.serve(dispatcher, config.host, config.port, config.log_level)


def main(argv: list[str] | None = None):
    """Start the server."""
    parser = build_parser()
    args = parser.parse_args(argv)
    apply_args(args)

    try:
        config = MemoryConfig.from_env()
    except ConfigError as e:
        parser.error(str(e))

    configure_logging(config.log_level)
    logger.info(f"Starting memory server: transport={config.transport}, profile={config.profile}")

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Error starting server: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
