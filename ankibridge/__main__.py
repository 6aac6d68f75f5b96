"""
ankibridge CLI entry point.

Runs the MCP server on stdio by default, plus a few utility commands for
checking configuration and connectivity.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from ankibridge import __version__
from ankibridge.anki import AnkiConnectClient, AnkiConnectError
from ankibridge.config.logging import get_logger, setup_logging
from ankibridge.config.settings import Settings, load_settings
from ankibridge.server import BridgeServer


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog="ankibridge",
        description="MCP server that creates Anki notes through AnkiConnect",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"ankibridge {__version__}",
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to .env file (default: .env in current directory)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging level from config",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "serve",
        help="Run the MCP server on stdio (default)",
    )

    subparsers.add_parser(
        "tools",
        help="Print the advertised tool descriptors as JSON",
    )

    subparsers.add_parser(
        "ping",
        help="Check that AnkiConnect is reachable",
    )

    subparsers.add_parser(
        "config",
        help="Show current configuration",
    )

    return parser


def cmd_config(settings: Settings) -> int:
    """Show current configuration."""
    logger = get_logger(__name__)

    logger.info("\n=== ankibridge Configuration ===\n")
    logger.info(f"Log Level: {settings.log_level}")
    logger.info(f"Log File: {settings.log_file or 'None (console only)'}")
    logger.info(f"\nAnkiConnect URL: {settings.anki.url}")
    logger.info(f"\nServer Name: {settings.server.name}")
    logger.info(f"Server Version: {settings.server.version}")

    return 0


async def cmd_tools(settings: Settings) -> int:
    """Print tool descriptors as JSON on stdout."""
    async with BridgeServer(settings) as bridge:
        descriptors = [d.model_dump(by_alias=True) for d in bridge.list_tools()]

    print(json.dumps(descriptors, indent=2))
    return 0


async def cmd_ping(settings: Settings) -> int:
    """Call AnkiConnect's version action to confirm Anki is reachable."""
    logger = get_logger(__name__)
    client = AnkiConnectClient.from_settings(settings.anki)

    try:
        api_version = await client.invoke("version")
    except AnkiConnectError as e:
        logger.error(f"AnkiConnect not reachable: {e}")
        return 1

    logger.info(f"AnkiConnect reachable at {client.url} (API version {api_version})")
    return 0


async def cmd_serve(settings: Settings) -> int:
    """Run the MCP server until stdin closes."""
    async with BridgeServer(settings) as bridge:
        await bridge.serve_stdio()
    return 0


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    # Load settings
    try:
        settings = load_settings(env_file=args.env_file)
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    # Override log level if specified
    if args.log_level:
        settings.log_level = args.log_level

    setup_logging(settings)

    if args.command == "config":
        return cmd_config(settings)
    elif args.command == "tools":
        return asyncio.run(cmd_tools(settings))
    elif args.command == "ping":
        return asyncio.run(cmd_ping(settings))

    # Default: serve
    try:
        return asyncio.run(cmd_serve(settings))
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
