"""
Command-line interface for the link store.

Usage:
    linkstore save <url> [--ttl SECONDS]
    linkstore lookup <key>
    linkstore info <key>
    linkstore health

The backend is taken from the same environment variables as the server
(BACKEND, REDIS_URL, POSTGRES_URL) unless given on the command line.
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from config import Config
from .common.logging_config import setup_logging
from .database.factory import create_backend
from .errors import LinkStoreError
from .store import LinkStore


class LinkStoreCLI:
    """Command-line interface for the link store."""
    
    def __init__(self, config: Config, verbose: bool = False):
        self.config = config
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.store: Optional[LinkStore] = None
    
    def initialize(self, store: Optional[LinkStore] = None):
        """Create the backend and store unless a store is given."""
        self.store = store or LinkStore(
            backend=create_backend(self.config, logger=self.logger),
            max_url_length=self.config.max_url_length,
            operation_timeout=self.config.operation_timeout_seconds,
            logger=self.logger,
        )
    
    async def cleanup(self):
        if self.store:
            await self.store.close()
    
    def _ok(self, **fields) -> int:
        print(json.dumps({"success": True, **fields}, indent=2))
        return 0
    
    def _fail(self, error: Exception) -> int:
        print(json.dumps({
            "success": False,
            "error": type(error).__name__,
            "message": str(error),
        }, indent=2), file=sys.stderr)
        return 1
    
    async def save(self, url: str, ttl: int = 0) -> int:
        try:
            key = await self.store.save(url, ttl)
        except LinkStoreError as e:
            return self._fail(e)
        return self._ok(key=key, url=url)
    
    async def lookup(self, key: str) -> int:
        try:
            url = await self.store.lookup(key)
        except LinkStoreError as e:
            return self._fail(e)
        return self._ok(key=key, url=url)
    
    async def info(self, key: str) -> int:
        try:
            info = await self.store.info(key)
        except LinkStoreError as e:
            return self._fail(e)
        return self._ok(key=key, **info.to_dict())
    
    async def health(self) -> int:
        healthy = await self.store.health_check()
        print(json.dumps({
            "success": healthy,
            "backend": self.store.backend.name,
        }, indent=2))
        return 0 if healthy else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkstore",
        description="Link store CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --backend redis save https://example.org --ttl 3600
  %(prog)s --backend redis lookup Ag
  %(prog)s --backend redis info Ag
        """
    )
    
    parser.add_argument("--backend", help="Backend: memory, redis or postgres (default: from BACKEND env)")
    parser.add_argument("--redis-url", help="Redis connection URL (default: from REDIS_URL env)")
    parser.add_argument("--postgres-url", help="PostgreSQL connection URL (default: from POSTGRES_URL env)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")
    
    save_parser = subparsers.add_parser("save", help="Save a URL")
    save_parser.add_argument("url", help="URL to save")
    save_parser.add_argument("--ttl", type=int, default=0, help="Seconds to live (0 = never expires)")
    
    lookup_parser = subparsers.add_parser("lookup", help="Resolve a key (counts a click)")
    lookup_parser.add_argument("key", help="Key to resolve")
    
    info_parser = subparsers.add_parser("info", help="Show link information")
    info_parser.add_argument("key", help="Key to describe")
    
    subparsers.add_parser("health", help="Check backend health")
    
    return parser


async def run(args: argparse.Namespace, store: Optional[LinkStore] = None) -> int:
    """Execute a parsed command."""
    overrides = {
        name: value
        for name, value in (
            ("backend", args.backend),
            ("redis_url", args.redis_url),
            ("postgres_url", args.postgres_url),
        )
        if value is not None
    }
    cli = LinkStoreCLI(Config(**overrides), verbose=args.verbose)
    cli.initialize(store)
    
    try:
        if args.command == "save":
            return await cli.save(args.url, args.ttl)
        elif args.command == "lookup":
            return await cli.lookup(args.key)
        elif args.command == "info":
            return await cli.info(args.key)
        return await cli.health()
    finally:
        await cli.cleanup()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    
    if not args.command:
        parser.print_help()
        return 1
    
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
