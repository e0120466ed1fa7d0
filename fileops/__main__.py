"""
Command-line entry point for the file operations server.

Usage:
    fileops-server [--host HOST] [--port PORT] [--config PATH]
    python -m fileops --config ./config.yaml
"""

from __future__ import annotations

import argparse
import os
import sys

import uvicorn


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="fileops-server", description=__doc__.splitlines()[1])
    parser.add_argument("--host", default=os.environ.get("FILEOPS_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.environ.get("FILEOPS_PORT", "8000")))
    parser.add_argument("--config", help="Path to config.yaml (overrides CONFIG_PATH)")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.config:
        if not os.path.exists(args.config):
            print(f"Configuration file not found: {args.config}", file=sys.stderr)
            return 1
        os.environ["CONFIG_PATH"] = args.config

    uvicorn.run(
        "fileops.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
