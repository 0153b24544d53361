#!/usr/bin/env python3
"""
manage.py - project management entry point

Usage:
    python manage.py                    # start the web server (default)
    python manage.py web                # start the web server
    python manage.py web --port 9000    # start on a given port
    python manage.py web --store dynamodb
    python manage.py init-db            # create the SQLite task table
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import Optional


def setup_environment(
    store: Optional[str] = None,
    db_path: Optional[Path] = None,
    log_level: Optional[str] = None,
) -> None:
    """Push CLI overrides into the environment before the app config loads"""
    if store:
        os.environ["TASKS_STORE_BACKEND"] = store
    if db_path:
        os.environ["TASKS_DB_PATH"] = str(db_path)
    if log_level:
        os.environ["TASKS_LOG_LEVEL"] = log_level.upper()


def print_config_summary(config) -> None:
    """Print configuration summary"""
    print("=" * 50)
    print("  Configuration")
    print("=" * 50)
    print(f"  Store backend: {config.store_backend}")
    if config.store_backend == "sqlite":
        print(f"  SQLite file: {config.db_path}")
    else:
        print(f"  DynamoDB table: {config.table_name}")
        print(f"  AWS region: {config.aws_region or '(default)'}")
        if config.dynamodb_endpoint_url:
            print(f"  Endpoint: {config.dynamodb_endpoint_url}")
    timeout = f"{config.request_timeout}s" if config.request_timeout else "none"
    print(f"  Request timeout: {timeout}")
    print(f"  Rate limit: {config.rate_limit}")
    print(f"  Log level: {config.log_level}")
    print("=" * 50)


def run_web_server(host: str, port: int, debug: bool = False) -> None:
    """Start the web server"""
    import uvicorn
    from backend.src.web.config import config

    print("\n" + "=" * 50)
    print("  Task API Web Server")
    print("=" * 50)
    print_config_summary(config)

    print("\n[Starting] Launching server...")
    print(f"  URL: http://{host}:{port}/api/tasks")
    print(f"  Debug: {'ON' if debug else 'OFF'}")
    print("\nPress Ctrl+C to stop.\n")

    try:
        uvicorn.run(
            "backend.src.web.main:app",
            host=host,
            port=port,
            reload=debug,
            log_level=config.log_level.lower(),
        )
    except KeyboardInterrupt:
        print("\n\n[INFO] Web server stopped")


def init_db() -> int:
    """Create the SQLite task table"""
    from backend.src.db import SqliteTaskStore
    from backend.src.web.config import config

    async def _init() -> None:
        store = SqliteTaskStore.from_path(config.db_path)
        await store.open()
        await store.close()

    asyncio.run(_init())
    print(f"[OK] Task table ready: {config.db_path}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Task API - management entry point",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python manage.py                           # start the web server
  python manage.py web --port 9000           # start on port 9000
  python manage.py web --store dynamodb      # serve from DynamoDB
  python manage.py init-db --db-path data/tasks.db
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="available commands")

    parser_web = subparsers.add_parser("web", help="start the web server")
    parser_web.add_argument("--host", default=None, help="bind address")
    parser_web.add_argument("--port", type=int, default=None, help="bind port")
    parser_web.add_argument("--debug", action="store_true", help="enable auto-reload")
    parser_web.add_argument("--store", choices=["sqlite", "dynamodb"], help="task store backend")
    parser_web.add_argument("--db-path", type=Path, help="SQLite file path")
    parser_web.add_argument("--log-level", help="log level (INFO, DEBUG, ...)")

    parser_init = subparsers.add_parser("init-db", help="create the SQLite task table")
    parser_init.add_argument("--db-path", type=Path, help="SQLite file path")

    args = parser.parse_args()

    if args.command == "init-db":
        setup_environment(db_path=args.db_path)
        return init_db()

    if args.command in (None, "web"):
        setup_environment(
            store=getattr(args, "store", None),
            db_path=getattr(args, "db_path", None),
            log_level=getattr(args, "log_level", None),
        )
        from backend.src.web.config import config

        run_web_server(
            host=getattr(args, "host", None) or config.host,
            port=getattr(args, "port", None) or config.port,
            debug=getattr(args, "debug", False) or config.debug,
        )
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\nExited")
        sys.exit(0)
