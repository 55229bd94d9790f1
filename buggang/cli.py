#!/usr/bin/env python3
"""
Bug Gang Scheduler: command-line entry point

Usage:
    buggang seed                 # seed default tasks if the table is empty
    buggang seed --force         # append the sample task set regardless
    buggang reset                # delete every task
    buggang show --view list     # print the list (or board) projection
    buggang serve --port 3000    # run the JSON API

Global options:
    --db PATH        database file (overrides config and BUGGANG_DB)
    --config PATH    YAML config file
    --verbose        debug logging
"""
import argparse
import logging
import sys
from typing import List, Optional

from .adapter import SQLiteTaskAdapter
from .config import Config, expand_db_path
from .errors import BugGangError, StorageUnavailable
from .seeding import DEFAULT_TASKS, reset_database, seed_database
from .store import TaskStore
from .views import TaskViewController, ViewMode

logger = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [buggang] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def _open(cfg: Config) -> SQLiteTaskAdapter:
    print("📋 Initializing database connection...")
    adapter = SQLiteTaskAdapter(cfg.db_path)
    adapter.initialize()
    print(f"✅ Database connected: {cfg.db_path}\n")
    return adapter


def cmd_seed(cfg: Config, args: argparse.Namespace) -> int:
    print("🚀 Starting database seeding...\n")
    try:
        adapter = _open(cfg)
    except StorageUnavailable as e:
        print(f"❌ Seeding failed: {e}")
        return 1
    try:
        report = seed_database(adapter, DEFAULT_TASKS, force=args.force)
    except BugGangError as e:
        print(f"❌ Seeding failed: {e}")
        return 1
    finally:
        adapter.close()
        print("🔐 Database connection closed.")
    if not report.ok:
        print(f"\n❌ Seeding finished with {report.failed} errors")
        return 1
    print("\n🎉 Database seeding completed successfully!")
    return 0


def cmd_reset(cfg: Config, args: argparse.Namespace) -> int:
    print("🧹 Resetting database...\n")
    try:
        adapter = _open(cfg)
    except StorageUnavailable as e:
        print(f"❌ Reset failed: {e}")
        return 1
    try:
        ok = reset_database(adapter)
    except BugGangError as e:
        print(f"❌ Reset failed: {e}")
        return 1
    finally:
        adapter.close()
        print("🔐 Database connection closed.")
    return 0 if ok else 1


def cmd_show(cfg: Config, args: argparse.Namespace) -> int:
    try:
        with SQLiteTaskAdapter(cfg.db_path) as adapter:
            store = TaskStore.from_tasks(adapter.select_all())
    except StorageUnavailable as e:
        print(f"❌ {e}")
        return 1
    mode = ViewMode.from_str(args.view or cfg.default_view)
    print(TaskViewController(store, mode).render_text())
    return 0


def cmd_serve(cfg: Config, args: argparse.Namespace) -> int:
    from .server import create_app

    if args.host:
        cfg.host = args.host
    if args.port:
        cfg.port = args.port
    try:
        adapter = SQLiteTaskAdapter(cfg.db_path)
        adapter.initialize()
    except StorageUnavailable as e:
        print(f"❌ {e}")
        return 1
    try:
        app = create_app(cfg, adapter)
        print(f"Bug Gang Scheduler API on http://{cfg.host}:{cfg.port} (db: {cfg.db_path})")
        # one request at a time: the task store is single-writer
        app.run(host=cfg.host, port=cfg.port, threaded=False)
    finally:
        adapter.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="buggang",
        description="Bug Gang Scheduler: task board maintenance and API",
    )
    ap.add_argument("--db", default=None, help="Path to the task database")
    ap.add_argument("--config", default=None, help="Path to buggang.yaml")
    ap.add_argument("--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    seed = sub.add_parser("seed", help="Seed default tasks if the database is empty")
    seed.add_argument("--force", action="store_true",
                      help="Append the sample task set even if tasks exist")
    seed.set_defaults(func=cmd_seed)

    reset = sub.add_parser("reset", help="Delete every task")
    reset.set_defaults(func=cmd_reset)

    show = sub.add_parser("show", help="Print tasks as a list or board")
    show.add_argument("--view", choices=[m.value for m in ViewMode], default=None)
    show.set_defaults(func=cmd_show)

    serve = sub.add_parser("serve", help="Run the JSON API")
    serve.add_argument("--host", default=None,
                       help="Bind address (use 0.0.0.0 to expose on network)")
    serve.add_argument("--port", type=int, default=None)
    serve.set_defaults(func=cmd_serve)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = Config.load(args.config)
    except BugGangError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    if args.db:
        cfg.db_path = expand_db_path(args.db)
    _setup_logging("DEBUG" if args.verbose else cfg.log_level)
    return args.func(cfg, args)


if __name__ == "__main__":
    sys.exit(main())
