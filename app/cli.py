from __future__ import annotations

import argparse
import json

from app.core.config import get_settings
from app.core.logging import configure_logging
from app.demo import seed_orders
from app.persistence.pg import init_db, session_scope


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Order Management CLI")
    parser.add_argument("--log-level", default=None, help="Override OM_LOG_LEVEL")
    top = parser.add_subparsers(dest="command", required=True)

    top.add_parser("init-db", help="Create tables and indexes")

    seed = top.add_parser("seed", help="Create the demo order set")
    seed.add_argument("--seed", type=int, default=None, help="Random seed (default: OM_DEMO_SEED)")
    seed.add_argument("--force", action="store_true", help="Seed even if orders already exist")

    return parser


def _init_db(_: argparse.Namespace) -> int:
    init_db()
    print(json.dumps({"status": "ok"}))
    return 0


def _seed(args: argparse.Namespace) -> int:
    init_db()
    seed = args.seed if args.seed is not None else get_settings().demo_seed
    with session_scope() as session:
        result = seed_orders(session, seed=seed, force=args.force)
    print(json.dumps(result, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "init-db":
        return _init_db(args)
    if args.command == "seed":
        return _seed(args)

    parser.error("unsupported command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
