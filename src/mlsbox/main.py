#!/usr/bin/env python3
"""Admin commands for the mlsbox databases."""
import argparse
import asyncio
import sys

from mlsbox.core.database import ClientDatabase, Database, ServerDatabase
from mlsbox.core.errors import StoreError


def _open(role: str, url: str | None) -> Database:
    if role == "client":
        return ClientDatabase(url=url)
    return ServerDatabase(url=url)


async def cmd_init(args) -> int:
    db = _open(args.role, args.url)
    try:
        await db.init()
    finally:
        await db.close()
    print(f"✅ {args.role} schema ready")
    return 0


async def cmd_stats(args) -> int:
    db = ServerDatabase(url=args.url)
    try:
        if args.recipient:
            print(f"📬 {args.recipient}: {await db.pending_count(args.recipient)} pending message(s)")
        if args.client_id:
            print(f"🔑 {args.client_id}: {await db.count_by_client(args.client_id)} key package(s)")
    finally:
        await db.close()
    return 0


async def cmd_purge(args) -> int:
    db = ServerDatabase(url=args.url)
    try:
        deleted = await db.purge_recipient(args.recipient)
    finally:
        await db.close()
    print(f"🗑️  {args.recipient}: {deleted} message(s) purged")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mlsbox", description="mlsbox store administration")
    parser.add_argument("--url", default=None, help="SQLAlchemy database URL (default: from environment)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_init = sub.add_parser("init", help="Create tables and indexes")
    p_init.add_argument("--role", choices=("server", "client"), default="server")
    p_init.set_defaults(func=cmd_init)

    p_stats = sub.add_parser("stats", help="Show queue and key package counts")
    p_stats.add_argument("--recipient", help="Mailbox to count")
    p_stats.add_argument("--client-id", help="Client whose key packages to count")
    p_stats.set_defaults(func=cmd_stats)

    p_purge = sub.add_parser("purge", help="Delete every queued message of a recipient")
    p_purge.add_argument("recipient")
    p_purge.set_defaults(func=cmd_purge)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "stats" and not (args.recipient or args.client_id):
        parser.error("stats needs --recipient and/or --client-id")
    try:
        return asyncio.run(args.func(args))
    except StoreError as exc:
        print(f"❌ {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
