"""Command line driver for vault storage providers (testing only).

Usage:
  MS_ACCESS_TOKEN=... python -m vaultsync.cli stat /drive/root:/Passwords.kdbx
  python -m vaultsync.cli save /drive/root:/Passwords.kdbx local.kdbx --rev '"{...},2"'

The access token is never printed.
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from uuid import uuid4

from vaultsync.errors import RevisionConflictError, StorageError
from vaultsync.integrations.onedrive_client import TokenAuth
from vaultsync.monitoring.context import set_request_context
from vaultsync.storage.registry import get_provider_by_name, list_providers


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Vault storage CLI (testing only)")
    parser.add_argument("action", choices=["path", "stat", "load", "save", "list", "mkdir", "remove"])
    parser.add_argument("target", nargs="?", default=None, help="provider path, or file name for 'path'")
    parser.add_argument("local_path", nargs="?", default=None)
    parser.add_argument("--rev", default=None, help="expected revision for 'save'")
    parser.add_argument("--provider", default="onedrive", choices=list_providers())
    return parser


async def run(args: argparse.Namespace) -> int:
    set_request_context(request_id=str(uuid4()), provider=args.provider)
    storage = get_provider_by_name(args.provider, TokenAuth())
    if args.action != "list" and not args.target:
        raise SystemExit(f"{args.action} requires target")
    try:
        if args.action == "path":
            print(storage.path_for_name(args.target))
        elif args.action == "stat":
            print((await storage.stat(args.target)).rev)
        elif args.action == "load":
            if not args.local_path:
                raise SystemExit("load requires local_path")
            res = await storage.load(args.target)
            Path(args.local_path).write_bytes(res.data)
            print(res.rev)
        elif args.action == "save":
            if not args.local_path:
                raise SystemExit("save requires local_path")
            res = await storage.save(args.target, Path(args.local_path).read_bytes(), rev=args.rev)
            print(res.rev)
        elif args.action == "list":
            for entry in await storage.list(args.target):
                print(f"{'d' if entry.is_directory else '-'} {entry.path} {entry.rev or ''}")
        elif args.action == "mkdir":
            await storage.mkdir(args.target)
        elif args.action == "remove":
            await storage.remove(args.target)
    except RevisionConflictError as exc:
        print(f"conflict: server revision is {exc.rev}", file=sys.stderr)
        return 2
    except StorageError as exc:
        print(f"{type(exc).__name__}: {exc.message}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
