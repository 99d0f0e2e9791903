"""minvcs CLI entry points.

This module maps argparse subcommands onto engine calls and renders the
results as text. Core errors become exit code 1.
"""

from __future__ import annotations

import argparse
import itertools
import sys
from pathlib import Path
from typing import Sequence

from .config import MinvcsConfig
from .engine import MinvcsEngine
from .errors import MinvcsError
from .logging_config import configure_logging
from .model.blob import Blob
from .model.codec import StoredObject
from .model.tree import Tree
from .system import initialize_repository, require_managed_root


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="minvcs", description="Minimal content-addressed version control")
    parser.add_argument("--log-level", help="Override MINVCS_LOG_LEVEL for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init", help="Initialize a new repository in the current directory")

    store_parser = subparsers.add_parser("store", help="Store a file or directory and print its digest")
    store_parser.add_argument("path", type=Path)

    snap_parser = subparsers.add_parser("snap", help="Take a snapshot of the repository")
    snap_parser.add_argument("path", type=Path, nargs="?", help="Directory to record (default: repository root)")
    snap_parser.add_argument("-a", "--author", help="Author (default: MINVCS_AUTHOR)")
    snap_parser.add_argument("-m", "--comment", default="", help="Snapshot comment")

    cat_parser = subparsers.add_parser("cat", help="Print an object specified by its digest")
    cat_parser.add_argument("digest")

    log_parser = subparsers.add_parser("log", help="Print snapshot history from the head")
    log_parser.add_argument("-n", "--max-count", type=_non_negative_int, default=None, help="Limit the number of snapshots")

    verify_parser = subparsers.add_parser("verify", help="Verify a snapshot and its history")
    verify_parser.add_argument("digest", nargs="?", help="Snapshot digest (default: head)")

    return parser


def _non_negative_int(raw_value: str) -> int:
    """Parse a count argument that must be zero or greater."""
    try:
        value = int(raw_value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"invalid count: {raw_value!r}") from error
    if value < 0:
        raise argparse.ArgumentTypeError(f"count must not be negative: {raw_value}")
    return value


def main(argv: Sequence[str] | None = None) -> int:
    """Run the minvcs CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = MinvcsConfig.from_env()
        configure_logging(args.log_level or config.log_level, config.log_format)
        return _dispatch(args, config)
    except MinvcsError as error:
        print(f"minvcs: {error}", file=sys.stderr)
        return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


def _dispatch(args: argparse.Namespace, config: MinvcsConfig) -> int:
    if args.command == "init":
        return _run_init_command()

    engine = MinvcsEngine(require_managed_root(Path.cwd()), config)
    if args.command == "store":
        print(engine.store_path(args.path))
        return 0
    if args.command == "snap":
        print(engine.snapshot(args.path, author=args.author, comment=args.comment))
        return 0
    if args.command == "cat":
        print(render_object(args.digest, engine.get_object(args.digest)), end="")
        return 0
    if args.command == "log":
        return _run_log_command(engine, args.max_count)
    if args.command == "verify":
        return _run_verify_command(engine, args.digest)
    raise AssertionError(f"Unsupported command: {args.command}")


def _run_init_command() -> int:
    root = initialize_repository(Path.cwd())
    print(f"Initialized empty minvcs repository in {root}")
    return 0


def _run_log_command(engine: MinvcsEngine, max_count: int | None) -> int:
    for digest, snapshot in itertools.islice(engine.history(), max_count):
        print(f"snapshot {digest}")
        print(f"Author: {snapshot.author}")
        print(f"Tree:   {snapshot.tree}")
        print()
        for line in snapshot.comment.splitlines():
            print(f"    {line}")
        print()
    return 0


def _run_verify_command(engine: MinvcsEngine, digest: str | None) -> int:
    result = engine.verify_snapshot(digest)
    if result["valid"]:
        print("ok")
        return 0
    for message in result["errors"]:
        print(message, file=sys.stderr)
    return 1


def render_object(digest: str, obj: StoredObject) -> str:
    """Render a stored object for humans.

    Args:
        digest: Digest the object was retrieved by.
        obj: Decoded object.

    Returns:
        Multi-line text ending in a newline.
    """
    if isinstance(obj, Blob):
        body = obj.data.decode("utf-8", errors="replace")
        return f"file {digest}\n{body}\n"
    if isinstance(obj, Tree):
        lines = [f"directory {digest}"]
        lines.extend(f"{entry.digest} {entry.name}" for entry in obj.entries)
        return "\n".join(lines) + "\n"
    lines = [f"snapshot {digest}", f"tree {obj.tree}", f"author {obj.author}"]
    lines.extend(f"parent {parent}" for parent in obj.parents)
    return "\n".join(lines) + "\n\n" + obj.comment + "\n"
