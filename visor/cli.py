"""Operator command line for the Visor core services."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from .config import AppSettings, load_settings
from .connections import DemoConnector
from .context import create_context
from .errors import VisorError, handle_error
from .images import ImageDimensions, get_image_size
from .utils.merge import deep_merge
from .utils.query import form_url_query, remove_keys_from_query


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="visor", description="Visor core utilities.")
    parser.add_argument("--log-level", help="Override the configured log level.")
    commands = parser.add_subparsers(dest="command", required=True)

    check = commands.add_parser("check", help="Connect to the database once and report the result.")
    check.add_argument("--database-url", help="Connection target (overrides settings and environment).")
    check.add_argument("--demo", action="store_true", help="Use the offline demo connector.")

    merge = commands.add_parser("merge", help="Deep-merge two JSON records; BASE values win.")
    merge.add_argument("base", type=Path)
    merge.add_argument("override", type=Path, nargs="?")

    query = commands.add_parser("query", help="Edit a URL query string.")
    query_commands = query.add_subparsers(dest="query_command", required=True)
    set_cmd = query_commands.add_parser("set", help="Set one key.")
    set_cmd.add_argument("params")
    set_cmd.add_argument("key")
    set_cmd.add_argument("value")
    set_cmd.add_argument("--path")
    remove_cmd = query_commands.add_parser("remove", help="Remove keys.")
    remove_cmd.add_argument("params")
    remove_cmd.add_argument("keys", nargs="+")
    remove_cmd.add_argument("--path")

    size = commands.add_parser("image-size", help="Resolve the rendered size of an image.")
    size.add_argument("type")
    size.add_argument("--width", type=int)
    size.add_argument("--height", type=int)
    size.add_argument("--aspect-ratio")
    size.add_argument("--dimension", choices=("width", "height"), default="width")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    if args.log_level:
        settings = settings.with_log_level(args.log_level)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.command == "check":
            return _check(settings, args)
        if args.command == "merge":
            return _merge(args)
        if args.command == "query":
            return _query(args)
        return _image_size(args)
    except VisorError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


def _check(settings: AppSettings, args: argparse.Namespace) -> int:
    if args.database_url:
        settings = settings.with_database_url(args.database_url)
        environ: dict[str, str] | None = {}
    else:
        environ = None
    connector = DemoConnector() if args.demo else None
    context = create_context(settings, connector=connector, environ=environ)

    async def _run() -> None:
        async with context:
            await context.get_connection()

    asyncio.run(_run())
    print("Connected")
    return 0


def _merge(args: argparse.Namespace) -> int:
    base = _load_record(args.base)
    override = _load_record(args.override) if args.override else None
    print(json.dumps(deep_merge(base, override), indent=2, sort_keys=True))
    return 0


def _query(args: argparse.Namespace) -> int:
    if args.query_command == "set":
        print(form_url_query(args.params, args.key, args.value, path=args.path))
    else:
        print(remove_keys_from_query(args.params, args.keys, path=args.path))
    return 0


def _image_size(args: argparse.Namespace) -> int:
    image = ImageDimensions(width=args.width, height=args.height, aspect_ratio=args.aspect_ratio)
    print(get_image_size(args.type, image, args.dimension))
    return 0


def _load_record(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        handle_error(exc)
    if not isinstance(data, dict):
        handle_error(f"{path} does not contain a JSON object")
    return data


__all__ = ["build_parser", "main"]
