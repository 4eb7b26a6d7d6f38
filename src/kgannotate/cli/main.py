from __future__ import annotations

import argparse
import logging

from rich.console import Console

from kgannotate.cli.commands import categories_cmd, generate_cmd, load_cmd
from kgannotate.cli.context import CLIContext
from kgannotate.core.errors import KgAnnotateError
from kgannotate.core.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kgannotate",
        description="Generate and load Dgraph mutations from entity annotation JSON",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)

    subparsers = parser.add_subparsers(dest="command", required=True)
    generate_cmd.register(subparsers)
    load_cmd.register(subparsers)
    categories_cmd.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    ctx = CLIContext(console=Console())

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 2

    try:
        return handler(args, ctx)
    except KgAnnotateError as exc:
        logger.error(str(exc))
        return 1
