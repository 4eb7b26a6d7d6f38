from __future__ import annotations

import argparse

from rich.table import Table

from kgannotate.cli.context import CLIContext
from kgannotate.domain.ontology import CATEGORY_TYPE_MAP


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("categories", help="Show the category to Dgraph type mapping")
    parser.set_defaults(handler=run_categories)


def run_categories(args: argparse.Namespace, ctx: CLIContext) -> int:
    out = Table(title="Category type mapping")
    out.add_column("Category")
    out.add_column("Dgraph type", overflow="fold")
    out.add_column("name_id prefix")
    out.add_column("Inverse field", overflow="fold")
    out.add_column("Shape")
    for category, mapping in CATEGORY_TYPE_MAP.items():
        out.add_row(
            category.value,
            mapping.type_name,
            mapping.name_id_prefix,
            mapping.inverse_field,
            mapping.shape.value,
        )
    ctx.console.print(out)
    return 0
