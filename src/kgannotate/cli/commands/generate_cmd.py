from __future__ import annotations

import argparse
import json
from pathlib import Path

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from kgannotate.application.services.mutation_service import MutationService
from kgannotate.cli.context import CLIContext
from kgannotate.domain.models.mutation import GeneratedMutation


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("generate", help="Print the mutations for an annotation file without executing them")
    parser.add_argument("file", help="Path to the annotation JSON file")
    parser.add_argument("--json", action="store_true", help="Emit the whole batch as JSON")
    parser.set_defaults(handler=run_generate)


def run_generate(args: argparse.Namespace, ctx: CLIContext) -> int:
    service = MutationService()
    document, batch = service.generate_from_file(Path(args.file))

    if args.json:
        ctx.console.out(json.dumps(batch.to_dict(), ensure_ascii=False, indent=2), highlight=False)
        return 0

    ctx.console.print(
        Panel.fit(
            "\n".join(
                [
                    f"Document: {escape(document.document.id)} ({escape(document.document.subject)})",
                    f"Path: {escape(document.document.path)}",
                    f"Entities: {len(document.entities)}",
                    f"Relationships: {len(document.relationships)}",
                ]
            ),
            title="Annotation",
        )
    )

    summary = batch.summary
    ctx.console.print(
        Panel.fit(
            "\n".join(
                [
                    f"_Name_ nodes:  {summary.total_entry_nodes}",
                    f"Entity nodes:  {summary.total_typed_nodes}",
                    f"Relationships: {summary.total_relationships}",
                ]
            ),
            title="Mutation Summary",
        )
    )

    counts = Table(title="Category counts")
    counts.add_column("Category")
    counts.add_column("Count", justify="right")
    for category, count in summary.category_counts.items():
        counts.add_row(category, str(count))
    ctx.console.print(counts)

    _print_section(ctx, "_Name_ Mutations", batch.entry_node_mutations)
    _print_section(ctx, "Entity Mutations", batch.typed_node_mutations)
    if batch.relationship_mutations:
        _print_section(ctx, "Relationship Mutations", batch.relationship_mutations)
    return 0


def _print_section(ctx: CLIContext, title: str, mutations: tuple[GeneratedMutation, ...]) -> None:
    ctx.console.rule(escape(title))
    for m in mutations:
        ctx.console.out(f"# {m.description}", highlight=False)
        ctx.console.out(m.mutation, highlight=False)
        ctx.console.out("")
