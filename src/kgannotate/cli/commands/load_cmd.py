from __future__ import annotations

import argparse
import json
from pathlib import Path

from rich.markup import escape
from rich.table import Table

from kgannotate.application.services.load_service import (
    PHASE_ENTRY_NODES,
    PHASE_RELATIONSHIPS,
    PHASE_TYPED_NODES,
    LoadService,
)
from kgannotate.application.services.mutation_service import MutationService
from kgannotate.cli.context import CLIContext
from kgannotate.core.config import load_settings
from kgannotate.domain.models.mutation import GeneratedMutation
from kgannotate.infrastructure.graphql.client import GraphQLClient, MutationResult

PHASE_TITLES = {
    PHASE_ENTRY_NODES: "Phase 1: Creating _Name_ nodes",
    PHASE_TYPED_NODES: "Phase 2: Creating entity nodes",
    PHASE_RELATIONSHIPS: "Phase 3: Creating relationships",
}


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("load", help="Generate mutations and execute them against a Dgraph GraphQL endpoint")
    parser.add_argument("file", help="Path to the annotation JSON file")
    parser.add_argument(
        "--endpoint",
        default=None,
        help="GraphQL endpoint (default: $KGANNOTATE_ENDPOINT or http://localhost:8080/graphql)",
    )
    parser.set_defaults(handler=run_load)


def run_load(args: argparse.Namespace, ctx: CLIContext) -> int:
    settings = load_settings(args.endpoint)
    path = Path(args.file).expanduser().resolve()

    ctx.console.print(f"Reading: {escape(str(path))}")
    ctx.console.print(f"Dgraph endpoint: {escape(settings.endpoint)}")

    _, batch = MutationService().generate_from_file(path)
    ctx.console.print(f"Document: {escape(batch.document_id)}")
    ctx.console.print(f"_Name_ nodes to create: {len(batch.entry_node_mutations)}")
    ctx.console.print(f"Entity nodes to create: {len(batch.typed_node_mutations)}")
    ctx.console.print(f"Relationships to create: {len(batch.relationship_mutations)}")

    started: set[str] = set()

    def _on_result(phase: str, mutation: GeneratedMutation, result: MutationResult) -> None:
        if phase not in started:
            started.add(phase)
            ctx.console.rule(PHASE_TITLES[phase])
        if result.success:
            ctx.console.print(f"  [green]OK[/green]: {escape(mutation.description)}")
        else:
            ctx.console.print(f"  [red]FAIL[/red]: {escape(mutation.description)}")
            ctx.console.print(f"    {escape(json.dumps(result.errors, default=str))}")

    service = LoadService(GraphQLClient(settings.endpoint, timeout=settings.timeout_seconds))
    report = service.load(batch, on_result=_on_result)

    out = Table(title="Load Complete")
    out.add_column("Phase")
    out.add_column("Created", justify="right")
    out.add_column("Failed", justify="right")
    out.add_column("Attempted", justify="right")
    for phase in report.phases:
        out.add_row(
            phase.name,
            str(phase.succeeded),
            str(phase.failed),
            "skipped" if phase.skipped else str(phase.attempted),
        )
    ctx.console.print(out)

    if not report.ok:
        failed = report.phase(PHASE_ENTRY_NODES).failed + report.phase(PHASE_TYPED_NODES).failed
        ctx.console.print(f"[yellow]WARNING[/yellow]: {failed} mutations failed.")
        return 1
    return 0
