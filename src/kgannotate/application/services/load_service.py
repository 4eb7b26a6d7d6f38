from __future__ import annotations

import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from kgannotate.domain.models.mutation import GeneratedMutation, MutationBatch
from kgannotate.infrastructure.graphql.client import MutationResult

logger = logging.getLogger(__name__)

PHASE_ENTRY_NODES = "entry_nodes"
PHASE_TYPED_NODES = "typed_nodes"
PHASE_RELATIONSHIPS = "relationships"


class MutationExecutor(Protocol):
    def execute(self, query: str, variables: dict[str, object] | None = None) -> MutationResult: ...


@dataclass(slots=True)
class MutationFailure:
    description: str
    errors: list[dict[str, object]]


@dataclass(slots=True)
class PhaseReport:
    name: str
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: bool = False
    failures: list[MutationFailure] = field(default_factory=list)


@dataclass(slots=True)
class LoadReport:
    document_id: str
    phases: list[PhaseReport]

    def phase(self, name: str) -> PhaseReport:
        for report in self.phases:
            if report.name == name:
                return report
        raise KeyError(name)

    @property
    def ok(self) -> bool:
        # Relationship failures are reported but do not fail the run.
        return self.phase(PHASE_ENTRY_NODES).failed == 0 and self.phase(PHASE_TYPED_NODES).failed == 0

    @property
    def total_failed(self) -> int:
        return sum(report.failed for report in self.phases)


ResultCallback = Callable[[str, GeneratedMutation, MutationResult], None]


class LoadService:
    """Executes a mutation batch phase by phase.

    Entry nodes are always fully attempted before typed nodes so that each
    typed node's ``names`` link has had its ``_Name_`` upsert sent first. A
    failing mutation is recorded and the phase moves on; nothing is retried or
    rolled back.
    """

    def __init__(self, client: MutationExecutor) -> None:
        self.client = client

    def load(self, batch: MutationBatch, on_result: ResultCallback | None = None) -> LoadReport:
        phases = [
            self._run_phase(PHASE_ENTRY_NODES, batch.entry_node_mutations, on_result),
            self._run_phase(PHASE_TYPED_NODES, batch.typed_node_mutations, on_result),
        ]
        if batch.relationship_mutations:
            phases.append(self._run_phase(PHASE_RELATIONSHIPS, batch.relationship_mutations, on_result))
        else:
            phases.append(PhaseReport(name=PHASE_RELATIONSHIPS, skipped=True))

        report = LoadReport(document_id=batch.document_id, phases=phases)
        logger.info(
            "Load of %s finished: %d failed mutation(s)",
            batch.document_id,
            report.total_failed,
        )
        return report

    def _run_phase(
        self,
        name: str,
        mutations: Sequence[GeneratedMutation],
        on_result: ResultCallback | None,
    ) -> PhaseReport:
        report = PhaseReport(name=name)
        logger.debug("Phase %s: %d mutation(s)", name, len(mutations))
        for mutation in mutations:
            result = self._execute(mutation)
            report.attempted += 1
            if result.success:
                report.succeeded += 1
            else:
                report.failed += 1
                report.failures.append(MutationFailure(description=mutation.description, errors=result.errors))
                logger.warning("Mutation failed: %s %s", mutation.description, json.dumps(result.errors, default=str))
            if on_result is not None:
                on_result(name, mutation, result)
        return report

    def _execute(self, mutation: GeneratedMutation) -> MutationResult:
        # One executor error must not abort the rest of the phase.
        try:
            return self.client.execute(mutation.mutation, mutation.variables)
        except Exception as exc:
            logger.exception("Executor raised for mutation: %s", mutation.description)
            return MutationResult(success=False, errors=[{"message": f"{type(exc).__name__}: {exc}"}])
