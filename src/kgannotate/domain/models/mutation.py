from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class GeneratedMutation:
    description: str
    mutation: str
    variables: dict[str, object] | None = None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {"description": self.description, "mutation": self.mutation}
        if self.variables is not None:
            payload["variables"] = dict(self.variables)
        return payload


@dataclass(frozen=True, slots=True)
class BatchSummary:
    total_entry_nodes: int
    total_typed_nodes: int
    total_relationships: int
    category_counts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class MutationBatch:
    document_id: str
    document_path: str
    entry_node_mutations: tuple[GeneratedMutation, ...]
    typed_node_mutations: tuple[GeneratedMutation, ...]
    relationship_mutations: tuple[GeneratedMutation, ...]
    summary: BatchSummary

    def to_dict(self) -> dict[str, object]:
        return {
            "document_id": self.document_id,
            "document_path": self.document_path,
            "entry_node_mutations": [m.to_dict() for m in self.entry_node_mutations],
            "typed_node_mutations": [m.to_dict() for m in self.typed_node_mutations],
            "relationship_mutations": [m.to_dict() for m in self.relationship_mutations],
            "summary": {
                "total_entry_nodes": self.summary.total_entry_nodes,
                "total_typed_nodes": self.summary.total_typed_nodes,
                "total_relationships": self.summary.total_relationships,
                "category_counts": dict(self.summary.category_counts),
            },
        }
