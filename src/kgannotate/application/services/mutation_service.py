from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from pathlib import Path

from kgannotate.core.errors import AnnotationInputError, ConfigurationError
from kgannotate.core.identifiers import derive_name_id
from kgannotate.core.time import utc_timestamp
from kgannotate.domain.models.annotation import (
    AnnotationDocument,
    AnnotationEntity,
    AnnotationRelationship,
    EntityCategory,
)
from kgannotate.domain.models.mutation import BatchSummary, GeneratedMutation, MutationBatch
from kgannotate.domain.ontology import (
    CATEGORY_TYPE_MAP,
    DATA_VALUE_TYPE,
    ENTRY_TYPE,
    CategoryTypeMapping,
    MutationShape,
    mapping_for,
    missing_categories,
)
from kgannotate.infrastructure.graphql import mutations as render
from kgannotate.infrastructure.importers.annotation_json_importer import (
    AnnotationJsonError,
    load_annotation_document,
)

logger = logging.getLogger(__name__)

_ShapeBuilder = Callable[[AnnotationEntity, CategoryTypeMapping, str], GeneratedMutation]


def _scalar_value(entity: AnnotationEntity, mapping: CategoryTypeMapping, created_on: str) -> GeneratedMutation:
    return GeneratedMutation(
        description=f'{DATA_VALUE_TYPE} for "{entity.text}" [{entity.category.value}]',
        mutation=render.render_scalar_value(entity.text.strip()),
    )


def _nested_entry(entity: AnnotationEntity, mapping: CategoryTypeMapping, created_on: str) -> GeneratedMutation:
    return GeneratedMutation(
        description=_typed_description(entity, mapping),
        mutation=render.render_nested_entry(mapping.type_name, entity.text.strip(), created_on),
    )


def _identified(entity: AnnotationEntity, mapping: CategoryTypeMapping, created_on: str) -> GeneratedMutation:
    return GeneratedMutation(
        description=_typed_description(entity, mapping),
        mutation=render.render_identified(
            mapping.type_name,
            derive_name_id(entity.text, mapping.name_id_prefix),
            entity.text.strip(),
            created_on,
        ),
    )


def _identified_untimestamped(
    entity: AnnotationEntity, mapping: CategoryTypeMapping, created_on: str
) -> GeneratedMutation:
    return GeneratedMutation(
        description=_typed_description(entity, mapping),
        mutation=render.render_identified(
            mapping.type_name,
            derive_name_id(entity.text, mapping.name_id_prefix),
            entity.text.strip(),
            None,
        ),
    )


def _typed_description(entity: AnnotationEntity, mapping: CategoryTypeMapping) -> str:
    return f'{mapping.type_name} for "{entity.text}" [{entity.category.value}]'


SHAPE_BUILDERS: Mapping[MutationShape, _ShapeBuilder] = {
    MutationShape.SCALAR_VALUE: _scalar_value,
    MutationShape.NESTED_ENTRY: _nested_entry,
    MutationShape.IDENTIFIED: _identified,
    MutationShape.IDENTIFIED_UNTIMESTAMPED: _identified_untimestamped,
}


class MutationGenerator:
    """Turns an annotation document into an ordered batch of Dgraph mutations.

    Strategy:
    1. Each unique (trimmed) entity text becomes a ``_Name_`` upsert. ``_Name_.name``
       is an ``@id`` field, so the store merges repeats instead of duplicating.
    2. Each entity becomes one typed node linked to its ``_Name_`` entry, shaped
       by the category's ``MutationShape``.
    3. Relationships are counted but not yet turned into edges.

    The generator holds no mutable state; one instance can serve many callers.
    """

    def __init__(
        self,
        mapping: Mapping[EntityCategory, CategoryTypeMapping] = CATEGORY_TYPE_MAP,
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        missing = missing_categories(mapping)
        if missing:
            names = ", ".join(c.value for c in missing)
            raise ConfigurationError(f"Category type mapping is missing categories: {names}")
        unhandled = {m.shape for m in mapping.values()} - set(SHAPE_BUILDERS)
        if unhandled:
            raise ConfigurationError(f"No mutation builder for shapes: {sorted(s.value for s in unhandled)}")
        self.mapping = mapping
        self.clock = clock

    def build_entry_node_mutations(self, entities: Iterable[AnnotationEntity]) -> list[GeneratedMutation]:
        # Keyed on exact trimmed text to match the store's own @id semantics.
        unique: dict[str, AnnotationEntity] = {}
        for entity in entities:
            unique.setdefault(entity.text.strip(), entity)

        return [
            GeneratedMutation(
                description=f'{ENTRY_TYPE} node for "{entity.text}"',
                mutation=render.render_entry_node(key),
            )
            for key, entity in unique.items()
        ]

    def build_typed_node_mutations(
        self,
        entities: Iterable[AnnotationEntity],
        created_on: str | None = None,
    ) -> list[GeneratedMutation]:
        timestamp = created_on or self.clock()
        out: list[GeneratedMutation] = []
        for entity in entities:
            mapping = mapping_for(entity.category, self.mapping)
            out.append(SHAPE_BUILDERS[mapping.shape](entity, mapping, timestamp))
        return out

    def build_relationship_mutations(
        self, relationships: Sequence[AnnotationRelationship]
    ) -> list[GeneratedMutation]:
        # TODO: map relationship.type onto a typed-node edge field once the ontology defines one per pair.
        if relationships:
            logger.debug(
                "Relationship mutations are not supported yet; %d relationship(s) left untranslated",
                len(relationships),
            )
        return []

    def generate_batch(self, document: AnnotationDocument) -> MutationBatch:
        entities = document.entities
        entry_nodes = self.build_entry_node_mutations(entities)
        typed_nodes = self.build_typed_node_mutations(entities)
        relationships = self.build_relationship_mutations(document.relationships)

        category_counts = {category.value: 0 for category in EntityCategory}
        for entity in entities:
            category_counts[entity.category.value] += 1

        logger.info(
            "Generated %d entry and %d typed mutations for document %s",
            len(entry_nodes),
            len(typed_nodes),
            document.document.id,
        )

        return MutationBatch(
            document_id=document.document.id,
            document_path=document.document.path,
            entry_node_mutations=tuple(entry_nodes),
            typed_node_mutations=tuple(typed_nodes),
            relationship_mutations=tuple(relationships),
            summary=BatchSummary(
                total_entry_nodes=len(entry_nodes),
                total_typed_nodes=len(typed_nodes),
                total_relationships=len(document.relationships),
                category_counts=category_counts,
            ),
        )


class MutationService:
    def __init__(self, generator: MutationGenerator | None = None) -> None:
        self.generator = generator or MutationGenerator()

    def load_document(self, file_path: Path) -> AnnotationDocument:
        path = file_path.expanduser().resolve()
        if not path.exists() or not path.is_file():
            raise AnnotationInputError(f"Annotation file not found: {path}")
        try:
            return load_annotation_document(path)
        except AnnotationJsonError as exc:
            raise AnnotationInputError(f"{path}: {exc}") from exc

    def generate_from_file(self, file_path: Path) -> tuple[AnnotationDocument, MutationBatch]:
        document = self.load_document(file_path)
        return document, self.generator.generate_batch(document)
