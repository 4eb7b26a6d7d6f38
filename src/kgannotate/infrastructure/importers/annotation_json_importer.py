from __future__ import annotations

import json
import logging
from pathlib import Path

from kgannotate.domain.models.annotation import (
    AnnotationDocument,
    AnnotationEntity,
    AnnotationRelationship,
    DocumentDescriptor,
    EntityCategory,
)

logger = logging.getLogger(__name__)

_CATEGORY_VALUES = {c.value: c for c in EntityCategory}


class AnnotationJsonError(ValueError):
    pass


def load_annotation_document(path: Path) -> AnnotationDocument:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise AnnotationJsonError(f"Annotation file is not valid JSON: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise AnnotationJsonError(f"Annotation file is not UTF-8 text: {exc}") from exc

    return parse_annotation_document(payload)


def parse_annotation_document(payload: object) -> AnnotationDocument:
    if not isinstance(payload, dict):
        raise AnnotationJsonError("Annotation JSON must be an object with 'document' and 'entities'.")

    document = _parse_descriptor(payload.get("document"))

    raw_entities = payload.get("entities")
    if not isinstance(raw_entities, list):
        raise AnnotationJsonError("'entities' must be a list of entity objects.")
    entities = tuple(_parse_entity(item, index) for index, item in enumerate(raw_entities))

    seen: set[str] = set()
    for entity in entities:
        if entity.id in seen:
            raise AnnotationJsonError(f"Duplicate entity id: {entity.id}")
        seen.add(entity.id)

    raw_relationships = payload.get("relationships")
    if raw_relationships is None:
        relationships: tuple[AnnotationRelationship, ...] = ()
    elif isinstance(raw_relationships, list):
        relationships = tuple(_parse_relationship(item, index) for index, item in enumerate(raw_relationships))
    else:
        raise AnnotationJsonError("'relationships' must be a list when present.")

    for rel in relationships:
        dangling = [ref for ref in (rel.source_entity_id, rel.target_entity_id) if ref not in seen]
        if dangling:
            logger.warning(
                "Relationship %s references unknown entity id(s): %s",
                rel.id,
                ", ".join(dangling),
            )

    saved_at = payload.get("saved_at")
    if saved_at is not None and not isinstance(saved_at, str):
        raise AnnotationJsonError("'saved_at' must be a string when present.")

    return AnnotationDocument(
        document=document,
        entities=entities,
        relationships=relationships,
        saved_at=saved_at,
    )


def _parse_descriptor(raw: object) -> DocumentDescriptor:
    if not isinstance(raw, dict):
        raise AnnotationJsonError("'document' must be an object with 'id' and 'path'.")
    subject = raw.get("subject", "")
    if not isinstance(subject, str):
        raise AnnotationJsonError("document.subject must be a string.")
    return DocumentDescriptor(
        id=_require_str(raw, "id", "document"),
        path=_require_str(raw, "path", "document"),
        subject=subject,
    )


def _parse_entity(raw: object, index: int) -> AnnotationEntity:
    where = f"entities[{index}]"
    if not isinstance(raw, dict):
        raise AnnotationJsonError(f"{where} must be a JSON object.")

    category_raw = _require_str(raw, "category", where)
    category = _CATEGORY_VALUES.get(category_raw)
    if category is None:
        raise AnnotationJsonError(f"{where}.category is not a known category: {category_raw!r}")

    return AnnotationEntity(
        id=_require_str(raw, "id", where),
        text=_require_str(raw, "text", where),
        start=_require_int(raw, "start", where),
        end=_require_int(raw, "end", where),
        category=category,
    )


def _parse_relationship(raw: object, index: int) -> AnnotationRelationship:
    where = f"relationships[{index}]"
    if not isinstance(raw, dict):
        raise AnnotationJsonError(f"{where} must be a JSON object.")
    label = raw.get("label", "")
    if not isinstance(label, str):
        raise AnnotationJsonError(f"{where}.label must be a string.")
    return AnnotationRelationship(
        id=_require_str(raw, "id", where),
        source_entity_id=_require_str(raw, "source_entity_id", where),
        target_entity_id=_require_str(raw, "target_entity_id", where),
        type=_require_str(raw, "type", where),
        label=label,
    )


def _require_str(raw: dict[str, object], key: str, where: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str):
        raise AnnotationJsonError(f"{where}.{key} must be a string.")
    return value


def _require_int(raw: dict[str, object], key: str, where: str) -> int:
    value = raw.get(key)
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise AnnotationJsonError(f"{where}.{key} must be an integer offset.")
    return value
