from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EntityCategory(str, Enum):
    ORGANIZATION = "organization"
    PROGRAM = "program"
    SERVICE = "service"
    BENEFIT = "benefit"
    CITIZEN_ATTRIBUTE = "citizen_attribute"
    VALUE = "value"
    OFFICIAL_ROLE = "official_role"
    REGION = "region"
    DELIVERY_NODE = "delivery_node"
    DOCUMENT = "document"
    DOMAIN_ISSUE = "domain_issue"


@dataclass(frozen=True, slots=True)
class DocumentDescriptor:
    id: str
    path: str
    subject: str


@dataclass(frozen=True, slots=True)
class AnnotationEntity:
    id: str
    text: str
    start: int
    end: int
    category: EntityCategory


@dataclass(frozen=True, slots=True)
class AnnotationRelationship:
    id: str
    source_entity_id: str
    target_entity_id: str
    type: str
    label: str


@dataclass(frozen=True, slots=True)
class AnnotationDocument:
    document: DocumentDescriptor
    entities: tuple[AnnotationEntity, ...]
    relationships: tuple[AnnotationRelationship, ...] = ()
    saved_at: str | None = None
