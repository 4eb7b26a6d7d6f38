"""Annotation category to graph type mapping.

Some categories could map to several store types (an organization may be a
Ministry or a Department). Each category uses its most general type here;
finer typing is expected to come from relationship context later.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from kgannotate.domain.models.annotation import EntityCategory

ENTRY_TYPE = "_Name_"
ENTRY_KEY_FIELD = "name"
DATA_VALUE_TYPE = "_Data_Value_"
DATA_VALUE_FIELD = "categorical_value"
NAME_ID_FIELD = "name_id"
NAMES_FIELD = "names"
CREATED_ON_FIELD = "node_created_on"


class MutationShape(str, Enum):
    # Scalar _Data_Value_ node, no identifier, always a new node.
    SCALAR_VALUE = "scalar_value"
    # Typed node with an inline-created _Name_, a timestamp and no identifier.
    NESTED_ENTRY = "nested_entry"
    # name_id upsert without node_created_on.
    IDENTIFIED_UNTIMESTAMPED = "identified_untimestamped"
    # name_id upsert with node_created_on.
    IDENTIFIED = "identified"


@dataclass(frozen=True, slots=True)
class CategoryTypeMapping:
    type_name: str
    name_id_prefix: str
    inverse_field: str
    shape: MutationShape = MutationShape.IDENTIFIED


CATEGORY_TYPE_MAP: Mapping[EntityCategory, CategoryTypeMapping] = MappingProxyType(
    {
        EntityCategory.ORGANIZATION: CategoryTypeMapping(
            type_name="_Indian_Union_Government_Ministry_",
            name_id_prefix="org",
            inverse_field="indian_union_government_ministry",
        ),
        EntityCategory.PROGRAM: CategoryTypeMapping(
            type_name="_Indian_Union_Government_Ministry_Program_",
            name_id_prefix="prog",
            inverse_field="indian_union_government_ministry_program",
        ),
        EntityCategory.SERVICE: CategoryTypeMapping(
            type_name="_Indian_Union_Government_Service_",
            name_id_prefix="svc",
            inverse_field="indian_union_government_service",
        ),
        EntityCategory.BENEFIT: CategoryTypeMapping(
            type_name="_Indian_Union_Government_Service_Benefit_",
            name_id_prefix="ben",
            inverse_field="indian_union_government_service_benefit",
            shape=MutationShape.NESTED_ENTRY,
        ),
        EntityCategory.CITIZEN_ATTRIBUTE: CategoryTypeMapping(
            type_name="_Citizen_Attribute_Category_",
            name_id_prefix="cattr",
            inverse_field="citizen_attribute_category",
        ),
        EntityCategory.VALUE: CategoryTypeMapping(
            type_name="_Metric_",
            name_id_prefix="metric",
            inverse_field="metric",
            shape=MutationShape.SCALAR_VALUE,
        ),
        EntityCategory.OFFICIAL_ROLE: CategoryTypeMapping(
            type_name="_Indian_Government_Official_Role_",
            name_id_prefix="role",
            inverse_field="indian_government_official_role",
        ),
        EntityCategory.REGION: CategoryTypeMapping(
            type_name="_Indian_State_Union_Territory_",
            name_id_prefix="region",
            inverse_field="indian_state_union_territory",
        ),
        EntityCategory.DELIVERY_NODE: CategoryTypeMapping(
            type_name="_Indian_Union_Government_Service_Delivery_Node_",
            name_id_prefix="dnode",
            inverse_field="indian_union_government_service_delivery_node",
        ),
        EntityCategory.DOCUMENT: CategoryTypeMapping(
            type_name="_Source_",
            name_id_prefix="doc",
            inverse_field="map_data_source_name",
            shape=MutationShape.IDENTIFIED_UNTIMESTAMPED,
        ),
        EntityCategory.DOMAIN_ISSUE: CategoryTypeMapping(
            type_name="_Domain_Issue_",
            name_id_prefix="issue",
            inverse_field="domain_issue",
        ),
    }
)


def missing_categories(mapping: Mapping[EntityCategory, CategoryTypeMapping]) -> list[EntityCategory]:
    return [category for category in EntityCategory if category not in mapping]


def mapping_for(
    category: EntityCategory,
    mapping: Mapping[EntityCategory, CategoryTypeMapping] = CATEGORY_TYPE_MAP,
) -> CategoryTypeMapping:
    return mapping[category]
