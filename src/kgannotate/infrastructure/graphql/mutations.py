"""Render Dgraph GraphQL mutation documents.

Each function returns the full ``mutation { ... }`` text for one node. Text
arguments are the already-trimmed entity text; escaping happens here.
"""

from __future__ import annotations

from kgannotate.domain.ontology import (
    CREATED_ON_FIELD,
    DATA_VALUE_FIELD,
    DATA_VALUE_TYPE,
    ENTRY_KEY_FIELD,
    ENTRY_TYPE,
    NAME_ID_FIELD,
    NAMES_FIELD,
)
from kgannotate.infrastructure.graphql.escaping import escape_graphql_string


def _literal(value: str) -> str:
    return f'"{escape_graphql_string(value)}"'


def _names_link(text: str) -> str:
    return f"{NAMES_FIELD}: [{{ {ENTRY_KEY_FIELD}: {_literal(text)} }}]"


def _add_mutation(type_name: str, fields: list[str], selection: str, *, upsert: bool) -> str:
    body = "\n".join(f"    {line}" for line in fields)
    upsert_arg = ", upsert: true" if upsert else ""
    return (
        "mutation {\n"
        f"  add{type_name}(input: [{{\n"
        f"{body}\n"
        f"  }}]{upsert_arg}) {{\n"
        f"    {type_name} {{\n"
        f"      {selection}\n"
        "    }\n"
        "  }\n"
        "}"
    )


def render_entry_node(text: str) -> str:
    return _add_mutation(
        ENTRY_TYPE,
        [f"{ENTRY_KEY_FIELD}: {_literal(text)}"],
        ENTRY_KEY_FIELD,
        upsert=True,
    )


def render_scalar_value(text: str) -> str:
    return _add_mutation(
        DATA_VALUE_TYPE,
        [f"{DATA_VALUE_FIELD}: {_literal(text)}"],
        DATA_VALUE_FIELD,
        upsert=False,
    )


def render_nested_entry(type_name: str, text: str, created_on: str) -> str:
    # No name_id on this type, so every call creates a fresh node.
    return _add_mutation(
        type_name,
        [_names_link(text), f"{CREATED_ON_FIELD}: {_literal(created_on)}"],
        "id",
        upsert=False,
    )


def render_identified(type_name: str, name_id: str, text: str, created_on: str | None) -> str:
    fields = [f"{NAME_ID_FIELD}: {_literal(name_id)}", _names_link(text)]
    if created_on is not None:
        fields.append(f"{CREATED_ON_FIELD}: {_literal(created_on)}")
    return _add_mutation(type_name, fields, NAME_ID_FIELD, upsert=True)
