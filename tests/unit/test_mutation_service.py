import json
from pathlib import Path

import pytest

from kgannotate.application.services.mutation_service import MutationGenerator, MutationService
from kgannotate.core.errors import AnnotationInputError, ConfigurationError, EmptyIdentifierError
from kgannotate.domain.models.annotation import (
    AnnotationDocument,
    AnnotationEntity,
    AnnotationRelationship,
    DocumentDescriptor,
    EntityCategory,
)
from kgannotate.domain.ontology import CATEGORY_TYPE_MAP, CategoryTypeMapping, MutationShape

FIXED_TS = "2024-03-18T10:22:05.000Z"
FIXTURE = Path(__file__).resolve().parents[1] / "fixtures" / "annotations_sample.json"


def _generator() -> MutationGenerator:
    return MutationGenerator(clock=lambda: FIXED_TS)


def _entity(entity_id: str, text: str, category: str) -> AnnotationEntity:
    return AnnotationEntity(id=entity_id, text=text, start=0, end=len(text), category=EntityCategory(category))


def _document(*entities: AnnotationEntity, relationships: tuple[AnnotationRelationship, ...] = ()) -> AnnotationDocument:
    return AnnotationDocument(
        document=DocumentDescriptor(id="doc-1", path="docs/doc-1.pdf", subject="health"),
        entities=tuple(entities),
        relationships=relationships,
    )


def test_repeated_organization_shares_entry_node_and_name_id() -> None:
    doc = _document(
        _entity("e1", "National Health Authority (NHA)", "organization"),
        _entity("e2", "National Health Authority (NHA)", "organization"),
    )

    batch = _generator().generate_batch(doc)

    assert len(batch.entry_node_mutations) == 1
    assert len(batch.typed_node_mutations) == 2
    for m in batch.typed_node_mutations:
        assert 'name_id: "org::national_health_authority_nha"' in m.mutation
        assert "upsert: true" in m.mutation
        assert f'node_created_on: "{FIXED_TS}"' in m.mutation
        assert m.description == '_Indian_Union_Government_Ministry_ for "National Health Authority (NHA)" [organization]'


def test_entry_node_mutation_layout() -> None:
    [mutation] = _generator().build_entry_node_mutations([_entity("e1", "  Uttar Pradesh ", "region")])

    assert mutation.description == '_Name_ node for "  Uttar Pradesh "'
    assert mutation.mutation == (
        "mutation {\n"
        "  add_Name_(input: [{\n"
        '    name: "Uttar Pradesh"\n'
        "  }], upsert: true) {\n"
        "    _Name_ {\n"
        "      name\n"
        "    }\n"
        "  }\n"
        "}"
    )


def test_entry_node_dedup_is_exact_trimmed_text_in_first_seen_order() -> None:
    entities = [
        _entity("e1", "NHA", "organization"),
        _entity("e2", "Uttar Pradesh", "region"),
        _entity("e3", " NHA ", "organization"),
        _entity("e4", "nha", "organization"),
    ]

    mutations = _generator().build_entry_node_mutations(entities)

    names = [m.mutation.split('name: "')[1].split('"')[0] for m in mutations]
    assert names == ["NHA", "Uttar Pradesh", "nha"]
    assert mutations[0].description == '_Name_ node for "NHA"'


def test_value_entity_is_plain_data_value() -> None:
    [mutation] = _generator().build_typed_node_mutations([_entity("e1", " ₹500 crore ", "value")])

    assert mutation.description == '_Data_Value_ for " ₹500 crore " [value]'
    assert 'add_Data_Value_(input: [{\n    categorical_value: "₹500 crore"\n  }]) {' in mutation.mutation
    assert "name_id" not in mutation.mutation
    assert "upsert" not in mutation.mutation
    assert "node_created_on" not in mutation.mutation


def test_value_entity_with_symbol_only_text_does_not_need_identifier() -> None:
    [mutation] = _generator().build_typed_node_mutations([_entity("e1", "—", "value")])
    assert 'categorical_value: "—"' in mutation.mutation


def test_benefit_entity_nests_entry_creation_without_identifier() -> None:
    entities = [_entity("e1", "cashless hospitalisation", "benefit"), _entity("e2", "cashless hospitalisation", "benefit")]

    mutations = _generator().build_typed_node_mutations(entities)

    assert len(mutations) == 2
    for m in mutations:
        assert "add_Indian_Union_Government_Service_Benefit_(input: [{" in m.mutation
        assert 'names: [{ name: "cashless hospitalisation" }]' in m.mutation
        assert f'node_created_on: "{FIXED_TS}"' in m.mutation
        assert "name_id" not in m.mutation
        assert "upsert" not in m.mutation
        assert "      id\n" in m.mutation


def test_document_entity_upserts_without_timestamp() -> None:
    [mutation] = _generator().build_typed_node_mutations([_entity("e1", "Operational Guidelines 2023", "document")])

    assert mutation.mutation == (
        "mutation {\n"
        "  add_Source_(input: [{\n"
        '    name_id: "doc::operational_guidelines_2023"\n'
        '    names: [{ name: "Operational Guidelines 2023" }]\n'
        "  }], upsert: true) {\n"
        "    _Source_ {\n"
        "      name_id\n"
        "    }\n"
        "  }\n"
        "}"
    )


def test_default_category_layout() -> None:
    [mutation] = _generator().build_typed_node_mutations([_entity("e1", "District Collector", "official_role")])

    assert mutation.mutation == (
        "mutation {\n"
        "  add_Indian_Government_Official_Role_(input: [{\n"
        '    name_id: "role::district_collector"\n'
        '    names: [{ name: "District Collector" }]\n'
        f'    node_created_on: "{FIXED_TS}"\n'
        "  }], upsert: true) {\n"
        "    _Indian_Government_Official_Role_ {\n"
        "      name_id\n"
        "    }\n"
        "  }\n"
        "}"
    )


def test_text_is_escaped_inside_mutations() -> None:
    entity = _entity("e1", 'The "Jan Aushadhi"\tscheme', "program")

    [entry] = _generator().build_entry_node_mutations([entity])
    [typed] = _generator().build_typed_node_mutations([entity])

    assert 'name: "The \\"Jan Aushadhi\\"\\tscheme"' in entry.mutation
    assert 'names: [{ name: "The \\"Jan Aushadhi\\"\\tscheme" }]' in typed.mutation
    assert 'name_id: "prog::the_jan_aushadhi_scheme"' in typed.mutation


def test_one_typed_mutation_per_entity() -> None:
    pairs = [("NHA", "organization"), ("NHA", "organization"), ("₹5", "value"), ("UP", "region"), ("UP", "region")]
    entities = [_entity(f"e{i}", text, category) for i, (text, category) in enumerate(pairs)]

    batch = _generator().generate_batch(_document(*entities))

    assert len(batch.typed_node_mutations) == len(entities)
    assert len(batch.entry_node_mutations) == 3


def test_empty_document_produces_empty_batch() -> None:
    batch = _generator().generate_batch(_document())

    assert batch.entry_node_mutations == ()
    assert batch.typed_node_mutations == ()
    assert batch.relationship_mutations == ()
    assert batch.summary.total_entry_nodes == 0
    assert batch.summary.total_typed_nodes == 0
    assert set(batch.summary.category_counts.values()) == {0}
    assert len(batch.summary.category_counts) == len(EntityCategory)


def test_relationships_are_counted_but_not_translated() -> None:
    rel = AnnotationRelationship(id="r1", source_entity_id="e1", target_entity_id="e2", type="administers", label="x")
    doc = _document(
        _entity("e1", "NHA", "organization"),
        _entity("e2", "PM-JAY", "program"),
        relationships=(rel,),
    )

    batch = _generator().generate_batch(doc)

    assert batch.summary.total_relationships == 1
    assert batch.relationship_mutations == ()


def test_category_counts_match_entities() -> None:
    document = MutationService().load_document(FIXTURE)
    batch = _generator().generate_batch(document)

    counts = batch.summary.category_counts
    assert sum(counts.values()) == len(document.entities)
    assert counts["organization"] == 2
    assert counts["benefit"] == 1
    assert counts["domain_issue"] == 0
    assert batch.document_id == "pmjay-guidelines-2023"
    assert batch.document_path == "docs/health/pmjay_guidelines.pdf"


def test_batch_uses_one_timestamp() -> None:
    ticks = iter(["2024-01-01T00:00:00.000Z", "2024-01-01T00:00:01.000Z"])
    generator = MutationGenerator(clock=lambda: next(ticks))

    batch = generator.generate_batch(
        _document(_entity("e1", "NHA", "organization"), _entity("e2", "UP", "region"))
    )

    for m in batch.typed_node_mutations:
        assert "2024-01-01T00:00:00.000Z" in m.mutation


def test_identified_entity_without_identifier_characters_fails() -> None:
    with pytest.raises(EmptyIdentifierError):
        _generator().generate_batch(_document(_entity("e1", "(—)", "organization")))


def test_generator_rejects_incomplete_mapping() -> None:
    partial = {k: v for k, v in CATEGORY_TYPE_MAP.items() if k is not EntityCategory.REGION}
    with pytest.raises(ConfigurationError, match="region"):
        MutationGenerator(mapping=partial)


def test_generator_accepts_substitute_mapping() -> None:
    substitute = dict(CATEGORY_TYPE_MAP)
    substitute[EntityCategory.BENEFIT] = CategoryTypeMapping(
        type_name="_Benefit_",
        name_id_prefix="benefit",
        inverse_field="benefit",
        shape=MutationShape.IDENTIFIED,
    )

    generator = MutationGenerator(mapping=substitute, clock=lambda: FIXED_TS)
    [mutation] = generator.build_typed_node_mutations([_entity("e1", "Free care", "benefit")])

    assert 'name_id: "benefit::free_care"' in mutation.mutation
    assert "upsert: true" in mutation.mutation


def test_batch_to_dict_is_json_serialisable() -> None:
    batch = _generator().generate_batch(_document(_entity("e1", "NHA", "organization")))

    payload = json.loads(json.dumps(batch.to_dict()))

    assert payload["document_id"] == "doc-1"
    assert payload["summary"]["total_typed_nodes"] == 1
    assert payload["entry_node_mutations"][0]["description"] == '_Name_ node for "NHA"'
    assert payload["relationship_mutations"] == []


def test_service_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(AnnotationInputError, match="not found"):
        MutationService().load_document(tmp_path / "missing.json")


def test_service_wraps_malformed_json(tmp_path: Path) -> None:
    source = tmp_path / "bad.json"
    source.write_text("[1, 2", encoding="utf-8")

    with pytest.raises(AnnotationInputError, match="not valid JSON"):
        MutationService().load_document(source)


def test_lookup_goes_through_injected_mapping() -> None:
    substitute = dict(CATEGORY_TYPE_MAP)
    substitute[EntityCategory.REGION] = CategoryTypeMapping(
        type_name="_State_", name_id_prefix="state", inverse_field="state"
    )
    generator = MutationGenerator(mapping=substitute, clock=lambda: FIXED_TS)

    [mutation] = generator.build_typed_node_mutations([_entity("e1", "Kerala", "region")])

    assert 'add_State_(input: [{\n    name_id: "state::kerala"' in mutation.mutation
