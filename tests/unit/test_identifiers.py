import pytest

from kgannotate.core.errors import EmptyIdentifierError
from kgannotate.core.identifiers import derive_name_id, normalize_name_text


def test_normalize_name_text_lowercases_and_strips_punctuation() -> None:
    assert normalize_name_text("  National Health Authority (NHA) ") == "national_health_authority_nha"


def test_normalize_collapses_whitespace_runs_including_tabs_and_newlines() -> None:
    assert normalize_name_text("Ayushman \t\n  Bharat") == "ayushman_bharat"


def test_normalize_keeps_hyphen_and_underscore() -> None:
    assert normalize_name_text("PM-JAY scheme_v2") == "pm-jay_scheme_v2"


def test_derive_name_id_uses_prefix_and_separator() -> None:
    assert derive_name_id("National Health Authority (NHA)", "org") == "org::national_health_authority_nha"


def test_derive_name_id_is_deterministic() -> None:
    a = derive_name_id("Uttar Pradesh", "region")
    b = derive_name_id("Uttar Pradesh", "region")
    assert a == b


def test_derive_name_id_differs_for_different_text() -> None:
    assert derive_name_id("Uttar Pradesh", "region") != derive_name_id("Madhya Pradesh", "region")


def test_texts_differing_only_in_stripped_characters_collide() -> None:
    assert derive_name_id("NHA.", "org") == derive_name_id("nha", "org")


def test_derive_name_id_rejects_text_without_identifier_characters() -> None:
    with pytest.raises(EmptyIdentifierError):
        derive_name_id(" — ", "org")


@pytest.mark.parametrize("text", ["— —", "आयुष्मान भारत", " - _ "])
def test_derive_name_id_rejects_separator_only_keys(text: str) -> None:
    assert normalize_name_text(text).strip("_-") == ""
    with pytest.raises(EmptyIdentifierError):
        derive_name_id(text, "prog")
