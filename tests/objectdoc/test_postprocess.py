"""Tests for exclusion and doc text post-processing."""

import pytest

from schemadoc.objectdoc import (
    DEFAULT_POST_PROCESSORS,
    ObjectDoc,
    PropertyDoc,
    children_paths,
    extract_deprecated_information,
    post_process_properties,
    remove_enum_declaration,
    remove_trailing_whitespace,
)
from schemadoc.settings import Settings


def _doc(*paths):
    properties = tuple(PropertyDoc(path=path) for path in paths)
    children = children_paths(properties)
    return ObjectDoc(name="Root", properties=tuple(p.model_copy(update={"children_paths": children[p.path]}) for p in properties))


# ---------------------------------------------------------------------------
# Text processors
# ---------------------------------------------------------------------------


def test_remove_enum_declaration():
    prop = PropertyDoc(path="$", type_doc="Color of a thing.\n\nENUM(Red, Green)\n")
    assert remove_enum_declaration(prop).type_doc == "Color of a thing.\n\n"


def test_remove_enum_declaration_without_marker_is_identity():
    prop = PropertyDoc(path="$", type_doc="Plain.")
    assert remove_enum_declaration(prop) is prop


def test_extract_deprecated_from_type_doc():
    prop = PropertyDoc(path="$", type_doc="Foo does X.\n\nDeprecated: use Bar instead.")
    processed = extract_deprecated_information(prop)
    assert processed.deprecated_doc == "use Bar instead."
    assert processed.type_doc == "Foo does X."


def test_extract_deprecated_from_field_doc():
    prop = PropertyDoc(path="$.a", type_doc="Type.", field_doc="Field.\nDeprecated:   gone soon  ")
    processed = extract_deprecated_information(prop)
    assert processed.deprecated_doc == "gone soon"
    assert processed.field_doc == "Field."
    assert processed.type_doc == "Type."


def test_type_doc_deprecation_takes_precedence():
    prop = PropertyDoc(path="$.a", type_doc="Deprecated: type note", field_doc="Deprecated: field note")
    processed = extract_deprecated_information(prop)
    assert processed.deprecated_doc == "type note"
    assert processed.type_doc == ""
    assert processed.field_doc == "Deprecated: field note"


def test_deprecated_must_start_a_line():
    prop = PropertyDoc(path="$", type_doc="Not Deprecated: really.")
    assert extract_deprecated_information(prop) is prop


def test_remove_trailing_whitespace():
    prop = PropertyDoc(path="$", type_doc="  Type.\n\n", field_doc="\tField. ")
    processed = remove_trailing_whitespace(prop)
    assert (processed.type_doc, processed.field_doc) == ("Type.", "Field.")


def test_enum_marker_after_deprecation_is_removed_first():
    prop = PropertyDoc(path="$", type_doc="Level.\n\nDeprecated: use Tier.\n\nENUM(Low, High)\n")
    processed = prop
    for processor in DEFAULT_POST_PROCESSORS:
        processed = processor(processed)
    assert processed.deprecated_doc == "use Tier."
    assert processed.type_doc == "Level."


# ---------------------------------------------------------------------------
# post_process_properties
# ---------------------------------------------------------------------------


def test_post_process_is_idempotent():
    doc = ObjectDoc(
        properties=(
            PropertyDoc(path="$", type_doc="Root.\n\nDeprecated: old.\n", children_paths=("$.a",)),
            PropertyDoc(path="$.a", type_doc="Kind.\nENUM(X)", field_doc="  Field.  "),
        )
    )
    once = post_process_properties(doc, (), *DEFAULT_POST_PROCESSORS)
    twice = post_process_properties(once, (), *DEFAULT_POST_PROCESSORS)
    assert once == twice
    assert once.property_at("$").deprecated_doc == "old."
    assert once.property_at("$.a").type_doc == "Kind."


def test_excluded_path_and_descendants_are_dropped():
    doc = _doc("$", "$.secret", "$.secret.token", "$.secret.keys", "$.secret.keys[*]", "$.secretive", "$.name")
    processed = post_process_properties(doc, ["$.secret"])
    assert [prop.path for prop in processed.properties] == ["$", "$.secretive", "$.name"]
    assert processed.property_at("$").children_paths == ("$.secretive", "$.name")


def test_excluded_sequence_element():
    doc = _doc("$", "$.items", "$.items[*]", "$.items[*].id")
    processed = post_process_properties(doc, ["$.items[*]"])
    assert [prop.path for prop in processed.properties] == ["$", "$.items"]


def test_settings_exclusions_apply(monkeypatch):
    monkeypatch.setattr("schemadoc.objectdoc.postprocess.settings", Settings(excluded_paths=("$.name",)))
    doc = _doc("$", "$.name", "$.other")
    processed = post_process_properties(doc, ())
    assert [prop.path for prop in processed.properties] == ["$", "$.other"]


def test_exclusion_is_exact_not_prefix():
    doc = _doc("$", "$.name", "$.names")
    processed = post_process_properties(doc, ["$.name"])
    assert [prop.path for prop in processed.properties] == ["$", "$.names"]


@pytest.mark.parametrize("processors", [(), DEFAULT_POST_PROCESSORS])
def test_post_process_keeps_doc_identity_fields(processors):
    doc = ObjectDoc(name="Root", doc="Root doc.", properties=(PropertyDoc(path="$"),))
    processed = post_process_properties(doc, (), *processors)
    assert (processed.name, processed.doc) == ("Root", "Root doc.")
