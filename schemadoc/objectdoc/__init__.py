"""Flattened, path-addressed documentation of runtime types."""

from schemadoc.objectdoc.generate import generate
from schemadoc.objectdoc.mapper import ObjectMapper, children_paths, generate_object_doc, parent_path
from schemadoc.objectdoc.merge import extend_with_validation_plan, merge_docs
from schemadoc.objectdoc.models import ObjectDoc, PropertyDoc
from schemadoc.objectdoc.postprocess import (
    DEFAULT_POST_PROCESSORS,
    PropertyPostProcessor,
    extract_deprecated_information,
    post_process_properties,
    remove_enum_declaration,
    remove_trailing_whitespace,
)

__all__ = [
    "DEFAULT_POST_PROCESSORS",
    "ObjectDoc",
    "ObjectMapper",
    "PropertyDoc",
    "PropertyPostProcessor",
    "children_paths",
    "extend_with_validation_plan",
    "extract_deprecated_information",
    "generate",
    "generate_object_doc",
    "merge_docs",
    "parent_path",
    "post_process_properties",
    "remove_enum_declaration",
    "remove_trailing_whitespace",
]
