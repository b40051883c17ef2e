"""Path exclusion and text clean-up of generated property docs."""

import re
from collections.abc import Callable, Iterable

from schemadoc.logging import get_schemadoc_logger
from schemadoc.objectdoc.models import ObjectDoc, PropertyDoc
from schemadoc.settings import settings

logger = get_schemadoc_logger(__name__)

PropertyPostProcessor = Callable[[PropertyDoc], PropertyDoc]
"""Pure transform of one property; must be a fixed point on its own output."""

_ENUM_DECLARATION = re.compile(r"(?s)ENUM(.*)")
_DEPRECATED = re.compile(r"(?m)^Deprecated:\s*(.*)$")


def post_process_properties(doc: ObjectDoc, filtered_paths: Iterable[str], *processors: PropertyPostProcessor) -> ObjectDoc:
    """Drop excluded properties and run ``processors`` in order on the rest.

    A property is excluded when its path equals one of ``settings.excluded_paths``
    or ``filtered_paths``; everything below an excluded property goes with it.
    """
    excluded = frozenset((*settings.excluded_paths, *filtered_paths))
    properties: list[PropertyDoc] = []
    for prop in doc.properties:
        if _is_excluded(prop.path, excluded):
            logger.debug("Excluding property %s", prop.path)
            continue
        if excluded.intersection(prop.children_paths):
            prop = prop.model_copy(update={"children_paths": tuple(p for p in prop.children_paths if p not in excluded)})
        for processor in processors:
            prop = processor(prop)
        properties.append(prop)
    return doc.model_copy(update={"properties": tuple(properties)})


def _is_excluded(path: str, excluded: frozenset[str]) -> bool:
    if path in excluded:
        return True
    return any(path.startswith((f"{prefix}.", f"{prefix}[")) for prefix in excluded)


def remove_enum_declaration(prop: PropertyDoc) -> PropertyDoc:
    """Cut the type doc at an ``ENUM`` marker (enum value listings)."""
    if "ENUM" not in prop.type_doc:
        return prop
    return prop.model_copy(update={"type_doc": _ENUM_DECLARATION.sub("", prop.type_doc)})


def extract_deprecated_information(prop: PropertyDoc) -> PropertyDoc:
    """Move a ``Deprecated:`` line into ``deprecated_doc``.

    The type doc is checked first; the field doc only when the type doc has
    no such line.
    """
    for attr in ("type_doc", "field_doc"):
        text: str = getattr(prop, attr)
        match = _DEPRECATED.search(text)
        if match is None:
            continue
        return prop.model_copy(update={
            "deprecated_doc": match.group(1).strip(),
            attr: _DEPRECATED.sub("", text).strip(),
        })
    return prop


def remove_trailing_whitespace(prop: PropertyDoc) -> PropertyDoc:
    return prop.model_copy(update={"type_doc": prop.type_doc.strip(), "field_doc": prop.field_doc.strip()})


DEFAULT_POST_PROCESSORS: tuple[PropertyPostProcessor, ...] = (
    remove_enum_declaration,
    extract_deprecated_information,
    remove_trailing_whitespace,
)
