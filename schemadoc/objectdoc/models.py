"""Property and object documentation models."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from schemadoc.planning import PropertyPlan


class PropertyDoc(PropertyPlan):
    """One path-addressed property of a documented object.

    Validation facts come from ``PropertyPlan``; the documentation fields are
    filled in by the merge and post-processing steps.
    """

    type_doc: str = ""
    """Documentation of the property's type (the class docstring for structures)."""
    field_doc: str = ""
    """Documentation attached to the member at this position."""
    deprecated_doc: str = ""
    """Text following a ``Deprecated:`` line in either doc."""
    children_paths: tuple[str, ...] = ()
    """Paths of immediate children, in walk order."""

    @property
    def key(self) -> str:
        """Qualified name of the property's type, empty without type info."""
        return self.type_info.key if self.type_info is not None else ""


class ObjectDoc(BaseModel):
    """Flattened documentation of a root type: root first, then depth-first."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    name: str = ""
    doc: str = ""
    properties: tuple[PropertyDoc, ...] = ()

    def property_at(self, path: str) -> PropertyDoc | None:
        for prop in self.properties:
            if prop.path == path:
                return prop
        return None

    def dump(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys, omitting empty values."""
        return self.model_dump(mode="json", by_alias=True, exclude_defaults=True)
