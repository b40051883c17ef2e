"""Structural walk of a runtime type into a flat, path-addressed property list.

Path syntax, shared with validation plans:

* ``$``: the root,
* ``.name``: a structure member (by output name),
* ``[*]``: a sequence element,
* ``.~`` / ``.*``: a mapping key / value.
"""

from collections.abc import Sequence
from typing import Any

from schemadoc.logging import get_schemadoc_logger
from schemadoc.objectdoc.models import ObjectDoc, PropertyDoc
from schemadoc.typeinfo import Shape, TypeShape, describe, inspect_type, struct_members

logger = get_schemadoc_logger(__name__)

ROOT_PATH = "$"
ELEMENT_SEGMENT = "[*]"
KEY_SEGMENT = ".~"
VALUE_SEGMENT = ".*"


class ObjectMapper:
    """Collects one ``PropertyDoc`` per reachable property, in depth-first order."""

    def __init__(self) -> None:
        self.properties: list[PropertyDoc] = []
        self._ancestors: list[Any] = []

    def map(self, tp: Any, path: str = ROOT_PATH) -> None:
        shape = inspect_type(tp)
        self.properties.append(PropertyDoc(path=path, type_info=describe(tp)))

        if shape.named and shape.target in self._ancestors:
            logger.debug("Type %s repeats inside itself at %s, not descending", shape.target, path)
            return
        if shape.named:
            self._ancestors.append(shape.target)
        try:
            self._map_children(shape, path)
        finally:
            if shape.named:
                self._ancestors.pop()

    def _map_children(self, shape: TypeShape, path: str) -> None:
        if shape.shape is Shape.STRUCTURE:
            for member in struct_members(shape.target):
                if member.output_name is None:
                    continue
                self.map(member.annotation, f"{path}.{member.output_name}")
        elif shape.shape is Shape.SEQUENCE:
            self.map(shape.element, path + ELEMENT_SEGMENT)
        elif shape.shape is Shape.MAPPING:
            self.map(shape.key, path + KEY_SEGMENT)
            self.map(shape.value, path + VALUE_SEGMENT)


def parent_path(path: str) -> str | None:
    """Path of the property one segment up, None for the root.

    >>> parent_path("$.items[*]")
    '$.items'
    >>> parent_path("$.labels.~")
    '$.labels'
    """
    if path.endswith(ELEMENT_SEGMENT):
        return path[: -len(ELEMENT_SEGMENT)]
    parent, dot, _ = path.rpartition(".")
    return parent if dot else None


def children_paths(properties: Sequence[PropertyDoc]) -> dict[str, tuple[str, ...]]:
    """Immediate child paths of every property, in property order."""
    children: dict[str, list[str]] = {prop.path: [] for prop in properties}
    for prop in properties:
        parent = parent_path(prop.path)
        if parent is not None and parent in children:
            children[parent].append(prop.path)
    return {path: tuple(paths) for path, paths in children.items()}


def generate_object_doc(tp: Any) -> ObjectDoc:
    """Walk ``tp`` from the root and attach children paths to every property."""
    mapper = ObjectMapper()
    mapper.map(tp, ROOT_PATH)
    children = children_paths(mapper.properties)
    properties = tuple(prop.model_copy(update={"children_paths": children[prop.path]}) for prop in mapper.properties)
    return ObjectDoc(name=describe(tp).name, properties=properties)
