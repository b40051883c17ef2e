"""Enumeration of structure members and their serialized names."""

import dataclasses
import typing
from dataclasses import dataclass
from typing import Any, get_origin

from pydantic import BaseModel

from schemadoc.logging import get_schemadoc_logger
from schemadoc.typeinfo.shapes import resolve_alias

logger = get_schemadoc_logger(__name__)

ALIAS_METADATA_KEY = "alias"
"""Dataclass ``field(metadata=...)`` key holding the serialized member name. ``"-"`` suppresses the member."""

SUPPRESSED = "-"


@dataclass(frozen=True, slots=True)
class StructMember:
    """One runtime member of a structure.

    ``output_name`` is None when the member is private or explicitly
    suppressed from serialization.
    """

    name: str
    output_name: str | None
    annotation: Any


def struct_members(tp: Any) -> tuple[StructMember, ...]:
    """List the members of a structure in the order the runtime reports them.

    Base-class members come first. Output names follow pydantic
    ``serialization_alias``/``alias`` and ``exclude=True``, or the dataclass
    ``alias`` metadata key; members without either use their declared name.
    NewType and ``type`` aliases of a structure list the aliased structure's members.
    """
    tp = resolve_alias(tp)
    cls = get_origin(tp) or tp
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        return tuple(
            StructMember(name=name, output_name=_pydantic_output_name(name, info), annotation=info.annotation)
            for name, info in cls.model_fields.items()
        )
    hints = _type_hints(cls)
    if dataclasses.is_dataclass(cls):
        return tuple(
            StructMember(name=f.name, output_name=_dataclass_output_name(f), annotation=hints.get(f.name, f.type))
            for f in dataclasses.fields(cls)
        )
    names = cls._fields if hasattr(cls, "_fields") else tuple(hints)
    return tuple(StructMember(name=name, output_name=_visible_name(name), annotation=hints.get(name, Any)) for name in names)


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except NameError as exc:
        logger.debug("Unresolved forward reference in %s, falling back to raw annotations: %s", cls.__qualname__, exc)
        hints: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            hints.update(getattr(klass, "__annotations__", {}))
        return hints


def _visible_name(name: str) -> str | None:
    if name.startswith("_"):
        return None
    return name


def _pydantic_output_name(name: str, info: Any) -> str | None:
    if info.exclude is True:
        return None
    return info.serialization_alias or info.alias or _visible_name(name)


def _dataclass_output_name(f: dataclasses.Field[Any]) -> str | None:
    if f.name.startswith("_"):
        return None
    alias = f.metadata.get(ALIAS_METADATA_KEY)
    if alias == SUPPRESSED:
        return None
    return alias or f.name
