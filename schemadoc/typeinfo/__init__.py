"""Runtime type introspection.

Reduces annotations to TypeShape values for dispatch, describes them as
TypeDescriptor values for output, and enumerates structure members with their
serialized names.
"""

from schemadoc.typeinfo.descriptor import TypeDescriptor, describe, kind_of, type_repr
from schemadoc.typeinfo.members import ALIAS_METADATA_KEY, StructMember, struct_members
from schemadoc.typeinfo.shapes import Shape, TypeShape, declared_type, inspect_type, is_structure, resolve_alias, unwrap

__all__ = [
    "ALIAS_METADATA_KEY",
    "Shape",
    "StructMember",
    "TypeDescriptor",
    "TypeShape",
    "declared_type",
    "describe",
    "inspect_type",
    "is_structure",
    "kind_of",
    "resolve_alias",
    "struct_members",
    "type_repr",
    "unwrap",
]
