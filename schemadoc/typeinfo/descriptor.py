"""Semantic type descriptors for property documentation."""

import collections.abc
import enum
from typing import Any, ForwardRef, Literal, NewType, TypeAliasType, TypeVar, get_args, get_origin

from pydantic import BaseModel, ConfigDict

from schemadoc.typeinfo.shapes import NoneType, Shape, declared_type, inspect_type, is_union, unwrap

_PRIMITIVE_KINDS: tuple[type, ...] = (bool, int, float, complex, str, bytes)


class TypeDescriptor(BaseModel):
    """Name, structural kind and defining module of a type.

    ``namespace`` is empty for built-in and unnamed (generic alias) types.
    """

    model_config = ConfigDict(frozen=True)

    name: str = ""
    kind: str = ""
    namespace: str = ""

    @property
    def key(self) -> str:
        """Qualified name: ``namespace.name``, or bare ``name`` for built-ins."""
        if not self.namespace:
            return self.name
        return f"{self.namespace}.{self.name}"


def describe(tp: Any) -> TypeDescriptor:
    """Return the descriptor for a runtime annotation.

    Optional and Annotated wrappers are transparent. Named types report their
    declared name and module. An unnamed sequence of a named element keeps
    the sequence marker in its name but reports the element's module:

        describe(list[Student]) -> TypeDescriptor(name="list[Student]", namespace="models")

    ``describe(None)`` (no type at all) returns the zero descriptor; the None
    annotation arrives here as ``NoneType``.
    """
    if tp is None:
        return TypeDescriptor()
    shape = inspect_type(tp)
    kind = kind_of(tp)
    if shape.named:
        decl = declared_type(shape.target)
        return TypeDescriptor(name=_declared_name(decl), kind=kind, namespace=decl.__module__)
    if shape.shape is Shape.SEQUENCE:
        element = unwrap(shape.element)
        if inspect_type(element).named:
            element_info = describe(element)
            return TypeDescriptor(name=_sequence_name(shape.target, element_info.name), kind=kind, namespace=element_info.namespace)
    return TypeDescriptor(name=type_repr(shape.target), kind=kind)


def kind_of(tp: Any, _seen: frozenset[Any] = frozenset()) -> str:
    """Normalized structural kind, computed recursively for containers.

    ``dict[str, list[int]]`` -> ``mapping<str,sequence<int>>``. A named
    container met again inside itself reports its bare shape.
    """
    shape = inspect_type(tp)
    if shape.named and shape.shape in (Shape.SEQUENCE, Shape.MAPPING):
        if shape.target in _seen:
            return shape.shape.value
        _seen = _seen | {shape.target}
    if shape.shape is Shape.STRUCTURE:
        return "struct"
    if shape.shape is Shape.SEQUENCE:
        return f"sequence<{kind_of(shape.element, _seen)}>"
    if shape.shape is Shape.MAPPING:
        return f"mapping<{kind_of(shape.key, _seen)},{kind_of(shape.value, _seen)}>"
    return _primitive_kind(shape.target)


def type_repr(tp: Any) -> str:
    """Render an annotation the way it is written in source, with short class names."""
    if tp is None or tp is NoneType:
        return "None"
    if tp is Any:
        return "Any"
    if tp is Ellipsis:
        return "..."
    if isinstance(tp, (NewType, TypeAliasType, TypeVar)):
        return tp.__name__
    if isinstance(tp, str):
        return tp
    if isinstance(tp, ForwardRef):
        return tp.__forward_arg__
    if isinstance(tp, list):
        return "[" + ", ".join(type_repr(arg) for arg in tp) + "]"
    origin = get_origin(tp)
    args = get_args(tp)
    if origin is not None:
        if is_union(origin):
            return " | ".join(type_repr(arg) for arg in args)
        if origin is Literal:
            return f"Literal[{', '.join(repr(arg) for arg in args)}]"
        if args and not isinstance(origin, type):
            return type_repr(args[0])
        name = _declared_name(origin)
        if not args:
            return name
        return f"{name}[{', '.join(type_repr(arg) for arg in args)}]"
    if isinstance(tp, type):
        return _declared_name(tp)
    return repr(tp)


def _declared_name(decl: Any) -> str:
    if isinstance(decl, (NewType, TypeAliasType)):
        return decl.__name__
    return getattr(decl, "__qualname__", None) or getattr(decl, "__name__", repr(decl))


def _sequence_name(target: Any, element_name: str) -> str:
    origin = get_origin(target) or target
    name = getattr(origin, "__name__", "list")
    if origin is tuple:
        return f"tuple[{element_name}, ...]"
    return f"{name}[{element_name}]"


def _primitive_kind(target: Any) -> str:  # noqa: PLR0911
    if isinstance(target, NewType):
        return kind_of(target.__supertype__)
    if isinstance(target, TypeAliasType):
        return kind_of(target.__value__)
    if target is Any or isinstance(target, TypeVar):
        return "any"
    origin = get_origin(target)
    if origin is Literal:
        return "literal"
    if is_union(origin):
        return "union"
    if origin is collections.abc.Callable:
        return "func"
    if origin is tuple:
        return "tuple"
    if isinstance(origin, type):
        target = origin
    if not isinstance(target, type):
        return "func" if callable(target) else "object"
    if target is NoneType:
        return "none"
    if issubclass(target, enum.Enum):
        return "enum"
    for primitive in _PRIMITIVE_KINDS:
        if issubclass(target, primitive):
            return primitive.__name__
    if issubclass(target, bytearray):
        return "bytes"
    if getattr(target, "_is_protocol", False):
        return "interface"
    return "object"
