"""Normalization of runtime annotations into structural shapes.

Every annotation reaching the walker or the correlator is first reduced to a
TypeShape: wrappers that do not change identity (Annotated, Optional,
Required/NotRequired) are stripped, and the remaining type is classified as a
structure, a sequence, a mapping or a primitive leaf.
"""

import collections
import collections.abc
import dataclasses
import types
import typing
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Annotated, Any, NewType, TypeAliasType, TypeVar, get_args, get_origin

from pydantic import BaseModel

NoneType = type(None)

_TRANSPARENT_FORMS: tuple[Any, ...] = (typing.Required, typing.NotRequired, typing.ClassVar, typing.Final)

_SEQUENCE_TYPES: frozenset[Any] = frozenset({
    list,
    tuple,
    set,
    frozenset,
    collections.deque,
    collections.abc.Iterable,
    collections.abc.Collection,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
})

_MAPPING_TYPES: frozenset[Any] = frozenset({
    dict,
    collections.OrderedDict,
    collections.defaultdict,
    collections.Counter,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
})


class Shape(StrEnum):
    """Structural kind used for walk dispatch."""

    PRIMITIVE = "primitive"
    STRUCTURE = "structure"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


@dataclass(frozen=True, slots=True)
class TypeShape:
    """Normalized view of a runtime annotation.

    ``target`` is the annotation after unwrapping. ``named`` is True for types
    with a declaration of their own (classes outside ``builtins``, NewType and
    ``type`` aliases). ``element`` is set for sequences, ``key``/``value`` for
    mappings.
    """

    shape: Shape
    target: Any
    named: bool
    element: Any = None
    key: Any = None
    value: Any = None


_SHAPE_CACHE: dict[Any, TypeShape] = {}  # nosemgrep: no-mutable-module-globals


def is_union(origin: Any) -> bool:
    """Check whether a ``get_origin`` result denotes a union."""
    return origin is typing.Union or origin is types.UnionType


def unwrap(tp: Any) -> Any:
    """Strip wrappers that do not change a type's identity.

    ``Annotated[T, ...]``, ``Required[T]``, ``NotRequired[T]`` and a union of a
    single type with None (``Optional[T]``) all reduce to ``T``.
    """
    while True:
        origin = get_origin(tp)
        if origin is Annotated or origin in _TRANSPARENT_FORMS:
            tp = get_args(tp)[0]
            continue
        if is_union(origin):
            args = get_args(tp)
            non_none = [arg for arg in args if arg is not NoneType]
            if len(non_none) == 1 and len(non_none) < len(args):
                tp = non_none[0]
                continue
        return tp


def resolve_alias(tp: Any) -> Any:
    """Follow NewType and ``type`` aliases down to the type they name.

    ``NewType("HomeAddress", Address)`` and ``type OfficeAddress = Address``
    both resolve to ``Address``; any other annotation is returned unwrapped.
    """
    while True:
        tp = unwrap(tp)
        if isinstance(tp, NewType):
            tp = tp.__supertype__
        elif isinstance(tp, TypeAliasType):
            tp = tp.__value__
        else:
            return tp


def is_structure(tp: Any) -> bool:
    """Check whether a type is a record with named members.

    Dataclasses, pydantic models, TypedDicts and NamedTuples qualify; generic
    aliases of those (``Box[int]``) qualify through their origin.
    """
    cls = get_origin(tp) or tp
    if not isinstance(cls, type):
        return False
    return dataclasses.is_dataclass(cls) or issubclass(cls, BaseModel) or typing.is_typeddict(cls) or _is_namedtuple(cls)


def declared_type(tp: Any) -> Any:
    """Return the object whose source declaration documents ``tp``.

    Parametrized pydantic models and typing generic aliases map back to the
    generic class they were created from.
    """
    origin = get_origin(tp)
    if isinstance(origin, type):
        tp = origin
    if isinstance(tp, type) and issubclass(tp, BaseModel):
        metadata = getattr(tp, "__pydantic_generic_metadata__", None) or {}
        if metadata.get("origin") is not None:
            return metadata["origin"]
    return tp


def inspect_type(tp: Any) -> TypeShape:
    """Classify an annotation, caching the result by type identity."""
    try:
        cached = _SHAPE_CACHE.get(tp)
    except TypeError:
        # Annotated metadata may be unhashable.
        return _inspect(tp)
    if cached is None:
        cached = _inspect(tp)
        _SHAPE_CACHE[tp] = cached
    return cached


def _inspect(tp: Any) -> TypeShape:
    tp = unwrap(tp)

    if isinstance(tp, NewType):
        return replace(inspect_type(tp.__supertype__), target=tp, named=True)
    if isinstance(tp, TypeAliasType):
        return replace(inspect_type(tp.__value__), target=tp, named=True)
    if tp is Any or isinstance(tp, TypeVar):
        return TypeShape(Shape.PRIMITIVE, tp, named=False)

    if is_structure(tp):
        return TypeShape(Shape.STRUCTURE, tp, named=True)

    origin = get_origin(tp)
    container = origin if origin is not None else tp
    args = get_args(tp)
    if container in _SEQUENCE_TYPES:
        if container is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
            # Fixed-length tuples are leaves.
            return TypeShape(Shape.PRIMITIVE, tp, named=False)
        element = args[0] if args else Any
        return TypeShape(Shape.SEQUENCE, tp, named=False, element=element)
    if container in _MAPPING_TYPES:
        key, value = _mapping_args(container, args)
        return TypeShape(Shape.MAPPING, tp, named=False, key=key, value=value)

    if isinstance(tp, type):
        if tp.__module__ == "builtins":
            return TypeShape(Shape.PRIMITIVE, tp, named=False)
        base = _container_base(tp)
        if base is not None:
            return replace(inspect_type(base), target=tp, named=True)
        return TypeShape(Shape.PRIMITIVE, tp, named=True)
    if isinstance(origin, type) and origin.__module__ != "builtins" and origin is not collections.abc.Callable and not is_union(origin):
        return TypeShape(Shape.PRIMITIVE, tp, named=True)
    return TypeShape(Shape.PRIMITIVE, tp, named=False)


def _mapping_args(container: Any, args: tuple[Any, ...]) -> tuple[Any, Any]:
    if container is collections.Counter:
        return (args[0] if args else Any), int
    if len(args) == 2:
        return args[0], args[1]
    return Any, Any


def _container_base(cls: type) -> Any:
    """Find the parametrized list/dict base of a named container class.

    ``class Students(list[Student])`` yields ``list[Student]``; an unparametrized
    subclass of ``list`` yields ``list``.
    """
    for klass in cls.__mro__:
        for base in getattr(klass, "__orig_bases__", ()):
            origin = get_origin(base)
            if origin in _SEQUENCE_TYPES or origin in _MAPPING_TYPES:
                return base
    for klass in cls.__mro__[1:]:
        if klass in _SEQUENCE_TYPES or klass in _MAPPING_TYPES:
            return klass
    return None


def _is_namedtuple(cls: type) -> bool:
    return issubclass(cls, tuple) and hasattr(cls, "_fields")
