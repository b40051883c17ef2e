"""Correlation of runtime types with their source declarations.

Walks a runtime type the same way the object mapper does, but keyed by
qualified name: every named type reached is looked up in the declaration
store, its docstring rendered, and for structures every member's doc comment
attached by member *name* (never by position).
"""

import typing
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from typing import Any

from schemadoc.docstore import ClassInfo, DeclarationHandle, DeclarationStore, FieldInfo, ModuleInfo, ValueInfo
from schemadoc.exceptions import CorrelationError, DeclarationNotFoundError, MalformedDeclarationError, NoDocumentationError
from schemadoc.logging import get_schemadoc_logger
from schemadoc.typeinfo import Shape, declared_type, describe, inspect_type, resolve_alias, struct_members

logger = get_schemadoc_logger(__name__)

_ALIAS_KINDS = frozenset({"NewType", "TypeAlias"})


@dataclass
class DocEntry:
    """Documentation of one qualified name.

    ``members`` maps a structure's output member names to the member type's
    entry with ``doc`` replaced by the member's own doc comment. Entries of
    self-referential types reference each other, so the graph may be cyclic.
    """

    name: str
    namespace: str = ""
    doc: str = ""
    members: dict[str, "DocEntry"] = field(default_factory=dict)

    @property
    def key(self) -> str:
        if not self.namespace:
            return self.name
        return f"{self.namespace}.{self.name}"


Docs = dict[str, DocEntry]


class DocumentationCorrelator:
    """Builds the qualified-name keyed documentation map for runtime types.

    The store is shared; every ``correlate`` call uses a fresh memo.
    """

    def __init__(self, store: DeclarationStore) -> None:
        self.store = store

    def correlate(self, tp: Any) -> Docs:
        """Return documentation for ``tp`` and every named type reachable from it.

        Raises:
            NoDocumentationError: nothing reachable has a declaration (e.g. ``str``).
            DeclarationNotFoundError: a reachable named type has no module or declaration.
            MalformedDeclarationError: a structure is not declared with a ``class`` statement.
        """
        docs: Docs = {}
        _CorrelationPass(self.store, docs).visit(tp)
        if not docs:
            raise NoDocumentationError(describe(tp).name)
        return docs


class _CorrelationPass:
    def __init__(self, store: DeclarationStore, docs: Docs) -> None:
        self._store = store
        self._docs = docs
        # Entries are memoized as soon as their declaration is found, so a
        # type reached again through its own members resolves to the same
        # (still incomplete) entry instead of recursing.
        self._entries: dict[str, DocEntry] = {}

    def visit(self, tp: Any) -> DocEntry:
        shape = inspect_type(tp)
        if not shape.named:
            if shape.shape is Shape.SEQUENCE:
                return self.visit(shape.element)
            if shape.shape is Shape.MAPPING:
                self.visit(shape.key)
                self.visit(shape.value)
            return DocEntry(name=describe(shape.target).name)

        info = describe(shape.target)
        cached = self._entries.get(info.key)
        if cached is not None:
            logger.debug("Reusing documentation entry for %s", info.key)
            return cached

        handle = self._find_declaration(info.namespace, info.name)
        entry = DocEntry(
            name=info.name,
            namespace=info.namespace,
            doc=self._store.render_comment(handle.module, _docstring(handle)),
        )
        self._entries[info.key] = entry

        if shape.shape is Shape.STRUCTURE:
            declaration = handle.declaration
            if isinstance(declaration, ClassInfo):
                self._visit_members(shape.target, entry, declaration, handle.module)
            elif isinstance(declaration, ValueInfo) and declaration.kind in _ALIAS_KINDS:
                # Members are documented on the aliased structure.
                entry.members = self.visit(resolve_alias(shape.target)).members
            else:
                raise MalformedDeclarationError(info.namespace, info.name, "a class declaration")
        elif shape.shape is Shape.SEQUENCE:
            self.visit(shape.element)
        elif shape.shape is Shape.MAPPING:
            self.visit(shape.key)
            self.visit(shape.value)

        self._docs[info.key] = entry
        return entry

    def _find_declaration(self, namespace: str, name: str) -> DeclarationHandle:
        if self._store.get_module(namespace) is None:
            raise DeclarationNotFoundError(namespace, name, reason=f"could not find {namespace} module")
        handle = self._store.lookup(namespace, name)
        if handle is None:
            raise DeclarationNotFoundError(namespace, name, reason=f"could not find {name} declaration in {namespace}")
        return handle

    def _visit_members(self, tp: Any, entry: DocEntry, declaration: ClassInfo, module: ModuleInfo) -> None:
        own_fields = declaration.field_map
        for member in struct_members(tp):
            if member.output_name is None:
                continue
            try:
                child = self.visit(member.annotation)
            except CorrelationError as exc:
                exc.add_member_context(entry.key, member.name)
                raise

            declared, declared_in = own_fields.get(member.name), module
            if declared is None:
                declared, declared_in = self._inherited_field(tp, member.name) or (None, module)
            doc = self._store.render_comment(declared_in, declared.doc) if declared is not None else ""
            entry.members[member.output_name] = replace(child, doc=doc)

    def _inherited_field(self, tp: Any, name: str) -> tuple[FieldInfo, ModuleInfo] | None:
        """Find the declaration of a member defined on a base class."""
        for base in _base_classes(declared_type(tp)):
            handle = self._store.lookup(base.__module__, base.__qualname__)
            if handle is None or not isinstance(handle.declaration, ClassInfo):
                continue
            declared = handle.declaration.field_map.get(name)
            if declared is not None:
                return declared, handle.module
        return None


def _docstring(handle: DeclarationHandle) -> str:
    return handle.declaration.docstring


def _base_classes(cls: Any) -> Iterator[type]:
    """Base classes in lookup order. TypedDict bases only survive in ``__orig_bases__``."""
    if typing.is_typeddict(cls):
        for base in getattr(cls, "__orig_bases__", ()):
            if typing.is_typeddict(base):
                yield base
                yield from _base_classes(base)
        return
    for base in getattr(cls, "__mro__", ())[1:]:
        if base.__module__ != "builtins":
            yield base
