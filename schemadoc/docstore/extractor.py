"""AST-based declaration extraction from Python source files.

Extracts classes (with fields, methods and nested classes), functions,
module-level values and imports, keeping the doc text attached to each
declaration. Field docs come from attribute docstrings, Sphinx ``#:``
comments or a pydantic ``Field(description=...)`` literal.
"""

import ast
import inspect
import io
import tokenize
from collections.abc import Iterator
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path


@dataclass(frozen=True)
class FieldInfo:
    """Class-body attribute declaration.

    A multi-target assignment (``a = b = 0`` or ``a, b = 0, 1``) declares
    every name in ``names`` with the same doc.
    """

    names: tuple[str, ...]
    annotation: str
    doc: str
    lineno: int


@dataclass(frozen=True)
class ClassInfo:
    """Extracted class declaration."""

    name: str
    qualname: str
    bases: tuple[str, ...]
    docstring: str
    fields: tuple[FieldInfo, ...]
    methods: tuple[str, ...]
    classes: tuple["ClassInfo", ...]
    module_path: str
    lineno: int = 0

    @cached_property
    def field_map(self) -> dict[str, FieldInfo]:
        """Map every declared field name to its declaration."""
        result: dict[str, FieldInfo] = {}
        for info in self.fields:
            for name in info.names:
                result.setdefault(name, info)
        return result

    @cached_property
    def member_names(self) -> frozenset[str]:
        """Names of fields, methods and nested classes."""
        return frozenset(self.field_map) | frozenset(self.methods) | frozenset(c.name for c in self.classes)

    def nested(self, name: str) -> "ClassInfo | None":
        """Return the directly nested class called ``name``."""
        for cls in self.classes:
            if cls.name == name:
                return cls
        return None


@dataclass(frozen=True)
class FunctionInfo:
    """Extracted module-level function."""

    name: str
    docstring: str
    is_async: bool
    module_path: str
    lineno: int = 0


@dataclass(frozen=True)
class ValueInfo:
    """Extracted module-level value: NewType, type alias, constant or plain assignment."""

    name: str
    kind: str  # "NewType", "TypeAlias", "Constant", "Value"
    docstring: str
    module_path: str
    lineno: int = 0


@dataclass(frozen=True)
class ImportInfo:
    """Target of a module-level import binding: a module, or ``name`` inside a module."""

    module: str
    name: str | None = None


Declaration = ClassInfo | FunctionInfo | ValueInfo


@dataclass(frozen=True)
class ModuleInfo:
    """Parsed module with its declarations and import bindings."""

    name: str
    path: Path
    docstring: str
    is_package: bool
    classes: tuple[ClassInfo, ...]
    functions: tuple[FunctionInfo, ...]
    values: tuple[ValueInfo, ...]
    imports: dict[str, ImportInfo] = field(default_factory=dict)
    star_imports: tuple[str, ...] = ()
    required_imports: tuple[str, ...] = ()

    @cached_property
    def declarations(self) -> dict[str, Declaration]:
        """Top-level declarations by name. Later definitions win, as at runtime."""
        result: dict[str, Declaration] = {}
        for decl in sorted((*self.values, *self.functions, *self.classes), key=lambda d: d.lineno):
            result[decl.name] = decl
        return result

    @property
    def package(self) -> str:
        """Dotted name of the package relative imports resolve against."""
        if self.is_package:
            return self.name
        return self.name.rpartition(".")[0]


@dataclass(frozen=True)
class _Comment:
    text: str
    standalone: bool


def module_name_for(path: Path) -> str:
    """Derive the dotted module name from the ``__init__.py`` package chain.

    e.g. src/schemadoc/docstore/store.py -> schemadoc.docstore.store
    """
    path = path.resolve()
    parts = [] if path.name == "__init__.py" else [path.stem]
    directory = path.parent
    while (directory / "__init__.py").is_file() and directory.parent != directory:
        parts.append(directory.name)
        directory = directory.parent
    return ".".join(reversed(parts))


def parse_module(path: Path, module_name: str | None = None) -> ModuleInfo:
    """Parse a single .py file and return its declarations.

    Raises OSError/UnicodeDecodeError when the file cannot be read and
    SyntaxError when it does not compile.
    """
    source = path.read_text(encoding="utf-8")
    return parse_source(source, module_name or module_name_for(path), path)


def parse_source(source: str, module_name: str, path: Path) -> ModuleInfo:
    """Parse module source text. ``path`` is recorded for error messages only."""
    tree = ast.parse(source, filename=str(path))
    comments = _doc_comments(source)
    is_package = path.name == "__init__.py"

    classes: list[ClassInfo] = []
    functions: list[FunctionInfo] = []
    values: list[ValueInfo] = []
    for block in _module_level_blocks(tree.body):
        for index, node in enumerate(block):
            if isinstance(node, ast.ClassDef):
                classes.append(_extract_class(node, module_name, node.name, comments))
            elif isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                functions.append(_extract_function(node, module_name))
            else:
                values.extend(_extract_values(block, index, module_name, comments))

    imports, star_imports, required = _extract_imports(tree, module_name, is_package)
    return ModuleInfo(
        name=module_name,
        path=path,
        docstring=ast.get_docstring(tree) or "",
        is_package=is_package,
        classes=tuple(classes),
        functions=tuple(functions),
        values=tuple(values),
        imports=imports,
        star_imports=star_imports,
        required_imports=required,
    )


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _doc_comments(source: str) -> dict[int, _Comment]:
    """Collect Sphinx-style ``#:`` comments by line number."""
    comments: dict[int, _Comment] = {}
    for token in tokenize.generate_tokens(io.StringIO(source).readline):
        if token.type != tokenize.COMMENT or not token.string.startswith("#:"):
            continue
        text = token.string[2:]
        if text.startswith(" "):
            text = text[1:]
        comments[token.start[0]] = _Comment(text=text.rstrip(), standalone=token.line.lstrip().startswith("#"))
    return comments


def _assignment_names(node: ast.stmt) -> tuple[str, ...]:
    targets: list[ast.expr] = []
    if isinstance(node, ast.AnnAssign):
        targets = [node.target]
    elif isinstance(node, ast.Assign):
        targets = list(node.targets)
    elif isinstance(node, ast.TypeAlias):
        targets = [node.name]
    names: list[str] = []
    for target in targets:
        if isinstance(target, ast.Name):
            names.append(target.id)
        elif isinstance(target, (ast.Tuple, ast.List)):
            names.extend(elt.id for elt in target.elts if isinstance(elt, ast.Name))
    return tuple(names)


def _statement_doc(body: list[ast.stmt], index: int, comments: dict[int, _Comment]) -> str:
    """Doc attached to an assignment: attribute docstring, ``#:`` comments, or Field(description=...)."""
    node = body[index]
    if index + 1 < len(body):
        following = body[index + 1]
        if isinstance(following, ast.Expr) and isinstance(following.value, ast.Constant) and isinstance(following.value.value, str):
            return inspect.cleandoc(following.value.value)

    lines: list[str] = []
    line = node.lineno - 1
    while line in comments and comments[line].standalone:
        lines.append(comments[line].text)
        line -= 1
    if lines:
        return "\n".join(reversed(lines))

    trailing = comments.get(node.end_lineno or node.lineno)
    if trailing is not None and not trailing.standalone:
        return trailing.text

    value = getattr(node, "value", None)
    if isinstance(value, ast.Call) and _call_name(value) in ("Field", "field"):
        for keyword in value.keywords:
            if keyword.arg == "description" and isinstance(keyword.value, ast.Constant) and isinstance(keyword.value.value, str):
                return inspect.cleandoc(keyword.value.value)
    return ""


def _call_name(node: ast.Call) -> str:
    if isinstance(node.func, ast.Attribute):
        return node.func.attr
    if isinstance(node.func, ast.Name):
        return node.func.id
    return ""


def _extract_class(node: ast.ClassDef, module_path: str, qualname: str, comments: dict[int, _Comment]) -> ClassInfo:
    fields: list[FieldInfo] = []
    methods: list[str] = []
    classes: list[ClassInfo] = []

    for index, item in enumerate(node.body):
        if isinstance(item, (ast.FunctionDef, ast.AsyncFunctionDef)):
            methods.append(item.name)
        elif isinstance(item, ast.ClassDef):
            classes.append(_extract_class(item, module_path, f"{qualname}.{item.name}", comments))
        elif isinstance(item, (ast.AnnAssign, ast.Assign)):
            names = _assignment_names(item)
            if not names:
                continue
            annotation = ast.unparse(item.annotation) if isinstance(item, ast.AnnAssign) else ""
            fields.append(FieldInfo(names=names, annotation=annotation, doc=_statement_doc(node.body, index, comments), lineno=item.lineno))

    return ClassInfo(
        name=node.name,
        qualname=qualname,
        bases=tuple(ast.unparse(base) for base in node.bases),
        docstring=ast.get_docstring(node) or "",
        fields=tuple(fields),
        methods=tuple(methods),
        classes=tuple(classes),
        module_path=module_path,
        lineno=node.lineno,
    )


def _extract_function(node: ast.FunctionDef | ast.AsyncFunctionDef, module_path: str) -> FunctionInfo:
    return FunctionInfo(
        name=node.name,
        docstring=ast.get_docstring(node) or "",
        is_async=isinstance(node, ast.AsyncFunctionDef),
        module_path=module_path,
        lineno=node.lineno,
    )


def _extract_values(body: list[ast.stmt], index: int, module_path: str, comments: dict[int, _Comment]) -> list[ValueInfo]:
    """Extract module-level NewType, type alias, constant or plain assignment."""
    node = body[index]
    names = _assignment_names(node)
    if not names:
        return []
    doc = _statement_doc(body, index, comments)
    kind = "Value"
    if isinstance(node, ast.TypeAlias) or (isinstance(node, ast.AnnAssign) and "TypeAlias" in ast.unparse(node.annotation)):
        kind = "TypeAlias"
    elif isinstance(value := getattr(node, "value", None), ast.Call) and _call_name(value) == "NewType":
        kind = "NewType"
    elif len(names) == 1 and names[0].isupper() and len(names[0]) > 1:
        kind = "Constant"
    return [ValueInfo(name=name, kind=kind, docstring=doc, module_path=module_path, lineno=node.lineno) for name in names]


def _module_level_blocks(body: list[ast.stmt]) -> Iterator[list[ast.stmt]]:
    """Yield the module body and every ``if``/``try``/``with`` block nested in it."""
    yield body
    for node in body:
        if isinstance(node, ast.If):
            yield from _module_level_blocks(node.body)
            yield from _module_level_blocks(node.orelse)
        elif isinstance(node, (ast.Try, ast.TryStar)):
            yield from _module_level_blocks(node.body)
            for handler in node.handlers:
                yield from _module_level_blocks(handler.body)
            yield from _module_level_blocks(node.orelse)
            yield from _module_level_blocks(node.finalbody)
        elif isinstance(node, ast.With):
            yield from _module_level_blocks(node.body)


def _module_level_statements(body: list[ast.stmt], guarded: bool = False) -> Iterator[tuple[ast.stmt, bool]]:
    """Yield statements executed at import time, flagging those inside ``try`` blocks."""
    for node in body:
        yield node, guarded
        if isinstance(node, ast.If):
            yield from _module_level_statements(node.body, guarded)
            yield from _module_level_statements(node.orelse, guarded)
        elif isinstance(node, (ast.Try, ast.TryStar)):
            yield from _module_level_statements(node.body, True)
            for handler in node.handlers:
                yield from _module_level_statements(handler.body, True)
            yield from _module_level_statements(node.orelse, True)
            yield from _module_level_statements(node.finalbody, guarded)
        elif isinstance(node, ast.With):
            yield from _module_level_statements(node.body, guarded)


def _resolve_relative(package: str, level: int, module: str | None) -> str:
    parts = package.split(".") if package else []
    if level > 1:
        parts = parts[: len(parts) - (level - 1)]
    base = ".".join(parts)
    if not module:
        return base
    return f"{base}.{module}" if base else module


def _extract_imports(tree: ast.Module, module_name: str, is_package: bool) -> tuple[dict[str, ImportInfo], tuple[str, ...], tuple[str, ...]]:
    """Collect import bindings, star imports and unconditionally imported modules."""
    package = module_name if is_package else module_name.rpartition(".")[0]
    imports: dict[str, ImportInfo] = {}
    star_imports: list[str] = []
    required: list[str] = []

    for node, guarded in _module_level_statements(tree.body):
        if isinstance(node, ast.Import):
            for alias in node.names:
                if not guarded:
                    required.append(alias.name)
                if alias.asname:
                    imports[alias.asname] = ImportInfo(module=alias.name)
                else:
                    top = alias.name.split(".")[0]
                    imports[top] = ImportInfo(module=top)
        elif isinstance(node, ast.ImportFrom):
            source = _resolve_relative(package, node.level, node.module) if node.level else (node.module or "")
            if not source:
                continue
            if not guarded:
                required.append(source)
            for alias in node.names:
                if alias.name == "*":
                    star_imports.append(source)
                else:
                    imports[alias.asname or alias.name] = ImportInfo(module=source, name=alias.name)

    return imports, tuple(star_imports), tuple(dict.fromkeys(required))
