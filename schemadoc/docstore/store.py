"""Declaration store: parsed source declarations indexed by qualified name.

The store is built once from a project source tree and shared read-only by
any number of correlation passes. Modules outside the tree (standard library,
installed packages) are located without importing them and parsed on first
use; each is parsed at most once per store.
"""

import sys
import threading
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from importlib.machinery import PathFinder
from pathlib import Path

from schemadoc.docstore.extractor import ClassInfo, Declaration, ModuleInfo, module_name_for, parse_module
from schemadoc.docstore.markup import render_markdown
from schemadoc.docstore.paths import find_project_root
from schemadoc.exceptions import PackageError, PackageErrors, StoreLoadError
from schemadoc.logging import get_schemadoc_logger
from schemadoc.settings import settings

logger = get_schemadoc_logger(__name__)

# Re-export chains longer than this are treated as unresolvable.
MAX_RESOLUTION_DEPTH = 16


@dataclass(frozen=True)
class DeclarationHandle:
    """A declaration together with the module it is declared in."""

    declaration: Declaration
    module: ModuleInfo


class DeclarationStore:
    """Read-only index of module declarations.

    Construct with ``DeclarationStore.load(root)`` for a source tree, or pass
    already parsed modules directly. Several stores may coexist.
    """

    def __init__(self, modules: Mapping[str, ModuleInfo], root: Path | None = None, *, doc_link_base_url: str | None = None) -> None:
        self.root = root
        self.doc_link_base_url = settings.doc_link_base_url if doc_link_base_url is None else doc_link_base_url
        self._modules = dict(modules)
        self._external: dict[str, ModuleInfo | None] = {}
        self._lock = threading.Lock()

    @classmethod
    def load(
        cls,
        root: Path | None = None,
        *,
        exclude_dirs: Iterable[str] | None = None,
        doc_link_base_url: str | None = None,
    ) -> "DeclarationStore":
        """Parse every module under ``root`` (default: the discovered project root).

        Raises:
            RootNotFoundError: no root given and no marker file found.
            StoreLoadError: a source file could not be read.
            PackageErrors: modules failed to compile or import missing project modules.
        """
        root = (root or find_project_root()).resolve()
        excluded = frozenset(settings.source_exclude_dirs if exclude_dirs is None else exclude_dirs)

        modules: dict[str, ModuleInfo] = {}
        errors: list[PackageError] = []
        for path in _iter_source_files(root, excluded):
            name = module_name_for(path)
            try:
                module = parse_module(path, name)
            except SyntaxError as exc:
                errors.append(PackageError(module=name, message=f"{exc.msg} ({path}:{exc.lineno})"))
                continue
            except (OSError, UnicodeDecodeError) as exc:
                raise StoreLoadError(path, str(exc)) from exc
            if name in modules:
                logger.debug("Module %s already loaded from %s, skipping %s", name, modules[name].path, path)
                continue
            modules[name] = module

        errors.extend(_unresolved_imports(modules))
        if errors:
            raise PackageErrors(tuple(errors))

        logger.info("Loaded %d modules from %s", len(modules), root)
        return cls(modules, root, doc_link_base_url=doc_link_base_url)

    @property
    def modules(self) -> Mapping[str, ModuleInfo]:
        """Modules loaded from the project tree, by dotted name."""
        return self._modules

    def get_module(self, name: str) -> ModuleInfo | None:
        """Return a module by dotted name, loading modules outside the project tree on demand."""
        module = self._modules.get(name)
        if module is not None:
            return module
        with self._lock:
            if name not in self._external:
                self._external[name] = _load_external(name)
            return self._external[name]

    def find_module_by_basename(self, basename: str) -> ModuleInfo | None:
        """Return the first project module whose last dotted segment is ``basename``."""
        for name in sorted(self._modules):
            if name.rpartition(".")[2] == basename:
                return self._modules[name]
        return None

    def lookup(self, namespace: str, name: str) -> DeclarationHandle | None:
        """Find the declaration of ``name`` (a qualname, dots for nested classes) in module ``namespace``.

        Names imported into the module (``from x import Name``, ``from x import *``)
        are followed to the module that declares them.
        """
        return self._lookup(namespace, name, 0)

    def render_comment(self, module: ModuleInfo, text: str) -> str:
        """Render a raw doc comment from ``module`` into Markdown with resolved links."""
        return render_markdown(text, _ModuleLinkResolver(self, module))

    def _lookup(self, namespace: str, name: str, depth: int) -> DeclarationHandle | None:
        if depth > MAX_RESOLUTION_DEPTH:
            return None
        module = self.get_module(namespace)
        if module is None:
            return None

        head, _, rest = name.partition(".")
        decl = module.declarations.get(head)
        if decl is None:
            return self._lookup_imported(module, head, rest, depth)
        for part in rest.split(".") if rest else ():
            if not isinstance(decl, ClassInfo):
                return None
            decl = decl.nested(part)
            if decl is None:
                return None
        return DeclarationHandle(declaration=decl, module=module)

    def _lookup_imported(self, module: ModuleInfo, head: str, rest: str, depth: int) -> DeclarationHandle | None:
        imported = module.imports.get(head)
        if imported is not None:
            if imported.name is None:
                return self._lookup(imported.module, rest, depth + 1) if rest else None
            handle = self._lookup(imported.module, f"{imported.name}.{rest}" if rest else imported.name, depth + 1)
            if handle is None and rest:
                # ``from package import submodule``
                handle = self._lookup(f"{imported.module}.{imported.name}", rest, depth + 1)
            return handle
        for star in module.star_imports:
            handle = self._lookup(star, f"{head}.{rest}" if rest else head, depth + 1)
            if handle is not None:
                return handle
        return None


class _ModuleLinkResolver:
    """Resolves doc links relative to one module."""

    def __init__(self, store: DeclarationStore, module: ModuleInfo) -> None:
        self._store = store
        self._module = module

    def resolve(self, target: str) -> str | None:
        parts = target.split(".")
        url = self._resolve_in(self._module, parts, 0)
        if url is not None:
            return url
        for split in range(len(parts) - 1, 0, -1):
            module = self._find_module(".".join(parts[:split]))
            if module is None:
                continue
            url = self._resolve_in(module, parts[split:], 0)
            if url is not None:
                return url
        return None

    def resolve_module(self, target: str) -> str | None:
        module = self._find_module(target)
        if module is None:
            return None
        return self._url(module.name, None)

    def _find_module(self, alias: str) -> ModuleInfo | None:
        imported = self._module.imports.get(alias)
        if imported is not None:
            name = imported.module if imported.name is None else f"{imported.module}.{imported.name}"
            module = self._store.get_module(name)
            if module is not None:
                return module
        return self._store.get_module(alias) or self._store.find_module_by_basename(alias)

    def _resolve_in(self, module: ModuleInfo, parts: list[str], depth: int) -> str | None:
        if depth > MAX_RESOLUTION_DEPTH:
            return None
        decl = module.declarations.get(parts[0])
        if decl is None:
            imported = module.imports.get(parts[0])
            if imported is None or imported.name is None:
                return None
            source = self._store.get_module(imported.module)
            if source is None:
                return self._url(imported.module, ".".join([imported.name, *parts[1:]])) if len(parts) == 1 else None
            return self._resolve_in(source, [imported.name, *parts[1:]], depth + 1)

        for part in parts[1:-1]:
            decl = decl.nested(part) if isinstance(decl, ClassInfo) else None
            if decl is None:
                return None
        if len(parts) > 1 and (not isinstance(decl, ClassInfo) or parts[-1] not in decl.member_names):
            return None
        return self._url(module.name, ".".join(parts))

    def _url(self, module: str, symbol: str | None) -> str:
        base_url = self._store.doc_link_base_url
        if base_url:
            page = f"{base_url.rstrip('/')}/{module}"
            return f"{page}#{symbol}" if symbol else page
        return f"#{module}.{symbol}" if symbol else f"#{module}"


def _iter_source_files(root: Path, excluded: frozenset[str]) -> Iterator[Path]:
    for directory, dirnames, filenames in root.walk():
        dirnames[:] = sorted(d for d in dirnames if d not in excluded and not d.startswith("."))
        for filename in sorted(filenames):
            if filename.endswith(".py"):
                yield directory / filename


def _unresolved_imports(modules: Mapping[str, ModuleInfo]) -> list[PackageError]:
    """Report unconditional imports of project modules that do not exist."""
    local_packages = {name.split(".")[0] for name in modules}
    errors: list[PackageError] = []
    for module in modules.values():
        for imported in module.required_imports:
            if imported.split(".")[0] in local_packages and imported not in modules:
                errors.append(PackageError(module=module.name, message=f"cannot resolve import {imported}"))
    return errors


def _find_source(name: str) -> Path | None:
    """Locate the .py source of a module without importing it."""
    loaded = sys.modules.get(name)
    file = getattr(loaded, "__file__", None)
    if file and file.endswith(".py"):
        return Path(file)

    parts = name.split(".")
    if not all(parts):
        return None
    search: list[str] | None = None
    spec = None
    for index in range(len(parts)):
        spec = PathFinder.find_spec(".".join(parts[: index + 1]), search)
        if spec is None:
            return None
        if index < len(parts) - 1:
            if spec.submodule_search_locations is None:
                return None
            search = list(spec.submodule_search_locations)
    if spec is None or not spec.origin or not spec.origin.endswith(".py"):
        return None
    return Path(spec.origin)


def _load_external(name: str) -> ModuleInfo | None:
    path = _find_source(name)
    if path is None:
        logger.debug("No Python source for module %s", name)
        return None
    try:
        module = parse_module(path, name)
    except (SyntaxError, OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to parse external module %s at %s: %s", name, path, exc)
        return None
    logger.debug("Loaded external module %s from %s", name, path)
    return module
