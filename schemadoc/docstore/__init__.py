"""Declaration/comment store.

Parses Python sources with ``ast`` and ``tokenize`` into declarations indexed
by module and qualified name, and renders their doc comments into Markdown
with cross-references resolved.
"""

from schemadoc.docstore.extractor import (
    ClassInfo,
    Declaration,
    FieldInfo,
    FunctionInfo,
    ImportInfo,
    ModuleInfo,
    ValueInfo,
    module_name_for,
    parse_module,
    parse_source,
)
from schemadoc.docstore.markup import render_markdown
from schemadoc.docstore.paths import find_project_root
from schemadoc.docstore.store import DeclarationHandle, DeclarationStore

__all__ = [
    "ClassInfo",
    "Declaration",
    "DeclarationHandle",
    "DeclarationStore",
    "FieldInfo",
    "FunctionInfo",
    "ImportInfo",
    "ModuleInfo",
    "ValueInfo",
    "find_project_root",
    "module_name_for",
    "parse_module",
    "parse_source",
    "render_markdown",
]
