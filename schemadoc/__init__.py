"""schemadoc - flattened, path-addressed documentation for Python data models.

Given a runtime type (dataclass, pydantic model, TypedDict, NamedTuple or any
container annotation of those), schemadoc walks every reachable property,
matches each type and member with its source declaration, and produces one
``ObjectDoc`` listing every property by path with its type, docstrings,
deprecation notes and validation facts.

Quick Start:
    >>> from schemadoc import DeclarationStore, generate
    >>> from myproject.models import Teacher
    >>>
    >>> store = DeclarationStore.load()  # parses the project containing pyproject.toml
    >>> doc = generate(Teacher, store=store)
    >>> doc.property_at("$.students[*].name").field_doc
    'Full name of the student.'

Paths use ``$`` for the root, ``.name`` for members, ``[*]`` for sequence
elements and ``.~`` / ``.*`` for mapping keys and values.

Environment Variables:
    SCHEMADOC_EXCLUDED_PATHS: JSON list of property paths always excluded
    SCHEMADOC_DOC_LINK_BASE_URL: Base URL for resolved doc links
    SCHEMADOC_ROOT_MARKER: File marking the project root (default pyproject.toml)
    SCHEMADOC_LOG_LEVEL: Level of the schemadoc loggers (default WARNING)
"""

from schemadoc.correlation import DocEntry, Docs, DocumentationCorrelator
from schemadoc.docstore import DeclarationHandle, DeclarationStore, find_project_root, render_markdown
from schemadoc.exceptions import (
    CorrelationError,
    DeclarationNotFoundError,
    MalformedDeclarationError,
    NoDocumentationError,
    PackageError,
    PackageErrors,
    RootNotFoundError,
    RulePlanError,
    SchemaDocError,
    StoreLoadError,
)
from schemadoc.logging import get_schemadoc_logger, setup_logging
from schemadoc.objectdoc import (
    DEFAULT_POST_PROCESSORS,
    ObjectDoc,
    ObjectMapper,
    PropertyDoc,
    extend_with_validation_plan,
    generate,
    generate_object_doc,
    merge_docs,
    post_process_properties,
)
from schemadoc.planning import PropertyPlan, RulePlan, StaticPlanner, ValidationPlanner, ValidatorPlan
from schemadoc.settings import Settings, settings
from schemadoc.typeinfo import TypeDescriptor, describe

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_POST_PROCESSORS",
    "CorrelationError",
    "DeclarationHandle",
    "DeclarationNotFoundError",
    "DeclarationStore",
    "DocEntry",
    "Docs",
    "DocumentationCorrelator",
    "MalformedDeclarationError",
    "NoDocumentationError",
    "ObjectDoc",
    "ObjectMapper",
    "PackageError",
    "PackageErrors",
    "PropertyDoc",
    "PropertyPlan",
    "RootNotFoundError",
    "RulePlan",
    "RulePlanError",
    "SchemaDocError",
    "Settings",
    "StaticPlanner",
    "StoreLoadError",
    "TypeDescriptor",
    "ValidationPlanner",
    "ValidatorPlan",
    "describe",
    "extend_with_validation_plan",
    "find_project_root",
    "generate",
    "generate_object_doc",
    "get_schemadoc_logger",
    "merge_docs",
    "post_process_properties",
    "render_markdown",
    "settings",
    "setup_logging",
]
