"""End-to-end documentation generation for a root type."""

from collections.abc import Iterable, Sequence
from typing import Any

from schemadoc.correlation import DocumentationCorrelator
from schemadoc.docstore import DeclarationStore
from schemadoc.exceptions import RulePlanError
from schemadoc.logging import get_schemadoc_logger
from schemadoc.objectdoc.mapper import ROOT_PATH, generate_object_doc
from schemadoc.objectdoc.merge import extend_with_validation_plan, merge_docs
from schemadoc.objectdoc.models import ObjectDoc, PropertyDoc
from schemadoc.objectdoc.postprocess import DEFAULT_POST_PROCESSORS, PropertyPostProcessor, post_process_properties
from schemadoc.planning import ValidationPlanner
from schemadoc.typeinfo import describe

logger = get_schemadoc_logger(__name__)


def generate(
    root_type: Any,
    planner: ValidationPlanner | None = None,
    *,
    store: DeclarationStore | None = None,
    filtered_paths: Iterable[str] = (),
    post_processors: Sequence[PropertyPostProcessor] = DEFAULT_POST_PROCESSORS,
) -> ObjectDoc:
    """Generate the flattened documentation of ``root_type``.

    Steps, in order: walk the type, correlate it with its declarations,
    merge the planner's validation facts, attach docs, exclude
    ``filtered_paths`` and run ``post_processors``. ``ObjectDoc.doc`` is the
    root type's doc after the same ``post_processors``.

    Args:
        root_type: Structure (or any annotation) to document.
        planner: Source of validation facts; without one properties carry docs only.
        store: Declarations to correlate against. Loaded from the discovered
            project root when omitted; pass one to reuse it across calls.
        filtered_paths: Property paths to exclude, on top of ``settings.excluded_paths``.
        post_processors: Property transforms, run in order.

    Raises:
        RulePlanError: the planner failed; the planner's exception is chained.
        CorrelationError: correlation failed (see ``DocumentationCorrelator.correlate``).
        RootNotFoundError, StoreLoadError, PackageErrors: the default store failed to load.
    """
    type_name = describe(root_type).name
    doc = generate_object_doc(root_type)

    if store is None:
        store = DeclarationStore.load()
    docs = DocumentationCorrelator(store).correlate(root_type)

    if planner is not None:
        try:
            plan = planner.plan(root_type)
        except Exception as exc:
            raise RulePlanError(type_name) from exc
        doc = extend_with_validation_plan(doc, plan)

    doc = merge_docs(doc, docs)
    doc = post_process_properties(doc, filtered_paths, *post_processors)

    root_entry = docs.get(describe(root_type).key)
    if root_entry is not None:
        doc = doc.model_copy(update={"doc": _root_doc(root_entry.doc, post_processors)})
    logger.info("Generated documentation for %s: %d properties", type_name, len(doc.properties))
    return doc


def _root_doc(text: str, post_processors: Sequence[PropertyPostProcessor]) -> str:
    """Root type doc with the same transforms the root property's type doc receives."""
    root = PropertyDoc(path=ROOT_PATH, type_doc=text)
    for process in post_processors:
        root = process(root)
    return root.type_doc.strip()
