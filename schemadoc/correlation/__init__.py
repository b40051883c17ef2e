"""Documentation correlation: runtime types to rendered declaration docs."""

from schemadoc.correlation.correlator import DocEntry, Docs, DocumentationCorrelator

__all__ = [
    "DocEntry",
    "Docs",
    "DocumentationCorrelator",
]
