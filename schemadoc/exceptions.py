"""Exception hierarchy for schemadoc.

All exceptions inherit from SchemaDocError. Every failure carries its context
as attributes (paths, qualified names, member trail) so callers can branch on
the exception class and inspect the fields instead of parsing messages.
"""

from dataclasses import dataclass
from pathlib import Path


class SchemaDocError(Exception):
    """Base exception for all schemadoc errors."""


class RootNotFoundError(SchemaDocError):
    """Raised when no project marker file exists in the start directory or any of its parents."""

    def __init__(self, start: Path, marker: str) -> None:
        self.start = start
        self.marker = marker
        super().__init__(f"{marker} not found in {start} or any parent directory")


class StoreLoadError(SchemaDocError):
    """Raised when a source file under the project root cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"failed to load {path}: {reason}")


@dataclass(frozen=True)
class PackageError:
    """Single compile-level or import resolution problem found while building the store."""

    module: str
    message: str

    def __str__(self) -> str:
        return f"module {self.module} has reported an error: {self.message}"


class PackageErrors(SchemaDocError):
    """Raised when one or more modules under the project root fail to compile or resolve imports.

    All problems are collected before raising; ``errors`` enumerates every one of them.
    """

    def __init__(self, errors: tuple[PackageError, ...]) -> None:
        self.errors = errors
        lines = "\n".join(f"  - {error}" for error in errors)
        super().__init__(f"{len(errors)} module error(s) found while loading declarations:\n{lines}")


class CorrelationError(SchemaDocError):
    """Base exception for failures while correlating a type with its declarations.

    ``trail`` lists the ``Owner.member`` hops from the correlated root down to the
    failing type, outermost first.
    """

    def __init__(self, message: str) -> None:
        self.trail: list[str] = []
        super().__init__(message)

    def add_member_context(self, owner: str, member: str) -> None:
        """Record that the failure happened while correlating ``owner.member``."""
        self.trail.insert(0, f"{owner}.{member}")
        self.add_note(f"while correlating {owner} field {member}")


class DeclarationNotFoundError(CorrelationError):
    """Raised when a named type has no module or no declaration in the store."""

    def __init__(self, namespace: str, name: str, reason: str = "declaration not found") -> None:
        self.namespace = namespace
        self.name = name
        self.reason = reason
        super().__init__(f"{namespace}.{name}: {reason}")


class MalformedDeclarationError(CorrelationError):
    """Raised when a declaration exists but its shape does not match the runtime type."""

    def __init__(self, namespace: str, name: str, expected: str) -> None:
        self.namespace = namespace
        self.name = name
        self.expected = expected
        super().__init__(f"failed to parse {namespace}.{name}, expected {expected}")


class NoDocumentationError(CorrelationError):
    """Raised when correlation found nothing to document, e.g. for a bare built-in root type."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"no documentation found for type {type_name}")


class RulePlanError(SchemaDocError):
    """Raised when the validation planner fails to produce rule facts for the root type."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"failed to generate validation plan for {type_name}")
