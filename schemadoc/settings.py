"""Core configuration settings for schemadoc.

This module provides centralized configuration for declaration loading and
document generation. Settings are loaded from environment variables with
.env file support via pydantic-settings.

Environment variables:
    SCHEMADOC_ROOT_MARKER: File name marking the project root (default pyproject.toml)
    SCHEMADOC_EXCLUDED_PATHS: JSON list of property paths removed from every document
    SCHEMADOC_DOC_LINK_BASE_URL: Base URL for resolved documentation links
    SCHEMADOC_SOURCE_EXCLUDE_DIRS: JSON list of directory names skipped while loading sources

Example:
    >>> from schemadoc.settings import settings
    >>> settings.root_marker
    'pyproject.toml'

Note:
    Settings are loaded once at module import and frozen. Components accept
    explicit arguments that take precedence over these defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for declaration loading and document generation.

    Attributes:
        root_marker: Name of the file whose presence marks the project root.
            Parent directories are searched upward from the working directory.

        excluded_paths: Process-wide list of property paths (exact match)
            dropped from every generated document, together with their
            structural descendants.

        doc_link_base_url: Base URL used when rendering resolved doc links.
            Empty renders in-document anchors (``#module.Symbol``).

        source_exclude_dirs: Directory names never descended into while
            loading the project source tree.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCHEMADOC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    root_marker: str = "pyproject.toml"
    excluded_paths: tuple[str, ...] = ()
    doc_link_base_url: str = ""
    source_exclude_dirs: tuple[str, ...] = Field(
        default=(
            ".git",
            ".venv",
            "venv",
            "__pycache__",
            "build",
            "dist",
            "node_modules",
            ".tox",
            ".mypy_cache",
            ".pytest_cache",
        )
    )


settings = Settings()
"""Global settings instance, created at import time."""
