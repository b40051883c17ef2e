"""Logging infrastructure for schemadoc.

Key components:
    get_schemadoc_logger: Factory function for module loggers
    setup_logging: Initialize logging configuration from YAML or defaults
    LoggingConfig: Configuration class for logging settings

Example:
    >>> from schemadoc.logging import get_schemadoc_logger
    >>>
    >>> logger = get_schemadoc_logger(__name__)
    >>> logger.info("Processing started")
"""

from .logging_config import LoggingConfig, get_schemadoc_logger, setup_logging

__all__ = [
    "LoggingConfig",
    "get_schemadoc_logger",
    "setup_logging",
]
