"""Centralized logging configuration for schemadoc.

Supports YAML-based configuration files and programmatic setup with
defaults suitable for a library: schemadoc loggers write to stdout,
everything else stays at WARNING.

Usage:
    >>> from schemadoc.logging import get_schemadoc_logger
    >>> logger = get_schemadoc_logger(__name__)
    >>> logger.info("Loading declarations")

Environment variables:
    SCHEMADOC_LOGGING_CONFIG: Path to custom logging.yml
    SCHEMADOC_LOG_LEVEL: Default log level (INFO, DEBUG, etc.)
"""

import logging
import logging.config
import os
from pathlib import Path
from typing import Any

import yaml

# Default log levels for different components
DEFAULT_LOG_LEVELS = {
    "schemadoc": "WARNING",
    "schemadoc.docstore": "WARNING",
    "schemadoc.correlation": "WARNING",
    "schemadoc.objectdoc": "WARNING",
}


class LoggingConfig:
    """Manages logging configuration for schemadoc.

    Configuration precedence:
        1. Explicit config_path parameter
        2. SCHEMADOC_LOGGING_CONFIG environment variable
        3. Default configuration

    Example:
        >>> config = LoggingConfig()
        >>> config.apply()
        >>>
        >>> config = LoggingConfig(Path("custom_logging.yml"))
        >>> config.apply()

    Note:
        Configuration is lazy-loaded and cached after first access.
    """

    def __init__(self, config_path: Path | None = None):
        self.config_path = config_path or self._get_default_config_path()
        self._config: dict[str, Any] | None = None

    @staticmethod
    def _get_default_config_path() -> Path | None:
        if env_path := os.environ.get("SCHEMADOC_LOGGING_CONFIG"):
            return Path(env_path)
        return None

    def load_config(self) -> dict[str, Any]:
        """Load logging configuration from file or defaults.

        Returns:
            Dictionary in ``logging.config.dictConfig`` format. Cached after
            the first call; create a new LoggingConfig to reload from disk.
        """
        if self._config is None:
            if self.config_path and self.config_path.exists():
                with open(self.config_path, encoding="utf-8") as f:
                    self._config = yaml.safe_load(f)
            else:
                self._config = self._get_default_config()
        assert self._config is not None
        return self._config

    @staticmethod
    def _get_default_config() -> dict[str, Any]:
        """Default configuration used when no config file is found.

        Default format:
            "HH:MM:SS.mmm | LEVEL | logger.name - message"
        """
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)s - %(message)s",
                    "datefmt": "%H:%M:%S",
                },
                "detailed": {
                    "format": ("%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d - %(message)s"),
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                "schemadoc": {
                    "level": os.environ.get("SCHEMADOC_LOG_LEVEL", "WARNING"),
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
            "root": {
                "level": "WARNING",
                "handlers": ["console"],
            },
        }

    def apply(self):
        """Apply the configuration with ``logging.config.dictConfig``.

        Multiple calls reconfigure logging.
        """
        config = self.load_config()
        logging.config.dictConfig(config)


_logging_config: LoggingConfig | None = None


def setup_logging(config_path: Path | None = None, level: str | None = None):
    """Initialize logging for schemadoc.

    Args:
        config_path: Optional path to a YAML logging configuration file.
            If None, uses SCHEMADOC_LOGGING_CONFIG or the defaults.
        level: Optional level override applied to every schemadoc logger.

    Example:
        >>> setup_logging()
        >>> setup_logging(level="DEBUG")
        >>> setup_logging(Path("custom.yml"), level="WARNING")
    """
    global _logging_config

    _logging_config = LoggingConfig(config_path)
    _logging_config.apply()

    if level:
        for logger_name in DEFAULT_LOG_LEVELS:
            logging.getLogger(logger_name).setLevel(level)


def get_schemadoc_logger(name: str) -> logging.Logger:
    """Get a logger for schemadoc components.

    Initializes logging with the default configuration on first use.

    Args:
        name: Logger name, typically ``__name__``.

    Example:
        >>> logger = get_schemadoc_logger(__name__)
        >>> logger.debug("Resolved %s", "pkg.Model")
    """
    if _logging_config is None:
        setup_logging()

    return logging.getLogger(name)
