"""
Logging configuration module for the demoware mock metrics server.

This module provides functionality to configure logging for the application
based on the provided configuration context. It supports different logging
configurations for development, production, and custom environments.
"""

import json
import logging.config
import os
from typing import Any, Dict

from demoware.config import ServerContext
from demoware.config.constants import APP_NAME


def configure_logging(context: ServerContext) -> None:
    """
    Configure logging for the application based on the provided configuration.

    This function sets up logging based on the logging type specified in the
    configuration context. It supports three types of logging configurations:
    - dev: Development logging configuration
    - prod: Production logging configuration
    - custom: Custom logging configuration from a specified file

    It also adds an application name filter to every root handler so that
    formatters can reference the %(app)s attribute.

    Args:
        context: Configuration context containing logging settings.

    Raises:
        ValueError: If the logging type is invalid or if a custom logging
            configuration file is not provided when using the 'custom' type.
    """
    logging_type: str = context.logging_type.lower()
    if not logging_type:
        raise ValueError("Logging type must be provided.")
    elif logging_type == "dev":
        file_path = _get_local_package_file_path("logging-config-dev.json")
        _load_logging_config(file_path)
    elif logging_type == "prod":
        file_path = _get_local_package_file_path("logging-config-prod.json")
        _load_logging_config(file_path)
    elif logging_type == "custom":
        if not context.logging_config_file:
            raise ValueError("Custom logging configuration file must be provided.")
        else:
            _load_logging_config(context.logging_config_file)
    else:
        raise ValueError(
            f"Invalid logging type: {context.logging_type}. Allowed values are: dev, prod, custom"
        )

    # Handler filters see records propagated from child loggers, logger filters do not
    app_filter = _AppNameFilter(app_name=APP_NAME)
    for handler in logging.getLogger().handlers:
        handler.addFilter(app_filter)

    logging.debug("Logging configured and AppNameFilter added.")


def _load_logging_config(config_file: str) -> None:
    """
    Load logging configuration from a JSON file.

    This function reads a JSON file containing logging configuration and
    applies it to the Python logging system using dictConfig.

    Args:
        config_file: Path to the JSON file containing logging configuration.

    Raises:
        RuntimeError: If the file is not found, contains invalid JSON, or
            if there is any other error loading the configuration.
    """
    try:
        with open(config_file) as f:
            config: Dict[str, Any] = json.load(f)
            logging.config.dictConfig(config)
    except FileNotFoundError as err:
        raise RuntimeError(f"Logging config file not found: {config_file}") from err
    except json.JSONDecodeError as err:
        raise RuntimeError(f"Invalid JSON format in logging config file: {config_file}") from err
    except Exception as err:
        raise RuntimeError(f"Error loading logging config: {str(err)}") from err


def _get_local_package_file_path(config_file: str) -> str:
    """Get the absolute path to a file shipped next to this module."""
    return os.path.join(os.path.dirname(__file__), config_file)


class _AppNameFilter(logging.Filter):
    """
    A logging filter that injects the application name into every log record.

    Every record leaving the process carries an 'app' attribute, so log
    aggregators can tell the mock server apart from the systems under test.
    """

    def __init__(self, app_name: str) -> None:
        super().__init__()
        self._app_name: str = app_name

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Add the application name to the log record.

        Args:
            record: The log record to be processed.

        Returns:
            bool: Always True to allow the record to be processed further.
        """
        record.app = self._app_name
        return True
