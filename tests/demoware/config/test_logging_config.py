"""
Unit tests for the logging configuration module.

This module contains tests for the logging configuration module, ensuring
that it correctly configures logging based on the provided configuration
context and handles different logging types and error conditions.

The tests follow the Arrange-Act-Assert (AAA) pattern.
"""

import logging
import os
from typing import Callable, Iterator
from unittest.mock import patch

import pytest

from demoware.config.logging_config import (
    _AppNameFilter,
    _get_local_package_file_path,
    _load_logging_config,
    configure_logging,
)
from demoware.config.server_context import ServerContext


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    """
    Restores the root logger's handlers and level after a test reconfigures logging.
    """
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


def test_get_local_package_file_path_should_point_next_to_the_module() -> None:
    """
    Tests that built-in configuration files are resolved relative to the config package.
    """
    # Act
    result = _get_local_package_file_path("logging-config-dev.json")

    # Assert
    assert os.path.isabs(result)
    assert os.path.basename(os.path.dirname(result)) == "config"
    assert os.path.exists(result)


@pytest.mark.parametrize("logging_type, file_name", [("dev", "logging-config-dev.json"), ("PROD", "logging-config-prod.json")])
def test_configure_logging_should_load_builtin_configuration(
    context_factory: Callable[..., ServerContext], logging_type: str, file_name: str
) -> None:
    """
    Tests that the dev and prod logging types load the packaged configuration files, case insensitively.
    """
    # Arrange
    context = context_factory(logging_type=logging_type)

    with patch("demoware.config.logging_config._load_logging_config") as mock_load:
        # Act
        configure_logging(context)

    # Assert
    mock_load.assert_called_once()
    assert mock_load.call_args[0][0].endswith(file_name)


def test_configure_logging_should_load_custom_file(
    context_factory: Callable[..., ServerContext],
) -> None:
    """
    Tests that the custom logging type loads the configured file.
    """
    # Arrange
    context = context_factory(logging_type="custom", logging_config_file="/path/to/custom.json")

    with patch("demoware.config.logging_config._load_logging_config") as mock_load:
        # Act
        configure_logging(context)

    # Assert
    mock_load.assert_called_once_with("/path/to/custom.json")


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"logging_type": ""}, "Logging type must be provided."),
        ({"logging_type": "custom", "logging_config_file": ""}, "Custom logging configuration file"),
        ({"logging_type": "verbose"}, "Invalid logging type: verbose"),
    ],
)
def test_configure_logging_should_reject_invalid_settings(
    context_factory: Callable[..., ServerContext], overrides: dict, message: str
) -> None:
    """
    Tests that invalid logging settings raise a ValueError.
    """
    # Arrange
    context = context_factory(**overrides)

    # Act / Assert
    with pytest.raises(ValueError) as exc_info:
        configure_logging(context)
    assert message in str(exc_info.value)


@pytest.mark.usefixtures("restore_root_logger")
@pytest.mark.parametrize("logging_type", ["dev", "prod"])
def test_builtin_configurations_should_format_records_with_app_name(
    context_factory: Callable[..., ServerContext], logging_type: str
) -> None:
    """
    Tests that the packaged configurations are valid and that child logger records carry the app name.
    """
    # Arrange
    context = context_factory(logging_type=logging_type)

    # Act
    configure_logging(context)

    # Assert
    root = logging.getLogger()
    assert root.handlers
    record = logging.LogRecord("demoware.pipeline", logging.INFO, __file__, 1, "GET /metrics", None, None)
    for handler in root.handlers:
        assert handler.filter(record)
        assert "demoware" in handler.format(record)


def test_load_logging_config_should_raise_for_missing_file(tmp_path) -> None:
    """
    Tests that a missing configuration file is reported as a RuntimeError.
    """
    # Act / Assert
    with pytest.raises(RuntimeError) as exc_info:
        _load_logging_config(str(tmp_path / "missing.json"))
    assert "not found" in str(exc_info.value)


def test_load_logging_config_should_raise_for_invalid_json(tmp_path) -> None:
    """
    Tests that a configuration file with invalid JSON is reported as a RuntimeError.
    """
    # Arrange
    config_file = tmp_path / "broken.json"
    config_file.write_text("{not json")

    # Act / Assert
    with pytest.raises(RuntimeError) as exc_info:
        _load_logging_config(str(config_file))
    assert "Invalid JSON" in str(exc_info.value)


def test_load_logging_config_should_raise_for_invalid_schema(tmp_path) -> None:
    """
    Tests that dictConfig errors are wrapped in a RuntimeError.
    """
    # Arrange
    config_file = tmp_path / "schema.json"
    config_file.write_text('{"version": 99}')

    # Act / Assert
    with pytest.raises(RuntimeError) as exc_info:
        _load_logging_config(str(config_file))
    assert "Error loading logging config" in str(exc_info.value)


def test_app_name_filter_should_add_app_attribute() -> None:
    """
    Tests that the filter injects the app name and never drops a record.
    """
    # Arrange
    log_filter = _AppNameFilter(app_name="demoware")
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)

    # Act
    result = log_filter.filter(record)

    # Assert
    assert result is True
    assert record.app == "demoware"
