"""
Shared fixtures for the demoware test suite.
"""

from typing import Any, Callable

import pytest

from demoware.config import ServerContext


@pytest.fixture
def context_factory() -> Callable[..., ServerContext]:
    """
    Returns a factory building a valid ServerContext bound to an ephemeral local port.

    Keyword arguments override individual fields.
    """

    def _make(**overrides: Any) -> ServerContext:
        values = dict(
            listen_address="127.0.0.1:0",
            tls_cert_file="",
            tls_key_file="",
            metrics_endpoint="/metrics",
            metrics_min_count=0,
            metrics_max_count=10,
            auth_token="",
            random_error_prob=0.0,
            shutdown_timeout=5.0,
            logging_type="dev",
            logging_config_file="",
        )
        values.update(overrides)
        return ServerContext(**values)

    return _make
