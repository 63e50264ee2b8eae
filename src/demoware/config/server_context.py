"""
Configuration context for the demoware mock metrics server.

This module defines the immutable data structure holding every configuration
parameter of the server, together with the startup validation applied to it
before any listener is bound.
"""

from typing import NamedTuple, Optional, Tuple


class ServerContext(NamedTuple):
    """
    A data structure containing all configuration parameters for the server.

    This class is immutable and is shared read-only by every request handler.
    It is created once at process start by parsing command-line arguments and
    environment variables.

    Attributes:
        listen_address: Address to listen on, in "host:port" form (host may be empty).
        tls_cert_file: Path to a PEM certificate; TLS is enabled only when the key is also set.
        tls_key_file: Path to the PEM private key matching tls_cert_file.
        metrics_endpoint: HTTP path serving the metrics payloads.
        metrics_min_count: Minimum number of metrics per response.
        metrics_max_count: Maximum number of metrics per response.
        auth_token: If non-empty, clients must send it as the Basic auth username.
        random_error_prob: If non-zero, probability of answering with an injected 500.
        shutdown_timeout: Grace period in seconds granted to in-flight requests on shutdown.
        logging_type: Type of logging configuration to use (dev, prod, or custom).
        logging_config_file: Path to custom logging configuration file (if logging_type is 'custom').
    """

    listen_address: str
    tls_cert_file: str
    tls_key_file: str
    metrics_endpoint: str
    metrics_min_count: int
    metrics_max_count: int
    auth_token: str
    random_error_prob: float
    shutdown_timeout: float
    logging_type: str
    logging_config_file: str

    @property
    def use_tls(self) -> bool:
        """True when both the certificate and the key paths are supplied."""
        return bool(self.tls_cert_file) and bool(self.tls_key_file)


def parse_listen_address(address: str) -> Tuple[Optional[str], int]:
    """
    Split a listen address into host and port.

    An empty host (":8080") means all interfaces and is returned as None.
    IPv6 hosts may be given in brackets ("[::1]:8080").

    Args:
        address: The address to parse.

    Returns:
        Tuple[Optional[str], int]: The host (or None) and the port.

    Raises:
        ValueError: If the address has no port or the port is not in 0-65535.
    """
    host, separator, port_text = address.rpartition(":")
    if not separator:
        raise ValueError(f"Invalid listen address '{address}': expected host:port")

    try:
        port = int(port_text)
    except ValueError as err:
        raise ValueError(f"Invalid port in listen address '{address}'") from err

    if not 0 <= port <= 65535:
        raise ValueError(f"Port out of range in listen address '{address}'")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]

    return (host or None), port


def validate_context(context: ServerContext) -> None:
    """
    Check the configuration for errors that must prevent the server from starting.

    Args:
        context: The configuration to validate.

    Raises:
        ValueError: On the first invalid setting found.
    """
    parse_listen_address(context.listen_address)

    if context.metrics_min_count < 0 or context.metrics_max_count < 0:
        raise ValueError("invalid metrics count params: counts must not be negative")
    if context.metrics_min_count > context.metrics_max_count:
        raise ValueError("invalid metrics count params: min-count > max-count")

    if not 0 <= context.random_error_prob <= 1:
        raise ValueError("random error probability must be in the [0, 1] range")

    if not context.metrics_endpoint.startswith("/"):
        raise ValueError(f"metrics endpoint must start with '/': {context.metrics_endpoint}")

    if bool(context.tls_cert_file) != bool(context.tls_key_file):
        raise ValueError("TLS requires both a certificate and a key file")

    if not context.shutdown_timeout > 0:
        raise ValueError("shutdown timeout must be positive")
