"""
Configuration module for the demoware mock metrics server.

This module provides functionality to parse command-line arguments and environment
variables to create a configuration context for the server. It defines
default values and help text for all configurable parameters.
"""

import argparse
import os
from typing import Any, List, Optional

from demoware.config.constants import (
    APP_NAME,
    DEFAULT_AUTH_TOKEN,
    DEFAULT_LISTEN_ADDRESS,
    DEFAULT_LOGGING_CONFIG_FILE,
    DEFAULT_LOGGING_TYPE,
    DEFAULT_METRICS_ENDPOINT,
    DEFAULT_METRICS_MAX_COUNT,
    DEFAULT_METRICS_MIN_COUNT,
    DEFAULT_RANDOM_ERROR_PROB,
    DEFAULT_SHUTDOWN_TIMEOUT,
    DEFAULT_TLS_CERT_FILE,
    DEFAULT_TLS_KEY_FILE,
)
from demoware.config.server_context import ServerContext, validate_context

__all__ = ["ServerContext", "get_context", "validate_context"]


def get_context(argv: Optional[List[str]] = None) -> ServerContext:
    """
    Parse command-line arguments and environment variables to create a configuration context.

    For each option, the command-line argument wins; otherwise the matching
    DEMOWARE_* environment variable is used, and finally the default value.
    The returned context is not validated; see validate_context.

    Args:
        argv: Arguments to parse. Defaults to sys.argv[1:].

    Returns:
        ServerContext: A configuration context object containing all parsed settings.
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="A minimal test server that simulates a poll-able metrics stream.",
    )

    parser.add_argument(
        "--listen-address",
        type=str,
        default=os.getenv("DEMOWARE_LISTEN_ADDRESS", DEFAULT_LISTEN_ADDRESS),
        help="The address to listen for incoming API connections.\n"
        "If not provided, the value is read from the DEMOWARE_LISTEN_ADDRESS environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_LISTEN_ADDRESS} is used.",
    )

    parser.add_argument(
        "--listen-tls-cert",
        type=str,
        default=os.getenv("DEMOWARE_LISTEN_TLS_CERT", DEFAULT_TLS_CERT_FILE),
        help="Path to a file with a TLS certificate for the server.\n"
        "TLS is enabled only when --listen-tls-key is also given.",
    )

    parser.add_argument(
        "--listen-tls-key",
        type=str,
        default=os.getenv("DEMOWARE_LISTEN_TLS_KEY", DEFAULT_TLS_KEY_FILE),
        help="Path to the TLS private key for the server.\n"
        "TLS is enabled only when --listen-tls-cert is also given.",
    )

    parser.add_argument(
        "--metrics-endpoint",
        type=str,
        default=os.getenv("DEMOWARE_METRICS_ENDPOINT", DEFAULT_METRICS_ENDPOINT),
        help="Endpoint for serving metrics requests.\n"
        "If not provided, the value is read from the DEMOWARE_METRICS_ENDPOINT environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_METRICS_ENDPOINT} is used.",
    )

    parser.add_argument(
        "--metrics-min-count",
        type=int,
        default=int(os.getenv("DEMOWARE_METRICS_MIN_COUNT", DEFAULT_METRICS_MIN_COUNT)),
        help="Minimum number of metrics to return in responses.\n"
        "If not provided, the value is read from the DEMOWARE_METRICS_MIN_COUNT environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_METRICS_MIN_COUNT} is used.",
    )

    parser.add_argument(
        "--metrics-max-count",
        type=int,
        default=int(os.getenv("DEMOWARE_METRICS_MAX_COUNT", DEFAULT_METRICS_MAX_COUNT)),
        help="Maximum number of metrics to return in responses (exclusive unless equal to the minimum).\n"
        "If not provided, the value is read from the DEMOWARE_METRICS_MAX_COUNT environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_METRICS_MAX_COUNT} is used.",
    )

    parser.add_argument(
        "--with-auth-token",
        type=str,
        default=os.getenv("DEMOWARE_AUTH_TOKEN", DEFAULT_AUTH_TOKEN),
        help="If specified, require clients to provide this token as the basic auth username.",
    )

    parser.add_argument(
        "--with-random-error-prob",
        type=float,
        default=float(os.getenv("DEMOWARE_RANDOM_ERROR_PROB", DEFAULT_RANDOM_ERROR_PROB)),
        help="If non-zero, inject errors based on the given probability (0 to 1).",
    )

    parser.add_argument(
        "--shutdown-timeout",
        type=float,
        default=float(os.getenv("DEMOWARE_SHUTDOWN_TIMEOUT", DEFAULT_SHUTDOWN_TIMEOUT)),
        help="Seconds granted to in-flight requests when shutting down.\n"
        "If not provided, the value is read from the DEMOWARE_SHUTDOWN_TIMEOUT environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_SHUTDOWN_TIMEOUT} is used.",
    )

    parser.add_argument(
        "-lt",
        "--logging-type",
        type=str,
        default=os.getenv("DEMOWARE_LOGGING_TYPE", DEFAULT_LOGGING_TYPE),
        help="Specifies the logging configuration type to use.\n"
        "Allowed values: dev, prod, custom (case insensitive).\n"
        "For 'dev' and 'prod', system will use built-in configurations.\n"
        "For 'custom', the --logging-config-file argument is required.",
    )

    parser.add_argument(
        "-lcf",
        "--logging-config-file",
        type=str,
        default=os.getenv("DEMOWARE_LOGGING_CONFIG_FILE", DEFAULT_LOGGING_CONFIG_FILE),
        help="Path to custom logging configuration file.\n"
        "Required when --logging-type is set to 'custom'.",
    )

    # Parse the command-line arguments
    args: Any = parser.parse_args(argv)

    return ServerContext(
        listen_address=args.listen_address,
        tls_cert_file=args.listen_tls_cert,
        tls_key_file=args.listen_tls_key,
        metrics_endpoint=args.metrics_endpoint,
        metrics_min_count=args.metrics_min_count,
        metrics_max_count=args.metrics_max_count,
        auth_token=args.with_auth_token,
        random_error_prob=args.with_random_error_prob,
        shutdown_timeout=args.shutdown_timeout,
        logging_type=args.logging_type,
        logging_config_file=args.logging_config_file,
    )
