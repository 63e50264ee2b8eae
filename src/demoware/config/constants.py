"""
Constants for the demoware mock metrics server.

This module defines default values for all configurable parameters
of the server. These constants are used as fallback values when neither
command-line arguments nor environment variables are provided.
"""

APP_NAME = "demoware"

# Listener configuration defaults
DEFAULT_LISTEN_ADDRESS = ":8080"
DEFAULT_TLS_CERT_FILE = ""
DEFAULT_TLS_KEY_FILE = ""
DEFAULT_SHUTDOWN_TIMEOUT = 5.0

# Metrics generation defaults
DEFAULT_METRICS_ENDPOINT = "/metrics"
DEFAULT_METRICS_MIN_COUNT = 0
DEFAULT_METRICS_MAX_COUNT = 10
CPU_USAGE_CORES = 5

# Injectable behaviour defaults
DEFAULT_AUTH_TOKEN = ""
DEFAULT_RANDOM_ERROR_PROB = 0.0

# Logging configuration defaults
DEFAULT_LOGGING_TYPE = "prod"
DEFAULT_LOGGING_CONFIG_FILE = ""
