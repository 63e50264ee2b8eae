"""
Main entry point for the demoware mock metrics server.

This module parses the configuration, sets up logging, runs the server until
it receives SIGINT or SIGHUP, and exits with a non-zero status when the
server cannot start.
"""

import sys

from demoware.app import run

if __name__ == "__main__":
    sys.exit(run())
