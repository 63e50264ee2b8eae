"""
Application wiring for the demoware mock metrics server.

This module assembles the aiohttp application from the configuration, runs
the server until a termination signal arrives, and maps startup failures to
the process exit status.
"""

import asyncio
import logging
import random
from typing import List, Optional

from aiohttp import web

from demoware.config import ServerContext, get_context, validate_context
from demoware.config.logging_config import configure_logging
from demoware.generator.random_generator import Clock, RandomMetricsGenerator, utc_now
from demoware.pipeline import register_metrics_handler
from demoware.server import MetricsServer, SignalWaiter

logger = logging.getLogger(__name__)


def create_app(
    context: ServerContext, rng: random.Random, clock: Clock = utc_now
) -> web.Application:
    """
    Builds the aiohttp application serving the metrics endpoint.

    Args:
        context: The server configuration.
        rng: The random source shared by the generator and the fault injector.
        clock: The clock used for last_kernel_upgrade timestamps.

    Returns:
        web.Application: The application with the metrics route registered.
    """
    generator = RandomMetricsGenerator(
        rng=rng,
        min_count=context.metrics_min_count,
        max_count=context.metrics_max_count,
        clock=clock,
    )
    app = web.Application()
    register_metrics_handler(app, context, generator, rng)
    return app


async def serve(
    context: ServerContext,
    rng: Optional[random.Random] = None,
    waiter: Optional[SignalWaiter] = None,
) -> None:
    """
    Runs the server until the first termination signal, then shuts it down.

    Signal handlers are installed before the listener is bound, so a signal
    arriving during startup still leads to a clean shutdown.

    Args:
        context: A validated server configuration.
        rng: The random source. A fresh, OS-seeded one is used by default.
        waiter: The shutdown trigger. Defaults to SIGINT/SIGHUP handling.

    Raises:
        OSError: If the listener cannot be bound or the TLS files cannot be loaded.
    """
    app = create_app(context, rng if rng is not None else random.Random())
    server = MetricsServer(context, app)
    waiter = waiter if waiter is not None else SignalWaiter()
    waiter.install()

    try:
        await server.start()
        await waiter.wait()
    finally:
        await server.shutdown()
        waiter.remove()


def run(argv: Optional[List[str]] = None) -> int:
    """
    Entry point: parse configuration, configure logging, serve.

    Args:
        argv: Command-line arguments. Defaults to sys.argv[1:].

    Returns:
        int: The process exit status, 0 after a clean shutdown and 1 when
            the server could not start.
    """
    context: ServerContext = get_context(argv)

    try:
        configure_logging(context)
        validate_context(context)
        logger.info("Starting demoware...")
        asyncio.run(serve(context))
    except (ValueError, RuntimeError, OSError) as e:
        logger.error(f"terminating due to error: {e}")
        return 1

    return 0
