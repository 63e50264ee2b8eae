"""
Fault injection middleware.

This module provides a RequestHandler decorator that answers a configurable
share of requests with an empty HTTP 500, to exercise client retry and
error handling paths.
"""

import logging
import random

from aiohttp import web

from demoware.contracts import RequestHandler

# Module logger
logger = logging.getLogger(__name__)


class FaultInjectionMiddleware(RequestHandler):
    """
    Fails requests at random with the configured probability.

    For each request a value u is drawn uniformly from [0, 1); when
    u <= probability the request is failed with HTTP 500 and the wrapped
    handler is not invoked.
    """

    def __init__(
        self, next_handler: RequestHandler, probability: float, rng: random.Random
    ) -> None:
        """
        Initializes the middleware.

        Args:
            next_handler: The handler invoked for requests that are not failed.
            probability: The failure probability, in [0, 1].
            rng: The random source used for the per-request draw.

        Raises:
            ValueError: If the probability lies outside [0, 1].
        """
        if not 0 <= probability <= 1:
            raise ValueError("random error probability must be in the [0, 1] range")
        self._next: RequestHandler = next_handler
        self._probability: float = probability
        self._rng: random.Random = rng

    async def handle(self, request: web.Request) -> web.StreamResponse:
        if self._rng.random() <= self._probability:
            logger.error(f"{request.method} {request.path} error=injected error")
            return web.Response(status=500)

        return await self._next.handle(request)
