"""
Core interfaces for the demoware mock metrics server.

This module defines the abstract base classes the request pipeline is built
from. Generators produce metrics; request handlers are chained so that each
middleware only knows about the next handler in line.
"""

import abc
from typing import List

from aiohttp import web

from .domain import MetricEnvelope


class MetricsGenerator(abc.ABC):
    """
    Abstract interface for a source of metric envelopes.

    Its responsibility is to produce the list of envelopes returned by a
    single metrics request. Implementations must not keep per-request state.
    """

    @abc.abstractmethod
    def generate(self) -> List[MetricEnvelope]:
        """
        Produces the envelopes for one response.

        Returns:
            List[MetricEnvelope]: The envelopes, in generation order.
        """
        pass


class RequestHandler(abc.ABC):
    """
    Abstract interface for one link of the request pipeline.

    Middlewares implement this interface and hold a reference to the next
    RequestHandler; the innermost handler produces the actual response.
    The bound 'handle' coroutine is what gets registered on the aiohttp router.
    """

    @abc.abstractmethod
    async def handle(self, request: web.Request) -> web.StreamResponse:
        """
        Handles a single HTTP request.

        Args:
            request: The incoming aiohttp request.

        Returns:
            web.StreamResponse: The response to send back. Implementations
                turn their own failures into HTTP error statuses rather than
                raising.
        """
        pass
