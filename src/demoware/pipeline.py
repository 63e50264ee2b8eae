"""
Request pipeline for the metrics endpoint.

This module builds the chain of request handlers serving the metrics
endpoint. The innermost MetricsHandler generates and serializes the
metrics; authentication and fault injection are optional decorators
applied around it in a fixed order:

    fault injection -> authentication -> metrics generation

so an injected fault never reaches the auth check and an unauthenticated
request never reaches the generator.
"""

import json
import logging
import random

from aiohttp import web

from demoware.config import ServerContext
from demoware.contracts import MetricsGenerator, RequestHandler
from demoware.domain import envelopes_to_json_ready
from demoware.middleware.auth_middleware import BasicAuthMiddleware
from demoware.middleware.fault_middleware import FaultInjectionMiddleware

# Module logger
logger = logging.getLogger(__name__)


class MetricsHandler(RequestHandler):
    """
    The innermost handler: generates metrics and writes them as a JSON array.

    A serialization failure is answered with an empty HTTP 500 and logged;
    it never propagates to the server.
    """

    def __init__(self, generator: MetricsGenerator) -> None:
        self._generator: MetricsGenerator = generator

    async def handle(self, request: web.Request) -> web.StreamResponse:
        envelopes = self._generator.generate()

        try:
            body = json.dumps(envelopes_to_json_ready(envelopes))
        except (TypeError, ValueError) as e:
            logger.error(f"{request.method} {request.path} error={e}")
            return web.Response(status=500)

        logger.info(f"{request.method} {request.path} num_metrics={len(envelopes)}")
        return web.Response(text=body, content_type="application/json")


def build_pipeline(
    context: ServerContext, generator: MetricsGenerator, rng: random.Random
) -> RequestHandler:
    """
    Composes the metrics handler with the middlewares enabled in the context.

    Args:
        context: The server configuration.
        generator: The source of metric envelopes.
        rng: The random source used by the fault injection middleware.

    Returns:
        RequestHandler: The outermost handler of the chain.
    """
    handler: RequestHandler = MetricsHandler(generator)

    if context.auth_token:
        handler = BasicAuthMiddleware(handler, context.auth_token)
        logger.info(f"enabling authentication for incoming requests auth_token={context.auth_token}")

    if context.random_error_prob != 0:
        handler = FaultInjectionMiddleware(handler, context.random_error_prob, rng)
        logger.info(
            f"enabling random fail injector for incoming requests fail_prob={context.random_error_prob}"
        )

    return handler


def register_metrics_handler(
    app: web.Application,
    context: ServerContext,
    generator: MetricsGenerator,
    rng: random.Random,
) -> RequestHandler:
    """
    Builds the pipeline and registers it for GET requests on the metrics endpoint.

    Args:
        app: The aiohttp application to register the route on.
        context: The server configuration.
        generator: The source of metric envelopes.
        rng: The random source used by the fault injection middleware.

    Returns:
        RequestHandler: The registered outermost handler.
    """
    handler = build_pipeline(context, generator, rng)
    app.router.add_get(context.metrics_endpoint, handler.handle, allow_head=False)
    logger.info(f"registered metrics handler endpoint={context.metrics_endpoint}")
    return handler
