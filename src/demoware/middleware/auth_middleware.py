"""
Basic authentication middleware.

This module provides a RequestHandler decorator that only lets a request
through when its HTTP Basic credentials carry the configured token as the
username. The password is never checked.
"""

import logging
from typing import Optional

from aiohttp import BasicAuth, hdrs, web

from demoware.contracts import RequestHandler

# Module logger
logger = logging.getLogger(__name__)


def extract_username(request: web.Request) -> Optional[str]:
    """
    Returns the Basic auth username sent with the request.

    Args:
        request: The incoming request.

    Returns:
        Optional[str]: The UTF-8 decoded username, or None if the header is
            missing, not a Basic scheme, or malformed.
    """
    header: Optional[str] = request.headers.get(hdrs.AUTHORIZATION)
    if not header:
        return None
    try:
        return BasicAuth.decode(header, encoding="utf-8").login
    except ValueError:
        return None


class BasicAuthMiddleware(RequestHandler):
    """
    Rejects requests whose Basic auth username differs from the token.

    Rejected requests receive an empty 401 response and never reach the
    wrapped handler. The middleware keeps no state besides its configuration,
    so one instance serves all concurrent requests.
    """

    def __init__(self, next_handler: RequestHandler, token: str) -> None:
        """
        Initializes the middleware.

        Args:
            next_handler: The handler invoked for authenticated requests.
            token: The expected username. Must not be empty.

        Raises:
            ValueError: If the token is empty.
        """
        if not token:
            raise ValueError("auth token must not be empty")
        self._next: RequestHandler = next_handler
        self._token: str = token

    async def handle(self, request: web.Request) -> web.StreamResponse:
        username = extract_username(request)
        if username is None or username != self._token:
            logger.error(f"{request.method} {request.path} error=authentication failed")
            return web.Response(status=401)

        return await self._next.handle(request)
