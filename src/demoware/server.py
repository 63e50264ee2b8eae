"""
Server lifecycle management for the demoware mock metrics server.

This module owns the listener: it binds the aiohttp application to the
configured address (optionally with TLS), lets it serve in the background
on the event loop, and tears it down with a bounded grace period once a
termination signal arrives.

The lifecycle only moves forward:

    CREATED -> LISTENING -> SHUTTING_DOWN -> STOPPED

There is no way to restart or re-bind a stopped server.
"""

import asyncio
import logging
import signal
import ssl
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from aiohttp import web

from demoware.config import ServerContext
from demoware.config.server_context import parse_listen_address

# Module logger
logger = logging.getLogger(__name__)

DEFAULT_SIGNALS: Tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGHUP)


class ServerState(str, Enum):
    """The lifecycle states of a MetricsServer."""

    CREATED = "created"
    LISTENING = "listening"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


def create_ssl_context(cert_file: str, key_file: str) -> ssl.SSLContext:
    """
    Builds a server-side SSL context from a PEM certificate and key.

    Raises:
        OSError: If a file cannot be read.
        ssl.SSLError: If the certificate or key is invalid.
    """
    ssl_context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    ssl_context.load_cert_chain(certfile=cert_file, keyfile=key_file)
    return ssl_context


class MetricsServer:
    """
    Runs an aiohttp application on a TCP listener with a one-way lifecycle.

    start() returns as soon as the listener is bound; the event loop keeps
    serving connections in the background until shutdown() is awaited.
    """

    def __init__(self, context: ServerContext, app: web.Application) -> None:
        """
        Initializes a new MetricsServer in the CREATED state.

        Args:
            context: The server configuration (listen address, TLS files, grace period).
            app: The application holding the registered metrics route.
        """
        self._context: ServerContext = context
        self._app: web.Application = app
        self._runner: Optional[web.AppRunner] = None
        self._state: ServerState = ServerState.CREATED

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def bound_addresses(self) -> List[Any]:
        """The socket names the listener is bound to, empty unless LISTENING."""
        if self._runner is None:
            return []
        return list(self._runner.addresses)

    async def start(self) -> None:
        """
        Binds the listener and starts serving in the background.

        Returns:
            None

        Raises:
            RuntimeError: If the server is not in the CREATED state.
            ValueError: If the listen address is malformed.
            OSError: If the address cannot be bound or the TLS files cannot be loaded.
        """
        if self._state is not ServerState.CREATED:
            raise RuntimeError(f"Cannot start server in state '{self._state.value}'")

        try:
            host, port = parse_listen_address(self._context.listen_address)
            ssl_context: Optional[ssl.SSLContext] = None
            if self._context.use_tls:
                ssl_context = create_ssl_context(
                    self._context.tls_cert_file, self._context.tls_key_file
                )

            runner = web.AppRunner(
                self._app,
                access_log=None,
                shutdown_timeout=self._context.shutdown_timeout,
            )
            await runner.setup()
            try:
                site = web.TCPSite(runner, host, port, ssl_context=ssl_context)
                await site.start()
            except Exception:
                await runner.cleanup()
                raise
        except Exception:
            self._state = ServerState.STOPPED
            raise

        self._runner = runner
        self._state = ServerState.LISTENING
        logger.info(
            f"listening for incoming connections use_tls={ssl_context is not None} "
            f"listen_at={self.bound_addresses}"
        )

    async def shutdown(self) -> None:
        """
        Stops accepting connections and drains in-flight requests.

        In-flight requests get at most the configured grace period before the
        listener is closed. Errors raised while closing are logged and
        suppressed; once this coroutine returns the server is STOPPED.

        Returns:
            None
        """
        if self._state in (ServerState.SHUTTING_DOWN, ServerState.STOPPED):
            return

        runner = self._runner
        if runner is None:
            self._state = ServerState.STOPPED
            return

        self._state = ServerState.SHUTTING_DOWN
        logger.info("shutting down server")
        try:
            await runner.cleanup()
        except Exception as e:
            logger.warning(f"Error while shutting down server: {e}")
        finally:
            self._runner = None
            self._state = ServerState.STOPPED
        logger.info("Shutdown complete.")


class SignalWaiter:
    """
    Turns the first termination signal into an awaitable event.

    Handlers stay installed until remove() is called, so later signals are
    ignored instead of interrupting a shutdown already in progress.
    """

    def __init__(self, signals: Iterable[signal.Signals] = DEFAULT_SIGNALS) -> None:
        self._signals: Tuple[signal.Signals, ...] = tuple(signals)
        self._event: Optional[asyncio.Event] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._received: Optional[signal.Signals] = None

    @property
    def received(self) -> Optional[signal.Signals]:
        """The signal that triggered the shutdown, if any."""
        return self._received

    def install(self) -> None:
        """Registers the signal handlers on the running event loop."""
        self._loop = asyncio.get_running_loop()
        self._event = asyncio.Event()
        for sig in self._signals:
            self._loop.add_signal_handler(sig, self.notify, sig)

    def remove(self) -> None:
        """Unregisters the signal handlers, restoring the default behaviour."""
        if self._loop is None:
            return
        for sig in self._signals:
            self._loop.remove_signal_handler(sig)
        self._loop = None

    def notify(self, sig: signal.Signals) -> None:
        """
        Records a termination signal. Only the first call has any effect.

        Args:
            sig: The signal received.
        """
        if self._received is not None or self._event is None:
            return
        self._received = sig
        logger.info(f"terminating due to signal signal={sig.name}")
        self._event.set()

    async def wait(self) -> signal.Signals:
        """
        Suspends until the first termination signal arrives.

        Returns:
            signal.Signals: The signal received.

        Raises:
            RuntimeError: If install() has not been called.
        """
        if self._event is None:
            raise RuntimeError("SignalWaiter.install() must be called before wait()")
        await self._event.wait()
        return self._received
