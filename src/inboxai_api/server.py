"""
Process lifecycle for the API service.

uvicorn serves on a background thread while the main thread waits for
SIGINT/SIGTERM. On a signal the server stops accepting connections, lets
in-flight requests finish and the process exits, graceful or not, once the
shutdown deadline has passed.
"""

import signal
import threading
import time
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI

from inboxai_api.config import Settings, get_settings
from inboxai_api.logging_config import configure_logging
from inboxai_api.main import create_app

logger = structlog.get_logger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)

# Extra time for uvicorn to run lifespan cleanup after its own drain deadline
SHUTDOWN_JOIN_MARGIN = 2.0  # seconds

EXIT_OK = 0
EXIT_STARTUP_FAILURE = 1


class ServerStartupError(Exception):
    """Raised when the listener could not be started (bind failure, lifespan failure)."""


def build_server_config(app: FastAPI, settings: Settings) -> uvicorn.Config:
    """
    uvicorn configuration for the service.

    uvicorn has no read/write timeouts of its own: the write timeout is
    enforced per request by AccessLogMiddleware, the idle timeout maps to
    keep-alive, the shutdown timeout bounds the graceful drain.
    """
    return uvicorn.Config(
        app,
        host=settings.HOST,
        port=settings.PORT,
        timeout_keep_alive=settings.IDLE_TIMEOUT,
        timeout_graceful_shutdown=settings.SHUTDOWN_TIMEOUT,
        log_config=None,
        access_log=False,
    )


class ServiceShell:
    """
    Owns the listener thread and the shutdown sequence.

    Usage:
        shell = ServiceShell(settings)
        shell.start()
        shell.wait_for_shutdown_signal()
        shell.shutdown()

    or simply ``ServiceShell(settings).run()``.
    """

    def __init__(self, settings: Settings, app: Optional[FastAPI] = None):
        self.settings = settings
        self.app = app or create_app(settings)
        self.server = uvicorn.Server(build_server_config(self.app, settings))
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()

    @property
    def port(self) -> Optional[int]:
        """Port actually bound (differs from settings when PORT=0)."""
        for server in getattr(self.server, "servers", []):
            for sock in server.sockets:
                return sock.getsockname()[1]
        return None

    def start(self, startup_timeout: float = 30.0) -> None:
        """
        Start serving on a background thread and wait until it listens.

        Raises:
            ServerStartupError: the server thread ended before listening
                (bind failure, database unreachable) or did not come up in time
        """
        self._thread = threading.Thread(target=self.server.run, name="http-server", daemon=True)
        self._thread.start()

        deadline = time.monotonic() + startup_timeout
        while not self.server.started:
            if not self._thread.is_alive():
                raise ServerStartupError(
                    f"Server failed to start on {self.settings.HOST}:{self.settings.PORT}"
                )
            if time.monotonic() > deadline:
                self.server.should_exit = True
                raise ServerStartupError(f"Server not listening after {startup_timeout}s")
            time.sleep(0.05)

        logger.info("API listening", host=self.settings.HOST, port=self.port)

    def request_shutdown(self) -> None:
        """Wake up wait_for_shutdown_signal(); safe to call from any thread."""
        self._stop.set()

    def wait_for_shutdown_signal(self) -> None:
        """
        Block until SIGINT/SIGTERM arrives, request_shutdown() is called, or
        the server thread dies on its own.

        Signal handlers can only be installed from the main thread; from any
        other thread this just waits for request_shutdown().
        """
        previous = {}
        if threading.current_thread() is threading.main_thread():
            for sig in SHUTDOWN_SIGNALS:
                previous[sig] = signal.signal(sig, self._handle_signal)

        try:
            while not self._stop.wait(0.5):
                if self._thread is not None and not self._thread.is_alive():
                    logger.error("Server thread exited unexpectedly")
                    break
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)

    def _handle_signal(self, signum, frame) -> None:
        logger.info("Shutdown signal received", signal=signal.Signals(signum).name)
        self._stop.set()

    def shutdown(self) -> bool:
        """
        Stop accepting connections, drain in-flight requests and wait for the
        server thread: SHUTDOWN_TIMEOUT seconds of drain plus
        SHUTDOWN_JOIN_MARGIN for lifespan cleanup.

        Returns:
            True if the server finished within the deadline
        """
        logger.info("Shutting down...", timeout=self.settings.SHUTDOWN_TIMEOUT)
        self.server.should_exit = True

        if self._thread is None:
            return True
        self._thread.join(timeout=self.settings.SHUTDOWN_TIMEOUT + SHUTDOWN_JOIN_MARGIN)
        if self._thread.is_alive():
            logger.error(
                "Graceful shutdown failed",
                timeout=self.settings.SHUTDOWN_TIMEOUT,
            )
            return False
        return True

    def run(self) -> int:
        """
        Serve until a shutdown signal, then shut down.

        Returns:
            Process exit code: 0 after graceful or forced shutdown, 1 if the
            server could not start
        """
        try:
            self.start()
        except ServerStartupError as e:
            logger.error("Server error", error=str(e))
            return EXIT_STARTUP_FAILURE

        self.wait_for_shutdown_signal()
        self.shutdown()
        logger.info("bye")
        return EXIT_OK


def main() -> int:
    """Console entry point."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
    return ServiceShell(settings).run()
