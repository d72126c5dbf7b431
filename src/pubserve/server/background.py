"""Background server with an explicit start/stop lifecycle.

Runs a uvicorn server on its own thread and event loop so a caller
(tests, an embedding application) can start an instance, learn the port
it bound, and stop it again. Instances are independent.
"""

from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING

import uvicorn

from pubserve.errors import ConfigurationError

if TYPE_CHECKING:
    from pubserve.app import StaticServer


class BackgroundServer:
    """A uvicorn server running on a daemon thread.

    Usage::

        server = BackgroundServer(app, "127.0.0.1", 0)
        port = server.start()
        ...
        server.stop()
    """

    __slots__ = ("_server", "_thread", "host", "port")

    def __init__(
        self,
        app: StaticServer,
        host: str,
        port: int,
        *,
        log_level: str = "info",
    ) -> None:
        config = uvicorn.Config(
            app,
            host=host,
            port=port,
            lifespan="on",
            log_level=log_level,
            access_log=False,
        )
        self._server = uvicorn.Server(config)
        self._thread: threading.Thread | None = None
        self.host = host
        self.port = port

    def start(self, timeout: float = 10.0) -> int:
        """Start serving and block until the socket is bound.

        Returns:
            The bound port (useful when 0 was requested).

        Raises:
            ConfigurationError: If the server is already running, exits
                during startup (e.g. the port is taken), or does not come
                up within *timeout* seconds.
        """
        if self._thread is not None:
            msg = "Server already started"
            raise ConfigurationError(msg)

        self._thread = threading.Thread(
            target=self._server.run,
            name=f"pubserve-{self.host}:{self.port}",
            daemon=True,
        )
        self._thread.start()

        deadline = time.monotonic() + timeout
        while not self._server.started:
            if not self._thread.is_alive():
                msg = f"Server failed to start on {self.host}:{self.port}"
                raise ConfigurationError(msg)
            if time.monotonic() > deadline:
                self.stop()
                msg = f"Server did not start within {timeout}s"
                raise ConfigurationError(msg)
            time.sleep(0.01)

        sockets = self._server.servers[0].sockets
        self.port = sockets[0].getsockname()[1]
        return self.port

    def stop(self, timeout: float = 10.0) -> None:
        """Ask the server to exit and wait for its thread."""
        if self._thread is None:
            return
        self._server.should_exit = True
        self._thread.join(timeout)
        self._thread = None
