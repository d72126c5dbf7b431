"""StaticServer — the pubserve application object.

Constructed from a ServerConfig; owns the resolver, the ASGI entry point
and the start/stop lifecycle. Nothing is process-global, so any number
of instances can run side by side.
"""

import logging
from types import TracebackType
from typing import TYPE_CHECKING

from pubserve._internal.asgi import Receive, Scope, Send
from pubserve.config import ServerConfig
from pubserve.errors import ConfigurationError
from pubserve.resolver import StaticAssetResolver
from pubserve.server.handler import handle_request

if TYPE_CHECKING:
    from pubserve.server.background import BackgroundServer

logger = logging.getLogger("pubserve.server")

_WILDCARD_HOSTS = frozenset({"0.0.0.0", "::", ""})


class StaticServer:
    """Serves one directory over HTTP.

    Usage::

        server = StaticServer(ServerConfig.from_env())
        server.run()                      # foreground, pounce

        with StaticServer(ServerConfig(root=tmp, port=0)) as server:
            httpx.get(server.url)         # background, uvicorn

    The serving root is canonicalised here and fixed for the lifetime of
    the instance.
    """

    __slots__ = ("_background", "config", "resolver")

    def __init__(self, config: ServerConfig | None = None) -> None:
        self.config: ServerConfig = config or ServerConfig()
        _validate(self.config)
        self.resolver: StaticAssetResolver = StaticAssetResolver.from_config(self.config)
        self._background: BackgroundServer | None = None

    @property
    def port(self) -> int:
        """The configured port, or the bound port once started in the background."""
        if self._background is not None:
            return self._background.port
        return self.config.port

    @property
    def url(self) -> str:
        """Base URL for the listening socket."""
        return format_url(self.config.host, self.port)

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve in the foreground until interrupted."""
        from pubserve.server.runner import run_pounce_server

        _host = host or self.config.host
        _port = port or self.config.port

        logger.info("HTTP server listening on %s", format_url(_host, _port))
        run_pounce_server(
            self,
            _host,
            _port,
            workers=self.config.workers,
            log_level=self.config.log_level,
        )

    def start(self, timeout: float = 10.0) -> int:
        """Serve in a background thread; returns the bound port."""
        from pubserve.server.background import BackgroundServer

        if self._background is not None:
            msg = "Server already started"
            raise ConfigurationError(msg)

        background = BackgroundServer(
            self,
            self.config.host,
            self.config.port,
            log_level=self.config.log_level,
        )
        background.start(timeout)
        self._background = background
        logger.info("HTTP server listening on %s", self.url)
        return background.port

    def stop(self, timeout: float = 10.0) -> None:
        """Stop a background server started with ``start()``."""
        if self._background is None:
            return
        self._background.stop(timeout)
        self._background = None

    def __enter__(self) -> "StaticServer":
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then delegates HTTP scopes to
        the request pipeline. Other scope types are ignored.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(scope, receive, send, resolver=self.resolver)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                if not self.resolver.root.is_dir():
                    logger.warning(
                        "Serving root %s is not a directory; every request will 404",
                        self.resolver.root,
                    )
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return


def format_url(host: str, port: int) -> str:
    """Human-facing URL for a bind address; wildcard hosts read as localhost."""
    if host in _WILDCARD_HOSTS:
        host = "localhost"
    elif ":" in host:
        host = f"[{host}]"
    return f"http://{host}:{port}/"


def _validate(config: ServerConfig) -> None:
    """Reject configurations that cannot serve."""
    if not 0 <= config.port <= 65535:
        msg = f"Port must be between 0 and 65535, got {config.port}"
        raise ConfigurationError(msg)
    if config.chunk_size <= 0:
        msg = f"chunk_size must be positive, got {config.chunk_size}"
        raise ConfigurationError(msg)
    if not config.index:
        msg = "index must name a file"
        raise ConfigurationError(msg)
