"""Foreground server.

Starts a pounce ASGI server with the live StaticServer object and blocks
until it exits.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pubserve.app import StaticServer


def run_pounce_server(
    app: StaticServer,
    host: str,
    port: int,
    *,
    workers: int = 1,
    log_level: str = "info",
) -> None:
    """Serve *app* with pounce until interrupted.

    Pounce's ``run()`` takes an import string (e.g., ``"myapp:app"``),
    but we have a live ``StaticServer`` object. We use ``pounce.Server``
    directly with the ASGI callable.

    Args:
        app: ASGI callable (StaticServer instance).
        host: Bind host address.
        port: Bind port number.
        workers: Worker count (0 = auto-detect from CPU count).
        log_level: Log level (debug, info, warning, error, critical).
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=workers,
        log_level=log_level,
    )
    server = Server(config, app)
    server.run()
