"""``pubserve serve`` — foreground server command.

Builds a ServerConfig from the environment plus CLI flags and runs the
server until interrupted.
"""

import argparse
import logging
import sys

from pubserve.app import StaticServer
from pubserve.config import ServerConfig
from pubserve.errors import ConfigurationError


def serve(args: argparse.Namespace) -> None:
    """Start the server in the foreground.

    CLI flags override the environment (``PORT``, ``HOST``,
    ``PUBSERVE_ROOT``), which overrides the defaults.
    """
    try:
        config = ServerConfig.from_env(
            root=args.root,
            host=args.host,
            port=args.port,
            workers=args.workers,
            get_only=args.get_only,
            log_level=args.log_level,
        )
        server = StaticServer(config)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(message)s",
    )
    server.run()
