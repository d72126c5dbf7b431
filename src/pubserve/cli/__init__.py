"""Pubserve CLI — serve a static directory.

Entry point registered as ``pubserve`` in ``pyproject.toml``::

    [project.scripts]
    pubserve = "pubserve.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``pubserve`` command."""
    parser = argparse.ArgumentParser(
        prog="pubserve",
        description="Pubserve — serve a static site from ./public.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- pubserve serve ---------------------------------------------------
    serve_parser = subparsers.add_parser("serve", help="Start the static file server")
    serve_parser.add_argument(
        "--root",
        default=None,
        help="Directory to serve (default: $PUBSERVE_ROOT or ./public)",
    )
    serve_parser.add_argument("--host", default=None, help="Bind host address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    serve_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker count (0=auto-detect)",
    )
    serve_parser.add_argument(
        "--get-only",
        action="store_true",
        default=None,
        help="Answer methods other than GET/HEAD with 405",
    )
    serve_parser.add_argument(
        "--log-level",
        default=None,
        choices=["debug", "info", "warning", "error", "critical"],
        help="Log level (default: info)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from pubserve.cli._serve import serve

        serve(args)
