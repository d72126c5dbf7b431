"""Pubserve — a small static file server for a ``public/`` directory.

Maps URL paths to files, infers content types from extensions, serves
``index.html`` for directory paths and an optional ``404.html`` for misses.

Basic usage::

    from pubserve import ServerConfig, StaticServer

    StaticServer(ServerConfig.from_env()).run()

Or from the command line::

    PORT=8080 pubserve serve
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "FileResponse",
    "HTTPError",
    "InvalidPath",
    "MethodNotAllowed",
    "PubserveError",
    "Request",
    "Response",
    "ServerConfig",
    "StaticAssetResolver",
    "StaticServer",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import pubserve`` fast while providing a clean top-level API.
    """
    if name == "StaticServer":
        from pubserve.app import StaticServer

        return StaticServer

    if name == "ServerConfig":
        from pubserve.config import ServerConfig

        return ServerConfig

    if name == "StaticAssetResolver":
        from pubserve.resolver import StaticAssetResolver

        return StaticAssetResolver

    if name == "Request":
        from pubserve.http.request import Request

        return Request

    if name in ("Response", "FileResponse"):
        from pubserve.http import response as _resp

        return getattr(_resp, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "InvalidPath",
        "MethodNotAllowed",
        "PubserveError",
    ):
        from pubserve import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
