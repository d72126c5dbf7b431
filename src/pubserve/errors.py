"""Pubserve exception hierarchy.

Shared across the resolver, the ASGI handler and the server object so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class PubserveError(Exception):
    """Base for all pubserve-specific errors."""


class ConfigurationError(PubserveError):
    """Raised when server configuration is invalid.

    Typically raised by ``StaticServer.__init__`` before anything binds.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(PubserveError):
    """An error that maps directly to an HTTP status code.

    The ASGI handler catches these and answers with a plain-text body.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class InvalidPath(HTTPError):  # noqa: N818
    """404 — the request path cannot name a file inside the serving root.

    Raised for malformed percent-encoding, NUL bytes, and paths that
    canonicalise outside the root.
    """

    def __init__(self, detail: str = "Invalid path") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — only GET and HEAD are served (``get_only`` mode).

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "Method Not Allowed") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail,
            headers=(("Allow", allow_value),),
        )
