"""Immutable HTTP request.

Frozen metadata only. The resolver looks at nothing but the raw path;
headers and body are never read.
"""

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

# RFC 3986 path characters plus "%" so existing escapes pass through
_PATH_SAFE = "/%!$&'()*+,;=:@~"


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is the percent-encoded path exactly as it arrived on the wire
    (no query string). Decoding is the resolver's job so malformed
    escapes can be classified there.
    """

    method: str
    path: str
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    @property
    def is_head(self) -> bool:
        """True for HEAD requests, which get headers without a body."""
        return self.method == "HEAD"

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> "Request":
        """Create a Request from an ASGI HTTP scope.

        Prefers ``raw_path``; servers that omit it only give the decoded
        ``path``, which is re-encoded so decoding stays a single step.
        Raw bytes outside the URL character set (unescaped UTF-8 sent by
        curl, for one) are percent-encoded; existing escapes are kept.
        """
        raw_path = scope.get("raw_path")
        if raw_path:
            path = quote(raw_path.partition(b"?")[0], safe=_PATH_SAFE)
        else:
            path = quote(scope["path"], safe="/")
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=path,
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
        )
