"""HTTP responses.

``Response`` is built through chainable ``.with_*()`` calls and carries an
in-memory body; ``FileResponse`` carries an open file that the sender
streams and then closes.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from anyio import AsyncFile, CancelScope

from pubserve.content_types import PLAIN_TEXT


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = PLAIN_TEXT
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


@dataclass(frozen=True, slots=True)
class FileResponse:
    """A response whose body is streamed from an open file.

    The body is a forward-only byte sequence: it can be sent once.
    ``size`` is the file size recorded at open time; at most that many
    bytes are streamed so ``Content-Length`` stays truthful.
    """

    file: AsyncFile[bytes]
    size: int
    status: int = 200
    content_type: str = "application/octet-stream"
    headers: tuple[tuple[str, str], ...] = ()
    chunk_size: int = 64 * 1024

    async def aclose(self) -> None:
        """Release the file handle, even inside a cancelled scope."""
        with CancelScope(shield=True):
            await self.file.aclose()


# Any response type the pipeline can produce
type AnyResponse = Response | FileResponse
