"""Static asset resolution.

Maps a request path onto the serving root, classifies the outcome
(file, directory, missing) and turns it into a response.  Supports
directory index files and an optional custom not-found page.

Security: every candidate is canonicalised (``..`` segments and symlinks
resolved) and must stay inside the root; anything else is answered as
not found.
"""

import errno
import logging
import os
import re
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO
from urllib.parse import unquote

import anyio
from anyio import AsyncFile

from pubserve.config import ServerConfig
from pubserve.content_types import HTML, PLAIN_TEXT, guess_content_type
from pubserve.errors import InvalidPath, MethodNotAllowed
from pubserve.http.request import Request
from pubserve.http.response import AnyResponse, FileResponse, Response
from pubserve.server.terminal_errors import log_error

logger = logging.getLogger("pubserve.resolver")

NOT_FOUND_BODY = "404 Not Found"
DIRECTORY_LISTING_BODY = "404 Not Found - Directory listing not allowed"
SERVER_ERROR_BODY = "500 Internal Server Error"

_SAFE_METHODS = frozenset({"GET", "HEAD"})

# "%" not followed by two hex digits
_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


# ------------------------------------------------------------------
# Resolution outcomes
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ResolvedFile:
    """A regular file, opened for reading."""

    path: Path
    stream: AsyncFile[bytes]
    size: int


@dataclass(frozen=True, slots=True)
class ResolvedDirectory:
    """The candidate path is a directory."""

    path: Path


@dataclass(frozen=True, slots=True)
class NotFound:
    """Nothing exists at the candidate path."""

    path: Path


type Resolution = ResolvedFile | ResolvedDirectory | NotFound


def decode_path(raw: str) -> str:
    """Percent-decode a request path.

    Raises:
        InvalidPath: On malformed escapes, escapes that are not UTF-8,
            or an embedded NUL byte.
    """
    if _MALFORMED_ESCAPE.search(raw):
        raise InvalidPath(f"Malformed percent-encoding in {raw!r}")
    try:
        decoded = unquote(raw, errors="strict")
    except UnicodeDecodeError as exc:
        raise InvalidPath(f"Undecodable path {raw!r}") from exc
    if "\x00" in decoded:
        raise InvalidPath("NUL byte in path")
    return decoded


def _open_sync(path: Path) -> tuple[BinaryIO, int] | None:
    """Open *path* for binary reading; ``None`` means it is a directory."""
    try:
        fh = open(path, "rb")  # noqa: SIM115
    except IsADirectoryError:
        return None
    try:
        info = os.fstat(fh.fileno())
    except BaseException:
        fh.close()
        raise
    if stat.S_ISDIR(info.st_mode):
        fh.close()
        return None
    return fh, info.st_size


class StaticAssetResolver:
    """Serves every request from one fixed directory.

    Usage::

        resolver = StaticAssetResolver("./public")
        response = await resolver.respond(request)

    The root is canonicalised once, here, and never changes. Instances
    hold no per-request state, so concurrent calls are independent.
    """

    __slots__ = ("_chunk_size", "_get_only", "_index", "_not_found_page", "_root")

    def __init__(
        self,
        root: str | Path,
        *,
        index: str = "index.html",
        not_found_page: str | None = "404.html",
        chunk_size: int = 64 * 1024,
        get_only: bool = False,
    ) -> None:
        self._root = Path(root).resolve()
        self._index = index
        self._not_found_page = not_found_page
        self._chunk_size = chunk_size
        self._get_only = get_only

    @classmethod
    def from_config(cls, config: ServerConfig) -> "StaticAssetResolver":
        """Build a resolver from the serving fields of *config*."""
        return cls(
            config.root,
            index=config.index,
            not_found_page=config.not_found_page,
            chunk_size=config.chunk_size,
            get_only=config.get_only,
        )

    @property
    def root(self) -> Path:
        """The canonical serving root."""
        return self._root

    # ------------------------------------------------------------------
    # Mapping and opening
    # ------------------------------------------------------------------

    def locate(self, raw_path: str) -> tuple[str, Path]:
        """Map a raw request path to ``(decoded_path, candidate)``.

        Blocking (touches the filesystem to resolve symlinks).
        """
        decoded = decode_path(raw_path)
        if decoded.endswith("/"):
            decoded += self._index
        return decoded, self._confine(self._root / decoded.lstrip("/"))

    def _confine(self, path: Path) -> Path:
        """Canonicalise *path* and ensure it stays under the root."""
        resolved = path.resolve()
        if not resolved.is_relative_to(self._root):
            raise InvalidPath(f"{path} escapes the serving root")
        return resolved

    async def open(self, path: Path) -> Resolution:
        """Open *path* and classify it.

        Raises:
            OSError: For anything other than a missing path or a symlink
                loop (permission denied, I/O failure, descriptor exhaustion).
        """
        try:
            opened = await anyio.to_thread.run_sync(_open_sync, path)
        except (FileNotFoundError, NotADirectoryError):
            return NotFound(path)
        except OSError as exc:
            # Symlink loop: resolve() leaves it in place, open() refuses it
            if exc.errno != errno.ELOOP:
                raise
            return NotFound(path)
        if opened is None:
            return ResolvedDirectory(path)
        fh, size = opened
        return ResolvedFile(path, anyio.wrap_file(fh), size)

    async def resolve(self, raw_path: str) -> Resolution:
        """Decode, map and open a raw request path."""
        _, candidate = await anyio.to_thread.run_sync(self.locate, raw_path)
        return await self.open(candidate)

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------

    async def respond(self, request: Request) -> AnyResponse:
        """Produce the response for *request*.

        Not-found, directory and traversal outcomes are normal control
        flow. Unexpected filesystem errors are logged and answered with a
        generic 500.
        """
        if self._get_only and request.method not in _SAFE_METHODS:
            raise MethodNotAllowed(_SAFE_METHODS)

        try:
            decoded, candidate = await anyio.to_thread.run_sync(self.locate, request.path)
            resolution = await self.open(candidate)
        except InvalidPath as exc:
            logger.debug("%s %s — %s", request.method, request.path, exc.detail)
            return await self._not_found()
        except OSError as exc:
            log_error(exc, request)
            return server_error()

        if isinstance(resolution, ResolvedFile):
            return self._file_response(resolution, guess_content_type(decoded))
        if isinstance(resolution, ResolvedDirectory):
            return await self._directory_index(resolution.path)
        return await self._not_found()

    async def _directory_index(self, directory: Path) -> AnyResponse:
        """Serve ``<directory>/index.html`` or refuse to list the directory."""
        try:
            index = await anyio.to_thread.run_sync(self._confine, directory / self._index)
            resolution = await self.open(index)
        except (InvalidPath, OSError):
            resolution = None
        if isinstance(resolution, ResolvedFile):
            return self._file_response(resolution, HTML)
        return Response(body=DIRECTORY_LISTING_BODY, status=404)

    async def _not_found(self) -> AnyResponse:
        """Serve the custom not-found page, or the plain-text fallback."""
        resolution: Resolution | None = None
        if self._not_found_page:
            try:
                page = await anyio.to_thread.run_sync(
                    self._confine, self._root / self._not_found_page
                )
                resolution = await self.open(page)
            except (InvalidPath, OSError):
                resolution = None
        if isinstance(resolution, ResolvedFile):
            return self._file_response(resolution, HTML, status=404)
        return Response(body=NOT_FOUND_BODY, status=404)

    def _file_response(
        self,
        resolved: ResolvedFile,
        content_type: str,
        *,
        status: int = 200,
    ) -> FileResponse:
        return FileResponse(
            file=resolved.stream,
            size=resolved.size,
            status=status,
            content_type=content_type,
            chunk_size=self._chunk_size,
        )


def server_error() -> Response:
    """The generic 500 response; never carries error detail."""
    return Response(body=SERVER_ERROR_BODY, status=500, content_type=PLAIN_TEXT)
