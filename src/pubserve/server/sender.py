"""ASGI response sending — translates pubserve Response types to ASGI messages.

Handles in-memory responses and file responses. File bodies are read in
chunks while a concurrent task watches for client disconnect; the file
is closed exactly once on every exit path.
"""

import logging

import anyio

from pubserve._internal.asgi import RawHeaders, Receive, Send, body_message, start_message
from pubserve.http.response import FileResponse, Response

logger = logging.getLogger("pubserve.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _raw_headers(content_type: str, headers: tuple[tuple[str, str], ...]) -> RawHeaders:
    raw: RawHeaders = [(b"content-type", content_type.encode("latin-1"))]
    for name, value in headers:
        raw.append((name.lower().encode("latin-1"), value.encode("latin-1")))
    return raw


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Translate a Response into ASGI send() calls."""
    raw_headers = _raw_headers(response.content_type, response.headers)

    body = response.body_bytes if _body_allowed(response.status) else b""
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(start_message(response.status, raw_headers))
    await send(body_message(b"" if head else body))


async def send_file_response(
    response: FileResponse,
    send: Send,
    receive: Receive,
    *,
    head: bool = False,
) -> None:
    """Stream a file response, then release the file.

    Sends headers with ``Content-Length`` set to the size recorded at
    open time, then at most that many bytes in ``chunk_size`` pieces.
    Stops reading as soon as the client disconnects. The file is closed
    when the body completes, on disconnect, when ``send`` fails, and when
    the surrounding task is cancelled.
    """
    try:
        raw_headers = _raw_headers(response.content_type, response.headers)
        raw_headers.append((b"content-length", str(response.size).encode("latin-1")))
        await send(start_message(response.status, raw_headers))

        if head or not _body_allowed(response.status):
            await send(body_message(b""))
            return

        completed = False
        async with anyio.create_task_group() as tg:
            tg.start_soon(_watch_disconnect, receive, tg.cancel_scope)
            await _stream_body(response, send)
            completed = True
            tg.cancel_scope.cancel()

        if completed:
            await send(body_message(b""))
        else:
            logger.debug("Client disconnected mid-stream")
    finally:
        await response.aclose()


async def _stream_body(response: FileResponse, send: Send) -> None:
    """Send the file in chunks with ``more_body=True``."""
    remaining = response.size
    while remaining > 0:
        chunk = await response.file.read(min(response.chunk_size, remaining))
        if not chunk:
            break
        remaining -= len(chunk)
        await send(body_message(chunk, more_body=True))


async def _watch_disconnect(receive: Receive, scope: anyio.CancelScope) -> None:
    """Cancel *scope* when the client goes away."""
    while True:
        message = await receive()
        if message.get("type") == "http.disconnect":
            scope.cancel()
            return
