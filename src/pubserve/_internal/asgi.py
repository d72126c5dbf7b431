"""Typed ASGI definitions.

Raw ASGI aliases plus the two message shapes the server emits.
Internal only -- users interact with Request and Response.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

# Raw ASGI types (matching the spec)
Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]

RawHeaders: TypeAlias = list[tuple[bytes, bytes]]


def start_message(status: int, headers: RawHeaders) -> dict[str, Any]:
    """Build an ``http.response.start`` message."""
    return {"type": "http.response.start", "status": status, "headers": headers}


def body_message(body: bytes, *, more_body: bool = False) -> dict[str, Any]:
    """Build an ``http.response.body`` message."""
    return {"type": "http.response.body", "body": body, "more_body": more_body}
