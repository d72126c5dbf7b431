"""Tests for pubserve.server.sender response emission and file lifetime."""

import asyncio
from pathlib import Path
from typing import Any

import anyio
import pytest

from pubserve.http.response import FileResponse, Response
from pubserve.server.sender import send_file_response, send_response


async def _connected() -> dict[str, Any]:
    """A receive() for a client that never disconnects."""
    await asyncio.Event().wait()
    return {"type": "http.disconnect"}


@pytest.fixture
def payload_file(tmp_path: Path) -> Path:
    path = tmp_path / "payload.bin"
    path.write_bytes(bytes(range(256)) * 4)
    return path


async def _file_response(path: Path, chunk_size: int = 64) -> FileResponse:
    fh = await anyio.open_file(path, "rb")
    return FileResponse(file=fh, size=path.stat().st_size, chunk_size=chunk_size)


class TestSendResponse:
    async def test_200_preserves_body(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(Response("ok"), send)

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"2"
        assert headers[b"content-type"] == b"text/plain"
        assert messages[1]["body"] == b"ok"

    async def test_304_drops_body(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(Response("unexpected-body").with_status(304), send)

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_head_keeps_length_without_body(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(Response("404 Not Found", status=404), send, head=True)

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"13"
        assert messages[1]["body"] == b""

    async def test_extra_headers_are_lowercased(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(Response("x").with_header("Allow", "GET, HEAD"), send)

        assert (b"allow", b"GET, HEAD") in messages[0]["headers"]


class TestSendFileResponse:
    async def test_streams_whole_file_then_closes(self, payload_file: Path) -> None:
        response = await _file_response(payload_file)
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_file_response(response, send, _connected)

        start, *bodies = messages
        assert start["status"] == 200
        assert dict(start["headers"])[b"content-length"] == b"1024"
        assert b"".join(m["body"] for m in bodies) == payload_file.read_bytes()
        assert all(m["more_body"] for m in bodies[:-1])
        assert bodies[-1] == {"type": "http.response.body", "body": b"", "more_body": False}
        assert len(bodies) == 1024 // 64 + 1
        assert response.file.wrapped.closed

    async def test_head_sends_no_body_and_closes(self, payload_file: Path) -> None:
        response = await _file_response(payload_file)
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_file_response(response, send, _connected, head=True)

        assert dict(messages[0]["headers"])[b"content-length"] == b"1024"
        assert messages[1]["body"] == b""
        assert len(messages) == 2
        assert response.file.wrapped.closed

    async def test_never_sends_more_than_recorded_size(self, payload_file: Path) -> None:
        fh = await anyio.open_file(payload_file, "rb")
        response = FileResponse(file=fh, size=100, chunk_size=64)
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_file_response(response, send, _connected)

        assert len(b"".join(m["body"] for m in messages[1:])) == 100

    async def test_client_disconnect_stops_reading(self, payload_file: Path) -> None:
        response = await _file_response(payload_file, chunk_size=8)
        messages: list[dict] = []
        first_chunk = asyncio.Event()

        async def send(message: dict) -> None:
            messages.append(message)
            if message.get("more_body"):
                first_chunk.set()

        async def receive() -> dict[str, Any]:
            await first_chunk.wait()
            return {"type": "http.disconnect"}

        await send_file_response(response, send, receive)

        bodies = messages[1:]
        assert len(bodies) < 1024 // 8
        assert all(m["more_body"] for m in bodies)
        assert response.file.wrapped.closed

    async def test_send_failure_closes_file(self, payload_file: Path) -> None:
        response = await _file_response(payload_file)

        async def send(message: dict) -> None:
            if message["type"] == "http.response.body":
                msg = "connection reset"
                raise ConnectionResetError(msg)

        with pytest.raises((ConnectionResetError, ExceptionGroup)):
            await send_file_response(response, send, _connected)
        assert response.file.wrapped.closed

    async def test_cancellation_closes_file(self, payload_file: Path) -> None:
        response = await _file_response(payload_file)
        blocked = asyncio.Event()

        async def send(message: dict) -> None:
            if message["type"] == "http.response.body":
                blocked.set()
                await asyncio.Event().wait()

        task = asyncio.create_task(send_file_response(response, send, _connected))
        await blocked.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert response.file.wrapped.closed
