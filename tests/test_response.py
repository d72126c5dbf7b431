"""Tests for pubserve.http.response — Response and FileResponse."""

from pathlib import Path

import anyio

from pubserve.http.response import FileResponse, Response


class TestResponse:
    def test_defaults(self) -> None:
        response = Response("hello")
        assert response.status == 200
        assert response.content_type == "text/plain"
        assert response.headers == ()

    def test_with_status_returns_copy(self) -> None:
        original = Response("gone")
        moved = original.with_status(404)
        assert moved.status == 404
        assert original.status == 200

    def test_with_header_appends(self) -> None:
        response = Response().with_header("Allow", "GET").with_header("Allow", "HEAD")
        assert response.headers == (("Allow", "GET"), ("Allow", "HEAD"))

    def test_body_conversions(self) -> None:
        assert Response("café").body_bytes == "café".encode()
        assert Response(b"caf\xc3\xa9").text == "café"


class TestFileResponse:
    def test_cannot_be_copied_with_transformations(self) -> None:
        # One open file per response; nothing may fork the handle
        for name in ("with_status", "with_header", "with_headers", "with_content_type"):
            assert not hasattr(FileResponse, name)

    async def test_aclose_releases_file(self, tmp_path: Path) -> None:
        path = tmp_path / "a.bin"
        path.write_bytes(b"abc")
        response = FileResponse(file=await anyio.open_file(path, "rb"), size=3)

        await response.aclose()

        assert response.file.wrapped.closed
