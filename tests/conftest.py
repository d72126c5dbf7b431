"""Shared fixtures: a throwaway ``public/`` tree and servers rooted at it."""

from collections.abc import Callable
from pathlib import Path

import pytest

from pubserve.app import StaticServer
from pubserve.config import ServerConfig

type SiteFiles = dict[str, str | bytes]


@pytest.fixture
def make_site(tmp_path: Path) -> Callable[[SiteFiles], Path]:
    """Return a builder that writes fixture files under ``tmp_path/public``."""

    def _make(files: SiteFiles) -> Path:
        public = tmp_path / "public"
        public.mkdir(exist_ok=True)
        for relative, content in files.items():
            target = public / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content)
        return public

    return _make


@pytest.fixture
def make_server(make_site: Callable[[SiteFiles], Path]) -> Callable[..., StaticServer]:
    """Return a builder for a StaticServer rooted at a fresh fixture tree."""

    def _make(files: SiteFiles, **overrides: object) -> StaticServer:
        root = make_site(files)
        return StaticServer(ServerConfig(root=root, **overrides))  # type: ignore[arg-type]

    return _make


@pytest.fixture
def site(make_site: Callable[[SiteFiles], Path]) -> Path:
    """A small site covering the common cases."""
    return make_site(
        {
            "index.html": "<h1>Home</h1>",
            "about.html": "<p>About</p>",
            "css/styles.css": "body { color: red; }",
            "js/app.js": "console.log('hello');",
            "data.json": '{"key":"value"}',
            "icon.svg": "<svg></svg>",
            "sitemap.xml": "<urlset></urlset>",
            "readme.txt": "Hello World",
            "doc.pdf": "%PDF-fake",
            "file.xyz": "binary-ish",
            "image.png": b"\x89PNG\r\n\x1a\n",
            "my file.html": "<p>Spaced</p>",
            "sub/index.html": "<h1>Sub</h1>",
            "emptydir/placeholder.txt": "not index",
        }
    )


@pytest.fixture
def server(site: Path) -> StaticServer:
    return StaticServer(ServerConfig(root=site))
