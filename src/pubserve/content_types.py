"""Content-type inference from file extensions.

A fixed table rather than ``mimetypes``: the answer must not depend on
the host's MIME database.
"""

DEFAULT_CONTENT_TYPE = "application/octet-stream"

HTML = "text/html; charset=utf-8"
PLAIN_TEXT = "text/plain"

CONTENT_TYPES: dict[str, str] = {
    "html": HTML,
    "css": "text/css; charset=utf-8",
    "js": "text/javascript; charset=utf-8",
    "json": "application/json",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
    "xml": "application/xml",
    "txt": "text/plain; charset=utf-8",
    "pdf": "application/pdf",
    "woff": "font/woff",
    "woff2": "font/woff2",
    "ttf": "font/ttf",
    "otf": "font/otf",
}


def guess_content_type(path: str) -> str:
    """Return the content type for *path* based on its final dot-suffix.

    Only the last path segment is inspected. The lookup is
    case-insensitive; unknown or missing extensions give
    ``application/octet-stream``.
    """
    name = path.rpartition("/")[2]
    _, dot, ext = name.rpartition(".")
    if not dot:
        return DEFAULT_CONTENT_TYPE
    return CONTENT_TYPES.get(ext.lower(), DEFAULT_CONTENT_TYPE)
