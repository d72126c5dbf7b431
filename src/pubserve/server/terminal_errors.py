"""Terminal error formatting for the pubserve server.

Provides structured, human-readable error output for unexpected failures
(permission errors, I/O errors) without ever sending the detail to the
client. Verbosity is controlled by the ``PUBSERVE_TRACEBACK`` environment
variable:

- ``compact`` (default): error summary plus application frames
- ``full``: the complete Python traceback
- ``minimal``: a single line

Compact output looks like::

    500 GET /secret.txt
    PermissionError: [Errno 13] Permission denied: '/srv/public/secret.txt'
      Trace (app frames):
        .../pubserve/resolver.py:98 in _open_sync
          fh = open(path, "rb")
"""

from __future__ import annotations

import logging
import os
import traceback as _traceback
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pubserve.http.request import Request

logger = logging.getLogger("pubserve.server")


def _is_app_frame(filename: str) -> bool:
    """True if the frame is from the application (not stdlib/site-packages)."""
    if "site-packages" in filename:
        return False
    if filename.startswith("<"):
        return False
    stdlib_prefix = os.path.dirname(os.__file__)
    return not filename.startswith(stdlib_prefix)


def format_compact_traceback(exc: BaseException) -> str:
    """Format an error with a compact traceback.

    Shows only application frames + error summary, suppressing
    anyio and stdlib internals.
    """
    parts: list[str] = []

    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []

    app_frames = [f for f in frames if _is_app_frame(f.filename)]

    # If no app frames, show last 3 frames instead
    display_frames = app_frames if app_frames else frames[-3:]

    parts.append(f"{type(exc).__name__}: {exc}")

    if display_frames:
        parts.append("  Trace (app frames):")
        for frame in display_frames[-5:]:
            parts.append(f"    {frame.filename}:{frame.lineno} in {frame.name}")
            if frame.line:
                parts.append(f"      {frame.line.strip()}")

    return "\n".join(parts)


def format_minimal_error(exc: BaseException) -> str:
    """One-line error summary for minimal verbosity."""
    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    last = frames[-1] if frames else None
    location = f" at {last.filename}:{last.lineno}" if last else ""
    return f"{type(exc).__name__}{location}: {exc}"


def log_error(exc: BaseException, request: Request | None = None) -> None:
    """Log an internal error server-side.

    Args:
        exc: The exception behind the 500 response.
        request: The request that triggered the error (optional for
            mid-stream failures where only the file is known).
    """
    prefix = f"500 {request.method} {request.path}" if request is not None else "Server error"

    traceback_style = os.environ.get("PUBSERVE_TRACEBACK", "compact").lower()

    if traceback_style == "full":
        logger.error(prefix, exc_info=exc)
    elif traceback_style == "minimal":
        logger.error("%s — %s", prefix, format_minimal_error(exc))
    else:
        logger.error("%s\n%s", prefix, format_compact_traceback(exc))
