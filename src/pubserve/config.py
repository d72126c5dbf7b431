"""Server configuration.

ServerConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

DEFAULT_PORT = 8000

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Server configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ServerConfig(root="./site", port=3000)
    """

    # Serving root
    root: str | Path = "public"
    index: str = "index.html"
    not_found_page: str | None = "404.html"  # None disables the custom page

    # Server
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT  # 0 = ephemeral (background server only)
    workers: int = 1

    # Streaming
    chunk_size: int = 64 * 1024

    # Methods other than GET/HEAD get 405 when True
    get_only: bool = False

    # Logging
    log_level: str = "info"

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> "ServerConfig":
        """Build a config from ``PORT``, ``HOST`` and ``PUBSERVE_ROOT``.

        Keyword overrides win over the environment; ``None`` overrides are
        ignored so CLI flags that were not given fall through.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {"port": parse_port(env.get("PORT"))}
        if env.get("HOST"):
            values["host"] = env["HOST"]
        if env.get("PUBSERVE_ROOT"):
            values["root"] = env["PUBSERVE_ROOT"]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def with_port(self, port: int) -> "ServerConfig":
        """Return a copy listening on *port*."""
        return replace(self, port=port)


def parse_port(value: str | None) -> int:
    """Parse a port the way ``parseInt`` reads a leading integer.

    Absent, unparsable and zero values fall back to ``DEFAULT_PORT``.
    Range checking happens when the server is constructed.
    """
    if not value:
        return DEFAULT_PORT
    match = _LEADING_INT.match(value)
    if match is None:
        return DEFAULT_PORT
    return int(match.group(1)) or DEFAULT_PORT
