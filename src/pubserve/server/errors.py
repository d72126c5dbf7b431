"""Error handling pipeline for pubserve requests.

Maps HTTPError exceptions and unexpected failures to plain-text
Response objects. Error detail stays in the server log.
"""

import logging

from pubserve.errors import HTTPError
from pubserve.http.request import Request
from pubserve.http.response import Response
from pubserve.resolver import server_error
from pubserve.server.terminal_errors import log_error

logger = logging.getLogger("pubserve.server")


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError to a Response."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)

    body = f"{exc.status} {exc.detail}" if exc.detail else str(exc.status)
    resp = Response(body=body, status=exc.status)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_internal_error(exc: Exception, request: Request) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    log_error(exc, request)
    return server_error()
