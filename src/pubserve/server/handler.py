"""ASGI handler — translates ASGI scope/messages to pubserve types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, dispatches through the resolver, and sends the
response back through ASGI send().
"""

from pubserve._internal.asgi import Receive, Scope, Send
from pubserve.errors import HTTPError
from pubserve.http.request import Request
from pubserve.http.response import AnyResponse, FileResponse
from pubserve.resolver import StaticAssetResolver
from pubserve.server.errors import handle_http_error, handle_internal_error
from pubserve.server.sender import send_file_response, send_response
from pubserve.server.terminal_errors import log_error


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    resolver: StaticAssetResolver,
) -> None:
    """Process a single HTTP request through the full pipeline.

    No failure escapes: errors before the response starts become error
    responses; errors while sending are logged and the connection is
    left to the server.
    """
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)

    response: AnyResponse
    try:
        response = await resolver.respond(request)
    except HTTPError as exc:
        response = handle_http_error(exc, request)
    except Exception as exc:
        response = handle_internal_error(exc, request)

    try:
        if isinstance(response, FileResponse):
            await send_file_response(response, send, receive, head=request.is_head)
        else:
            await send_response(response, send, head=request.is_head)
    except Exception as exc:
        log_error(exc, request)
