"""ASGI handler — translates ASGI scope/messages to wren types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, runs middleware around the dispatcher, and
sends the Response back through ASGI send().
"""

import logging
from collections.abc import Callable
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.middleware import Next
from wren.server.dispatcher import Dispatcher
from wren.server.sender import send_response
from wren.server.serializer import error_response

logger = logging.getLogger("wren.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    dispatcher: Dispatcher,
    middleware: tuple[Callable[..., Any], ...] = (),
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        handler: Next = dispatcher.dispatch
        for mw in reversed(middleware):
            handler = _wrap(mw, handler)
        response = await handler(request)
    except HTTPError as exc:
        logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)
        response = error_response(exc.status, exc.detail, headers=exc.headers)
    except Exception as exc:
        logger.exception("500 %s %s", request.method, request.path)
        detail = str(exc) if debug else "Internal Server Error"
        response = error_response(500, detail)

    await send_response(response, send)


def _wrap(mw: Callable[..., Any], inner: Next) -> Next:
    async def call(req: Request) -> Response:
        return await mw(req, inner)

    return call
