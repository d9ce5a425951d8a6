"""Per-request dispatch — route, bind, invoke, serialize.

Every request ends in exactly one of these terminal states:

- no route for the path              -> 404
- path routed, method not            -> 405 + ``Allow``
- unreadable body                    -> 400 (or 413 when too large)
- required parameter missing         -> 500
- parameter malformed                -> 400 naming the parameter
- handler raised                     -> 500 carrying the message
- handler returned                   -> declared success status

Failures are not classified further: any exception a handler raises is
a 500.  A missing required parameter is also a 500, not a 400, because
presence is part of the route's contract and is not pre-validated.
"""

import logging
from collections.abc import Mapping
from dataclasses import replace

from wren._internal.invoke import Raised, Returned, capture
from wren.binding.binder import BindingFailure, FailureKind, bind
from wren.binding.handler import HandlerDescriptor
from wren.config import AppConfig
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.routing.route import Matched, MethodNotAllowed, NoRouteMatch
from wren.routing.router import Router
from wren.server.serializer import error_response, serialize

logger = logging.getLogger("wren.server")


class Dispatcher:
    """Runs one request through the route table, binder, and handler.

    Holds only read-only state (the compiled router and config), so one
    dispatcher serves all concurrent requests.
    """

    __slots__ = ("_config", "_router")

    def __init__(self, router: Router, config: AppConfig) -> None:
        self._router = router
        self._config = config

    async def dispatch(self, request: Request) -> Response:
        """Produce the response for *request*."""
        match self._router.resolve(request.method, request.path):
            case NoRouteMatch():
                logger.debug("404 %s %s", request.method, request.path)
                return error_response(404, f"No route matches {request.method} {request.path!r}")
            case MethodNotAllowed() as outcome:
                logger.debug("405 %s %s", request.method, request.path)
                return error_response(
                    405,
                    f"Method not allowed. Allowed methods: {outcome.allow_header}",
                    headers=(("Allow", outcome.allow_header),),
                    allowed=sorted(outcome.allowed),
                )
            case Matched(route=route, path_params=path_params):
                request = replace(request, path_params=path_params)
                return await self._run(route.handler, request)

    async def _run(self, handler: HandlerDescriptor, request: Request) -> Response:
        fields: Mapping[str, str] = {}
        if handler.needs_fields:
            try:
                fields = await request.fields(
                    max_length=self._config.max_content_length,
                    include_query=self._config.merge_query_into_fields,
                )
            except HTTPError as exc:
                logger.debug(
                    "%d %s %s — %s", exc.status, request.method, request.path, exc.detail
                )
                return error_response(exc.status, exc.detail, headers=exc.headers)

        bound = bind(handler.parameters, request.path_params, fields)
        if isinstance(bound, BindingFailure):
            return self._binding_failure(bound, request)

        outcome = await capture(
            handler.invoke,
            bound,
            in_thread=self._config.sync_handlers_in_thread,
        )
        match outcome:
            case Raised(error=exc):
                logger.error(
                    "500 %s %s — %s raised",
                    request.method,
                    request.path,
                    handler.name,
                    exc_info=exc,
                )
                return error_response(500, str(exc) or type(exc).__name__)
            case Returned(value=value):
                try:
                    return serialize(
                        value,
                        handler.success_status,
                        ensure_ascii=self._config.json_ensure_ascii,
                    )
                except (TypeError, ValueError) as exc:
                    logger.exception(
                        "500 %s %s — unserializable result", request.method, request.path
                    )
                    detail = str(exc) if self._config.debug else "Internal Server Error"
                    return error_response(500, detail)

    def _binding_failure(self, failure: BindingFailure, request: Request) -> Response:
        if failure.kind is FailureKind.MALFORMED:
            logger.debug("400 %s %s — %s", request.method, request.path, failure.message)
            return error_response(400, failure.message, parameter=failure.name)

        logger.error("500 %s %s — %s", request.method, request.path, failure.message)
        return error_response(500, failure.message, parameter=failure.name)
