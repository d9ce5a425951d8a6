"""Wren application class.

Mutable during setup (route registration, middleware, lifecycle hooks).
Frozen at runtime when the first ASGI call or lifespan startup arrives.
"""

import inspect
import threading
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren.binding.handler import HandlerDescriptor, describe
from wren.binding.params import Source
from wren.config import AppConfig
from wren.errors import ConfigurationError
from wren.middleware import Middleware
from wren.routing.pattern import parse_pattern
from wren.routing.route import Route
from wren.routing.router import Router, normalize_method
from wren.server.dispatcher import Dispatcher
from wren.server.handler import handle_request

type Handler = Callable[..., Any]


class App:
    """The wren application.

    Routes are registered explicitly, either by call::

        app.register("GET", "/api", hello)

    or by decorator::

        @app.delete("/api/resource/{id}", status=204)
        def remove(id: int) -> None: ...

    Registration validates immediately: a bad template, a duplicate
    route, or an ambiguous route raises before the app ever serves.

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check to ensure exactly
        one thread compiles the app, even when several server workers
        call ``__call__()`` concurrently on first request.
    """

    __slots__ = (
        "_dispatcher",
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._router: Router = Router()
        self._middleware: list[Middleware] = []
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state — set during _freeze()
        self._dispatcher: Dispatcher | None = None

    # -- Route registration --

    def register(
        self,
        method: str,
        pattern: str,
        handler: HandlerDescriptor | Handler,
        *,
        status: int | None = None,
    ) -> Route:
        """Register a route.

        Args:
            method: HTTP method, case-insensitive.
            pattern: Route template. Use ``{name}`` for path variables.
            handler: A ``HandlerDescriptor``, or a callable whose signature
                is turned into one with ``describe()``.
            status: Success status override (default 200).

        Raises:
            InvalidPattern: If *pattern* cannot be parsed.
            DuplicateRoute: If (method, pattern) is already registered.
            RouteAmbiguity: If another route for *method* overlaps *pattern*.
            ConfigurationError: If the app is frozen or the handler's
                parameters do not fit the template.
        """
        self._check_not_frozen()
        compiled = parse_pattern(pattern)

        if isinstance(handler, HandlerDescriptor):
            descriptor = handler
            if status is not None:
                descriptor = replace(descriptor, success_status=status)
        else:
            descriptor = describe(
                handler,
                path_variables=compiled.variables,
                success_status=200 if status is None else status,
            )

        for spec in descriptor.parameters:
            if spec.source is Source.PATH and spec.name not in compiled.variables:
                msg = (
                    f"Handler {descriptor.name} binds {spec.name!r} from the path, "
                    f"but {pattern!r} has no {{{spec.name}}} variable."
                )
                raise ConfigurationError(msg)

        route = Route(method=normalize_method(method), pattern=compiled, handler=descriptor)
        self._router.add(route)
        return route

    def route(
        self,
        pattern: str,
        *,
        methods: list[str] | None = None,
        status: int | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            pattern: URL path template. Use ``{name}`` for path variables.
            methods: HTTP methods. Defaults to ``["GET"]``.
            status: Success status override (default 200).
        """

        def decorator(func: Handler) -> Handler:
            for method in methods or ["GET"]:
                self.register(method, pattern, func, status=status)
            return func

        return decorator

    def get(self, pattern: str, *, status: int | None = None) -> Callable[[Handler], Handler]:
        return self.route(pattern, methods=["GET"], status=status)

    def post(self, pattern: str, *, status: int | None = None) -> Callable[[Handler], Handler]:
        return self.route(pattern, methods=["POST"], status=status)

    def put(self, pattern: str, *, status: int | None = None) -> Callable[[Handler], Handler]:
        return self.route(pattern, methods=["PUT"], status=status)

    def patch(self, pattern: str, *, status: int | None = None) -> Callable[[Handler], Handler]:
        return self.route(pattern, methods=["PATCH"], status=status)

    def delete(self, pattern: str, *, status: int | None = None) -> Callable[[Handler], Handler]:
        return self.route(pattern, methods=["DELETE"], status=status)

    @property
    def routes(self) -> list[Route]:
        """Registered routes in registration order."""
        return self._router.routes

    # -- Middleware --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware to the pipeline. First added runs outermost."""
        self._check_not_frozen()
        self._middleware.append(middleware)

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()

        assert self._dispatcher is not None

        await handle_request(
            scope,
            receive,
            send,
            dispatcher=self._dispatcher,
            middleware=tuple(self._middleware),
            debug=self.config.debug,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before first HTTP request), then
        runs registered startup/shutdown hooks and signals completion
        back to the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await _run_hooks(self._startup_hooks)
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                try:
                    await _run_hooks(self._shutdown_hooks)
                except Exception as exc:
                    await send({"type": "lifespan.shutdown.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Freeze --

    def _ensure_frozen(self) -> None:
        """Compile the app exactly once (double-checked locking)."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        self._router.compile()
        self._dispatcher = Dispatcher(self._router, self.config)
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, middleware, and hooks before the first request."
            )
            raise ConfigurationError(msg)


async def _run_hooks(hooks: list[Callable[..., Any]]) -> None:
    for hook in hooks:
        result = hook()
        if inspect.isawaitable(result):
            await result
