"""Wren — a small request-dispatch and binding engine for JSON APIs.

Matches requests to explicitly registered handlers, binds path and
form/query values to typed parameters, and serializes results as JSON.
Any ASGI 3.0 server can host an ``App``.

Basic usage::

    from wren import App

    app = App()

    @app.get("/api")
    def hello() -> list[str]:
        return ["Hello", "World", "!"]

    @app.post("/api/calculate")
    def calculate(operand1: int, operator: str, operand2: int) -> str:
        ...
"""

__version__ = "0.1.0"
__all__ = [
    "NO_CONTENT",
    "App",
    "AppConfig",
    "BadRequest",
    "ConfigurationError",
    "DuplicateRoute",
    "HTTPError",
    "HandlerDescriptor",
    "InvalidPattern",
    "Next",
    "ParameterSpec",
    "Request",
    "Response",
    "RouteAmbiguity",
    "Source",
    "WrenError",
    "describe",
    "register_coercion",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name == "Response":
        from wren.http.response import Response

        return Response

    if name == "NO_CONTENT":
        from wren.server.serializer import NO_CONTENT

        return NO_CONTENT

    if name == "Next":
        from wren.middleware import Next

        return Next

    if name in ("HandlerDescriptor", "describe"):
        from wren.binding import handler as _handler

        return getattr(_handler, name)

    if name in ("ParameterSpec", "Source", "register_coercion"):
        from wren.binding import params as _params

        return getattr(_params, name)

    if name in (
        "BadRequest",
        "ConfigurationError",
        "DuplicateRoute",
        "HTTPError",
        "InvalidPattern",
        "RouteAmbiguity",
        "WrenError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
