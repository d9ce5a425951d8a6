"""Wren exception hierarchy.

Shared across the route table, binder, dispatcher, and app so every
module raises and catches the same types.

Routing misses (404/405) and binding failures are *values*, not
exceptions; see ``wren.routing.route`` and ``wren.binding.binder``.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when app configuration is invalid.

    Detected while routes are registered or when the app freezes.
    Fatal to startup; never surfaced to a client.
    """


class InvalidPattern(ConfigurationError):  # noqa: N818 — reads as a condition
    """A route template could not be parsed."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid route pattern {pattern!r}: {reason}")


class DuplicateRoute(ConfigurationError):  # noqa: N818
    """A route with the same method and pattern string is already registered."""

    def __init__(self, method: str, pattern: str) -> None:
        self.method = method
        self.pattern = pattern
        super().__init__(f"Route {method} {pattern!r} is already registered.")


class RouteAmbiguity(ConfigurationError):  # noqa: N818
    """Two routes for one method would both match the same request path."""

    def __init__(self, method: str, pattern: str, existing: str, sample: str) -> None:
        self.method = method
        self.pattern = pattern
        self.existing = existing
        self.sample = sample
        super().__init__(
            f"Route {method} {pattern!r} is ambiguous with {method} {existing!r}: "
            f"both match {sample!r}."
        )


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Raised while the request surface is read (body decoding, size limits).
    The dispatcher catches these and renders the standard error payload.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """400 — the request body could not be decoded."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail)


class PayloadTooLarge(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """413 — the request body exceeds ``AppConfig.max_content_length``."""

    def __init__(self, limit: int) -> None:
        super().__init__(
            status=413,
            detail=f"Request body exceeds the {limit} byte limit.",
        )
