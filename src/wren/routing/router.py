"""Route table with registration-time conflict detection.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes.  Lookups never mutate state,
so concurrent requests share one table without locking.
"""

import logging
import re

from wren.errors import ConfigurationError, DuplicateRoute, RouteAmbiguity
from wren.routing.pattern import match_segments, overlap_path, split_path
from wren.routing.route import DispatchOutcome, Matched, MethodNotAllowed, NoRouteMatch, Route

logger = logging.getLogger("wren.routing")

# RFC 9110 token characters
_METHOD_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Z]+")


def normalize_method(method: str) -> str:
    """Upper-case an HTTP method and check it is a valid token."""
    normalized = method.strip().upper()
    if not _METHOD_TOKEN.fullmatch(normalized):
        msg = f"Invalid HTTP method {method!r}."
        raise ConfigurationError(msg)
    return normalized


class Router:
    """Ordered route table.

    Usage::

        router = Router()
        router.add(Route("GET", parse_pattern("/api"), descriptor))
        router.add(Route("DELETE", parse_pattern("/api/resource/{id}"), other))
        router.compile()
        outcome = router.resolve("DELETE", "/api/resource/12")
    """

    __slots__ = ("_compiled", "_keys", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._keys: set[tuple[str, str]] = set()
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route. Must be called before compile().

        Raises ``DuplicateRoute`` when the same (method, pattern string)
        is already present, and ``RouteAmbiguity`` when an existing route
        for the same method matches a path this route also matches.
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise ConfigurationError(msg)

        if route.key in self._keys:
            raise DuplicateRoute(route.method, route.pattern.raw)

        for existing in self._routes:
            if existing.method != route.method:
                continue
            sample = overlap_path(route.pattern, existing.pattern)
            if sample is None:
                continue
            if route.pattern.match(sample) is not None and existing.pattern.match(sample) is not None:
                raise RouteAmbiguity(route.method, route.pattern.raw, existing.pattern.raw, sample)

        self._routes.append(route)
        self._keys.add(route.key)
        logger.debug("Registered %s %s", route.method, route.pattern.raw)

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes in registration order."""
        return list(self._routes)

    @property
    def compiled(self) -> bool:
        return self._compiled

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def resolve(self, method: str, path: str) -> DispatchOutcome:
        """Resolve a request method and path to a dispatch outcome.

        Returns ``Matched`` when a route matches both path and method,
        ``MethodNotAllowed`` when the path matches only under other
        methods, and ``NoRouteMatch`` when nothing matches the path.
        """
        method = method.upper()
        parts = split_path(path)
        allowed: set[str] = set()

        for route in self._routes:
            params = match_segments(route.pattern.segments, parts)
            if params is None:
                continue
            if route.method == method:
                # Registration rejects same-method overlaps, so this is the only one.
                return Matched(route=route, path_params=params)
            allowed.add(route.method)

        if allowed:
            return MethodNotAllowed(frozenset(allowed))
        return NoRouteMatch(path)
