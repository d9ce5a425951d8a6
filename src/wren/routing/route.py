"""Route and dispatch outcome frozen dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from wren.routing.pattern import PathPattern

if TYPE_CHECKING:
    from wren.binding.handler import HandlerDescriptor


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Identity is ``(method, pattern.raw)``.  Created during app setup,
    shared read-only once the route table is compiled.
    """

    method: str
    pattern: PathPattern
    handler: HandlerDescriptor

    @property
    def key(self) -> tuple[str, str]:
        return (self.method, self.pattern.raw)


@dataclass(frozen=True, slots=True)
class Matched:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]


@dataclass(frozen=True, slots=True)
class NoRouteMatch:
    """No registered pattern matches the request path (404)."""

    path: str


@dataclass(frozen=True, slots=True)
class MethodNotAllowed:
    """The path matches, but only under other methods (405)."""

    allowed: frozenset[str]

    @property
    def allow_header(self) -> str:
        return ", ".join(sorted(self.allowed))


type DispatchOutcome = Matched | NoRouteMatch | MethodNotAllowed
