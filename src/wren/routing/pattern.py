"""Path templates and segment-by-segment matching.

A template such as ``/api/resource/{id}`` compiles to a ``PathPattern``:
an ordered tuple of literal and variable segments.  Matching is exact on
segment count — there are no wildcard or greedy segments.
"""

import re
from dataclasses import dataclass

from wren.errors import InvalidPattern

_VARIABLE_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route template.

    Literal:  ``/users``  (is_variable=False, value="users")
    Variable: ``/{id}``   (is_variable=True, value="id")
    """

    value: str
    is_variable: bool = False

    def __str__(self) -> str:
        return f"{{{self.value}}}" if self.is_variable else self.value


@dataclass(frozen=True, slots=True)
class PathPattern:
    """A compiled route template. Immutable and safe to share."""

    raw: str
    segments: tuple[PathSegment, ...]

    @property
    def variables(self) -> tuple[str, ...]:
        """Variable names in declaration order."""
        return tuple(seg.value for seg in self.segments if seg.is_variable)

    def match(self, path: str) -> dict[str, str] | None:
        """Match a concrete request path against this pattern.

        Returns the captured raw strings keyed by variable name, or
        ``None`` when the path does not match.
        """
        return match_segments(self.segments, split_path(path))

    def __str__(self) -> str:
        return "/" + "/".join(str(seg) for seg in self.segments)


def split_path(path: str) -> list[str]:
    """Split a path on ``/``, ignoring one leading and one trailing slash.

    Examples::

        "/api/resource/12"  -> ["api", "resource", "12"]
        "/api/"             -> ["api"]
        "/a//b"             -> ["a", "", "b"]
        "/"                 -> []
    """
    if path.startswith("/"):
        path = path[1:]
    if path.endswith("/"):
        path = path[:-1]
    if not path:
        return []
    return path.split("/")


def match_segments(
    segments: tuple[PathSegment, ...],
    parts: list[str],
) -> dict[str, str] | None:
    """Match split path parts against pattern segments."""
    if len(segments) != len(parts):
        return None

    captured: dict[str, str] = {}
    for seg, part in zip(segments, parts, strict=True):
        if seg.is_variable:
            if not part:
                return None
            captured[seg.value] = part
        elif seg.value != part:
            return None
    return captured


def parse_pattern(pattern: str) -> PathPattern:
    """Compile a route template into a ``PathPattern``.

    Examples::

        "/api"                -> (PathSegment("api"),)
        "/api/resource/{id}"  -> (..., PathSegment("id", is_variable=True))

    Raises ``InvalidPattern`` for empty segments, malformed or duplicate
    variable names, segments mixing literal text with a variable, and
    Flask-style ``<name>`` placeholders.
    """
    segments: list[PathSegment] = []
    seen: set[str] = set()

    for part in split_path(pattern):
        if not part:
            raise InvalidPattern(pattern, "empty path segment")

        if part.startswith("<") and part.endswith(">"):
            msg = f"use {{{part[1:-1]}}} instead of <param> for path variables"
            raise InvalidPattern(pattern, msg)

        if part.startswith("{") and part.endswith("}"):
            name = part[1:-1]
            if not _VARIABLE_NAME.fullmatch(name):
                raise InvalidPattern(pattern, f"bad variable name {name!r}")
            if name in seen:
                raise InvalidPattern(pattern, f"duplicate variable {name!r}")
            seen.add(name)
            segments.append(PathSegment(name, is_variable=True))
            continue

        if "{" in part or "}" in part:
            raise InvalidPattern(pattern, f"segment {part!r} mixes text and a variable")

        segments.append(PathSegment(part))

    return PathPattern(raw=pattern, segments=tuple(segments))


def overlap_path(first: PathPattern, second: PathPattern) -> str | None:
    """Build a path that both patterns could match, if one exists.

    Each position takes the literal from whichever side has one; where
    both sides are variables a placeholder is used.  Returns ``None``
    when segment counts differ or two literals disagree.  The caller
    confirms the sample with the real matcher.
    """
    if len(first.segments) != len(second.segments):
        return None

    parts: list[str] = []
    for a, b in zip(first.segments, second.segments, strict=True):
        if not a.is_variable:
            if not b.is_variable and a.value != b.value:
                return None
            parts.append(a.value)
        elif not b.is_variable:
            parts.append(b.value)
        else:
            parts.append("_")
    return "/" + "/".join(parts)
