"""Immutable HTTP request.

Frozen metadata with async body access. The request is honest about
what it is: received data that doesn't change.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any
from urllib.parse import parse_qsl

from wren._internal.asgi import Receive, Scope
from wren.errors import PayloadTooLarge
from wren.http.forms import FormData, parse_body


def _decode_headers(raw: Iterable[tuple[bytes, bytes]]) -> Mapping[str, str]:
    """Lower-cased header names; the first value sent under a name wins."""
    headers: dict[str, str] = {}
    for name, value in raw:
        headers.setdefault(name.decode("latin-1").lower(), value.decode("latin-1"))
    return MappingProxyType(headers)


def _parse_query(query_string: bytes) -> Mapping[str, str]:
    """Query string fields; the first value for a repeated key wins."""
    query: dict[str, str] = {}
    for key, value in parse_qsl(query_string.decode("latin-1"), keep_blank_values=True):
        query.setdefault(key, value)
    return MappingProxyType(query)


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, query) is frozen at creation.
    Header names are lower-cased.
    The body is read on demand via ``.body()`` or ``.form()``.
    """

    method: str
    path: str
    headers: Mapping[str, str]
    query: Mapping[str, str]
    path_params: dict[str, str]

    # Private: ASGI receive callable for body reading
    _receive: Receive

    # Private: mutable cache for body and parsed form data
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    # -- Async body access --

    async def body(self, max_length: int | None = None) -> bytes:
        """Read the full request body.

        Result is cached — the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.

        Raises:
            PayloadTooLarge: If the body is longer than *max_length*.
        """
        if "_body" in self._cache:
            return self._cache["_body"]

        declared = self.content_length
        if max_length is not None and declared is not None and declared > max_length:
            raise PayloadTooLarge(max_length)

        chunks: list[bytes] = []
        size = 0
        async for chunk in self._stream():
            size += len(chunk)
            if max_length is not None and size > max_length:
                raise PayloadTooLarge(max_length)
            chunks.append(chunk)

        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def _stream(self) -> AsyncGenerator[bytes]:
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def form(self, max_length: int | None = None) -> FormData:
        """Parse the body as form fields (URL-encoded, multipart, or JSON object).

        Result is cached — the body is read and parsed once.

        Raises:
            BadRequest: If the body cannot be decoded.
            PayloadTooLarge: If the body is longer than *max_length*.
        """
        if "_form" in self._cache:
            return self._cache["_form"]

        raw = await self.body(max_length)
        result = parse_body(raw, self.content_type)
        self._cache["_form"] = result
        return result

    async def fields(
        self,
        *,
        max_length: int | None = None,
        include_query: bool = True,
    ) -> Mapping[str, str]:
        """The merged field namespace: query string, then body (body wins)."""
        form = await self.form(max_length)
        if not include_query:
            return form
        merged = dict(self.query)
        merged.update({key: form[key] for key in form})
        return merged

    # -- Factory --

    @classmethod
    def from_asgi(
        cls,
        scope: Scope,
        receive: Receive,
        path_params: dict[str, str] | None = None,
    ) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=_decode_headers(scope.get("headers", ())),
            query=_parse_query(scope.get("query_string", b"")),
            path_params=path_params or {},
            _receive=receive,
        )
