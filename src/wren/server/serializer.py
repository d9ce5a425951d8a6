"""Response serialization — maps handler return values to JSON Responses.

isinstance-based dispatch, no magic, fully predictable:

1. ``Response``              -> pass through
2. ``None`` / ``NO_CONTENT`` -> empty body, declared status
3. anything else             -> compact JSON, declared status

Strings are always JSON-encoded (quoted and escaped); the engine never
emits raw text as a body.
"""

import dataclasses
import datetime
import json as json_module
import uuid
from collections.abc import Mapping, Set
from decimal import Decimal
from enum import Enum
from http import HTTPStatus
from typing import Any, Final

from wren.http.response import JSON_CONTENT_TYPE, Response


class _NoContent:
    """Marker a handler returns to send its declared status with no body."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "NO_CONTENT"


NO_CONTENT: Final = _NoContent()


def _default(value: Any) -> Any:
    """``json.dumps`` fallback for types the stdlib encoder rejects."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime.date | datetime.time):
        return value.isoformat()
    if isinstance(value, Decimal | uuid.UUID):
        return str(value)
    if isinstance(value, Set):
        return sorted(value)
    if isinstance(value, Mapping):
        return dict(value)
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def encode(value: Any, *, ensure_ascii: bool = False) -> bytes:
    """Encode *value* as compact UTF-8 JSON.

    Raises ``TypeError`` for values with no JSON representation.
    """
    text = json_module.dumps(
        value,
        default=_default,
        ensure_ascii=ensure_ascii,
        separators=(",", ":"),
        allow_nan=False,
    )
    return text.encode("utf-8")


def serialize(value: Any, status: int = 200, *, ensure_ascii: bool = False) -> Response:
    """Convert a handler's return value to a ``Response``.

    Raises:
        TypeError: If *value* has no JSON representation.
        ValueError: If *value* contains NaN or infinity.
    """
    match value:
        case Response():
            return value
        case None | _NoContent():
            return Response(body=b"", status=status)
        case _:
            return Response(body=encode(value, ensure_ascii=ensure_ascii), status=status)


def error_response(
    status: int,
    detail: str = "",
    *,
    headers: tuple[tuple[str, str], ...] = (),
    **extra: Any,
) -> Response:
    """Build the standard JSON error payload.

    Shape: ``{"status": 400, "error": "Bad Request", "detail": "...", ...}``
    where *extra* adds members such as ``parameter`` or ``allowed``.
    """
    try:
        reason = HTTPStatus(status).phrase
    except ValueError:
        reason = "Error"
    payload: dict[str, Any] = {"status": status, "error": reason, "detail": detail or reason}
    payload.update(extra)
    return Response(
        body=encode(payload),
        status=status,
        content_type=JSON_CONTENT_TYPE,
        headers=headers,
    )
