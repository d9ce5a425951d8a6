"""Parameter specs and the coercion table.

Every supported target type has exactly one entry in ``COERCIONS``.
A coercion takes the raw request string and returns the typed value,
raising ``ValueError`` when the string is malformed for that type.
"""

import math
import re
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

# Signed 64-bit range for integer parameters
INT_MIN = -(2**63)
INT_MAX = 2**63 - 1

_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_UUID = re.compile(r"[0-9a-f]{8}-(?:[0-9a-f]{4}-){3}[0-9a-f]{12}", re.IGNORECASE)

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})


class Source(Enum):
    """Where a parameter's raw value comes from."""

    PATH = "path"
    FIELD = "field"


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """One handler parameter: where to find it and what to convert it to."""

    name: str
    source: Source = Source.FIELD
    target_type: type = str
    required: bool = True
    default: Any = None


def coerce_str(raw: str) -> str:
    return raw


def coerce_int(raw: str) -> int:
    """Parse a base-10 signed integer within the signed 64-bit range."""
    if not _INTEGER.fullmatch(raw):
        msg = f"{raw!r} is not a base-10 integer"
        raise ValueError(msg)
    value = int(raw)
    if not INT_MIN <= value <= INT_MAX:
        msg = f"{raw!r} is out of range"
        raise ValueError(msg)
    return value


def coerce_float(raw: str) -> float:
    if not _DECIMAL.fullmatch(raw):
        msg = f"{raw!r} is not a number"
        raise ValueError(msg)
    value = float(raw)
    if not math.isfinite(value):
        msg = f"{raw!r} is out of range"
        raise ValueError(msg)
    return value


def coerce_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    msg = f"{raw!r} is not a boolean"
    raise ValueError(msg)


def coerce_decimal(raw: str) -> Decimal:
    if not _DECIMAL.fullmatch(raw):
        msg = f"{raw!r} is not a decimal number"
        raise ValueError(msg)
    try:
        return Decimal(raw)
    except InvalidOperation as exc:
        msg = f"{raw!r} is not a decimal number"
        raise ValueError(msg) from exc


def coerce_uuid(raw: str) -> uuid.UUID:
    """Parse the canonical hyphenated 8-4-4-4-12 form only."""
    if not _UUID.fullmatch(raw):
        msg = f"{raw!r} is not a canonical UUID"
        raise ValueError(msg)
    return uuid.UUID(raw)


# target type -> coercion
COERCIONS: dict[type, Callable[[str], Any]] = {
    str: coerce_str,
    int: coerce_int,
    float: coerce_float,
    bool: coerce_bool,
    Decimal: coerce_decimal,
    uuid.UUID: coerce_uuid,
}


def register_coercion(target_type: type, coerce: Callable[[str], Any]) -> None:
    """Add or replace the coercion for *target_type*.

    Call during setup, before any app freezes.  *coerce* must raise
    ``ValueError`` for malformed input.
    """
    COERCIONS[target_type] = coerce


def convert_param(value: str, target_type: type) -> Any:
    """Convert a raw request string to *target_type*.

    Raises ``ValueError`` if the string cannot be converted.
    Raises ``KeyError`` if *target_type* has no registered coercion.
    """
    return COERCIONS[target_type](value)
