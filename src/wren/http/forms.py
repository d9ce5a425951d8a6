"""Request body parsing into the field namespace.

Supports ``application/x-www-form-urlencoded`` (stdlib),
``multipart/form-data`` (``python-multipart``), and a top-level JSON
object.  Every parser produces a ``FormData`` of string values so the
binder sees one uniform shape regardless of encoding.
"""

import json as json_module
from collections.abc import Iterator, Mapping
from typing import Any
from urllib.parse import parse_qs

from python_multipart.multipart import MultipartParser, parse_options_header

from wren.errors import BadRequest


class FormData(Mapping[str, str]):
    """Immutable parsed body fields.

    ``__getitem__`` returns the first value sent for a key.
    """

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, list[str]] | None = None) -> None:
        object.__setattr__(self, "_data", data or {})

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"FormData({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default


def parse_body(body: bytes, content_type: str | None) -> FormData:
    """Parse a request body into ``FormData``.

    An empty body parses to empty fields whatever the content type.

    Raises:
        BadRequest: If the body cannot be decoded or the content type
            is not a supported encoding.
    """
    if not body:
        return FormData()

    ct = content_type or "application/x-www-form-urlencoded"
    ct_lower = ct.lower().split(";")[0].strip()

    if ct_lower == "application/x-www-form-urlencoded":
        return _parse_urlencoded(body)

    if ct_lower == "multipart/form-data":
        return _parse_multipart(body, ct)

    if ct_lower == "application/json" or ct_lower.endswith("+json"):
        return _parse_json(body)

    raise BadRequest(f"Unsupported content type: {ct!r}")


def _parse_urlencoded(body: bytes) -> FormData:
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BadRequest("Form body is not valid UTF-8.") from exc
    return FormData(parse_qs(text, keep_blank_values=True))


def _parse_json(body: bytes) -> FormData:
    """Parse a JSON object body; scalar members become string fields.

    ``null`` members are treated as absent.  Nested arrays and objects are
    kept as their compact JSON text.
    """
    try:
        payload = json_module.loads(body)
    except ValueError as exc:
        raise BadRequest(f"Malformed JSON body: {exc}") from exc

    if not isinstance(payload, dict):
        raise BadRequest("JSON body must be an object.")

    data: dict[str, list[str]] = {}
    for key, value in payload.items():
        if value is None:
            continue
        data[key] = [_json_field_text(value)]
    return FormData(data)


def _json_field_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    return json_module.dumps(value, separators=(",", ":"))


def _parse_multipart(body: bytes, content_type: str) -> FormData:
    """Parse multipart form data using python-multipart.

    File parts are not bindable to scalar parameters and are skipped.
    """
    _, options = parse_options_header(content_type)
    boundary = options.get(b"boundary")
    if not boundary:
        raise BadRequest("Multipart form data missing boundary parameter.")

    data: dict[str, list[str]] = {}

    # Track current part state
    header_field = bytearray()
    header_value = bytearray()
    current_data = bytearray()
    current_name: str | None = None
    is_file = False

    def on_part_begin() -> None:
        nonlocal current_name, is_file
        current_data.clear()
        current_name = None
        is_file = False

    def on_part_data(chunk: bytes, start: int, end: int) -> None:
        current_data.extend(chunk[start:end])

    def on_part_end() -> None:
        if current_name is None or is_file:
            return
        try:
            value = current_data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise BadRequest(f"Field {current_name!r} is not valid UTF-8.") from exc
        data.setdefault(current_name, []).append(value)

    def on_header_field(chunk: bytes, start: int, end: int) -> None:
        header_field.extend(chunk[start:end])

    def on_header_value(chunk: bytes, start: int, end: int) -> None:
        header_value.extend(chunk[start:end])

    def on_header_end() -> None:
        nonlocal current_name, is_file
        if bytes(header_field).lower() == b"content-disposition":
            _, params = parse_options_header(bytes(header_value))
            name = params.get(b"name")
            if name is not None:
                current_name = name.decode("utf-8", errors="replace")
            is_file = b"filename" in params
        header_field.clear()
        header_value.clear()

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
        "on_header_end": on_header_end,
    }

    parser = MultipartParser(boundary, callbacks)
    try:
        parser.write(body)
        parser.finalize()
    except ValueError as exc:
        raise BadRequest(f"Malformed multipart body: {exc}") from exc

    return FormData(data)
