"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, max_content_length=64 * 1024)
    """

    # Include exception text in 500 bodies raised outside handlers
    # (middleware, serialization). Handler failure messages are always sent.
    debug: bool = False

    # Limits
    max_content_length: int = 1024 * 1024  # 1 MB

    # Run plain ``def`` handlers in a worker thread so they never block the loop
    sync_handlers_in_thread: bool = True

    # JSON output
    json_ensure_ascii: bool = False

    # Query-string fields join the body fields in one lookup namespace
    merge_query_into_fields: bool = True
