"""Server pipeline — dispatch, serialization, and ASGI translation."""
