"""Invoke helpers — call sync or async handlers uniformly.

Handlers can be ``def`` or ``async def``.  ``invoke`` awaits coroutine
results and can push plain functions onto a worker thread.  ``capture``
wraps the call so a handler failure comes back as a value instead of
unwinding the dispatcher.

Usage::

    from wren._internal.invoke import Raised, Returned, capture

    match await capture(handler, {"operand1": 3}):
        case Returned(value):
            ...
        case Raised(exc):
            ...
"""

import functools
import inspect
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import anyio.to_thread


async def invoke(
    handler: Any,
    kwargs: Mapping[str, Any],
    /,
    *,
    in_thread: bool = False,
) -> Any:
    """Call a handler with *kwargs* and await the result if it's awaitable.

    Handler arguments stay in *kwargs*, apart from the keyword-only flags;
    a parameter named ``in_thread`` is just another argument.

    With *in_thread*, non-coroutine functions run via ``anyio.to_thread``
    so blocking handler code never stalls the event loop.
    """
    if in_thread and not inspect.iscoroutinefunction(handler):
        result = await anyio.to_thread.run_sync(functools.partial(handler, **kwargs))
    else:
        result = handler(**kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


@dataclass(frozen=True, slots=True)
class Returned:
    """The handler returned normally."""

    value: Any


@dataclass(frozen=True, slots=True)
class Raised:
    """The handler raised."""

    error: Exception


type Outcome = Returned | Raised


async def capture(
    handler: Any,
    kwargs: Mapping[str, Any],
    /,
    *,
    in_thread: bool = False,
) -> Outcome:
    """Invoke *handler* and report how it finished."""
    try:
        value = await invoke(handler, kwargs, in_thread=in_thread)
    except Exception as exc:
        return Raised(exc)
    return Returned(value)
