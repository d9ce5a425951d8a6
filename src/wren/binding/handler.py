"""Handler descriptors — what a route calls and how its arguments bind.

A descriptor can be written out explicitly::

    HandlerDescriptor(
        invoke=calculate,
        parameters=(
            ParameterSpec("operand1", target_type=int),
            ParameterSpec("operator"),
            ParameterSpec("operand2", target_type=int),
        ),
    )

or derived from a function signature with ``describe()``, where each
annotation selects the coercion, a default makes the parameter optional,
and a name that appears in the route template binds from the path.
"""

import inspect
import types
import typing
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from wren.binding.params import COERCIONS, ParameterSpec, Source
from wren.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class HandlerDescriptor:
    """A registered handler: its parameters, callable, and success status."""

    invoke: Callable[..., Any]
    parameters: tuple[ParameterSpec, ...] = ()
    success_status: int = 200

    def __post_init__(self) -> None:
        if not 100 <= self.success_status <= 599:
            msg = f"Invalid success status {self.success_status} for {self.name}."
            raise ConfigurationError(msg)
        seen: set[str] = set()
        for spec in self.parameters:
            if spec.name in seen:
                msg = f"Parameter {spec.name!r} is declared twice on {self.name}."
                raise ConfigurationError(msg)
            seen.add(spec.name)
            if spec.target_type not in COERCIONS:
                msg = (
                    f"Parameter {spec.name!r} on {self.name} has unsupported type "
                    f"{getattr(spec.target_type, '__name__', spec.target_type)!r}. "
                    f"Register one with register_coercion()."
                )
                raise ConfigurationError(msg)

    @property
    def name(self) -> str:
        return getattr(self.invoke, "__qualname__", None) or repr(self.invoke)

    @property
    def path_parameters(self) -> tuple[ParameterSpec, ...]:
        return tuple(p for p in self.parameters if p.source is Source.PATH)

    @property
    def needs_fields(self) -> bool:
        """True if any parameter binds from the form/query namespace."""
        return any(p.source is Source.FIELD for p in self.parameters)


def describe(
    func: Callable[..., Any],
    *,
    path_variables: Iterable[str] = (),
    success_status: int = 200,
) -> HandlerDescriptor:
    """Build a ``HandlerDescriptor`` from a function signature.

    Args:
        func: The handler. ``def`` or ``async def``.
        path_variables: Variable names of the route template; parameters
            with these names bind from the path, all others from fields.
        success_status: Status for a normal return.

    Raises:
        ConfigurationError: For ``*args``/``**kwargs``, positional-only
            parameters, or annotations with no registered coercion.
    """
    variables = set(path_variables)
    sig = inspect.signature(func, eval_str=True)
    specs: list[ParameterSpec] = []

    for name, param in sig.parameters.items():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD, param.POSITIONAL_ONLY):
            msg = f"Handler {func.__qualname__} parameter {name!r} must be passable by keyword."
            raise ConfigurationError(msg)

        target, optional = _unwrap_optional(param.annotation)
        has_default = param.default is not inspect.Parameter.empty
        specs.append(
            ParameterSpec(
                name=name,
                source=Source.PATH if name in variables else Source.FIELD,
                target_type=target,
                required=not (has_default or optional),
                default=param.default if has_default else None,
            )
        )

    return HandlerDescriptor(
        invoke=func,
        parameters=tuple(specs),
        success_status=success_status,
    )


def _unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Return ``(base_type, is_optional)`` for ``X``, ``X | None``, ``Optional[X]``."""
    if annotation is inspect.Parameter.empty:
        return str, False

    if isinstance(annotation, types.UnionType) or typing.get_origin(annotation) is typing.Union:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        optional = len(args) < len(typing.get_args(annotation))
        if len(args) == 1:
            return args[0], optional
        return annotation, optional

    return annotation, False
