"""Parameter binding — raw request strings to typed handler arguments.

Binding is all-or-nothing: specs are checked in declaration order and
the first failure aborts.  The result depends only on the inputs, so the
same request always binds the same way.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from wren.binding.params import ParameterSpec, Source, convert_param

type BindingResult = dict[str, Any]


class FailureKind(Enum):
    MISSING = "missing"
    MALFORMED = "malformed"


@dataclass(frozen=True, slots=True)
class BindingFailure:
    """The first parameter that could not be bound, and why."""

    name: str
    kind: FailureKind
    detail: str = ""

    @property
    def message(self) -> str:
        if self.kind is FailureKind.MISSING:
            return f"Required parameter {self.name!r} is missing."
        if self.detail:
            return f"Parameter {self.name!r} is malformed: {self.detail}."
        return f"Parameter {self.name!r} is malformed."


def bind(
    specs: Sequence[ParameterSpec],
    path_params: Mapping[str, str],
    fields: Mapping[str, str],
) -> BindingResult | BindingFailure:
    """Bind every parameter or report the first failure.

    Args:
        specs: The handler's parameters, in declaration order.
        path_params: Raw path variables captured by the matcher.
        fields: The merged form/query field namespace.

    Returns:
        A dict of parameter name to typed value, or a ``BindingFailure``.
    """
    bound: BindingResult = {}

    for spec in specs:
        source = path_params if spec.source is Source.PATH else fields
        raw = source.get(spec.name)

        if raw is None:
            if spec.required:
                return BindingFailure(spec.name, FailureKind.MISSING)
            bound[spec.name] = spec.default
            continue

        try:
            bound[spec.name] = convert_param(raw, spec.target_type)
        except ValueError as exc:
            return BindingFailure(spec.name, FailureKind.MALFORMED, str(exc))

    return bound
