"""Tests for wren.binding.handler — descriptors and signature introspection."""

import uuid
from typing import Optional

import pytest

from wren.binding.handler import HandlerDescriptor, describe
from wren.binding.params import ParameterSpec, Source
from wren.errors import ConfigurationError


def calculate(operand1: int, operator: str, operand2: int) -> str:
    return f"{operand1} {operator} {operand2}"


class TestHandlerDescriptor:
    def test_defaults(self) -> None:
        descriptor = HandlerDescriptor(invoke=calculate)
        assert descriptor.parameters == ()
        assert descriptor.success_status == 200

    def test_name_is_qualname(self) -> None:
        assert HandlerDescriptor(invoke=calculate).name == "calculate"

    def test_rejects_bad_status(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid success status"):
            HandlerDescriptor(invoke=calculate, success_status=99)
        with pytest.raises(ConfigurationError):
            HandlerDescriptor(invoke=calculate, success_status=600)

    def test_rejects_duplicate_parameter(self) -> None:
        with pytest.raises(ConfigurationError, match="declared twice"):
            HandlerDescriptor(
                invoke=calculate,
                parameters=(ParameterSpec("a"), ParameterSpec("a", target_type=int)),
            )

    def test_rejects_unregistered_type(self) -> None:
        with pytest.raises(ConfigurationError, match="register_coercion"):
            HandlerDescriptor(invoke=calculate, parameters=(ParameterSpec("a", target_type=bytes),))

    def test_path_parameters(self) -> None:
        descriptor = HandlerDescriptor(
            invoke=calculate,
            parameters=(
                ParameterSpec("id", source=Source.PATH, target_type=int),
                ParameterSpec("note"),
            ),
        )
        assert [p.name for p in descriptor.path_parameters] == ["id"]

    def test_needs_fields(self) -> None:
        path_only = HandlerDescriptor(
            invoke=calculate,
            parameters=(ParameterSpec("id", source=Source.PATH),),
        )
        with_field = HandlerDescriptor(invoke=calculate, parameters=(ParameterSpec("note"),))
        assert path_only.needs_fields is False
        assert with_field.needs_fields is True
        assert HandlerDescriptor(invoke=calculate).needs_fields is False


class TestDescribe:
    def test_zero_arguments(self) -> None:
        def hello() -> list[str]:
            return ["Hello", "World", "!"]

        assert describe(hello).parameters == ()

    def test_annotations_select_types(self) -> None:
        descriptor = describe(calculate)
        assert descriptor.parameters == (
            ParameterSpec("operand1", target_type=int),
            ParameterSpec("operator", target_type=str),
            ParameterSpec("operand2", target_type=int),
        )

    def test_unannotated_is_str(self) -> None:
        def handler(name):  # noqa: ANN001, ANN202
            return name

        assert describe(handler).parameters[0].target_type is str

    def test_path_variables_bind_from_path(self) -> None:
        def remove(id: int) -> None:  # noqa: A002
            pass

        spec = describe(remove, path_variables=("id",)).parameters[0]
        assert spec.source is Source.PATH
        assert spec.target_type is int

    def test_default_makes_optional(self) -> None:
        def search(q: str, limit: int = 10) -> list[str]:
            return []

        _, limit = describe(search).parameters
        assert limit.required is False
        assert limit.default == 10

    def test_union_none_makes_optional(self) -> None:
        def handler(token: uuid.UUID | None) -> None:
            pass

        spec = describe(handler).parameters[0]
        assert spec.target_type is uuid.UUID
        assert spec.required is False
        assert spec.default is None

    def test_typing_optional(self) -> None:
        def handler(count: Optional[int]) -> None:  # noqa: UP007
            pass

        spec = describe(handler).parameters[0]
        assert spec.target_type is int
        assert spec.required is False

    def test_success_status(self) -> None:
        def remove() -> None:
            pass

        assert describe(remove, success_status=204).success_status == 204

    def test_async_handler(self) -> None:
        async def fetch(id: int) -> dict[str, int]:  # noqa: A002
            return {"id": id}

        descriptor = describe(fetch, path_variables=("id",))
        assert descriptor.invoke is fetch
        assert descriptor.parameters[0].source is Source.PATH

    def test_rejects_var_keyword(self) -> None:
        def handler(**kwargs: str) -> None:
            pass

        with pytest.raises(ConfigurationError, match="passable by keyword"):
            describe(handler)

    def test_rejects_var_positional(self) -> None:
        def handler(*args: str) -> None:
            pass

        with pytest.raises(ConfigurationError):
            describe(handler)

    def test_rejects_positional_only(self) -> None:
        def handler(a: int, /) -> None:
            pass

        with pytest.raises(ConfigurationError):
            describe(handler)

    def test_rejects_unsupported_annotation(self) -> None:
        def handler(data: bytes) -> None:
            pass

        with pytest.raises(ConfigurationError, match="unsupported type"):
            describe(handler)
