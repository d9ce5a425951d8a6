"""Tests for wren._internal.invoke — uniform sync/async handler calls."""

import threading

import pytest

from wren._internal.invoke import Raised, Returned, capture, invoke


class TestInvoke:
    @pytest.mark.asyncio
    async def test_sync(self) -> None:
        assert await invoke(lambda a: a * 2, {"a": 21}) == 42

    @pytest.mark.asyncio
    async def test_async(self) -> None:
        async def handler(a: int) -> int:
            return a + 1

        assert await invoke(handler, {"a": 1}) == 2

    @pytest.mark.asyncio
    async def test_sync_in_thread(self) -> None:
        main = threading.get_ident()

        def handler() -> int:
            return threading.get_ident()

        assert await invoke(handler, {}, in_thread=True) != main
        assert await invoke(handler, {}) == main

    @pytest.mark.asyncio
    async def test_parameter_named_like_flag(self) -> None:
        def handler(in_thread: str) -> str:
            return in_thread

        assert await invoke(handler, {"in_thread": "x"}, in_thread=True) == "x"
        assert await invoke(handler, {"in_thread": "y"}) == "y"


class TestCapture:
    @pytest.mark.asyncio
    async def test_returned(self) -> None:
        assert await capture(lambda: None, {}) == Returned(None)

    @pytest.mark.asyncio
    async def test_raised(self) -> None:
        def handler() -> None:
            raise ValueError("Invalid operator")

        outcome = await capture(handler, {}, in_thread=True)
        assert isinstance(outcome, Raised)
        assert isinstance(outcome.error, ValueError)
        assert str(outcome.error) == "Invalid operator"

    @pytest.mark.asyncio
    async def test_parameter_named_like_flag(self) -> None:
        def handler(in_thread: bool) -> bool:
            return in_thread

        assert await capture(handler, {"in_thread": False}, in_thread=True) == Returned(False)
