"""Tests for wren.cli — entrypoint, app resolution, and ``wren routes``."""

import sys
import types

import pytest

from wren.app import App
from wren.cli import main
from wren.cli._resolve import resolve_app


@pytest.fixture
def _fake_app_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module with a wren App on sys.modules."""
    app = App()

    @app.get("/api")
    def hello() -> list[str]:
        return ["Hello", "World", "!"]

    @app.post("/api/calculate")
    def calculate(operand1: int, operator: str, operand2: int) -> str:
        return ""

    @app.delete("/api/resource/{id}", status=204)
    def remove(id: int, reason: str | None = None) -> None:  # noqa: A002
        pass

    mod = types.ModuleType("_fake_wren_app")
    mod.app = app  # type: ignore[attr-defined]
    mod.empty = App()  # type: ignore[attr-defined]
    mod.factory = lambda: app  # type: ignore[attr-defined]
    mod.not_an_app = "just a string"  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_wren_app", mod)


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_routes_missing_app(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes"])
        assert exc_info.value.code == 2

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "wren" in capsys.readouterr().out


@pytest.mark.usefixtures("_fake_app_module")
class TestResolveApp:
    def test_explicit_attribute(self) -> None:
        assert isinstance(resolve_app("_fake_wren_app:app"), App)

    def test_default_attribute(self) -> None:
        assert resolve_app("_fake_wren_app") is resolve_app("_fake_wren_app:app")

    def test_factory(self) -> None:
        assert resolve_app("_fake_wren_app:factory") is resolve_app("_fake_wren_app:app")

    def test_not_an_app(self) -> None:
        with pytest.raises(TypeError, match="not a wren.App"):
            resolve_app("_fake_wren_app:not_an_app")

    def test_missing_attribute(self) -> None:
        with pytest.raises(AttributeError):
            resolve_app("_fake_wren_app:nope")


@pytest.mark.usefixtures("_fake_app_module")
class TestRoutesCommand:
    def test_prints_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_wren_app:app"])
        lines = capsys.readouterr().out.splitlines()

        assert lines[0].split() == ["METHOD", "PATH", "STATUS", "HANDLER"]
        assert lines[2].split()[:3] == ["GET", "/api", "200"]
        assert "calculate(operand1: int, operator: str, operand2: int)" in lines[3]
        assert lines[4].split()[:3] == ["DELETE", "/api/resource/{id}", "204"]
        assert "{id}: int, reason?: str" in lines[4]

    def test_no_routes(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_wren_app:empty"])
        assert capsys.readouterr().out.strip() == "No routes registered."

    def test_bad_import(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "_no_such_module_here:app"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err
