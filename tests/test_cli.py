"""Tests for the wren CLI."""

import logging
import sys
import textwrap
from pathlib import Path
from typing import Any

import pytest

from wren.app import App
from wren.cli import configure_logging, main
from wren.cli._resolve import resolve_app


@pytest.fixture
def app_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """A throwaway importable module defining ``app`` and ``not_an_app``."""
    source = textwrap.dedent(
        """
        from wren import App

        app = App()

        @app.get("/hello/:name")
        def hello(request, response, params):
            return "hi"

        app.add_route("POST", "/items", hello, content_type="text/plain")

        not_an_app = 42
        """
    )
    (tmp_path / "wren_cli_sample.py").write_text(source)
    monkeypatch.syspath_prepend(str(tmp_path))
    return "wren_cli_sample"


class TestResolveApp:
    def test_module_and_attribute(self, app_module: str) -> None:
        assert isinstance(resolve_app(f"{app_module}:app"), App)

    def test_attribute_defaults_to_app(self, app_module: str) -> None:
        assert resolve_app(app_module) is resolve_app(f"{app_module}:app")

    def test_not_an_app(self, app_module: str) -> None:
        with pytest.raises(TypeError, match="not a wren.App"):
            resolve_app(f"{app_module}:not_an_app")

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_app("wren_no_such_module_anywhere")

    def test_default_app_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "wren_cli_script.py").write_text(
            "import wren\nwren.get('/', lambda request, response, params: 'x')\n"
        )
        monkeypatch.syspath_prepend(str(tmp_path))
        from wren import default

        app = resolve_app("wren_cli_script")
        assert app is default.default_app()


class TestMain:
    def test_no_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1
        assert "usage: wren" in capsys.readouterr().out

    def test_routes(self, app_module: str, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", f"{app_module}:app"])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["METHOD", "PATH", "CONTENT-TYPE", "HANDLER"]
        assert lines[2].split() == ["GET", "/hello/:name", "text/html", "hello"]
        assert lines[3].split() == ["POST", "/items", "text/plain", "hello"]

    def test_routes_bad_import(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "wren_no_such_module_anywhere:app"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_run(self, app_module: str, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: dict[str, Any] = {}

        def fake_run_server(app, host, port, *, reload=False, app_path=None) -> None:
            seen.update(host=host, port=port, app_path=app_path)

        monkeypatch.setattr("wren.server.runner.run_server", fake_run_server)
        monkeypatch.setattr("wren.cli._run.configure_logging", lambda level: None)
        main(["run", f"{app_module}:app", "--port", "8083"])
        assert seen == {"host": "127.0.0.1", "port": 8083, "app_path": f"{app_module}:app"}


class TestConfigureLogging:
    def test_access_lines_reach_stdout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        root = logging.getLogger()
        monkeypatch.setattr(root, "handlers", [])
        monkeypatch.setattr(root, "level", root.level)
        configure_logging("info")
        [handler] = root.handlers
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stdout
        assert root.level == logging.INFO
        assert logging.getLogger("wren.access").isEnabledFor(logging.INFO)

    def test_existing_handlers_left_alone(self, monkeypatch: pytest.MonkeyPatch) -> None:
        root = logging.getLogger()
        existing = logging.NullHandler()
        monkeypatch.setattr(root, "handlers", [existing])
        monkeypatch.setattr(root, "level", root.level)
        configure_logging("debug")
        assert root.handlers == [existing]
