"""Shared fixtures for wren tests."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from wren import default
from wren.app import App
from wren.config import AppConfig


@pytest.fixture(autouse=True)
def _reset_default_app() -> Iterator[None]:
    """Every test starts and ends without a process-wide default app."""
    default.reset()
    yield
    default.reset()


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A template directory with a couple of simple kida templates."""
    (tmp_path / "hello.html").write_text("Hello {{ name }}!")
    (tmp_path / "item.html").write_text("<p>{{ msg }} {{ id }}</p>")
    return tmp_path


@pytest.fixture
def template_app(template_dir: Path) -> App:
    return App(AppConfig(template_dir=template_dir))
