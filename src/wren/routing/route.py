"""Route frozen dataclass."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from wren.routing.pattern import (
    CompiledPattern,
    LiteralPath,
    PathSpec,
    PlaceholderPath,
    RawPattern,
    classify_path,
    compile_path,
)

METHODS: frozenset[str] = frozenset({"GET", "POST", "PUT", "DELETE"})

# Methods whose request body is read and merged into the parameters
BODY_METHODS: frozenset[str] = frozenset({"POST", "PUT"})

DEFAULT_CONTENT_TYPE = "text/html"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created at registration time; the path specification is classified
    and compiled exactly once, in ``Route.create``.
    """

    method: str
    spec: PathSpec
    pattern: CompiledPattern
    handler: Callable[..., Any]
    content_type: str = DEFAULT_CONTENT_TYPE

    @classmethod
    def create(
        cls,
        method: str | None,
        path: str | re.Pattern[str],
        handler: Callable[..., Any],
        content_type: str | None = None,
    ) -> Route:
        """Build a route from a raw path string or compiled pattern."""
        spec = classify_path(path)
        return cls(
            method=(method or "GET").upper(),
            spec=spec,
            pattern=compile_path(spec),
            handler=handler,
            content_type=content_type or DEFAULT_CONTENT_TYPE,
        )

    @property
    def placeholder_names(self) -> tuple[str, ...]:
        return self.pattern.placeholder_names

    @property
    def path(self) -> str:
        """Human-readable form of the path specification."""
        match self.spec:
            case LiteralPath(path) | PlaceholderPath(path, _):
                return path
            case RawPattern(pattern):
                return f"re:{pattern.pattern}"
