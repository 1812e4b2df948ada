"""Wren exception hierarchy.

Shared across Router, App, dispatcher, and finalizer so every module
raises and catches the same types.
"""


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when route registration or app configuration is invalid.

    Surfaces at registration time, before the app starts serving.
    """


class RouteConsistencyError(WrenError):
    """A route was asked to extract parameters from a path it does not match.

    The route table only hands out routes whose pattern matched, so this
    is a programming error, never a client-facing one.
    """

    def __init__(self, pattern: str, path: str) -> None:
        self.pattern = pattern
        self.path = path
        super().__init__(f"Route pattern {pattern!r} does not match path {path!r}")


class ResponseFinishedError(WrenError):
    """A response was finalized (or completed) more than once."""
