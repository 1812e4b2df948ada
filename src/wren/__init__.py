"""Wren — a small request router for readable route definitions.

Register literal, ``:placeholder``, or regex paths against GET, POST,
PUT, and DELETE; handlers get ``(request, response, params)`` and
return the body, a deferred function, or nothing (after starting a
template render).

Basic usage::

    from wren import App

    app = App()

    @app.get("/hello/:name")
    def hello(request, response, params):
        return f"Hello, {params['name']}!"

    app.run()

Script usage, with the process-wide default app::

    import wren

    wren.get("/hello-world/simple", lambda request, response, params: "Hello World!")
    wren.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "Deferred",
    "Immediate",
    "PendingExternalCompletion",
    "Request",
    "ResponseContext",
    "ResponseFinishedError",
    "RouteConsistencyError",
    "WrenError",
    "delete",
    "get",
    "post",
    "put",
    "run",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name == "ResponseContext":
        from wren.http.response import ResponseContext

        return ResponseContext

    if name in ("Immediate", "Deferred", "PendingExternalCompletion"):
        from wren.dispatch import results as _results

        return getattr(_results, name)

    if name in ("get", "post", "put", "delete", "run"):
        from wren import default as _default

        return getattr(_default, name)

    if name in (
        "WrenError",
        "ConfigurationError",
        "ResponseFinishedError",
        "RouteConsistencyError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
