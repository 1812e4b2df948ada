"""App import resolution — resolves ``"module:attribute"`` strings to App instances."""

import importlib

from wren.app import App


def resolve_app(import_string: str) -> App:
    """Resolve an import string to a wren App instance.

    Accepts ``"module:attribute"``. When the attribute is omitted it
    defaults to ``"app"``. A module that only registered routes through
    the default app (``wren.get(...)``) resolves to that app.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a wren ``App``.
    """
    module_path, _, attr_name = import_string.partition(":")

    module = importlib.import_module(module_path)
    if not attr_name and not hasattr(module, "app"):
        from wren.default import default_app

        obj = default_app()
        if obj is None:
            msg = f"{module_path!r} defines no 'app' and registered no default routes"
            raise AttributeError(msg)
        return obj

    obj = getattr(module, attr_name or "app")
    if not isinstance(obj, App):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a wren.App instance"
        raise TypeError(msg)
    return obj
