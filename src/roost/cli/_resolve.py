"""Resolve ``"module:attribute"`` strings to App instances.

Shared by ``roost routes`` and ``roost check``.
"""

import importlib

from roost.app import App


def resolve_app(import_string: str) -> App:
    """Import and return the App named by *import_string*.

    The attribute defaults to ``app`` (``"myapp"`` means ``myapp:app``).
    A callable that is not an App is treated as a factory and called.

    Raises ``ModuleNotFoundError``, ``AttributeError``, or ``TypeError``
    when the target is not an App and no factory produced one.
    """
    module_path, _, attr_name = import_string.partition(":")
    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name or "app")

    if callable(obj) and not isinstance(obj, App):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, App):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a roost.App instance"
        raise TypeError(msg)
    return obj
