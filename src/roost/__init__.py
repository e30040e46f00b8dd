"""roost: a small MVC web framework for ASGI.

Routes map paths to named controller actions, optionally behind named
middleware gates; paths no route matches fall back to
``/controller/action/param...`` conventions.

Basic usage::

    from roost import App, Controller, Router

    class HomeController(Controller):
        def index(self):
            return "Hello, World!"

        def greet(self, name):
            return {"hello": name}

    app = App()
    app.controllers.register(HomeController)

    @app.routes
    def web(r: Router) -> None:
        r.get("/", "HomeController", "index")
        r.get("hello/{name}", "HomeController", "greet")
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "Controller",
    "Fragment",
    "HTTPError",
    "NotFound",
    "Redirect",
    "Request",
    "Response",
    "RoostError",
    "Router",
    "Template",
    "g",
    "get_request",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import roost`` cheap while offering a flat top-level namespace.
    """
    if name == "App":
        from roost.app import App

        return App

    if name == "AppConfig":
        from roost.config import AppConfig

        return AppConfig

    if name == "Controller":
        from roost.controller import Controller

        return Controller

    if name == "Router":
        from roost.routing.router import Router

        return Router

    if name == "Request":
        from roost.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from roost.http import response

        return getattr(response, name)

    if name in ("Template", "Fragment"):
        from roost.templating import returns

        return getattr(returns, name)

    if name in ("RoostError", "ConfigurationError", "HTTPError", "NotFound"):
        from roost import errors

        return getattr(errors, name)

    if name in ("g", "get_request"):
        from roost import context

        return getattr(context, name)

    msg = f"module 'roost' has no attribute {name!r}"
    raise AttributeError(msg)
