"""Name → factory registries for controllers and middleware gates.

Routes refer to controllers and middleware by string identifier
(``"UserController"``, ``"AuthMiddleware"``). A registry resolves those
identifiers to zero-argument factories. Classes are factories, so the
common case is registering the class itself.

Registries are mutable during setup and frozen together with the app.
"""

import importlib
import inspect
import pkgutil
from collections.abc import Callable, Iterator
from typing import Any


class Registry:
    """An ordered mapping of identifiers to zero-argument factories.

    Subclasses set ``kind`` (used in error messages) and may override
    ``accepts()`` to filter what ``discover()`` picks up.
    """

    kind = "object"

    __slots__ = ("_factories", "_frozen")

    def __init__(self) -> None:
        self._factories: dict[str, Callable[[], Any]] = {}
        self._frozen = False

    def register(
        self,
        name: str | type,
        factory: Callable[[], Any] | None = None,
    ) -> Any:
        """Register *factory* under *name*.

        Three forms::

            registry.register("AuthMiddleware", AuthMiddleware)
            registry.register(AuthMiddleware)          # name = class name

            @registry.register("AuthMiddleware")       # decorator
            class Auth: ...
        """
        if isinstance(name, type) and factory is None:
            self._add(name.__name__, name)
            return name

        if factory is None:

            def decorator(obj: Any) -> Any:
                self._add(str(name), obj)
                return obj

            return decorator

        self._add(str(name), factory)
        return factory

    def discover(self, package: str) -> list[str]:
        """Import every module of *package* and register accepted classes.

        Only classes defined in the imported module itself are considered,
        so re-exports and imported base classes are skipped. Returns the
        names registered, in discovery order.
        """
        root = importlib.import_module(package)
        modules = [root]
        search = getattr(root, "__path__", None)
        if search is not None:
            prefix = f"{root.__name__}."
            modules.extend(
                importlib.import_module(info.name)
                for info in pkgutil.walk_packages(search, prefix)
            )

        added: list[str] = []
        for module in modules:
            for attr_name, obj in vars(module).items():
                if (
                    inspect.isclass(obj)
                    and obj.__module__ == module.__name__
                    and not attr_name.startswith("_")
                    and self.accepts(obj)
                    and attr_name not in self._factories
                ):
                    self._add(attr_name, obj)
                    added.append(attr_name)
        return added

    def accepts(self, obj: type) -> bool:
        """Whether ``discover()`` should register *obj*."""
        return True

    def resolve(self, name: str) -> Callable[[], Any] | None:
        """Return the factory for *name*, or ``None`` if unknown."""
        return self._factories.get(name)

    def create(self, name: str) -> Any | None:
        """Build a fresh instance for *name*, or ``None`` if unknown."""
        factory = self._factories.get(name)
        if factory is None:
            return None
        return factory()

    def freeze(self) -> None:
        """Disallow further registration."""
        self._frozen = True

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(self._factories)

    def __len__(self) -> int:
        return len(self._factories)

    def _add(self, name: str, factory: Callable[[], Any]) -> None:
        if self._frozen:
            msg = f"Cannot register {self.kind} {name!r} after the app has been frozen."
            raise RuntimeError(msg)
        if not callable(factory):
            msg = f"{self.kind.capitalize()} factory for {name!r} is not callable."
            raise TypeError(msg)
        self._factories[name] = factory
