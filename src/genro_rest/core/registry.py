"""Handler registry for Genro REST.

Finders never import modules or inspect packages: a handler "exists" when it
has been registered under its identifier. Applications fill the registry at
startup (explicitly or with the ``handler`` decorator) and only read it while
serving requests.

Identifiers are dotted strings shaped like qualified class names
(``shop.api.SessionController``). By default a class registers under
``<module>.<qualname>``, so a controller declared in ``shop/api.py`` is found
by the conventions without repeating its name.

Example::

    from genro_rest import HandlerRegistry, RestController

    registry = HandlerRegistry()

    @registry.handler("shop.api.SessionController")
    class SessionController(RestController):
        def index(self):
            return ["s1", "s2"]

    registry.exists("shop.api.SessionController")  # True
    registry.instantiate("shop.api.SessionController")  # SessionController()
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from genro_rest.exceptions import ResolutionNotFound

__all__ = ["HandlerRegistry"]


class HandlerRegistry:
    """Table mapping handler identifiers to factories (usually classes)."""

    __slots__ = ("_factories",)

    def __init__(self, handlers: dict[str, Callable[..., Any]] | None = None) -> None:
        self._factories: dict[str, Callable[..., Any]] = {}
        for identifier, factory in (handlers or {}).items():
            self.register(factory, identifier)

    def register(
        self,
        factory: Callable[..., Any],
        identifier: str | None = None,
        *,
        replace: bool = False,
    ) -> Callable[..., Any]:
        """Register ``factory`` under ``identifier``.

        Args:
            factory: Class or callable producing the handler instance.
            identifier: Dotted identifier. Defaults to ``module.QualName``.
            replace: Allow overwriting an existing registration.

        Returns:
            The factory, unchanged.

        Raises:
            TypeError: If factory is not callable.
            ValueError: On identifier collision when replace is False.
        """
        if not callable(factory):
            raise TypeError(f"Handler factory must be callable, got {factory!r}")
        key = identifier or f"{factory.__module__}.{factory.__qualname__}"
        existing = self._factories.get(key)
        if existing is not None and existing is not factory and not replace:
            raise ValueError(f"Handler '{key}' already registered")
        self._factories[key] = factory
        return factory

    def handler(
        self, identifier: str | None = None, *, replace: bool = False
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of ``register``."""

        def decorator(factory: Callable[..., Any]) -> Callable[..., Any]:
            return self.register(factory, identifier, replace=replace)

        return decorator

    def exists(self, identifier: str | None) -> bool:
        return bool(identifier) and identifier in self._factories

    def get(self, identifier: str) -> Callable[..., Any] | None:
        return self._factories.get(identifier)

    def instantiate(self, identifier: str, *args: Any, **kwargs: Any) -> Any:
        """Create a handler instance.

        Raises:
            ResolutionNotFound: If nothing is registered under identifier.
        """
        factory = self._factories.get(identifier)
        if factory is None:
            raise ResolutionNotFound(identifier)
        return factory(*args, **kwargs)

    def identifiers(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(self.identifiers())

    def __len__(self) -> int:
        return len(self._factories)

    def __repr__(self) -> str:
        return f"HandlerRegistry({len(self)} handlers)"
