"""Convention-based handler resolution for Genro REST.

This module exposes :class:`ResourceFinder`, which turns a resource name taken
from the URL into the identifier of the handler that should process it. There
is no route table: identifiers are derived from naming conventions and probed
against a :class:`~genro_rest.core.registry.HandlerRegistry`.

Constructor
-----------
Constructor signature::

    ResourceFinder(registry, main_package=None, alias_package=None, *,
                   prefix="", suffix="", style=PackageStyle.FLAT,
                   fixed=None, fallback=None)

- ``main_package`` is required unless ``style`` is ``OFF``; a missing one
  raises ``ConfigurationError``.
- ``prefix`` is prepended to the class stem (serializers use the extension,
  so ``json`` + ``sessions`` gives ``JsonSessionSerializer``); controllers
  leave it empty.
- ``style`` is fixed for the lifetime of the finder.
- ``fixed`` is the identifier returned by ``OFF`` finders.
- ``fallback`` is a strategy ``(resource_name) -> identifier | None`` used
  when no candidate is registered.

Candidates
----------
For ``sessions`` with suffix ``Controller``::

    {alias}.SessionController             (only when alias_package is set)
    {main}.SessionController              (FLAT)
    {main}.sessions.SessionController     (NESTED)

Resolution
----------
``resolve`` returns the first registered candidate, else whatever the
fallback returns. ``None`` means "no handler": callers fall back to defaults
or answer not found. Nothing here raises for a missing handler.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from genro_rest.config import PackageStyle
from genro_rest.exceptions import ConfigurationError

from .naming import camelize, class_base, qualified_name
from .registry import HandlerRegistry

__all__ = ["ResourceFinder", "FallbackStrategy"]

logger = logging.getLogger("genro_rest")

FallbackStrategy = Callable[[str], str | None]


class ResourceFinder:
    """Resolve resource names to handler identifiers.

    Responsibilities:
        - Build the ordered candidate identifiers for a resource
        - Probe them against the registry, most specific first
        - Delegate to the fallback strategy when nothing matches
    """

    __slots__ = (
        "registry",
        "main_package",
        "alias_package",
        "prefix",
        "suffix",
        "style",
        "fixed",
        "_fallback",
    )

    def __init__(
        self,
        registry: HandlerRegistry,
        main_package: str | None = None,
        alias_package: str | None = None,
        *,
        prefix: str = "",
        suffix: str = "",
        style: PackageStyle | str = PackageStyle.FLAT,
        fixed: str | None = None,
        fallback: FallbackStrategy | None = None,
    ) -> None:
        style = PackageStyle.parse(style)
        if style is not PackageStyle.OFF and not main_package:
            raise ConfigurationError(
                f"ResourceFinder with style '{style.value}' requires a main_package"
            )
        self.registry = registry
        self.main_package = main_package or None
        self.alias_package = alias_package or None
        self.prefix = prefix or ""
        self.suffix = suffix or ""
        self.style = style
        self.fixed = fixed
        self._fallback = fallback

    def class_name(self, resource: str) -> str:
        """Class name for ``resource``: prefix + singular PascalCase stem + suffix."""
        stem = class_base(resource)
        prefix = camelize(self.prefix) if self.prefix else ""
        return f"{prefix}{stem}{self.suffix}"

    def candidates(self, resource: str) -> list[str]:
        """Ordered identifiers to probe for ``resource``, most specific first."""
        if self.style is PackageStyle.OFF:
            return [self.fixed] if self.fixed else []
        name = self.class_name(resource)
        result: list[str] = []
        if self.alias_package:
            result.append(qualified_name(self.alias_package, name))
        if self.style is PackageStyle.NESTED:
            result.append(qualified_name(self.main_package, resource, name))
        else:
            result.append(qualified_name(self.main_package, name))
        return result

    def resolve(self, resource: str) -> str | None:
        """Return the handler identifier for ``resource`` or ``None``."""
        if self.style is PackageStyle.OFF:
            if self.fixed:
                return self.fixed
            return self.default_resource(resource)
        for candidate in self.candidates(resource):
            if self.registry.exists(candidate):
                logger.debug("resolved %r -> %s", resource, candidate)
                return candidate
            logger.debug("no handler at %s", candidate)
        return self.default_resource(resource)

    def default_resource(self, resource: str) -> str | None:
        """Fallback step, delegated to the injected strategy."""
        if self._fallback is None:
            return None
        identifier = self._fallback(resource)
        if identifier:
            logger.debug("fallback for %r -> %s", resource, identifier)
        return identifier or None

    def __repr__(self) -> str:
        return (
            f"ResourceFinder(main={self.main_package!r}, alias={self.alias_package!r}, "
            f"prefix={self.prefix!r}, suffix={self.suffix!r}, style={self.style.value})"
        )
