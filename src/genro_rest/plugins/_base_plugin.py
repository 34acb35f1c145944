"""Plugin contract definitions for the Genro REST dispatcher.

Objects
-------
``ActionEntry``
    Dataclass describing the action about to run. Fields:
        - ``name``: ``"<ControllerClass>.<action>"``, used for per-action config
        - ``controller``: resolved controller identifier
        - ``action``: action method name
        - ``func``: bound action method
        - ``context``: the request's ``RequestContext``

``BasePlugin``
    Base class for dispatcher plugins. Provides:
        - Configuration helpers backed by the dispatcher's ``_plugin_info`` store
        - The ``wrap_action`` hook used to build the middleware chain

    Required class attributes:
        - ``plugin_code``: unique identifier used for registration (e.g. "logging")
        - ``plugin_description``: human-readable description of the plugin

Configuration targets are ``"_all_"`` (every action) or an entry name such as
``"SessionController.show"``; several targets can be given comma-separated.

Example::

    from genro_rest.plugins._base_plugin import BasePlugin

    class TimingPlugin(BasePlugin):
        plugin_code = "timing"
        plugin_description = "Adds X-Elapsed to the context"

        def configure(self, enabled: bool = True):
            pass  # Storage handled by wrapper

        def wrap_action(self, entry, call_next):
            def wrapper(*args, **kwargs):
                t0 = time.perf_counter()
                result = call_next(*args, **kwargs)
                entry.context.put_param("elapsed", time.perf_counter() - t0)
                return result
            return wrapper
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from typing import Any

from pydantic import validate_call

__all__ = ["BasePlugin", "ActionEntry"]


@dataclass
class ActionEntry:
    """The controller action being dispatched."""

    name: str
    controller: str
    action: str
    func: Callable
    context: Any


def _wrap_configure(original_configure: Callable) -> Callable:
    """Wrap a plugin's configure() to handle flags, _target, validation, and storage."""
    validated = validate_call(original_configure)

    @wraps(original_configure)
    def wrapper(
        self: BasePlugin, *, _target: str = "_all_", flags: str | None = None, **kwargs: Any
    ) -> None:
        if flags:
            kwargs.update(self._parse_flags(flags))

        if "," in _target:
            for target in [t.strip() for t in _target.split(",") if t.strip()]:
                wrapper(self, _target=target, **kwargs)
            return

        validated(self, **kwargs)
        self._write_config(_target, kwargs)

    return wrapper


class BasePlugin:
    """Hook interface and configuration helpers for dispatcher plugins."""

    __slots__ = ("name", "_dispatcher")

    plugin_code: str = ""
    plugin_description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _wrap_configure(cls.__dict__["configure"])  # type: ignore[method-assign]

    def __init__(self, dispatcher: Any, **config: Any) -> None:
        self.name = self.plugin_code
        self._dispatcher = dispatcher
        self._get_store().setdefault(self.name, {}).setdefault(
            "_all_", {"enabled": True}
        )
        self.configure(**config)

    def _get_store(self) -> dict[str, Any]:
        return self._dispatcher._plugin_info  # type: ignore[no-any-return]

    def _write_config(self, target: str, config: dict[str, Any]) -> None:
        if not config:
            return
        bucket = self._get_store().setdefault(self.name, {}).setdefault(target, {})
        bucket.update(config)

    def configuration(self, entry_name: str | None = None) -> dict[str, Any]:
        """Read merged configuration (base + optional per-action override)."""
        plugin_bucket = self._get_store().get(self.name)
        if not plugin_bucket:
            return {}
        merged = dict(plugin_bucket.get("_all_", {}))
        if entry_name:
            merged.update(plugin_bucket.get(entry_name, {}))
        return merged

    def _parse_flags(self, flags: str) -> dict[str, bool]:
        """Parse flag string like "enabled,before:off" into boolean dict."""
        mapping: dict[str, bool] = {}
        for chunk in flags.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            if ":" in chunk:
                name, value = chunk.split(":", 1)
                mapping[name.strip()] = value.strip().lower() != "off"
            else:
                mapping[chunk] = True
        return mapping

    # =========================================================================
    # METHODS TO OVERRIDE IN CUSTOM PLUGINS
    # =========================================================================

    def configure(self, *, _target: str = "_all_", flags: str | None = None) -> None:
        """Override to define accepted configuration parameters.

        The wrapper added by ``__init_subclass__`` parses ``flags``, routes to
        ``_target``, validates with pydantic ``validate_call`` and stores the
        values.
        """
        if flags:
            self._write_config(_target, self._parse_flags(flags))

    def wrap_action(self, entry: ActionEntry, call_next: Callable) -> Callable:
        """Override to wrap action invocation.

        Return a callable with the same signature as ``call_next``.
        """
        return call_next
