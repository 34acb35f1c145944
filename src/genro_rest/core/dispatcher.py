"""Dispatcher - from request data to a controller action.

``Dispatcher`` glues the resolution pieces together for a transport adapter
(WSGI, ASGI, test client):

1. ``PathResolver`` decodes the path into a resource chain and extension.
2. The extension comes from the URL, else from the content type
   (``get_extension``), else it is empty and the response is a page.
3. A controller ``ResourceFinder`` resolves the current resource.
4. A ``SerializerFinder`` resolves the serializer for the extension.
5. The action is inferred from the HTTP method and the presence of an id.

``dispatch`` then instantiates the controller, binds the context and runs
the action through the plugin pipeline. When no controller or action exists
the ``not_found`` exception is raised; every other outcome of resolution is
a fallback, never an error.

Plugins
-------
``Dispatcher.register_plugin(cls)`` registers a ``BasePlugin`` subclass
globally; ``dispatcher.plug(name, **config)`` attaches it. Plugins wrap
actions in attachment order, the first attached being the outermost.

Example::

    from genro_rest import Dispatcher, HandlerRegistry, RestConfig, RestController

    registry = HandlerRegistry()

    @registry.handler("shop.api.SessionController")
    class SessionController(RestController):
        def show(self):
            return {"id": self.get_id()}

    dispatcher = Dispatcher(RestConfig(main_package="shop.api"), registry)
    dispatcher.dispatch("/sessions/7")  # {"id": "7"}
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from genro_toolbox.typeutils import safe_is_instance

from genro_rest.config import RestConfig
from genro_rest.exceptions import ResolutionNotFound
from genro_rest.plugins._base_plugin import ActionEntry, BasePlugin

from .context import PageRenderer, RequestContext
from .path import PathResolver, ResolvedPath
from .registry import HandlerRegistry
from .resource_finder import ResourceFinder
from .serializer_finder import SerializerFinder, get_extension

__all__ = ["Dispatcher", "action_for"]

logger = logging.getLogger("genro_rest")

_PLUGIN_REGISTRY: dict[str, type[BasePlugin]] = {}

_METHOD_ACTIONS: dict[str, str] = {
    "POST": "create",
    "PUT": "update",
    "PATCH": "update",
    "DELETE": "destroy",
}

_OVERRIDABLE_METHODS = frozenset({"PUT", "PATCH", "DELETE"})


def action_for(method: str, has_id: bool) -> str | None:
    """Conventional action for an HTTP method; ``None`` when there is none."""
    method = (method or "GET").upper()
    if method in ("GET", "HEAD"):
        return "show" if has_id else "index"
    return _METHOD_ACTIONS.get(method)


class Dispatcher:
    """Resolve requests into contexts and run controller actions.

    Args:
        config: Naming conventions. With package style ``OFF`` every resource is
            handled by ``config.fixed_controller``.
        registry: Registry holding controllers and serializers.
        renderer: Page renderer handed to every context.
        path_resolver: Custom ``PathResolver`` (e.g. with a mount prefix).
        errors: Mapping of error codes to exception classes. The only code is
            ``not_found`` (default ``ResolutionNotFound``).
    """

    DEFAULT_EXCEPTIONS: dict[str, type[Exception]] = {"not_found": ResolutionNotFound}

    __slots__ = (
        "config",
        "registry",
        "renderer",
        "path_resolver",
        "_exceptions",
        "_controller_finder",
        "_plugins",
        "_plugins_by_name",
        "_plugin_info",
    )

    def __init__(
        self,
        config: RestConfig,
        registry: HandlerRegistry,
        *,
        renderer: PageRenderer | None = None,
        path_resolver: PathResolver | None = None,
        errors: dict[str, type[Exception]] | None = None,
    ) -> None:
        self.config = config
        self.registry = registry
        self.renderer = renderer
        self.path_resolver = path_resolver or PathResolver()
        self._exceptions: dict[str, type[Exception]] = dict(self.DEFAULT_EXCEPTIONS)
        if errors:
            self._exceptions.update(errors)
        self._controller_finder = ResourceFinder(
            registry,
            config.main_package,
            config.alias_controllers_package,
            suffix=config.suffix_controller,
            style=config.package_style,
            fixed=config.fixed_controller,
        )
        self._plugins: list[BasePlugin] = []
        self._plugins_by_name: dict[str, BasePlugin] = {}
        self._plugin_info: dict[str, dict[str, Any]] = {}

    # ------------------------------------------------------------------
    # Plugin registration
    # ------------------------------------------------------------------
    @classmethod
    def register_plugin(cls, plugin_class: type[BasePlugin], name: str | None = None) -> None:
        """Register a plugin class globally.

        Raises:
            TypeError: If plugin_class is not a BasePlugin subclass.
            ValueError: If plugin_code is missing or name collision occurs.
        """
        if not isinstance(plugin_class, type) or not issubclass(plugin_class, BasePlugin):
            raise TypeError("plugin_class must be a BasePlugin subclass")
        if not getattr(plugin_class, "plugin_code", None):
            raise ValueError(
                f"Plugin {plugin_class.__name__} not following standards: missing plugin_code"
            )
        code = name or plugin_class.plugin_code
        if name is None:
            existing = _PLUGIN_REGISTRY.get(code)
            if existing is not None and existing is not plugin_class:
                raise ValueError(f"Plugin '{code}' already registered")
        _PLUGIN_REGISTRY[code] = plugin_class

    @classmethod
    def available_plugins(cls) -> dict[str, type[BasePlugin]]:
        """Return a copy of the global plugin registry."""
        return dict(_PLUGIN_REGISTRY)

    def plug(self, plugin: str, **config: Any) -> Dispatcher:
        """Attach a registered plugin by name.

        Returns:
            self (for method chaining).
        """
        plugin_class = _PLUGIN_REGISTRY.get(plugin)
        if plugin_class is None:
            available = ", ".join(sorted(_PLUGIN_REGISTRY)) or "none"
            raise ValueError(
                f"Unknown plugin '{plugin}'. Register it first. Available plugins: {available}"
            )
        if plugin in self._plugins_by_name:
            raise ValueError(f"Plugin '{plugin}' is already attached to this dispatcher")
        instance = plugin_class(self, **config)
        self._plugins.append(instance)
        self._plugins_by_name[instance.name] = instance
        return self

    def plugin(self, name: str) -> BasePlugin:
        try:
            return self._plugins_by_name[name]
        except KeyError:
            raise AttributeError(f"No plugin named '{name}' attached") from None

    def iter_plugins(self) -> list[BasePlugin]:
        return list(self._plugins)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def resolve_controller(self, resource: str | None) -> str | None:
        """Controller identifier for ``resource``, ``None`` without a resource or match."""
        if not resource:
            return None
        return self._controller_finder.resolve(resource)

    def resolve_serializer(self, resource: str | None, extension: str | None) -> str | None:
        """Serializer identifier, ``None`` meaning "render a page"."""
        finder = SerializerFinder(self.registry, extension or None, self.config)
        if not resource:
            return finder.default_serializer("")
        return finder.resolve(resource)

    def request_extension(self, resolved: ResolvedPath, content_type: str | None) -> str:
        """URL extension, else the one mapped from ``content_type``, else ``""``."""
        return resolved.extension or get_extension(content_type) or ""

    def build_context(
        self,
        path: str,
        *,
        method: str = "GET",
        content_type: str | None = None,
        query: Mapping[str, Any] | None = None,
        attributes: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        remote_addr: str | None = None,
        scheme: str = "http",
    ) -> RequestContext:
        """Resolve everything known about a request into a ``RequestContext``."""
        resolved = self.path_resolver.parse(path)
        extension = self.request_extension(resolved, content_type)
        resource = resolved.resource
        effective_method = self._effective_method(method, query, attributes)
        context = RequestContext(
            resolved,
            method=effective_method,
            extension=extension,
            action=action_for(effective_method, resolved.chain.get_id() is not None),
            controller=self.resolve_controller(resource),
            serializer=self.resolve_serializer(resource, extension),
            query=query,
            attributes=attributes,
            headers=headers,
            remote_addr=remote_addr,
            scheme=scheme,
            registry=self.registry,
            renderer=self.renderer,
        )
        logger.debug("built %r", context)
        return context

    @staticmethod
    def _effective_method(
        method: str, query: Mapping[str, Any] | None, attributes: Mapping[str, Any] | None
    ) -> str:
        method = (method or "GET").upper()
        if method != "POST":
            return method
        override = (attributes or {}).get("_method") or (query or {}).get("_method")
        if isinstance(override, str) and override.upper() in _OVERRIDABLE_METHODS:
            return override.upper()
        return method

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def dispatch(self, path: str, **request: Any) -> Any:
        """Build the context for ``path`` and run the controller action.

        Args:
            path: Request path.
            **request: Keyword arguments accepted by ``build_context``.

        Returns:
            Whatever the action returns.

        Raises:
            Exception mapped to ``not_found``: when no controller or action exists.
        """
        context = self.build_context(path, **request)
        return self.invoke(context)

    def invoke(self, context: RequestContext) -> Any:
        """Run the action selected in ``context``."""
        if context.controller is None or context.action is None:
            self._not_found(context, "no controller")
        controller = self.registry.instantiate(context.controller)
        if not safe_is_instance(controller, "genro_rest.core.controller.RestController"):
            raise TypeError(
                f"Handler '{context.controller}' is not a RestController "
                f"(got {type(controller).__name__})"
            )
        controller.bind(context)
        func = getattr(controller, context.action, None)
        if context.action.startswith("_") or not callable(func):
            self._not_found(context, f"no action '{context.action}'")
        entry = ActionEntry(
            name=f"{type(controller).__name__}.{context.action}",
            controller=context.controller,
            action=context.action,
            func=func,
            context=context,
        )
        return self._wrap(entry)()

    def _wrap(self, entry: ActionEntry) -> Callable:
        call: Callable = entry.func
        for plugin in reversed(self._plugins):
            call = plugin.wrap_action(entry, call)
        return call

    def _not_found(self, context: RequestContext, reason: str) -> None:
        logger.info("%s %s: %s", context.method, context.path, reason)
        raise self._exceptions.get("not_found", ResolutionNotFound)(context.path)
