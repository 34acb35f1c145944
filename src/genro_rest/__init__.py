"""Genro REST - Convention-over-configuration resource resolution.

Given a REST-style URL, Genro REST infers which controller handles the
request, extracts the identifiers embedded in the path, and picks the
serializer for the response from the URL extension or content type. There is
no route table: everything follows naming conventions.

Public exports:
    - ``RestConfig`` / ``PackageStyle``: Naming conventions
    - ``HandlerRegistry``: Where controllers and serializers are registered
    - ``ResourceFinder`` / ``SerializerFinder``: Resolution
    - ``PathResolver`` / ``ResourceChain``: Path decoding
    - ``RequestContext`` / ``RestController``: Handler-facing API
    - ``Dispatcher``: Request to action glue

Built-in plugins (logging) are auto-registered on first import.

Example::

    from genro_rest import Dispatcher, HandlerRegistry, RestConfig, RestController

    registry = HandlerRegistry()

    @registry.handler("shop.api.SessionController")
    class SessionController(RestController):
        def index(self):
            return ["s1", "s2"]

    dispatcher = Dispatcher(RestConfig(main_package="shop.api"), registry)
    dispatcher.dispatch("/sessions")  # ["s1", "s2"]
"""

from importlib import import_module

__version__ = "0.1.0"

from .config import PackageStyle, RestConfig
from .core import (
    Dispatcher,
    FilePageRenderer,
    HandlerRegistry,
    PageRenderer,
    PathResolver,
    RequestContext,
    ResourceChain,
    ResourceFinder,
    ResourceSegment,
    RestController,
    SerializerFinder,
    get_extension,
)
from .exceptions import (
    ConfigurationError,
    InvalidInputError,
    RenderMissing,
    ResolutionNotFound,
)

# Import plugins to trigger auto-registration (lazy to avoid cycles)
for _plugin in ("logging",):
    import_module(f"{__name__}.plugins.{_plugin}")
del _plugin

__all__ = [
    "ConfigurationError",
    "Dispatcher",
    "FilePageRenderer",
    "HandlerRegistry",
    "InvalidInputError",
    "PackageStyle",
    "PageRenderer",
    "PathResolver",
    "RenderMissing",
    "RequestContext",
    "ResolutionNotFound",
    "ResourceChain",
    "ResourceFinder",
    "ResourceSegment",
    "RestConfig",
    "RestController",
    "SerializerFinder",
    "get_extension",
]
