"""Core runtime aggregator for Genro REST.

Exposes the resolution building blocks from a single module.

Public API:
    - ``HandlerRegistry``: Identifier -> handler factory table
    - ``ResourceFinder``: Convention-based handler resolution
    - ``SerializerFinder``: Serializer resolution with built-in fallbacks
    - ``PathResolver``: Path -> resource chain decoding
    - ``RequestContext``: Per-request resolved state and parameters
    - ``RestController``: Base class for controllers
    - ``Dispatcher``: Request -> controller action glue

Importing this module performs only imports; it does not register plugins.
"""

from .context import FilePageRenderer, PageRenderer, RequestContext, ViewLocator
from .controller import RestController
from .dispatcher import Dispatcher, action_for
from .path import PathResolver, ResolvedPath, ResourceChain, ResourceSegment
from .registry import HandlerRegistry
from .resource_finder import ResourceFinder
from .serializer_finder import (
    EXTENSION_MAPPING,
    SerializerFinder,
    builtin_serializer,
    get_content_type,
    get_extension,
)

__all__ = [
    "Dispatcher",
    "EXTENSION_MAPPING",
    "FilePageRenderer",
    "HandlerRegistry",
    "PageRenderer",
    "PathResolver",
    "RequestContext",
    "ResolvedPath",
    "ResourceChain",
    "ResourceFinder",
    "ResourceSegment",
    "RestController",
    "SerializerFinder",
    "ViewLocator",
    "action_for",
    "builtin_serializer",
    "get_content_type",
    "get_extension",
]
