# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""RequestContext - Per-request state handed to controllers.

A ``RequestContext`` gathers everything resolution produced for one request
(resource chain, extension, controller and serializer identifiers, action)
together with the request parameters. It lives for a single request.

Rendering and serialization are delegated to collaborators supplied by the
host application:

- a ``PageRenderer`` for pages (``render_page``)
- serializer classes registered in the ``HandlerRegistry`` (``serialize``)

Example::

    from jinja2 import TemplateNotFound

    from genro_rest import PageRenderer, RenderMissing

    class JinjaRenderer(PageRenderer):
        def __init__(self, env):
            self._env = env

        def render(self, context, view):
            try:
                template = self._env.get_template(f"{view}.html")
            except TemplateNotFound as exc:
                raise RenderMissing(view) from exc
            return template.render(**context.params)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from genro_rest.exceptions import RenderMissing, ResolutionNotFound

from .path import ResolvedPath, ResourceChain
from .serializer_finder import get_content_type

if TYPE_CHECKING:  # pragma: no cover
    from .registry import HandlerRegistry

__all__ = ["PageRenderer", "ViewLocator", "FilePageRenderer", "RequestContext"]


class PageRenderer(ABC):
    """Renders a view for a request.

    Implementations raise ``RenderMissing`` when the view does not exist.
    """

    @abstractmethod
    def render(self, context: RequestContext, view: str) -> Any:
        """Render ``view`` (``resource/page``, or just ``page``)."""
        ...


class ViewLocator:
    """Find view files below a views directory.

    A view without extension is looked up with each of ``extensions`` in
    order; a view with an extension must exist as given.
    """

    __slots__ = ("root", "extensions")

    def __init__(self, root: str | Path, extensions: Sequence[str] = (".html", ".htm")) -> None:
        self.root = Path(root)
        self.extensions = tuple(extensions)

    def locate(self, view: str) -> Path:
        relative = view.strip("/")
        if not relative:
            raise RenderMissing(view)
        base = (self.root / relative).resolve()
        root = self.root.resolve()
        if root not in base.parents:
            raise RenderMissing(view)
        if base.suffix:
            if base.is_file():
                return base
            raise RenderMissing(view)
        for extension in self.extensions:
            candidate = base.with_name(base.name + extension)
            if candidate.is_file():
                return candidate
        raise RenderMissing(view)


class FilePageRenderer(PageRenderer):
    """Return the text of static view files found by a ``ViewLocator``."""

    def __init__(self, root: str | Path, extensions: Sequence[str] = (".html", ".htm")) -> None:
        self.locator = ViewLocator(root, extensions)

    def render(self, context: RequestContext, view: str) -> str:
        return self.locator.locate(view).read_text(encoding="utf-8")


class RequestContext:
    """Resolved state and parameters of a single request.

    Attributes:
        path: Normalized request path.
        method: HTTP method (upper case).
        chain: Resource chain decoded from the path.
        extension: Requested extension, ``""`` when none (page rendering).
        action: Controller action chosen for the request.
        controller: Controller identifier, ``None`` when no controller resolved.
        serializer: Serializer identifier, ``None`` meaning "render a page".
    """

    __slots__ = (
        "path",
        "method",
        "chain",
        "extension",
        "action",
        "controller",
        "serializer",
        "scheme",
        "remote_addr",
        "_headers",
        "_params",
        "_registry",
        "_renderer",
    )

    def __init__(
        self,
        resolved: ResolvedPath,
        *,
        method: str = "GET",
        extension: str | None = None,
        action: str | None = None,
        controller: str | None = None,
        serializer: str | None = None,
        query: Mapping[str, Any] | None = None,
        attributes: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        remote_addr: str | None = None,
        scheme: str = "http",
        registry: HandlerRegistry | None = None,
        renderer: PageRenderer | None = None,
    ) -> None:
        self.path = resolved.path
        self.chain: ResourceChain = resolved.chain
        self.method = (method or "GET").upper()
        self.extension = extension if extension is not None else (resolved.extension or "")
        self.action = action
        self.controller = controller
        self.serializer = serializer
        self.scheme = scheme
        self.remote_addr = remote_addr
        self._headers = {key.lower(): value for key, value in (headers or {}).items()}
        self._params: dict[str, Any] = dict(query or {})
        self._params.update(attributes or {})
        self._registry = registry
        self._renderer = renderer

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------
    @property
    def params(self) -> Mapping[str, Any]:
        """Read-only view of the request parameters."""
        return MappingProxyType(self._params)

    def get_param(self, name: str, default: Any = None) -> Any:
        return self._params.get(name, default)

    def get_string_param(self, name: str, default: str | None = None) -> str | None:
        """Return a parameter that must be a string.

        Raises:
            TypeError: If the stored value is not a ``str``.
        """
        value = self._params.get(name, default)
        if value is not None and not isinstance(value, str):
            raise TypeError(f"Parameter '{name}' is {type(value).__name__}, not str")
        return value

    def put_param(self, name: str, value: Any) -> None:
        """Store a parameter, visible to every later read in this request."""
        self._params[name] = value

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------
    @property
    def resource(self) -> str | None:
        return self.chain.resource

    def get_id(self, resource: str | None = None) -> str | None:
        return self.chain.get_id(resource)

    def get_id_at(self, position: int) -> str | None:
        return self.chain.get_id_at(position)

    # ------------------------------------------------------------------
    # Request data
    # ------------------------------------------------------------------
    def header(self, name: str, default: str | None = None) -> str | None:
        return self._headers.get(name.lower(), default)

    @property
    def content_type(self) -> str | None:
        """Content type matching the requested extension, if known."""
        return get_content_type(self.extension)

    def remote_address(self) -> str:
        """Client address with scheme, honoring proxy forwarding headers."""
        address = self.header("x-forwarded-for") or self.header("x_forwarded_for") or self.remote_addr
        return f"{self.scheme}://{address or ''}"

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    @property
    def renders_page(self) -> bool:
        """True when no serializer resolved and output is a rendered page."""
        return self.serializer is None

    def render_page(self, page: str | None = None, resource: str | None = None) -> Any:
        """Render ``page`` of ``resource`` through the page renderer.

        Defaults to the current resource and the current action.

        Raises:
            RenderMissing: If no renderer is configured or the view is missing.
        """
        page = page or self.action or "index"
        resource = self.resource if resource is None else resource
        view = f"{resource}/{page}" if resource else page
        if self._renderer is None:
            raise RenderMissing(view)
        return self._renderer.render(self, view)

    def serialize(self, obj: Any) -> Any:
        """Serialize ``obj`` with the resolved serializer.

        Raises:
            ResolutionNotFound: If no serializer resolved or it is not registered.
        """
        if self.serializer is None or self._registry is None:
            raise ResolutionNotFound(f"{self.path}.{self.extension or 'page'}")
        serializer = self._registry.instantiate(self.serializer)
        return serializer.serialize(obj)

    def __repr__(self) -> str:
        return (
            f"RequestContext({self.method} {self.path!r}, controller={self.controller!r}, "
            f"serializer={self.serializer!r}, action={self.action!r})"
        )
