"""RestController - Base class for convention-resolved controllers.

Controllers are found by name (``/sessions/1`` resolves ``SessionController``)
and receive the request through a bound ``RequestContext``. Actions are plain
methods named after the REST verb mapping:

=========  ==================  =========
Method     Path                Action
=========  ==================  =========
GET        ``/sessions``       index
GET        ``/sessions/1``     show
POST       ``/sessions``       create
PUT/PATCH  ``/sessions/1``     update
DELETE     ``/sessions/1``     destroy
=========  ==================  =========

Example::

    @registry.handler("shop.api.SessionController")
    class SessionController(RestController):
        def show(self):
            session = load_session(self.get_id())
            if self.serializer:
                return self.serialize(session)
            self.put_param("session", session)
            return self.render_page()
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .context import RequestContext

__all__ = ["RestController"]


class RestController:
    """Thin binding layer between an action and its ``RequestContext``."""

    def __init__(self, context: RequestContext | None = None) -> None:
        self._context = context

    def bind(self, context: RequestContext) -> RestController:
        self._context = context
        return self

    @property
    def context(self) -> RequestContext:
        if self._context is None:
            raise RuntimeError(f"{type(self).__name__} is not bound to a request")
        return self._context

    @property
    def params(self) -> Mapping[str, Any]:
        return self.context.params

    def get_param(self, name: str, default: Any = None) -> Any:
        return self.context.get_param(name, default)

    def get_string_param(self, name: str, default: str | None = None) -> str | None:
        return self.context.get_string_param(name, default)

    def put_param(self, name: str, value: Any) -> None:
        """Expose ``value`` to the page renderer and to later reads."""
        self.context.put_param(name, value)

    def get_id(self, resource: str | None = None) -> str | None:
        """Identifier of the current resource, or of ``resource``.

        ``/sessions/1/users/2``: ``get_id()`` is ``"2"``, ``get_id("session")`` is ``"1"``.
        """
        return self.context.get_id(resource)

    def get_id_at(self, position: int) -> str | None:
        return self.context.get_id_at(position)

    def remote_address(self) -> str:
        return self.context.remote_address()

    def render_page(self, page: str | None = None, resource: str | None = None) -> Any:
        return self.context.render_page(page, resource)

    def serialize(self, obj: Any) -> Any:
        return self.context.serialize(obj)

    @property
    def extension(self) -> str:
        return self.context.extension

    @property
    def serializer(self) -> str | None:
        return self.context.serializer
