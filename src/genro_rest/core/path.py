"""Resource path decomposition for Genro REST.

A REST path alternates resource names and identifiers::

    /sessions/1/users/2   -> [(sessions, 1), (users, 2)]
    /sessions/1/users     -> [(sessions, 1), (users, None)]
    /sessions             -> [(sessions, None)]

The last segment of the chain is the current resource. A trailing unpaired
name is a collection-level request. Identifiers are opaque strings and are
never converted.

``PathResolver.parse`` also strips the query string, the optional mount
prefix, and the URL extension of the last segment
(``/sessions/1.json`` gives identifier ``1`` and extension ``json``).
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any, overload

from genro_rest.exceptions import InvalidInputError

from .naming import singularize

__all__ = ["ResourceSegment", "ResourceChain", "ResolvedPath", "PathResolver"]


@dataclass(frozen=True)
class ResourceSegment:
    """One hop of a nested resource path.

    Attributes:
        name: Resource name as found in the URL (``sessions``).
        identifier: Identifier following the name, ``None`` for collections.
    """

    name: str
    identifier: str | None = None

    def matches(self, resource: str) -> bool:
        """True when ``resource`` names this segment, singular or plural."""
        if resource == self.name:
            return True
        try:
            return singularize(resource).lower() == singularize(self.name).lower()
        except InvalidInputError:
            return False


class ResourceChain(Sequence[ResourceSegment]):
    """Immutable ordered sequence of ``ResourceSegment``."""

    __slots__ = ("_segments",)

    def __init__(self, segments: Sequence[ResourceSegment] = ()) -> None:
        self._segments: tuple[ResourceSegment, ...] = tuple(segments)

    @overload
    def __getitem__(self, index: int) -> ResourceSegment: ...

    @overload
    def __getitem__(self, index: slice) -> ResourceChain: ...

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            return ResourceChain(self._segments[index])
        return self._segments[index]

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[ResourceSegment]:
        return iter(self._segments)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResourceChain):
            return self._segments == other._segments
        if isinstance(other, (list, tuple)):
            return list(self._segments) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._segments)

    def __repr__(self) -> str:
        return f"ResourceChain({self.to_list()!r})"

    @property
    def current(self) -> ResourceSegment | None:
        """The most deeply nested segment, ``None`` for an empty chain."""
        return self._segments[-1] if self._segments else None

    @property
    def resource(self) -> str | None:
        """Name of the current resource."""
        current = self.current
        return current.name if current else None

    def names(self) -> list[str]:
        return [segment.name for segment in self._segments]

    def to_list(self) -> list[tuple[str, str | None]]:
        return [(segment.name, segment.identifier) for segment in self._segments]

    def get_id(self, resource: str | None = None) -> str | None:
        """Identifier of the current resource, or of ``resource`` when given.

        ``/sessions/1/users/2``: ``get_id()`` is ``"2"``, ``get_id("sessions")``
        and ``get_id("session")`` are ``"1"``, ``get_id("orders")`` is ``None``.
        """
        if resource is None:
            current = self.current
            return current.identifier if current else None
        for segment in reversed(self._segments):
            if segment.matches(resource):
                return segment.identifier
        return None

    def get_id_at(self, position: int) -> str | None:
        """Identifier at nesting ``position`` (negative counts from the end)."""
        try:
            return self._segments[position].identifier
        except IndexError:
            return None


@dataclass(frozen=True)
class ResolvedPath:
    """Outcome of ``PathResolver.parse``.

    Attributes:
        path: Normalized path (no query string, no mount prefix, no extension).
        chain: Decoded resource chain.
        extension: URL extension of the last segment, ``None`` when absent.
    """

    path: str
    chain: ResourceChain
    extension: str | None = None

    @property
    def resource(self) -> str | None:
        return self.chain.resource

    def get_id(self, resource: str | None = None) -> str | None:
        return self.chain.get_id(resource)


class PathResolver:
    """Turn request paths into resource chains.

    Args:
        base_path: Mount prefix removed before decoding (e.g. ``/api``).
    """

    __slots__ = ("base_path",)

    def __init__(self, base_path: str = "") -> None:
        self.base_path = "/" + base_path.strip("/") if base_path.strip("/") else ""

    def parse(self, path: str | None) -> ResolvedPath:
        """Decode ``path`` into a ``ResolvedPath``."""
        raw = (path or "").split("?", 1)[0].split("#", 1)[0]
        raw = self._strip_base(raw)
        parts = [part for part in raw.split("/") if part]
        extension: str | None = None
        if parts and not raw.endswith("/"):
            parts[-1], extension = self.split_extension(parts[-1])
            if not parts[-1]:
                parts.pop()
        return ResolvedPath(
            path="/" + "/".join(parts),
            chain=self.chain(parts),
            extension=extension,
        )

    def chain(self, parts: Sequence[str]) -> ResourceChain:
        """Pair ``parts`` as (name, identifier), the last name possibly alone."""
        segments = [
            ResourceSegment(parts[index], parts[index + 1] if index + 1 < len(parts) else None)
            for index in range(0, len(parts), 2)
        ]
        return ResourceChain(segments)

    @staticmethod
    def split_extension(segment: str) -> tuple[str, str | None]:
        """Split ``1.json`` into ``("1", "json")``; dotfiles keep their name."""
        stem, dot, extension = segment.rpartition(".")
        if not dot or not stem or not extension:
            return segment, None
        return stem, extension

    def _strip_base(self, raw: str) -> str:
        if not self.base_path:
            return raw
        normalized = "/" + raw.lstrip("/")
        if normalized == self.base_path:
            return "/"
        if normalized.startswith(self.base_path + "/"):
            return normalized[len(self.base_path) :]
        return raw
