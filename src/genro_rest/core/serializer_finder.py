"""Serializer resolution for Genro REST.

A serializer is looked up like any other handler, with the requested
extension as class prefix: ``/sessions/1.json`` probes
``JsonSessionSerializer`` in the alias serializers package, then in the main
package. When the application defines none, the built-in serializer for the
extension is used::

    json   -> genro_rest.serializers.JsonSerializer
    xml    -> genro_rest.serializers.XmlSerializer
    base64 -> genro_rest.serializers.Base64Serializer
    file   -> genro_rest.serializers.FileSerializer

Any other extension without a custom serializer resolves to ``None`` and the
request renders a page instead. A missing extension means ``page``.

Content types
-------------
``EXTENSION_MAPPING`` maps content types to extensions and is built once at
import, before any request can read it. ``base64`` and ``file`` share
``application/octet-stream``: the later registration (``file``) wins, so the
forward lookup cannot return ``base64``. ``CONTENT_TYPES`` goes the other way
and is lossless.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from genro_rest.config import PackageStyle

from .naming import capitalize, qualified_name
from .registry import HandlerRegistry
from .resource_finder import ResourceFinder

if TYPE_CHECKING:  # pragma: no cover
    from genro_rest.config import RestConfig

__all__ = [
    "DEFAULT_SERIALIZERS_PACKAGE",
    "PAGE_EXTENSION",
    "BUILTIN_EXTENSIONS",
    "EXTENSION_MAPPING",
    "CONTENT_TYPES",
    "get_extension",
    "get_content_type",
    "builtin_serializer",
    "SerializerFinder",
]

DEFAULT_SERIALIZERS_PACKAGE = "genro_rest.serializers"
PAGE_EXTENSION = "page"
JSON_EXTENSION = "json"
XML_EXTENSION = "xml"
B64_EXTENSION = "base64"
FILE_EXTENSION = "file"

BUILTIN_EXTENSIONS = frozenset({JSON_EXTENSION, XML_EXTENSION, B64_EXTENSION, FILE_EXTENSION})

# Registration order matters: the octet-stream entry keeps the last extension.
_REGISTRATIONS: tuple[tuple[str, str], ...] = (
    ("application/json", JSON_EXTENSION),
    ("text/xml", XML_EXTENSION),
    ("application/octet-stream", B64_EXTENSION),
    ("application/octet-stream", FILE_EXTENSION),
)


def _build_tables() -> tuple[MappingProxyType, MappingProxyType]:
    forward: dict[str, str] = {}
    reverse: dict[str, str] = {}
    for content_type, extension in _REGISTRATIONS:
        forward[content_type] = extension
        reverse[extension] = content_type
    return MappingProxyType(forward), MappingProxyType(reverse)


EXTENSION_MAPPING, CONTENT_TYPES = _build_tables()


def get_extension(content_type: str | None) -> str | None:
    """Extension for a content type, or ``None`` when there is no mapping.

    Media-type parameters and case are ignored
    (``Application/JSON; charset=utf-8`` gives ``json``).
    """
    if not content_type:
        return None
    media_type = content_type.split(";", 1)[0].strip().lower()
    return EXTENSION_MAPPING.get(media_type)


def get_content_type(extension: str | None) -> str | None:
    """Content type for a built-in extension, or ``None``."""
    if not extension:
        return None
    return CONTENT_TYPES.get(extension.lower())


def builtin_serializer(extension: str | None) -> str | None:
    """Identifier of the built-in serializer for ``extension``, if there is one."""
    if not extension or extension.lower() not in BUILTIN_EXTENSIONS:
        return None
    return qualified_name(
        DEFAULT_SERIALIZERS_PACKAGE, f"{capitalize(extension.lower())}Serializer"
    )


class SerializerFinder:
    """Find the serializer for a resource and a requested extension.

    Custom serializers always win over built-ins, and the alias package over
    the main package. Without a config the finder only knows the built-ins.

    Args:
        registry: Registry holding the application serializers.
        extension: Requested extension; ``None`` means ``page``.
        config: Naming conventions; ``None`` disables probing.
    """

    __slots__ = ("extension", "_finder")

    def __init__(
        self,
        registry: HandlerRegistry,
        extension: str | None = None,
        config: RestConfig | None = None,
    ) -> None:
        self.extension = extension or PAGE_EXTENSION
        if config is None:
            self._finder = ResourceFinder(
                registry,
                prefix=self.extension,
                style=PackageStyle.OFF,
                fallback=self.default_serializer,
            )
        else:
            self._finder = ResourceFinder(
                registry,
                config.main_package,
                config.alias_serializers_package,
                prefix=self.extension,
                suffix=config.suffix_serializer,
                style=config.package_style,
                fallback=self.default_serializer,
            )

    @property
    def finder(self) -> ResourceFinder:
        return self._finder

    @property
    def is_builtin(self) -> bool:
        """True when the extension has a built-in serializer."""
        return self.extension.lower() in BUILTIN_EXTENSIONS

    def candidates(self, resource: str) -> list[str]:
        return self._finder.candidates(resource)

    def resolve(self, resource: str) -> str | None:
        """Serializer identifier for ``resource``, or ``None`` to render a page."""
        return self._finder.resolve(resource)

    def default_serializer(self, resource: str) -> str | None:
        return builtin_serializer(self.extension)

    def __repr__(self) -> str:
        return f"SerializerFinder(extension={self.extension!r}, finder={self._finder!r})"
