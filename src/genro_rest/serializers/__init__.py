# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Serializer contract and built-in serializer identifiers.

Genro REST decides *which* serializer renders a result; it does not encode
JSON, XML or Base64 itself. The built-in identifiers below are the fallbacks
chosen when an application defines no serializer for a resource. The host
application registers its implementations under them::

    from genro_rest.serializers import JSON_SERIALIZER, Serializer

    class JsonSerializer(Serializer):
        content_type = "application/json"

        def serialize(self, obj):
            return json.dumps(obj)

    registry.register(JsonSerializer, JSON_SERIALIZER)

``PAGE_SERIALIZER`` names page rendering. Finders never return it: a ``None``
serializer already means "render a page".
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

__all__ = [
    "Serializer",
    "JSON_SERIALIZER",
    "XML_SERIALIZER",
    "BASE64_SERIALIZER",
    "FILE_SERIALIZER",
    "PAGE_SERIALIZER",
]

JSON_SERIALIZER = "genro_rest.serializers.JsonSerializer"
XML_SERIALIZER = "genro_rest.serializers.XmlSerializer"
BASE64_SERIALIZER = "genro_rest.serializers.Base64Serializer"
FILE_SERIALIZER = "genro_rest.serializers.FileSerializer"
PAGE_SERIALIZER = "genro_rest.serializers.PageSerializer"


class Serializer(ABC):
    """Turns a handler result into a response body.

    Attributes:
        content_type: Content type of the produced body.
    """

    content_type: str = "application/octet-stream"

    @abstractmethod
    def serialize(self, obj: Any) -> Any:
        """Return the serialized form of ``obj``."""
        ...
