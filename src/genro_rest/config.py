# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Configuration model for Genro REST.

``RestConfig`` holds the naming conventions used to turn resource names into
handler identifiers. It is an immutable pydantic model: build it once at
startup and share it between requests.

Example::

    from genro_rest import RestConfig

    config = RestConfig(main_package="shop.api", package_style="nested")

    # or from a flat settings mapping (e.g. loaded by the host application)
    config = RestConfig.from_mapping({
        "rest_main_package": "shop.api",
        "rest_alias_serializers_package": "shop.custom",
        "main.package": "ignored when the prefixed key is present",
    })

Legacy dotted keys (``main.package``, ``alias.controllers.package``,
``alias.serializers.package``, ``suffix.controller``, ``suffix.serializer``,
``packages.style``, ``fixed.controller``) are accepted by ``from_mapping`` as well.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from genro_toolbox import dictExtract
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from genro_rest.exceptions import ConfigurationError

__all__ = ["PackageStyle", "RestConfig"]


class PackageStyle(str, Enum):
    """Namespace layout used to build candidate handler identifiers.

    - ``FLAT``: every handler lives in the main package.
    - ``NESTED``: each resource has its own sub-package.
    - ``OFF``: no probing, a fixed identifier (or the fallback) is used.
    """

    FLAT = "flat"
    NESTED = "nested"
    OFF = "off"

    @classmethod
    def parse(cls, value: Any) -> PackageStyle:
        """Accept enum members and case-insensitive names, including legacy aliases."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.FLAT
        key = str(value).strip().lower()
        style = _STYLE_ALIASES.get(key)
        if style is None:
            raise ConfigurationError(f"Unknown package style: {value!r}")
        return style


_STYLE_ALIASES: dict[str, PackageStyle] = {
    "flat": PackageStyle.FLAT,
    "functional": PackageStyle.FLAT,
    "nested": PackageStyle.NESTED,
    "functional_by_model": PackageStyle.NESTED,
    "off": PackageStyle.OFF,
}

_LEGACY_KEYS: dict[str, str] = {
    "main.package": "main_package",
    "alias.controllers.package": "alias_controllers_package",
    "alias.serializers.package": "alias_serializers_package",
    "suffix.controller": "suffix_controller",
    "suffix.serializer": "suffix_serializer",
    "packages.style": "package_style",
    "fixed.controller": "fixed_controller",
}


class RestConfig(BaseModel):
    """Naming conventions for controller and serializer resolution.

    Attributes:
        main_package: Namespace root for controllers and serializers.
        alias_controllers_package: Optional namespace probed before the main one for controllers.
        alias_serializers_package: Optional namespace probed before the main one for serializers.
        suffix_controller: Role suffix appended to controller class names.
        suffix_serializer: Role suffix appended to serializer class names.
        package_style: Namespace layout (see ``PackageStyle``).
        fixed_controller: Controller identifier used for every resource with
            package style ``OFF``, where it is required.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    main_package: str | None = None
    alias_controllers_package: str | None = None
    alias_serializers_package: str | None = None
    suffix_controller: str = "Controller"
    suffix_serializer: str = "Serializer"
    package_style: PackageStyle = PackageStyle.FLAT
    fixed_controller: str | None = None

    @field_validator("package_style", mode="before")
    @classmethod
    def _parse_style(cls, value: Any) -> PackageStyle:
        return PackageStyle.parse(value)

    @field_validator(
        "main_package",
        "alias_controllers_package",
        "alias_serializers_package",
        "fixed_controller",
        mode="before",
    )
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().strip(".")
            return value or None
        return value

    @model_validator(mode="after")
    def _check_style_requirements(self) -> RestConfig:
        if self.package_style is not PackageStyle.OFF and not self.main_package:
            raise ConfigurationError(
                f"main_package is required with package style '{self.package_style.value}'"
            )
        if self.package_style is PackageStyle.OFF and not self.fixed_controller:
            raise ConfigurationError("fixed_controller is required with package style 'off'")
        return self

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], prefix: str = "rest_") -> RestConfig:
        """Build a config from a flat settings mapping.

        Keys starting with ``prefix`` win over legacy dotted keys.
        """
        values: dict[str, Any] = {
            target: mapping[legacy] for legacy, target in _LEGACY_KEYS.items() if legacy in mapping
        }
        values.update(dictExtract(dict(mapping), prefix, slice_prefix=True, pop=False))
        return cls(**values)
