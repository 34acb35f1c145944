"""Naming helpers for convention-based resolution.

Resource names come from URL segments (``sessions``, ``user_groups``) while
handler identifiers use singular PascalCase class names (``Session``,
``UserGroup``). The helpers here bridge the two.

Pluralization follows the regular English rules::

    category  <-> categories
    address   <-> addresses
    box       <-> boxes
    status    <-> statuses
    house     <-> houses
    analysis  <-> analyses
    tie       <-> ties
    session   <-> sessions

``-ie`` nouns are recognized from a short list (``tie``, ``movie``,
``cookie``...) or when the stem is a single letter.

Known limitations: irregular plurals (``people``, ``children``, ``mice``),
Latin and Greek plurals other than ``-yses``/``-theses`` (``crises``,
``cacti``), nouns ending in consonant + ``-use`` (``excuses`` gives
``excus``), ``-che``/``-ze`` nouns (``caches``, ``prizes``) and ``-ie``
nouns missing from the list. Name such resources in singular form or
register their handlers under the singularized identifier.
"""

from __future__ import annotations

import re

from genro_rest.exceptions import InvalidInputError

__all__ = [
    "capitalize",
    "singularize",
    "pluralize",
    "camelize",
    "class_base",
    "qualified_name",
]

_VOWELS = frozenset("aeiou")
_SIBILANT_PLURALS = ("sses", "xes", "zzes", "ches", "shes")
_SINGULAR_ENDINGS = ("ss", "us", "is")
_GREEK_PLURALS = ("yses", "theses")
_IE_NOUNS = frozenset(
    {
        "brownie",
        "calorie",
        "cookie",
        "die",
        "genie",
        "hoodie",
        "lie",
        "movie",
        "pie",
        "prairie",
        "rookie",
        "selfie",
        "smoothie",
        "tie",
        "zombie",
    }
)
_WORD_SPLIT = re.compile(r"[_\-\s]+")


def _require(value: str, what: str) -> None:
    if not value:
        raise InvalidInputError(f"Cannot {what} an empty name")


def _same_case(value: str, suffix: str) -> str:
    return suffix.upper() if value[-1].isupper() else suffix


def capitalize(value: str) -> str:
    """Uppercase the first character, leaving the rest untouched."""
    _require(value, "capitalize")
    return value[0].upper() + value[1:]


def singularize(value: str) -> str:
    """Return the singular form of a regular English plural."""
    _require(value, "singularize")
    lower = value.lower()
    if lower.endswith("ies") and len(value) > 3:
        # ties -> tie, movies -> movie, categories -> category
        if len(value) == 4 or lower[:-1] in _IE_NOUNS:
            return value[:-1]
        return value[:-3] + _same_case(value, "y")
    if lower.endswith(_GREEK_PLURALS):
        return value[:-2] + _same_case(value, "is")
    if lower.endswith("uses"):
        # buses -> bus, houses -> house
        if len(value) > 4 and lower[-5] not in _VOWELS:
            return value[:-2]
        return value[:-1]
    if lower.endswith(_SIBILANT_PLURALS):
        return value[:-2]
    if lower.endswith(_SINGULAR_ENDINGS):
        return value
    if lower.endswith("s") and len(value) > 1:
        return value[:-1]
    return value


def pluralize(value: str) -> str:
    """Return the plural form of a regular English noun."""
    _require(value, "pluralize")
    lower = value.lower()
    if lower.endswith("y") and len(value) > 1 and lower[-2] not in _VOWELS:
        return value[:-1] + _same_case(value, "ies")
    if lower.endswith("is") and len(value) > 2:
        return value[:-2] + _same_case(value, "es")
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return value + "es"
    return value + "s"


def camelize(value: str) -> str:
    """Turn ``user_groups`` or ``user-groups`` into ``UserGroups``."""
    _require(value, "camelize")
    words = [word for word in _WORD_SPLIT.split(value) if word]
    if not words:
        raise InvalidInputError(f"Cannot camelize {value!r}")
    return "".join(capitalize(word) for word in words)


def class_base(resource: str) -> str:
    """Class name stem for a resource: singular and PascalCase."""
    words = [word for word in _WORD_SPLIT.split(resource or "") if word]
    if not words:
        raise InvalidInputError(f"Cannot build a class name from {resource!r}")
    words[-1] = singularize(words[-1])
    return "".join(capitalize(word) for word in words)


def qualified_name(*parts: str | None) -> str:
    """Join the non-empty parts with dots."""
    return ".".join(part.strip(".") for part in parts if part and part.strip("."))
