# Copyright 2025 Softwell S.r.l. - All Rights Reserved
# SPDX-License-Identifier: Apache-2.0
"""Exceptions for Genro REST.

Resolution never raises: finders return ``None`` when no handler matches.
These exceptions are reserved for the dispatch boundary and for genuinely
invalid input or configuration.
"""

__all__ = [
    "ResolutionNotFound",
    "InvalidInputError",
    "RenderMissing",
    "ConfigurationError",
]


class ResolutionNotFound(Exception):
    """Raised when every fallback for a resource has been exhausted.

    Transports usually map this to a 404 response.

    Attributes:
        selector: What could not be resolved (a path, an identifier, an extension).
    """

    def __init__(self, selector: str) -> None:
        self.selector = selector
        super().__init__(f"Resource '{selector}' not found")


class InvalidInputError(ValueError):
    """Raised when a naming utility receives an empty or malformed name.

    Well-formed paths never trigger it: seeing this error means an integration bug.
    """


class RenderMissing(OSError):
    """Raised when the requested page or view does not exist.

    Attributes:
        page: The page path that could not be found.
    """

    def __init__(self, page: str) -> None:
        self.page = page
        super().__init__(f"Page '{page}' not found")


class ConfigurationError(ValueError):
    """Raised for invalid finder or dispatcher configuration."""
