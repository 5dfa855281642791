from __future__ import annotations

from typing import Optional

import httpx


class GedcomxClientError(Exception):
    """Base error for client failures."""


class GedcomxApplicationError(GedcomxClientError):
    """A response (or token exchange) indicated failure."""

    def __init__(self, message: str, response: Optional[httpx.Response] = None):
        super().__init__(message)
        self.response = response

    @property
    def status_code(self) -> Optional[int]:
        return self.response.status_code if self.response is not None else None


class GedcomxConfigurationError(GedcomxClientError):
    """A hypermedia relation (or factory binding) an operation depends on is missing."""


class GedcomxParseError(GedcomxClientError):
    pass


__all__ = [
    "GedcomxClientError",
    "GedcomxApplicationError",
    "GedcomxConfigurationError",
    "GedcomxParseError",
]
