"""Error taxonomy for a collection pass."""

from __future__ import annotations


class OpenStackStatusError(Exception):
    """Base class for collection errors."""


class AuthError(OpenStackStatusError):
    """
    Authentication or endpoint discovery failed.

    Fatal to the whole pass: without a session there is nothing to fetch.
    """

    def __init__(self, message: str, *, phase: str = "authenticate"):
        super().__init__(message)
        self.phase = phase


class FetchError(OpenStackStatusError):
    """Listing one resource kind failed. Scoped to that kind only."""

    def __init__(self, kind: str, message: str):
        super().__init__(f"{kind}: {message}")
        self.kind = kind
