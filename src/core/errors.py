"""protovendor exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations

from enum import Enum


class ProtoVendorError(Exception):
    """Base exception for all protovendor failures."""


class ProtoVendorConfigError(ProtoVendorError):
    """Raised for invalid runtime configuration or source specs."""


class FetchErrorKind(str, Enum):
    """Failure classes reported by document fetchers."""

    NOT_FOUND = "not_found"
    TRANSPORT = "transport"
    UNAUTHORIZED = "unauthorized"


class FetchError(ProtoVendorError):
    """Raised when a remote schema file cannot be retrieved.

    Attributes:
        kind: Failure class.
        relative_path: Source-tree path that was requested.
        url: Concrete URL, when one was built.
    """

    def __init__(
        self,
        kind: FetchErrorKind,
        relative_path: str,
        message: str,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.relative_path = relative_path
        self.url = url


class ProtoVendorStoreError(ProtoVendorError):
    """Raised when vendored output or its lock file cannot be written."""


class ProtoVendorDependencyError(ProtoVendorError):
    """Raised when an optional runtime dependency is missing."""
