"""Public SDK surface for protovendor.

This module provides a stable import path for library users.
It re-exports the client, the sanitizer, and typed models.
"""

from __future__ import annotations

from core.config import VendorConfig
from core.errors import FetchError, FetchErrorKind, ProtoVendorError
from core.source_spec import load_source_spec
from core.types import (
    DocumentFetcher,
    SanitizeResult,
    SanitizeRules,
    SourceSpec,
    VendorRunResult,
)
from fetch.http_fetcher import HttpDocumentFetcher, fetch_document
from transforms.proto_sanitizer import sanitize, sanitize_document
from vendor.sdk import VendorClient

__all__ = [
    "DocumentFetcher",
    "FetchError",
    "FetchErrorKind",
    "HttpDocumentFetcher",
    "ProtoVendorError",
    "SanitizeResult",
    "SanitizeRules",
    "SourceSpec",
    "VendorClient",
    "VendorConfig",
    "VendorRunResult",
    "fetch_document",
    "load_source_spec",
    "sanitize",
    "sanitize_document",
]
