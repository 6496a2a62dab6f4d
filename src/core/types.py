"""Shared typed models.

This module defines immutable data models used by the fetch, transform,
vendor, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable

from core.constants import (
    BLOCK_CLOSING_MARKER,
    DEFAULT_BRANCH,
    DEFAULT_RELATIVE_PATHS,
    DEFAULT_URL_TEMPLATE,
    HTTP_OPTION_NAME,
    VENDOR_EXTENSION_IMPORTS,
    VENDOR_OPTION_NAMESPACES,
)
from core.errors import FetchErrorKind


@dataclass(frozen=True)
class SourceSpec:
    """Where schema files are vendored from.

    Attributes:
        url_template: Raw-file URL with ``{branch}`` and ``{path}`` placeholders.
        branch: Branch, tag, or revision to fetch.
        relative_paths: Ordered source-tree paths of the files to vendor.
    """

    url_template: str = DEFAULT_URL_TEMPLATE
    branch: str = DEFAULT_BRANCH
    relative_paths: tuple[str, ...] = DEFAULT_RELATIVE_PATHS


class FilterState(Enum):
    """Sanitizer position relative to a dropped option block."""

    NORMAL = "normal"
    IN_BLOCK = "in_block"


@dataclass(frozen=True)
class SanitizeRules:
    """Vendor-specific syntax stripped by the sanitizer.

    Attributes:
        vendor_imports: Full import paths deleted outright.
        vendor_option_namespaces: Extension namespaces whose single-line
            ``option (ns.name) = value;`` statements and inline
            ``[(ns.name) = value]`` field options are deleted.
        block_option_name: Option whose ``= {`` block spans lines and is deleted.
        block_closing_marker: Text that ends a deleted block.
    """

    vendor_imports: tuple[str, ...] = VENDOR_EXTENSION_IMPORTS
    vendor_option_namespaces: tuple[str, ...] = VENDOR_OPTION_NAMESPACES
    block_option_name: str = HTTP_OPTION_NAME
    block_closing_marker: str = BLOCK_CLOSING_MARKER


@dataclass(frozen=True)
class SanitizeResult:
    """Sanitized document with a summary of applied edits.

    Attributes:
        text: Sanitized document text.
        dropped_line_count: Lines removed, block lines included.
        rewritten_import_count: Import lines whose path was flattened.
        stripped_field_option_count: Lines with vendor field options removed.
        removed_block_count: Option blocks opened and removed.
        unterminated_block: Whether the document ended inside a block.
    """

    text: str
    dropped_line_count: int = 0
    rewritten_import_count: int = 0
    stripped_field_option_count: int = 0
    removed_block_count: int = 0
    unterminated_block: bool = False


@dataclass(frozen=True)
class VendoredFile:
    """One sanitized file written to the output root."""

    relative_path: str
    destination: Path
    sha256: str
    source_url: str


@dataclass(frozen=True)
class EntryFailure:
    """One source entry that could not be vendored."""

    relative_path: str
    kind: FetchErrorKind
    message: str


@dataclass(frozen=True)
class VendorRunResult:
    """Outcome of a vendoring run.

    Attributes:
        branch: Branch the files were fetched from.
        written: Files written, in source list order.
        failures: Entries that failed, in source list order.
    """

    branch: str
    written: tuple[VendoredFile, ...] = field(default_factory=tuple)
    failures: tuple[EntryFailure, ...] = field(default_factory=tuple)

    @property
    def succeeded(self) -> bool:
        """Return whether every entry was vendored."""
        return not self.failures


@runtime_checkable
class DocumentFetcher(Protocol):
    """Capability to retrieve raw schema text by source-tree path."""

    def fetch(self, relative_path: str) -> str:
        """Return the full text stored at ``relative_path``."""
        ...
