"""Protobuf schema sanitizing transform.

This module strips vendor-only syntax from ``.proto`` files so they
compile without gogoproto or google.api HTTP annotations. It works in
one pass over the ``\\n``-delimited document lines and keeps a single
``FilterState`` that tracks whether the current line sits inside a
dropped option block.

Rules applied per line:
    1. Imports of known vendor extension files are deleted.
    1b. Single-line ``option (gogoproto.x) = y;`` statements are deleted.
    1c. ``(gogoproto.x) = y`` entries inside ``[...]`` field options are
        removed, together with the brackets when nothing else is left.
    2. Other import paths are flattened to their base file name.
    3. ``option (google.api.http) = {`` blocks are deleted through the
       first line containing ``};``.
    4. Everything else passes through byte-for-byte.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import re
from typing import Iterator

from core.types import FilterState, SanitizeResult, SanitizeRules

_DEFAULT_RULES = SanitizeRules()
_IMPORT_STATEMENT_PATTERN = re.compile(
    r"""^import\s+(?:(?:public|weak)\s+)?(?P<quote>["'])(?P<path>[^"']*)(?P=quote)\s*;\s*(?://.*)?$"""
)
_IMPORT_PATH_PATTERN = re.compile(
    r"""^(?P<head>\s*import\s+(?:(?:public|weak)\s+)?)(?P<quote>["'])"""
    r"""(?P<directory>[^"']*/)(?P<name>[^"'/]*)(?P=quote)(?P<tail>.*)$"""
)
_OPTION_STATEMENT_PATTERN = re.compile(
    r"^option\s*\(\s*(?P<namespace>[A-Za-z_]\w*)\.[\w.]+\s*\)\s*=\s*[^{;]*;\s*(?://.*)?$"
)
_QUOTED = r""""(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'"""
_FIELD_OPTIONS_PATTERN = re.compile(
    rf"""(?P<lead>\s*)\[(?P<entries>(?:[^\[\]"']|{_QUOTED})*)\]"""
)
_OPTION_ENTRY_PATTERN = re.compile(
    rf"""\s*(?P<name>\(\s*(?P<namespace>[A-Za-z_]\w*)\.[\w.]+\s*\)(?:\.[\w.]+)?|[A-Za-z_][\w.]*)"""
    rf"""\s*=\s*(?:{_QUOTED}|[^,"']*?)\s*(?:,|$)"""
)


@dataclass(frozen=True)
class _CompiledRules:
    """Rule set with lookups and patterns prepared once."""

    vendor_imports: frozenset[str]
    vendor_option_namespaces: frozenset[str]
    block_open_pattern: re.Pattern[str]
    block_closing_marker: str


def sanitize(text: str, rules: SanitizeRules | None = None) -> str:
    """Sanitize one proto document.

    Args:
        text: Raw document text.
        rules: Optional vendor rule set; defaults to gogoproto/google.api.

    Returns:
        Sanitized document text.
    """
    return sanitize_document(text, rules).text


def sanitize_document(text: str, rules: SanitizeRules | None = None) -> SanitizeResult:
    """Sanitize one proto document and report the edits made.

    Args:
        text: Raw document text.
        rules: Optional vendor rule set; defaults to gogoproto/google.api.

    Returns:
        Sanitized text with edit counters.
    """
    compiled = _compile_rules(rules or _DEFAULT_RULES)
    state = FilterState.NORMAL
    output: list[str] = []
    dropped = 0
    rewritten = 0
    stripped = 0
    blocks = 0
    for line in _iter_lines(text):
        body, ending = _split_line_ending(line)
        if state is FilterState.IN_BLOCK:
            dropped += 1
            if compiled.block_closing_marker in body:
                state = FilterState.NORMAL
            continue
        drop_line = _is_vendor_import(body, compiled) or _is_vendor_option(body, compiled)
        if _opens_block(body, compiled):
            blocks += 1
            drop_line = True
            if not _closes_on_opening_line(body, compiled):
                state = FilterState.IN_BLOCK
        if drop_line:
            dropped += 1
            continue
        flattened = _flatten_import_path(body)
        if flattened is not None:
            rewritten += 1
            output.append(flattened + ending)
            continue
        cleaned = _strip_vendor_field_options(body, compiled)
        if cleaned is not None:
            stripped += 1
            output.append(cleaned + ending)
            continue
        output.append(line)
    return SanitizeResult(
        text="".join(output),
        dropped_line_count=dropped,
        rewritten_import_count=rewritten,
        stripped_field_option_count=stripped,
        removed_block_count=blocks,
        unterminated_block=state is FilterState.IN_BLOCK,
    )


def _iter_lines(text: str) -> Iterator[str]:
    """Yield ``\\n``-terminated lines; the last one may lack a terminator."""
    pieces = text.split("\n")
    for piece in pieces[:-1]:
        yield piece + "\n"
    if pieces[-1]:
        yield pieces[-1]


def _split_line_ending(line: str) -> tuple[str, str]:
    """Split a line into content and its original ``\\n`` or ``\\r\\n`` terminator."""
    if line.endswith("\r\n"):
        return line[:-2], "\r\n"
    if line.endswith("\n"):
        return line[:-1], "\n"
    return line, ""


def _is_vendor_import(body: str, compiled: _CompiledRules) -> bool:
    match = _IMPORT_STATEMENT_PATTERN.match(body.strip())
    return match is not None and match.group("path") in compiled.vendor_imports


def _is_vendor_option(body: str, compiled: _CompiledRules) -> bool:
    match = _OPTION_STATEMENT_PATTERN.match(body.strip())
    return match is not None and match.group("namespace") in compiled.vendor_option_namespaces


def _opens_block(body: str, compiled: _CompiledRules) -> bool:
    return compiled.block_open_pattern.match(body) is not None


def _closes_on_opening_line(body: str, compiled: _CompiledRules) -> bool:
    """Return whether the closing marker follows the opening brace on one line."""
    opening_brace = body.index("{")
    return compiled.block_closing_marker in body[opening_brace + 1:]


def _flatten_import_path(body: str) -> str | None:
    """Rewrite ``import "a/b/c.proto";`` to ``import "c.proto";``.

    Returns:
        Rewritten line content, or None when the line is not an import
        with a directory component.
    """
    match = _IMPORT_PATH_PATTERN.match(body)
    if match is None:
        return None
    quote = match.group("quote")
    return f"{match.group('head')}{quote}{match.group('name')}{quote}{match.group('tail')}"


def _strip_vendor_field_options(body: str, compiled: _CompiledRules) -> str | None:
    """Remove vendor entries from ``[...]`` option lists on one line.

    ``bytes key = 1 [(gogoproto.nullable) = false, deprecated = true];``
    becomes ``bytes key = 1 [deprecated = true];`` and a list holding only
    vendor entries is removed with its leading whitespace.

    Returns:
        Rewritten line content, or None when nothing was removed.
    """
    if "[" not in body or not compiled.vendor_option_namespaces:
        return None
    changed = False

    def _rewrite(match: re.Match[str]) -> str:
        nonlocal changed
        entries = _parse_option_entries(match.group("entries"))
        if entries is None:
            return match.group(0)
        kept = [entry for entry, namespace in entries
                if namespace not in compiled.vendor_option_namespaces]
        if len(kept) == len(entries):
            return match.group(0)
        changed = True
        if not kept:
            return ""
        return f"{match.group('lead')}[{', '.join(kept)}]"

    rewritten = _FIELD_OPTIONS_PATTERN.sub(_rewrite, body)
    return rewritten if changed else None


def _parse_option_entries(entries_text: str) -> list[tuple[str, str | None]] | None:
    """Split an option list into ``(entry text, extension namespace)`` pairs.

    Returns:
        Parsed entries, or None when the text is not a plain option list.
    """
    entries: list[tuple[str, str | None]] = []
    position = 0
    while entries_text[position:].strip():
        match = _OPTION_ENTRY_PATTERN.match(entries_text, position)
        if match is None or match.end() == position:
            return None
        entry_text = match.group(0).strip().rstrip(",").strip()
        entries.append((entry_text, match.group("namespace")))
        position = match.end()
    return entries or None


@lru_cache(maxsize=16)
def _compile_rules(rules: SanitizeRules) -> _CompiledRules:
    option_name = r"\.".join(re.escape(part) for part in rules.block_option_name.split("."))
    block_open_pattern = re.compile(rf"^\s*option\s*\(\s*{option_name}\s*\)\s*=\s*\{{")
    return _CompiledRules(
        vendor_imports=frozenset(rules.vendor_imports),
        vendor_option_namespaces=frozenset(rules.vendor_option_namespaces),
        block_open_pattern=block_open_pattern,
        block_closing_marker=rules.block_closing_marker,
    )
