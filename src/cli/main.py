"""protovendor CLI entry point.

This module maps the ``protovendor [branch]`` command onto the SDK.
It prints one line per written file and one stderr line per failure.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
import sys
from typing import Sequence

from core.config import VendorConfig, parse_timeout_seconds, parse_worker_count
from core.errors import ProtoVendorConfigError, ProtoVendorError
from core.source_spec import load_source_spec
from core.types import SourceSpec, VendorRunResult
from vendor.sdk import VendorClient

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="protovendor",
        description="Vendor sanitized protobuf schemas from a remote source tree",
    )
    parser.add_argument(
        "branch",
        nargs="?",
        help="Branch or revision to fetch (default: master, or the source spec's branch)",
    )
    parser.add_argument("--output-root", help="Override PROTOVENDOR_OUTPUT_ROOT")
    parser.add_argument("--source-spec", help="YAML file listing the URL template and paths")
    parser.add_argument("--timeout", help="Per-request timeout in seconds")
    parser.add_argument("--workers", help="Number of files processed concurrently")
    parser.add_argument(
        "--no-lock",
        action="store_true",
        help="Do not write the vendor lock file",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the protovendor CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
        source_spec = _load_source_spec(args.source_spec)
        client = VendorClient(config)
        result = client.vendor(source_spec, branch=args.branch, write_lock=not args.no_lock)
    except ProtoVendorConfigError as error:
        print(f"protovendor: {error}", file=sys.stderr)
        return EXIT_USAGE
    except ProtoVendorError as error:
        print(f"protovendor: {error}", file=sys.stderr)
        return EXIT_FAILED
    _print_result(result)
    if not result.succeeded:
        return EXIT_FAILED
    return EXIT_OK


def _build_config(args: argparse.Namespace) -> VendorConfig:
    """Build config with CLI overrides applied.

    Args:
        args: Parsed CLI args.

    Returns:
        Runtime configuration.
    """
    config = VendorConfig.from_env()
    if args.output_root:
        config = replace(config, output_root=Path(args.output_root).expanduser())
    if args.timeout is not None:
        config = replace(config, timeout_seconds=parse_timeout_seconds(args.timeout, "--timeout"))
    if args.workers is not None:
        config = replace(config, workers=parse_worker_count(args.workers, "--workers"))
    return config


def _load_source_spec(spec_path: str | None) -> SourceSpec:
    if spec_path is None:
        return SourceSpec()
    return load_source_spec(spec_path)


def _print_result(result: VendorRunResult) -> None:
    for vendored in result.written:
        print(vendored.destination)
    for failure in result.failures:
        print(
            f"protovendor: failed to fetch {failure.relative_path} "
            f"({failure.kind.value}): {failure.message}",
            file=sys.stderr,
        )
