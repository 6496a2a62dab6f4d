"""Runtime configuration model for protovendor.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_OUTPUT_ROOT, DEFAULT_TIMEOUT_SECONDS, DEFAULT_WORKERS
from core.errors import ProtoVendorConfigError


@dataclass(frozen=True)
class VendorConfig:
    """Validated runtime configuration.

    Attributes:
        output_root: Local root directory for vendored schema files.
        timeout_seconds: Per-request network timeout.
        workers: Number of entries processed concurrently.
        auth_token: Optional bearer token sent with fetch requests.
    """

    output_root: Path
    timeout_seconds: float
    workers: int
    auth_token: str | None

    @classmethod
    def from_env(cls) -> "VendorConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ProtoVendorConfigError: If environment values are invalid.
        """
        output_root_value = os.getenv("PROTOVENDOR_OUTPUT_ROOT", str(DEFAULT_OUTPUT_ROOT))
        timeout_value = os.getenv("PROTOVENDOR_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
        workers_value = os.getenv("PROTOVENDOR_WORKERS", str(DEFAULT_WORKERS))
        return cls(
            output_root=Path(output_root_value).expanduser(),
            timeout_seconds=parse_timeout_seconds(timeout_value, "PROTOVENDOR_TIMEOUT_SECONDS"),
            workers=parse_worker_count(workers_value, "PROTOVENDOR_WORKERS"),
            auth_token=os.getenv("PROTOVENDOR_AUTH_TOKEN") or None,
        )


def parse_timeout_seconds(raw_value: str, source_name: str) -> float:
    """Parse a positive timeout value.

    Args:
        raw_value: Raw string from environment or CLI.
        source_name: Variable or flag name used in error messages.

    Returns:
        Parsed timeout in seconds.

    Raises:
        ProtoVendorConfigError: If value is not a positive number.
    """
    try:
        timeout_seconds = float(raw_value)
    except ValueError as error:
        raise ProtoVendorConfigError(
            f"Invalid {source_name} value: expected number of seconds, got '{raw_value}'. "
            f"Set {source_name} to a positive number."
        ) from error
    if timeout_seconds <= 0:
        raise ProtoVendorConfigError(
            f"Invalid {source_name} value: expected a positive number, got '{raw_value}'."
        )
    return timeout_seconds


def parse_worker_count(raw_value: str, source_name: str) -> int:
    """Parse a positive worker count.

    Args:
        raw_value: Raw string from environment or CLI.
        source_name: Variable or flag name used in error messages.

    Returns:
        Parsed worker count.

    Raises:
        ProtoVendorConfigError: If value is not a positive integer.
    """
    try:
        workers = int(raw_value)
    except ValueError as error:
        raise ProtoVendorConfigError(
            f"Invalid {source_name} value: expected integer, got '{raw_value}'. "
            f"Set {source_name} to a numeric value."
        ) from error
    if workers < 1:
        raise ProtoVendorConfigError(
            f"Invalid {source_name} value: expected at least 1 worker, got {workers}."
        )
    return workers
