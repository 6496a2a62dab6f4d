"""Core constants used across protovendor modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_BRANCH = "master"
DEFAULT_OUTPUT_ROOT = Path("proto")
DEFAULT_URL_TEMPLATE = "https://raw.githubusercontent.com/etcd-io/etcd/{branch}/{path}"
DEFAULT_RELATIVE_PATHS = (
    "etcdserver/etcdserverpb/rpc.proto",
    "mvcc/mvccpb/kv.proto",
    "auth/authpb/auth.proto",
)
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_WORKERS = 1
SOURCE_SPEC_VERSION = 1
LOCK_FILE_NAME = "vendor.lock.json"
HASH_ALGORITHM = "sha256"
TEXT_ENCODING = "utf-8"
USER_AGENT = "protovendor/0.1"
VENDOR_EXTENSION_IMPORTS = (
    "gogoproto/gogo.proto",
    "google/api/annotations.proto",
)
VENDOR_OPTION_NAMESPACES = ("gogoproto",)
HTTP_OPTION_NAME = "google.api.http"
BLOCK_CLOSING_MARKER = "};"
