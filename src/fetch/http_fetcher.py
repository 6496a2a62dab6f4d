"""HTTP document fetcher.

This module resolves source-tree paths to raw-file URLs and downloads
them with requests. Remote failures are classified into ``FetchError``
kinds so the pipeline can report them without inspecting HTTP details.
"""

from __future__ import annotations

from typing import Any

import requests

from core.constants import DEFAULT_TIMEOUT_SECONDS, TEXT_ENCODING, USER_AGENT
from core.errors import FetchError, FetchErrorKind
from core.types import SourceSpec

_NOT_FOUND_STATUSES = frozenset({404, 410})
_UNAUTHORIZED_STATUSES = frozenset({401, 403})


def build_source_url(url_template: str, branch: str, relative_path: str) -> str:
    """Substitute branch and path into a raw-file URL template.

    Args:
        url_template: Template with ``{branch}`` and ``{path}`` placeholders.
        branch: Branch or revision name.
        relative_path: Source-tree path.

    Returns:
        Concrete URL.
    """
    return url_template.format(branch=branch, path=relative_path)


def fetch_document(
    url_template: str,
    branch: str,
    relative_path: str,
    *,
    session: Any | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    auth_token: str | None = None,
) -> str:
    """Download one raw schema file.

    Args:
        url_template: Template with ``{branch}`` and ``{path}`` placeholders.
        branch: Branch or revision name.
        relative_path: Source-tree path.
        session: Optional requests-compatible session.
        timeout_seconds: Request timeout; expiry is a transport failure.
        auth_token: Optional bearer token.

    Returns:
        Full document text.

    Raises:
        FetchError: If the file is missing, access is denied, or transport fails.
    """
    url = build_source_url(url_template, branch, relative_path)
    http = session or requests
    try:
        response = http.get(
            url,
            headers=_build_headers(auth_token),
            timeout=timeout_seconds,
        )
    except requests.Timeout as error:
        raise FetchError(
            FetchErrorKind.TRANSPORT,
            relative_path,
            f"Timed out after {timeout_seconds}s fetching {url}. "
            "Check connectivity or raise the timeout.",
            url=url,
        ) from error
    except requests.RequestException as error:
        raise FetchError(
            FetchErrorKind.TRANSPORT,
            relative_path,
            f"Failed to fetch {url}: {error}. Check connectivity and retry.",
            url=url,
        ) from error
    _raise_for_status(response.status_code, relative_path, url, branch)
    return _decode_body(response.content, relative_path, url)


class HttpDocumentFetcher:
    """Fetcher bound to one source spec and HTTP session."""

    def __init__(
        self,
        source_spec: SourceSpec,
        session: Any | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        auth_token: str | None = None,
    ) -> None:
        self._source_spec = source_spec
        self._session = session or requests.Session()
        self._timeout_seconds = timeout_seconds
        self._auth_token = auth_token

    def fetch(self, relative_path: str) -> str:
        """Download ``relative_path`` from the configured branch."""
        return fetch_document(
            self._source_spec.url_template,
            self._source_spec.branch,
            relative_path,
            session=self._session,
            timeout_seconds=self._timeout_seconds,
            auth_token=self._auth_token,
        )


def _build_headers(auth_token: str | None) -> dict[str, str]:
    headers = {"User-Agent": USER_AGENT}
    if auth_token:
        headers["Authorization"] = f"Bearer {auth_token}"
    return headers


def _raise_for_status(status_code: int, relative_path: str, url: str, branch: str) -> None:
    """Map non-2xx statuses onto fetch error kinds.

    Raises:
        FetchError: For any status outside 200-299.
    """
    if 200 <= status_code < 300:
        return
    if status_code in _NOT_FOUND_STATUSES:
        raise FetchError(
            FetchErrorKind.NOT_FOUND,
            relative_path,
            f"No file at '{relative_path}' on branch '{branch}' (HTTP {status_code} from {url}).",
            url=url,
        )
    if status_code in _UNAUTHORIZED_STATUSES:
        raise FetchError(
            FetchErrorKind.UNAUTHORIZED,
            relative_path,
            f"Access denied fetching {url} (HTTP {status_code}). "
            "Set PROTOVENDOR_AUTH_TOKEN to a token with read access.",
            url=url,
        )
    raise FetchError(
        FetchErrorKind.TRANSPORT,
        relative_path,
        f"Unexpected HTTP {status_code} fetching {url}. Retry later.",
        url=url,
    )


def _decode_body(content: bytes, relative_path: str, url: str) -> str:
    try:
        return content.decode(TEXT_ENCODING)
    except UnicodeDecodeError as error:
        raise FetchError(
            FetchErrorKind.TRANSPORT,
            relative_path,
            f"Response from {url} is not valid {TEXT_ENCODING} text: {error.reason}.",
            url=url,
        ) from error
