"""Catalog data API HTTP client.

Calls the catalog data API over HTTP with retry/backoff on transient failures.
"""

from __future__ import annotations

import random
import time
from typing import Any, Mapping, Optional

import requests

from ApiCatalog.utils.log import log

DEFAULT_TIMEOUT = 30.0
MAX_ATTEMPTS = 4
BASE_PAUSE = 0.8
MAX_SLEEP = 8.0
TOO_MANY_REQUESTS_BASE_PAUSE = 2.0
TOO_MANY_REQUESTS_MAX_SLEEP = 30.0

RETRYABLE_STATUS = {429, 500, 502, 503, 504}

HEADERS = {
    "User-Agent": "api-catalog/0.1",
    "Accept": "application/json",
}


class TransportError(RuntimeError):
    """Network or HTTP failure after the client gave up retrying.

    Attributes:
        status_code: Last HTTP status when a response was received.
        url: Request URL.
    """

    def __init__(self, message: str, *, status_code: int | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class CatalogApiClient:
    """Low-level HTTP client for the catalog data API.

    Responsible only for making network requests and returning decoded bodies.
    Query compilation and payload mapping are handled elsewhere.
    """

    def __init__(
        self,
        *,
        base_url: str,
        workspace: str = "default",
        access_token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_attempts: int = MAX_ATTEMPTS,
    ) -> None:
        """Initialize the client with a reusable HTTP session.

        Args:
            base_url: Data API service URL, e.g. `https://<name>.data.<region>.azure-apicenter.ms`.
            workspace: Workspace name used as path prefix for most endpoints.
            access_token: Already-acquired bearer token, if the service needs one.
            timeout: Request timeout in seconds.
            max_attempts: Attempts per request including the first one.
        """
        self.base_url = base_url.rstrip("/")
        self.workspace = workspace
        self.timeout = timeout
        self.max_attempts = max_attempts
        self._session = requests.Session()
        self._session.headers.update(HEADERS)
        if access_token:
            self._session.headers["Authorization"] = f"Bearer {access_token}"

    def close(self) -> None:
        """Close the underlying HTTP session and release pooled connections."""
        self._session.close()

    def __enter__(self) -> CatalogApiClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def build_url(self, path: str, *, skip_workspace_prefix: bool = False) -> str:
        """Resolve an endpoint path against the service URL.

        Paths starting with `:` are custom actions on the workspace itself
        (e.g. `:search`) and are appended without a separating slash.
        """
        prefix = self.base_url if skip_workspace_prefix else f"{self.base_url}/workspaces/{self.workspace}"
        if path.startswith(":"):
            return prefix + path
        return prefix + "/" + path.lstrip("/")

    def get_json(
        self,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        skip_workspace_prefix: bool = False,
    ) -> Any:
        """GET a workspace endpoint and decode the JSON body."""
        url = self.build_url(path, skip_workspace_prefix=skip_workspace_prefix)
        return self._decode(self._request_with_retry("GET", url, params=params))

    def get_json_by_url(self, url: str) -> Any:
        """GET an absolute URL (e.g. a `nextLink`) as-is and decode the JSON body."""
        return self._decode(self._request_with_retry("GET", url))

    def post_json(
        self,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> Any:
        """POST to a workspace endpoint with an optional JSON body."""
        url = self.build_url(path)
        return self._decode(self._request_with_retry("POST", url, params=params, json_body=body))

    def get_text(self, url: str) -> str:
        """Download a document from a self-authorising link.

        The catalog session (and its credentials) is deliberately not used.
        """
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as error:
            status_code = getattr(getattr(error, "response", None), "status_code", None)
            raise TransportError(f"Download failed: {error}", status_code=status_code, url=url) from error
        log.debug("Downloaded document: bytes=%d", len(response.text))
        return response.text

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as error:
            raise TransportError(
                f"Response is not valid JSON: {error}",
                status_code=response.status_code,
                url=response.url,
            ) from error

    def _request_with_retry(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Mapping[str, Any] | None = None,
    ) -> requests.Response:
        """Issue a request with retry/backoff.

        Retries on timeouts/connection errors and selected HTTP status codes;
        any other HTTP error fails immediately.

        Returns:
            Successful `requests.Response`.

        Raises:
            TransportError: When all attempts failed or the status is not retryable.
        """
        last_err: Exception | None = None
        last_status_code: int | None = None

        for attempt in range(1, self.max_attempts + 1):
            last_status_code = None
            try:
                log.debug("Catalog request attempt %d/%d: %s %s", attempt, self.max_attempts, method, url)
                response = self._session.request(
                    method,
                    url,
                    params=params,
                    json=json_body,
                    timeout=self.timeout,
                )
                if response.status_code in RETRYABLE_STATUS:
                    raise requests.exceptions.HTTPError(f"HTTP {response.status_code}", response=response)
                response.raise_for_status()
                return response
            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                last_err = e
            except requests.exceptions.HTTPError as e:
                last_err = e
                st = getattr(e.response, "status_code", None)
                last_status_code = st if isinstance(st, int) else None
                if st not in RETRYABLE_STATUS:
                    break

            if attempt < self.max_attempts:
                log.debug("Catalog retrying after attempt %d (error=%s)", attempt, last_err)
                self._sleep_backoff(attempt, status_code=last_status_code)

        assert last_err is not None
        raise TransportError(
            f"{method} {url} failed: {last_err}",
            status_code=last_status_code,
            url=url,
        ) from last_err

    @staticmethod
    def _sleep_backoff(attempt: int, *, status_code: int | None = None) -> None:
        """Sleep with status-aware exponential backoff.

        Args:
            attempt: Current attempt index (1-based).
            status_code: Last HTTP status code when available.
        """
        if status_code == 429:
            delay = min(TOO_MANY_REQUESTS_BASE_PAUSE * (2 ** (attempt - 1)), TOO_MANY_REQUESTS_MAX_SLEEP)
            time.sleep(delay)
            return

        delay = min(BASE_PAUSE * (2 ** (attempt - 1)) + random.uniform(0, 0.3), MAX_SLEEP)
        time.sleep(delay)
