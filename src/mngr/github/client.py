"""GitHub client for release listings and asset downloads."""

import json
import logging

import httpx

from .exceptions import (
    ParseError,
    RemoteError,
    TransportError,
    UnauthorizedError,
)
from .models import ReleaseListing, RepositoryRef
from .urls import asset_download_url, releases_endpoint

__all__ = ['GitHubClient', 'API_VERSION', 'USER_AGENT']

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"
USER_AGENT = "mngr"


class GitHubClient:
    """Client for interacting with the GitHub releases API."""

    def __init__(
        self,
        token: str = "",
        api_url: str = "https://api.github.com",
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            token: Optional bearer token, empty means unauthenticated
            api_url: Base URL for the REST API
            timeout: Request timeout in seconds, None waits forever
            transport: Optional httpx transport (tests pass a mock one)
        """
        self.token = token.strip()
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    def __enter__(self):
        self._ensure_client()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _ensure_client(self) -> httpx.Client:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def close(self):
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def _api_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def list_releases(self, ref: RepositoryRef) -> ReleaseListing:
        """Fetch the releases listing of a repository.

        Args:
            ref: Repository to list

        Returns:
            ReleaseListing with the decoded release objects

        Raises:
            UnauthorizedError: If the token is invalid or expired
            RemoteError: For any other non-2xx response
            TransportError: If the network request fails
            ParseError: If the body is not a JSON array
        """
        client = self._ensure_client()
        url = releases_endpoint(self.api_url, ref)

        try:
            response = client.get(url, headers=self._api_headers())
        except httpx.RequestError as e:
            raise TransportError(f"Network error while listing releases of {ref.url}: {e}")

        if not response.is_success:
            self._handle_api_error(response)

        try:
            payload = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise ParseError(f"Releases listing of {ref.url} is not valid JSON: {e}",
                             status_code=response.status_code)
        if not isinstance(payload, list):
            raise ParseError(f"Releases listing of {ref.url} is not a list",
                             status_code=response.status_code)

        remaining = self._parse_rate_limit(response.headers.get("x-ratelimit-remaining"))
        logger.debug("Listed %d releases of %s (rate limit remaining: %s)",
                     len(payload), ref.url, remaining)
        return ReleaseListing(payload=payload, rate_limit_remaining=remaining)

    def download_asset(self, repository_url: str, version: str, file_name: str) -> bytes:
        """Download one release asset.

        No credential is sent, the download host doesn't need one.

        Args:
            repository_url: Canonical repository URL
            version: Release tag
            file_name: Asset file name

        Returns:
            The asset content

        Raises:
            RemoteError: For a non-2xx response
            TransportError: If the network request fails
        """
        client = self._ensure_client()
        url = asset_download_url(repository_url, version, file_name)

        try:
            response = client.get(url)
        except httpx.RequestError as e:
            raise TransportError(f"Network error while downloading {url}: {e}")

        if not response.is_success:
            self._handle_api_error(response)

        logger.debug("Downloaded %s (%d bytes)", url, len(response.content))
        return response.content

    @staticmethod
    def _handle_api_error(response: httpx.Response) -> None:
        """Raise the exception matching an error response.

        Args:
            response: HTTP response object

        Raises:
            UnauthorizedError: On 401
            RemoteError: On every other status code
        """
        status_code = response.status_code

        try:
            message = response.json().get("message", response.text)
        except (json.JSONDecodeError, ValueError, AttributeError):
            message = response.text or f"HTTP {status_code} error"

        if status_code == 401:
            raise UnauthorizedError(message, status_code=status_code)
        raise RemoteError(f"HTTP {status_code}: {message}", status_code=status_code)

    @staticmethod
    def _parse_rate_limit(value: str | None) -> int | None:
        """Parse the remaining-rate-limit header, None when missing or not numeric."""
        if value is None:
            return None
        try:
            return int(value.strip())
        except ValueError:
            return None

