"""Base HTTP client with retry logic, timeouts, and error handling.

External API clients inherit from this class to get consistent behavior for
retries, timeouts, and error reporting.
"""

import logging
from typing import Any, Self

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)


class HTTPClientError(Exception):
    """Raised when a request fails after retries or returns an error status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class HTTPClient:
    """Base HTTP client with retry logic, timeouts, and error handling.

    Example usage:
        class StorageClient(HTTPClient):
            def __init__(self, base_url: str):
                super().__init__(base_url=base_url, timeout=30.0)

            def list_buckets(self) -> list[dict]:
                return self.get_json("/storage/v1/bucket")
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.default_headers = headers or {}
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Lazily created underlying httpx client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url or "",
                timeout=self.timeout,
                headers=self.default_headers,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
        reraise=True,
    )
    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request; transient transport failures are retried."""
        return self.client.request(method, url, **kwargs)

    def _request(
        self,
        method: str,
        url: str,
        params: dict | None = None,
        json: Any = None,
        content: bytes | None = None,
        headers: dict | None = None,
    ) -> httpx.Response:
        """Make HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            url: URL path (joined with base_url if set)
            params: Query parameters
            json: JSON body
            content: Raw body bytes (uploads)
            headers: Additional headers merged over the defaults

        Returns:
            httpx.Response object

        Raises:
            HTTPClientError: On HTTP errors, timeouts, or connection failures
        """
        merged_headers = {**self.default_headers, **(headers or {})}

        try:
            response = self._send(
                method,
                url,
                params=params,
                json=json,
                content=content,
                headers=merged_headers,
            )
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            logger.warning(
                "HTTP %d for %s %s: %s",
                e.response.status_code,
                method,
                url,
                e.response.text[:200],
            )
            raise HTTPClientError(
                message=f"HTTP {e.response.status_code}: {e.response.reason_phrase}",
                status_code=e.response.status_code,
                response_body=e.response.text,
            ) from e
        except httpx.TimeoutException as e:
            logger.warning("Timeout for %s %s", method, url)
            raise HTTPClientError(f"Request timed out: {url}") from e
        except httpx.TransportError as e:
            logger.warning("Connection error for %s %s: %s", method, url, e)
            raise HTTPClientError(f"Connection failed: {url}") from e

    def get_json(self, url: str, params: dict | None = None) -> Any:
        """HTTP GET returning parsed JSON."""
        return self._request("GET", url, params=params).json()

    def post(
        self,
        url: str,
        json: Any = None,
        content: bytes | None = None,
        headers: dict | None = None,
    ) -> httpx.Response:
        """HTTP POST request."""
        return self._request("POST", url, json=json, content=content, headers=headers)

    def delete(self, url: str, json: Any = None, headers: dict | None = None) -> httpx.Response:
        """HTTP DELETE request (with an optional JSON body)."""
        return self._request("DELETE", url, json=json, headers=headers)
