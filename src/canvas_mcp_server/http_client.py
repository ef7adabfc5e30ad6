"""
Canvas HTTP Client

This module provides the transport used by every Canvas accessor. It owns a
single authenticated requests session and runs each request through an
explicit pipeline: a retry loop with exponential backoff, then a bounded
pagination loop that follows Link headers until the collection is drained.
All failures leave this module as CanvasAPIError.
"""

import logging
import time
from typing import Any

import requests
from pydantic import BaseModel, ConfigDict, Field

from canvas_mcp_server.errors import (
    error_from_network_failure,
    error_from_response,
)

# Configure logging
logger = logging.getLogger(__name__)

# Exceptions meaning the request never produced a response
NETWORK_ERRORS = (requests.ConnectionError, requests.Timeout)

RATE_LIMIT_STATUS = 429


class ClientOptions(BaseModel):
    """Retry and timeout settings for the Canvas HTTP client."""

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(3, ge=0)
    retry_delay: int = Field(1000, ge=0, description="Base backoff in milliseconds")
    timeout: int = Field(30000, gt=0, description="Request timeout in milliseconds")


def is_retryable_status(status_code: int) -> bool:
    """Rate limits and server errors are worth another attempt."""
    return status_code == RATE_LIMIT_STATUS or status_code >= 500


def backoff_delay(retry_delay: int, attempt: int) -> int:
    """
    Delay in milliseconds before retry number `attempt` (1-indexed).

    Args:
        retry_delay: Base delay in milliseconds
        attempt: Retry number, starting at 1

    Returns:
        retry_delay * 2^(attempt - 1)
    """
    return retry_delay * 2 ** (attempt - 1)


def decode_body(response: requests.Response) -> Any:
    """
    Decode a response body.

    Empty bodies decode to None, JSON bodies to the parsed value, anything
    else is returned as text.
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _encode_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    if not params:
        return None

    encoded: dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            value = [
                ("true" if item else "false") if isinstance(item, bool) else item
                for item in value
            ]
        encoded[key] = value
    return encoded


class CanvasHttpClient:
    """
    Authenticated, paginating, retrying client for the Canvas REST API.

    One instance is shared by all accessors. It keeps no per-call state:
    retry counters and page accumulators live inside each call.
    """

    def __init__(
        self,
        token: str,
        domain: str,
        options: ClientOptions | None = None,
        session: requests.Session | None = None,
    ):
        """
        Initialize the client.

        Args:
            token: Canvas API access token
            domain: Canvas host name, e.g. school.instructure.com
            options: Retry and timeout settings (defaults when None)
            session: Optional pre-built session, mainly for tests
        """
        self.options = options or ClientOptions()
        self.base_url = f"https://{domain}/api/v1"
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            }
        )

    @property
    def max_retries(self) -> int:
        return self.options.max_retries

    @property
    def retry_delay(self) -> int:
        return self.options.retry_delay

    @property
    def timeout_seconds(self) -> float:
        return self.options.timeout / 1000

    def build_url(self, path: str) -> str:
        """Join a path onto the base URL; absolute URLs are kept as they are."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def execute(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: Any = None,
        paginate: bool = True,
    ) -> Any:
        """
        Run one logical Canvas API call.

        Array responses that advertise a next page are drained completely, so
        the caller always gets the whole collection. With paginate=False only
        the first page is returned.

        Args:
            method: HTTP method
            path: Path relative to /api/v1, or an absolute URL
            params: Optional query parameters
            body: Optional JSON body
            paginate: Follow rel="next" links of array responses

        Returns:
            Decoded response payload

        Raises:
            CanvasAPIError: If the call fails after the retry policy is applied
        """
        response = self._send(method.upper(), self.build_url(path), params, body)
        payload = decode_body(response)

        if not paginate or not self._has_next_page(payload, response):
            return payload

        # Pagination drain; a failure on any page aborts the whole call
        items = list(payload)
        next_url = self._next_page_url(response)
        while next_url:
            response = self._send("GET", next_url)
            page = decode_body(response)
            if isinstance(page, list):
                items.extend(page)
            elif page is not None:
                items.append(page)
            next_url = self._next_page_url(response)

        logger.debug(f"Collected {len(items)} items for {method.upper()} {path}")
        return items

    def get(
        self, path: str, params: dict[str, Any] | None = None, paginate: bool = True
    ) -> Any:
        return self.execute("GET", path, params=params, paginate=paginate)

    def post(self, path: str, body: Any = None, params: dict[str, Any] | None = None) -> Any:
        return self.execute("POST", path, params=params, body=body)

    def put(self, path: str, body: Any = None, params: dict[str, Any] | None = None) -> Any:
        return self.execute("PUT", path, params=params, body=body)

    def delete(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.execute("DELETE", path, params=params)

    def close(self) -> None:
        """Release the underlying session."""
        self.session.close()

    def _send(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        body: Any = None,
    ) -> requests.Response:
        """
        Send one request, retrying transient failures.

        Args:
            method: HTTP method
            url: Absolute URL
            params: Optional query parameters
            body: Optional JSON body

        Returns:
            The first successful response

        Raises:
            CanvasAPIError: On a non-retryable failure or when retries run out
        """
        encoded_params = _encode_params(params)
        retries = 0

        while True:
            logger.info(f"[Canvas API] {method} {url}")
            response = None
            try:
                response = self.session.request(
                    method,
                    url,
                    params=encoded_params,
                    json=body,
                    timeout=self.timeout_seconds,
                )
            except NETWORK_ERRORS as e:
                network_error = e
            else:
                if response.ok:
                    return response
                network_error = None

            retryable = response is None or is_retryable_status(response.status_code)
            if retryable and retries < self.max_retries:
                retries += 1
                delay = backoff_delay(self.retry_delay, retries)
                logger.warning(
                    f"[Canvas API] Retrying request ({retries}/{self.max_retries}) after {delay}ms"
                )
                time.sleep(delay / 1000)
                continue

            if response is None:
                logger.error(f"[Canvas API] Network error - no response received: {network_error}")
                raise error_from_network_failure(network_error)

            error = error_from_response(response.status_code, decode_body(response))
            logger.error(
                f"[Canvas API] Error response: {response.status_code}, "
                f"Content-Type: {response.headers.get('content-type', 'unknown')}"
            )
            raise error

    @staticmethod
    def _next_page_url(response: requests.Response) -> str | None:
        return response.links.get("next", {}).get("url")

    def _has_next_page(self, payload: Any, response: requests.Response) -> bool:
        content_type = response.headers.get("content-type", "")
        return (
            isinstance(payload, list)
            and "application/json" in content_type
            and self._next_page_url(response) is not None
        )
