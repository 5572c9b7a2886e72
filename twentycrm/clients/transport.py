"""HTTP transport for the Twenty REST API."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional, Protocol

import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)

from ..utils.errors import ApiError, AuthenticationError

# Constants
DEFAULT_TIMEOUT_SECONDS = 30
RETRY_TIMEOUT_SECONDS = int(os.getenv("TWENTY_RETRY_TIMEOUT_SECONDS", "60"))  # Give up retrying after this

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Anything that can send one request and return the decoded JSON body."""

    def request(
        self,
        method: str,
        path: str,
        query: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        ...


class ServerError(ApiError):
    """5xx answer; retried before being raised."""


class TwentyTransport:
    """requests-based transport with bearer auth and retry on transient failures."""

    def __init__(self, base_url: str, api_token: str, timeout: int = DEFAULT_TIMEOUT_SECONDS):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {api_token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @retry(
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout, ServerError)),
        stop=(stop_after_attempt(3) | stop_after_delay(RETRY_TIMEOUT_SECONDS)),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    def _send(
        self,
        method: str,
        url: str,
        query: Optional[Dict[str, Any]],
        json: Any,
    ) -> requests.Response:
        response = self._session.request(method, url, params=query, json=json, timeout=self.timeout)
        if response.status_code >= 500:
            raise ServerError(
                f"API request failed: {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        return response

    def request(
        self,
        method: str,
        path: str,
        query: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        """Send a request and decode the JSON answer.

        Args:
            method: HTTP method.
            path: Path relative to the base URL, e.g. ``/people/<id>``.
            query: Query string parameters.
            json: JSON body.

        Returns:
            The decoded JSON body, or an empty dict for an empty body.

        Raises:
            AuthenticationError: On 401.
            ApiError: On any other non-2xx status, a network failure after
                retries or an undecodable body (status 0).
        """
        url = self.url_for(path)
        logger.debug("Twenty API request", extra={"method": method, "path": path})

        try:
            response = self._send(method, url, query, json)
        except requests.RequestException as exc:
            logger.error(
                "Twenty API request failed after retries",
                extra={"method": method, "path": path, "error": str(exc)},
                exc_info=True,
            )
            raise ApiError(f"API request failed: {exc}") from exc

        if response.status_code == 401:
            raise AuthenticationError(
                "Authentication failed: invalid API token",
                status_code=401,
                body=response.text,
            )
        if response.status_code >= 400:
            raise ApiError(
                f"API request failed: {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(f"Failed to decode response: {exc}", status_code=0, body=response.text) from exc
