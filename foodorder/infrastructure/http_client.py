"""Shared HTTP plumbing for collaborator clients.

Wraps a lazily created ``httpx.AsyncClient`` and retries transient
failures (transport errors and 5xx responses) a bounded number of times
with a fixed delay between attempts.
"""

import asyncio
from typing import Any

import httpx
import structlog

from foodorder.domain.exceptions import ExternalServiceError

logger = structlog.get_logger()


class CollaboratorHttpClient:
    """Base class for clients of the shop and user services."""

    service_name = "collaborator"

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        max_attempts: int = 2,
        retry_delay_seconds: float = 0.2,
        request_id: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Collaborator base URL.
            timeout: Request timeout in seconds.
            max_attempts: Total attempts per call, at least 1.
            retry_delay_seconds: Fixed delay between attempts.
            request_id: Optional request ID for correlation.
            transport: Optional transport, used by tests to mock responses.
        """
        self.base_url = base_url
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self.retry_delay_seconds = retry_delay_seconds
        self.request_id = request_id
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {}
            if self.request_id:
                headers["X-Request-ID"] = self.request_id
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _get_json(self, path: str) -> dict[str, Any] | None:
        """GET a JSON document, retrying transient failures.

        Args:
            path: Path relative to the base URL.

        Returns:
            Decoded JSON body, or None on 404.

        Raises:
            ExternalServiceError: On a non-retryable error status, or when
                the last attempt fails.
        """
        client = await self._get_client()
        attempt = 0
        while True:
            attempt += 1
            try:
                response = await client.get(path)
                if response.status_code < 500:
                    break
                failure = f"HTTP {response.status_code}"
                status_code: int | None = response.status_code
            except httpx.RequestError as e:
                failure = f"Request failed: {e}"
                status_code = None

            if attempt >= self.max_attempts:
                logger.error(
                    "Collaborator call failed",
                    service=self.service_name,
                    path=path,
                    attempts=attempt,
                    error=failure,
                )
                raise ExternalServiceError(self.service_name, failure, status_code)

            logger.warning(
                "Collaborator call failed, retrying",
                service=self.service_name,
                path=path,
                attempt=attempt,
                max_attempts=self.max_attempts,
                error=failure,
            )
            await asyncio.sleep(self.retry_delay_seconds)

        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise ExternalServiceError(
                self.service_name,
                f"Unexpected response for {path}: {response.text}",
                response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise ExternalServiceError(
                self.service_name, f"Invalid JSON for {path}", response.status_code
            ) from e
