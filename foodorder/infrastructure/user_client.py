"""User service collaborator.

Answers "is this user id valid" for the cart and order services.
"""

from abc import ABC, abstractmethod

import httpx

from foodorder.domain.value_objects import UserId
from foodorder.infrastructure.config import settings
from foodorder.infrastructure.http_client import CollaboratorHttpClient


class UserApiClient(ABC):
    """User-validity provider."""

    @abstractmethod
    async def is_valid_user(self, user_id: UserId) -> bool:
        ...

    async def close(self) -> None:
        """Release resources held by the client."""
        return None


class HttpUserApiClient(CollaboratorHttpClient, UserApiClient):
    """HTTP client for the user service.

    ``GET /api/users/{user_id}`` returns ``{"id": ...}`` for a known user
    and 404 otherwise. Transport failures are retried with a fixed delay;
    the defaults (2 attempts, 0.1s) come from settings.
    """

    service_name = "user-api"

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        max_attempts: int = 2,
        retry_delay_seconds: float = 0.1,
        request_id: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            base_url,
            timeout=timeout,
            max_attempts=max_attempts,
            retry_delay_seconds=retry_delay_seconds,
            request_id=request_id,
            transport=transport,
        )

    async def is_valid_user(self, user_id: UserId) -> bool:
        data = await self._get_json(f"/api/users/{user_id}")
        return bool(data and data.get("id"))


class LocalUserApiClient(UserApiClient):
    """Permissive user check for standalone runs.

    Every user id is valid unless listed in ``blocked_users``.
    """

    def __init__(self, blocked_users: set[str] | None = None) -> None:
        self.blocked_users = set(blocked_users or ())

    async def is_valid_user(self, user_id: UserId) -> bool:
        return str(user_id) not in self.blocked_users


_http_user_client: HttpUserApiClient | None = None


def get_user_client() -> UserApiClient:
    """Get the configured user client.

    Returns:
        UserApiClient instance.
    """
    global _http_user_client
    if not settings.use_remote_clients:
        return LocalUserApiClient()
    if _http_user_client is None:
        _http_user_client = HttpUserApiClient(
            settings.user_api_url,
            timeout=settings.http_timeout_seconds,
            max_attempts=settings.user_api_max_attempts,
            retry_delay_seconds=settings.user_api_retry_delay_seconds,
        )
    return _http_user_client


async def close_user_client() -> None:
    """Close the shared HTTP user client, if one was created."""
    global _http_user_client
    if _http_user_client is not None:
        await _http_user_client.close()
        _http_user_client = None
