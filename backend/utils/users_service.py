# backend/utils/users_service.py
import httpx
import logging
from typing import Optional
from urllib.parse import urljoin
from config import settings

logger = logging.getLogger(__name__)

class UsersServiceClient:
    """Client for the external identity service that issues and resolves session tokens."""

    def __init__(self, api_url: Optional[str] = None, api_key: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_url = (api_url or settings.USERS_SERVICE_API_URL).rstrip("/") + "/"
        self.api_key = api_key if api_key is not None else settings.USERS_SERVICE_API_KEY
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={"x-api-key": self.api_key},
            transport=self._transport,
            timeout=10.0,
        )

    def _url(self, path: str) -> str:
        return urljoin(self.api_url, path.lstrip("/"))

    async def get_oauth_redirect_url(self, provider: str) -> str:
        async with self._client() as client:
            try:
                response = await client.get(self._url(f"/oauth/{provider}/redirect_url"))
                response.raise_for_status()
                return response.json()["redirect_url"]
            except (httpx.RequestError, httpx.HTTPStatusError) as e:
                logger.error(f"Users service redirect url error: {e}")
                raise

    async def exchange_code_for_session_token(self, code: str) -> str:
        # Trade the OAuth authorization code for a long-lived session token
        async with self._client() as client:
            try:
                response = await client.post(self._url("/sessions"), json={"code": code})
                response.raise_for_status()
                return response.json()["session_token"]
            except (httpx.RequestError, httpx.HTTPStatusError) as e:
                logger.error(f"Users service code exchange error: {e}")
                raise

    async def get_current_user(self, session_token: str) -> Optional[dict]:
        """Resolve a session token to a user record; None when the service rejects it."""
        headers = {"Authorization": f"Bearer {session_token}"}
        async with self._client() as client:
            try:
                response = await client.get(self._url("/users/me"), headers=headers)
            except httpx.RequestError as e:
                logger.error(f"Users service unreachable: {e}")
                raise

            if response.status_code in (401, 403, 404):
                return None
            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                logger.error(f"Users service session lookup error: {e.response.status_code}")
                raise
            return response.json()

    async def delete_session(self, session_token: str) -> None:
        headers = {"Authorization": f"Bearer {session_token}"}
        async with self._client() as client:
            try:
                response = await client.delete(self._url("/sessions"), headers=headers)
                response.raise_for_status()
            except (httpx.RequestError, httpx.HTTPStatusError) as e:
                logger.error(f"Users service logout error: {e}")
                raise

users_service = UsersServiceClient()

def get_users_service() -> UsersServiceClient:
    return users_service
