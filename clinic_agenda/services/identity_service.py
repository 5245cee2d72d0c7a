"""
Identity service - admin calls to the external auth service (GoTrue API)

Only the backend holds the service-role key, so account creation for
staff members goes through here rather than through the browser.
"""
import logging
from typing import Any, Optional

import httpx

from ..config import AUTH_REQUEST_TIMEOUT, AUTH_SERVICE_ROLE_KEY, AUTH_URL

logger = logging.getLogger(__name__)


class AuthServiceError(Exception):
    """The auth service rejected a request or could not be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Auth service returned {response.status_code}"
    if not isinstance(body, dict):
        return response.text or f"Auth service returned {response.status_code}"
    return (
        body.get("msg")
        or body.get("message")
        or body.get("error_description")
        or body.get("error")
        or f"Auth service returned {response.status_code}"
    )


class IdentityClient:
    """Thin async client for the auth admin endpoints"""

    def __init__(
        self,
        base_url: str = AUTH_URL,
        service_role_key: Optional[str] = AUTH_SERVICE_ROLE_KEY,
        timeout: float = AUTH_REQUEST_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.service_role_key = service_role_key
        self.timeout = timeout

    def _headers(self) -> dict:
        if not self.service_role_key:
            raise AuthServiceError("AUTH_SERVICE_ROLE_KEY is not configured")
        return {
            "apikey": self.service_role_key,
            "Authorization": f"Bearer {self.service_role_key}",
            "Content-Type": "application/json",
        }

    async def create_user(
        self, email: str, password: str, metadata: Optional[dict] = None, email_confirm: bool = True
    ) -> dict[str, Any]:
        """Create a confirmed identity and return the auth user object"""
        payload = {
            "email": email,
            "password": password,
            "email_confirm": email_confirm,
            "user_metadata": metadata or {},
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as http_client:
                response = await http_client.post(
                    f"{self.base_url}/auth/v1/admin/users", json=payload, headers=self._headers()
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ Auth service unreachable: {str(e)}")
            raise AuthServiceError(f"Auth service unreachable: {str(e)}") from e

        if response.status_code not in [200, 201]:
            message = _error_message(response)
            logger.error(f"❌ Identity creation failed for {email}: {message}")
            raise AuthServiceError(message, response.status_code)

        user = response.json()
        if not isinstance(user, dict) or not user.get("id"):
            raise AuthServiceError("User not created")

        logger.info(f"✅ Identity created: {user['id']}")
        return user

    async def delete_user(self, user_id: str) -> None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as http_client:
                response = await http_client.delete(
                    f"{self.base_url}/auth/v1/admin/users/{user_id}", headers=self._headers()
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ Auth service unreachable: {str(e)}")
            raise AuthServiceError(f"Auth service unreachable: {str(e)}") from e

        if response.status_code not in [200, 204]:
            message = _error_message(response)
            logger.error(f"❌ Identity deletion failed for {user_id}: {message}")
            raise AuthServiceError(message, response.status_code)

        logger.info(f"🗑️ Identity deleted: {user_id}")


def get_identity_client() -> IdentityClient:
    return IdentityClient()
