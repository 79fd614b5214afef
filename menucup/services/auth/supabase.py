"""
Supabase Auth Provider

Production identity provider talking to Supabase Auth (GoTrue) over
its REST API with httpx.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from typing import Optional

import httpx

from menucup.core.config import get_settings
from menucup.services.auth.base import AuthResult, AuthUser, BaseAuthProvider

logger = logging.getLogger(__name__)
settings = get_settings()


class SupabaseAuthProvider(BaseAuthProvider):
    """Auth provider backed by a hosted Supabase project."""

    def __init__(self, timeout: float = 10.0):
        if not settings.supabase_url or not settings.supabase_anon_key:
            logger.warning("Supabase credentials not configured")
        self.base_url = (settings.supabase_url or "").rstrip("/") + "/auth/v1"
        self.api_key = settings.supabase_anon_key or ""
        self.timeout = timeout
        logger.info("SupabaseAuthProvider initialized")

    @property
    def provider_name(self) -> str:
        return "supabase"

    def _headers(self, access_token: Optional[str] = None) -> dict[str, str]:
        headers = {"apikey": self.api_key, "Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    @staticmethod
    def _user_from(data: dict) -> Optional[AuthUser]:
        if not data or not data.get("id"):
            return None
        return AuthUser(id=data["id"], email=data.get("email"))

    async def sign_in(self, email: str, password: str) -> AuthResult:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/token",
                    params={"grant_type": "password"},
                    json={"email": email, "password": password},
                    headers=self._headers(),
                )
        except httpx.HTTPError as e:
            logger.error(f"Supabase sign-in request failed: {e}")
            return AuthResult(success=False, error_message="Auth service unavailable")

        if response.status_code != 200:
            try:
                data = response.json()
            except ValueError:
                data = {}
            message = data.get("error_description") or data.get("msg") or "Invalid login credentials"
            logger.info(f"Supabase sign-in rejected for {email}: {response.status_code}")
            return AuthResult(success=False, error_message=message)

        data = response.json()
        return AuthResult(
            success=True,
            access_token=data.get("access_token"),
            user=self._user_from(data.get("user") or {}),
        )

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    f"{self.base_url}/user",
                    headers=self._headers(access_token),
                )
        except httpx.HTTPError as e:
            logger.error(f"Supabase get-user request failed: {e}")
            return None

        if response.status_code != 200:
            return None
        return self._user_from(response.json())

    async def sign_out(self, access_token: str) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/logout",
                    headers=self._headers(access_token),
                )
        except httpx.HTTPError as e:
            logger.error(f"Supabase sign-out request failed: {e}")
            return False
        return response.status_code in (200, 204)

    async def health_check(self) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(f"{self.base_url}/health", headers=self._headers())
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.error(f"Supabase health check failed: {e}")
            return False
