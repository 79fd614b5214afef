"""
Mock Auth Provider

Signs in local users configured through MOCK_AUTH_USERS and issues
signed JWT access tokens. Revoked tokens are remembered in memory
until they expire.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from menucup.core.config import get_settings
from menucup.services.auth.base import AuthResult, AuthUser, BaseAuthProvider

logger = logging.getLogger(__name__)


class MockAuthProvider(BaseAuthProvider):
    """Local-user auth provider for development and tests."""

    def __init__(
        self,
        users: Optional[list[tuple[str, str, str]]] = None,
        secret: Optional[str] = None,
    ):
        settings = get_settings()
        entries = users if users is not None else settings.mock_auth_users_list
        # email -> (password, user_id)
        self.users = {email.lower(): (password, user_id) for email, password, user_id in entries}
        self.secret = secret or settings.auth_jwt_secret
        self.algorithm = settings.auth_jwt_algorithm
        self.expire_minutes = settings.access_token_expire_minutes
        # jti -> token expiry (epoch seconds)
        self.revoked: dict[str, float] = {}
        logger.info(f"MockAuthProvider initialized ({len(self.users)} users)")

    @property
    def provider_name(self) -> str:
        return "mock"

    def add_user(self, email: str, password: str, user_id: Optional[str] = None) -> AuthUser:
        user_id = user_id or str(uuid.uuid4())
        self.users[email.lower()] = (password, user_id)
        return AuthUser(id=user_id, email=email.lower())

    def create_access_token(self, user: AuthUser) -> str:
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes)
        payload = {
            "sub": user.id,
            "email": user.email,
            "exp": expire,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    async def sign_in(self, email: str, password: str) -> AuthResult:
        record = self.users.get((email or "").strip().lower())
        if record is None or record[0] != password:
            logger.info(f"Mock sign-in rejected for {email}")
            return AuthResult(success=False, error_message="Invalid login credentials")

        user = AuthUser(id=record[1], email=email.strip().lower())
        logger.info(f"Mock sign-in for {user.email}")
        return AuthResult(success=True, access_token=self.create_access_token(user), user=user)

    def _decode(self, access_token: str) -> Optional[dict]:
        try:
            return jwt.decode(access_token, self.secret, algorithms=[self.algorithm])
        except JWTError:
            return None

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        payload = self._decode(access_token)
        if payload is None or payload.get("jti") in self.revoked:
            return None
        user_id = payload.get("sub")
        if not user_id:
            return None
        return AuthUser(id=user_id, email=payload.get("email"))

    def _forget_expired_revocations(self) -> None:
        # Expired tokens fail decoding anyway
        now = datetime.now(timezone.utc).timestamp()
        for jti in [jti for jti, exp in self.revoked.items() if exp <= now]:
            del self.revoked[jti]

    async def sign_out(self, access_token: str) -> bool:
        payload = self._decode(access_token)
        if payload is None:
            return False
        self._forget_expired_revocations()
        self.revoked[payload.get("jti")] = float(payload.get("exp") or 0)
        logger.info(f"Mock sign-out for {payload.get('email')}")
        return True

    async def health_check(self) -> bool:
        return True
