"""
Session Context

One SessionContext per signed-in access token. It carries the auth
identity and the user's role, resolved from the profiles table the
first time it is needed and cached for the rest of the session.

Usage:
    store = get_session_store()
    result, session = await store.sign_in(email, password)
    ...
    session = await store.get(token)
    role = await session.resolve_role(repository)
    ...
    await store.close(token)

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Optional

from menucup.core.config import get_settings
from menucup.models import ProfileRole
from menucup.repository import MenuRepository
from menucup.services.auth import AuthResult, AuthUser, BaseAuthProvider, get_auth_provider

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SessionContext:
    """
    Per-session identity and cached role.

    Attributes:
        access_token: Token issued by the auth provider
        user: Signed-in identity
        role: Cached role, None until first resolved
        created_at: When the context was opened
        builder: Menu-builder state kept between dashboard requests
    """
    access_token: str
    user: AuthUser
    role: Optional[ProfileRole] = None
    created_at: datetime = field(default_factory=_utcnow)
    builder: Optional[Any] = None

    @property
    def user_id(self) -> str:
        return self.user.id

    @property
    def is_admin(self) -> bool:
        return self.role == ProfileRole.ADMIN

    async def resolve_role(self, repository: MenuRepository) -> ProfileRole:
        """Look the role up once, then serve it from the context."""
        if self.role is None:
            self.role = await repository.get_role(self.user.id)
            logger.debug(f"Role for {self.user.id} resolved: {self.role.value}")
        return self.role

    async def can_manage(self, repository: MenuRepository, owner_id: str) -> bool:
        """True for the owner of a restaurant or any admin."""
        role = await self.resolve_role(repository)
        return role == ProfileRole.ADMIN or owner_id == self.user.id


class SessionStore:
    """Registry of open sessions keyed by access token."""

    def __init__(self, auth_provider: BaseAuthProvider, max_age_minutes: Optional[int] = None):
        self.auth_provider = auth_provider
        self.max_age = timedelta(
            minutes=max_age_minutes or get_settings().access_token_expire_minutes
        )
        self._sessions: dict[str, SessionContext] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def prune(self) -> int:
        """Drop contexts older than max age. Returns how many were dropped."""
        cutoff = _utcnow() - self.max_age
        stale = [token for token, context in self._sessions.items() if context.created_at <= cutoff]
        for token in stale:
            del self._sessions[token]
        if stale:
            logger.info(f"Pruned {len(stale)} expired session(s)")
        return len(stale)

    def _open(self, access_token: str, user: AuthUser) -> SessionContext:
        self.prune()
        context = SessionContext(access_token=access_token, user=user)
        self._sessions[access_token] = context
        logger.info(f"Session opened for {user.email or user.id}")
        return context

    async def sign_in(self, email: str, password: str) -> tuple[AuthResult, Optional[SessionContext]]:
        result = await self.auth_provider.sign_in(email, password)
        if not result.success or not result.access_token or result.user is None:
            return result, None
        return result, self._open(result.access_token, result.user)

    async def get(self, access_token: Optional[str]) -> Optional[SessionContext]:
        """
        Return the session for a token.

        Known tokens younger than max age are reused. Anything else is
        checked with the auth provider and opened on success.
        """
        if not access_token:
            return None

        self.prune()
        context = self._sessions.get(access_token)
        if context is not None:
            return context

        user = await self.auth_provider.get_user(access_token)
        if user is None:
            return None
        return self._open(access_token, user)

    async def close(self, access_token: Optional[str]) -> bool:
        """Sign out with the provider and forget the session."""
        if not access_token:
            return False
        context = self._sessions.pop(access_token, None)
        signed_out = await self.auth_provider.sign_out(access_token)
        if context is not None:
            logger.info(f"Session closed for {context.user.email or context.user.id}")
        return signed_out or context is not None


@lru_cache()
def get_session_store() -> SessionStore:
    """Process-wide session store bound to the configured auth provider."""
    return SessionStore(get_auth_provider())


def reset_session_store() -> None:
    get_session_store.cache_clear()
