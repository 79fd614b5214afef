"""
Auth Provider Factory

Environment Switching:
    - ENV_MODE=development → MockAuthProvider (local users, signed JWTs)
    - ENV_MODE=staging → SupabaseAuthProvider
    - ENV_MODE=production → SupabaseAuthProvider

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from functools import lru_cache

from menucup.core.config import get_settings
from menucup.services.auth.base import AuthResult, AuthUser, BaseAuthProvider
from menucup.services.auth.mock import MockAuthProvider
from menucup.services.auth.supabase import SupabaseAuthProvider

logger = logging.getLogger(__name__)


@lru_cache()
def get_auth_provider() -> BaseAuthProvider:
    """Get the configured auth provider."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Auth Provider: Using MockAuthProvider (development mode)")
        return MockAuthProvider()
    else:
        logger.info(f"Auth Provider: Using SupabaseAuthProvider ({settings.env_mode.value} mode)")
        return SupabaseAuthProvider()


def reset_auth_provider() -> None:
    """Clear the cached provider instance."""
    get_auth_provider.cache_clear()


__all__ = [
    "get_auth_provider",
    "reset_auth_provider",
    "AuthResult",
    "AuthUser",
    "BaseAuthProvider",
    "MockAuthProvider",
    "SupabaseAuthProvider",
]
