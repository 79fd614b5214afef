"""
Auth Provider Abstract Base Class

Defines the identity operations the application needs: password
sign-in, token introspection and sign-out. Supports both Mock
(development) and Supabase (production) implementations.

Author: Khalil Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class AuthUser:
    """An authenticated identity."""
    id: str
    email: Optional[str] = None


@dataclass
class AuthResult:
    """
    Result from a sign-in attempt.

    Attributes:
        success: Whether the credentials were accepted
        access_token: Bearer token for subsequent requests
        user: The signed-in identity
        error_message: Error description if sign-in failed
    """
    success: bool
    access_token: Optional[str] = None
    user: Optional[AuthUser] = None
    error_message: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "access_token": self.access_token,
            "user": {"id": self.user.id, "email": self.user.email} if self.user else None,
            "error_message": self.error_message,
        }


class BaseAuthProvider(ABC):
    """Abstract base class for auth providers."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthResult:
        """Exchange email/password for an access token."""
        pass

    @abstractmethod
    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        """Resolve a token to its user; None when invalid or expired."""
        pass

    @abstractmethod
    async def sign_out(self, access_token: str) -> bool:
        """Invalidate a token."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check service connectivity."""
        pass
