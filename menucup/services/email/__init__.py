"""
Email Service Factory

Returns Mock or SendGrid email service based on ENV_MODE.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from functools import lru_cache

from menucup.core.config import get_settings
from menucup.services.email.base import (
    BaseEmailService,
    EmailResult,
    Lead,
    render_lead_email,
)
from menucup.services.email.mock import MockEmailService
from menucup.services.email.sendgrid import SendGridEmailService

logger = logging.getLogger(__name__)


@lru_cache()
def get_email_service() -> BaseEmailService:
    """Get the configured email service."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Email Service: Using MockEmailService (development mode)")
        return MockEmailService()
    else:
        logger.info(f"Email Service: Using SendGridEmailService ({settings.env_mode.value} mode)")
        return SendGridEmailService()


def reset_email_service() -> None:
    """Clear the cached service instance."""
    get_email_service.cache_clear()


__all__ = [
    "get_email_service",
    "reset_email_service",
    "BaseEmailService",
    "EmailResult",
    "Lead",
    "MockEmailService",
    "SendGridEmailService",
    "render_lead_email",
]
