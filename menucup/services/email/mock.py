"""
Mock Email Service

Simulates email sending for development.
No actual messages are sent - they are logged and kept in an outbox.

Author: Khalil Bannouri
Version: 1.0.0
"""

import asyncio
import random
import uuid
import logging
from dataclasses import dataclass
from typing import Optional

from menucup.services.email.base import BaseEmailService, EmailResult

logger = logging.getLogger(__name__)


@dataclass
class OutboxMessage:
    message_id: str
    to_email: str
    subject: str
    body_html: str
    body_text: Optional[str]
    reply_to: Optional[str]


class MockEmailService(BaseEmailService):
    """Mock email service for development."""

    def __init__(self, failure_rate: float = 0.0, simulate_latency: bool = True):
        self.failure_rate = failure_rate
        self.simulate_latency = simulate_latency
        self.outbox: list[OutboxMessage] = []
        logger.info(f"MockEmailService initialized (failure_rate={failure_rate:.0%})")

    @property
    def provider_name(self) -> str:
        return "mock"

    async def _simulate_latency(self) -> None:
        """Simulate network latency."""
        if self.simulate_latency:
            await asyncio.sleep(random.uniform(0.05, 0.15))

    def _should_fail(self) -> bool:
        return random.random() < self.failure_rate

    async def send_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
        body_text: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> EmailResult:
        """Simulate sending email."""
        await self._simulate_latency()

        if self._should_fail():
            logger.warning(f"Mock email failed (simulated) to {to_email}")
            return EmailResult(
                success=False,
                error_message="Simulated email failure",
                provider="mock"
            )

        message_id = f"email_mock_{uuid.uuid4().hex[:12]}"
        self.outbox.append(
            OutboxMessage(
                message_id=message_id,
                to_email=to_email,
                subject=subject,
                body_html=body_html,
                body_text=body_text,
                reply_to=reply_to,
            )
        )
        logger.info(f"Mock email sent to {to_email}: {subject} (ID: {message_id})")

        return EmailResult(
            success=True,
            message_id=message_id,
            provider="mock"
        )

    async def health_check(self) -> bool:
        return True
