"""
Email Service Abstract Base Class

Defines the interface for transactional email (lead notifications).
Supports both Mock (development) and SendGrid (production) implementations.

Author: Khalil Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from html import escape
from typing import Optional


@dataclass
class EmailResult:
    """Result from sending an email."""
    success: bool
    message_id: Optional[str] = None
    error_message: Optional[str] = None
    provider: str = "unknown"


@dataclass
class Lead:
    """A demo request captured by the landing page form."""
    full_name: str
    email: str
    company_name: str


def render_lead_email(lead: Lead) -> tuple[str, str, str]:
    """
    Build subject, HTML and plain-text bodies for a lead.

    User-supplied values are HTML-escaped in the HTML body.
    """
    name = escape(lead.full_name)
    email = escape(lead.email)
    company = escape(lead.company_name)

    subject = f"🚀 New Lead: {lead.company_name}"
    body_html = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h1 style="color: #6366f1;">New demo request</h1>
        <table style="width: 100%; border-collapse: collapse; margin: 20px 0;">
            <tr>
                <td style="padding: 8px; font-weight: bold;">Restaurant</td>
                <td style="padding: 8px;">{company}</td>
            </tr>
            <tr>
                <td style="padding: 8px; font-weight: bold;">Contact Name</td>
                <td style="padding: 8px;">{name}</td>
            </tr>
            <tr>
                <td style="padding: 8px; font-weight: bold;">Email</td>
                <td style="padding: 8px;">{email}</td>
            </tr>
        </table>
        <a href="mailto:{email}"
           style="background: #6366f1; color: #ffffff; padding: 12px 24px;
                  border-radius: 8px; text-decoration: none;">Reply to Lead</a>
    </div>
    """
    body_text = (
        f"New demo request\n"
        f"Restaurant: {lead.company_name}\n"
        f"Contact Name: {lead.full_name}\n"
        f"Email: {lead.email}\n"
    )
    return subject, body_html, body_text


class BaseEmailService(ABC):
    """Abstract base class for email services."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def send_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
        body_text: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> EmailResult:
        """Send an email."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check service connectivity."""
        pass

    async def send_lead_email(self, to_email: str, lead: Lead) -> EmailResult:
        """Deliver a lead notification; replies go to the lead."""
        subject, body_html, body_text = render_lead_email(lead)
        return await self.send_email(
            to_email=to_email,
            subject=subject,
            body_html=body_html,
            body_text=body_text,
            reply_to=lead.email,
        )
