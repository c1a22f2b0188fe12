"""
Email Service - Welcome e-mails through EmailJS.

Sending is skipped, and reported as a success, until a real public key
is configured.
"""

from typing import Optional

import httpx
from loguru import logger

from mediconnect.config import Settings, get_settings
from mediconnect.models.account import EmailResult

PLACEHOLDER_PUBLIC_KEY = "your_emailjs_public_key"
MIN_PUBLIC_KEY_LENGTH = 10

WELCOME_SUBJECT = "Welcome to MediConnect - Your Health Journey Begins!"

WELCOME_MESSAGE = """
Dear {name},

Welcome to MediConnect! We're thrilled to have you join our healthcare community.

At MediConnect, we're committed to:
- Connecting you with the best doctors across India
- Providing seamless appointment booking
- Ensuring quality healthcare at your fingertips
- Supporting your health monitoring journey

Get started by exploring our features:
- Find and book appointments with top doctors
- Track your health metrics with our smart dashboard
- Access your medical records anytime, anywhere

Best regards,
The MediConnect Team

---
This is an automated message. Please do not reply to this email.
For support, contact us at: support@mediconnect.in
"""


class EmailService:
    """
    Async client for the EmailJS send endpoint.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def is_configured(self) -> bool:
        """Whether a usable public key is set."""
        key = self.settings.emailjs_public_key
        return bool(key) and key != PLACEHOLDER_PUBLIC_KEY and len(key) >= MIN_PUBLIC_KEY_LENGTH

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.settings.backend_timeout))
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def send_welcome_email(self, email: str, name: str) -> EmailResult:
        """
        Send the welcome e-mail to a new user.

        Args:
            email: Recipient address
            name: Recipient display name

        Returns:
            EmailResult; skipped=True when EmailJS is not configured
        """
        if not self.is_configured:
            logger.info("EmailJS not configured - skipping welcome email")
            return EmailResult(success=True, skipped=True, message="Email not configured")

        payload = {
            "service_id": self.settings.emailjs_service_id,
            "template_id": self.settings.emailjs_template_id,
            "user_id": self.settings.emailjs_public_key,
            "template_params": {
                "to_email": email,
                "to_name": name,
                "from_name": f"{self.settings.app_name} Team",
                "subject": WELCOME_SUBJECT,
                "message": WELCOME_MESSAGE.format(name=name),
            },
        }

        client = await self._get_client()
        try:
            response = await client.post(self.settings.emailjs_api_url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to send welcome email: {e}")
            return EmailResult(success=False, message="Failed to send welcome email")

        logger.info(f"Welcome email sent to {email}")
        return EmailResult(success=True, message="Welcome email sent")


# Singleton instance
_email_service: Optional[EmailService] = None


def get_email_service() -> EmailService:
    """Get the singleton email service instance."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
