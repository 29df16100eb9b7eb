"""
Email service.

Sends account lifecycle emails through SES and reports sending status.

Dependencies: contract_engine.boundary.aws.ses_client
System role: Outbound email use cases
"""

import asyncio
import logging

from contract_engine.application.services.email_templates import (
    RenderedEmail,
    render_password_reset_email,
    render_test_email,
    render_welcome_email,
)
from contract_engine.boundary.aws.ses_client import SesEmailClient
from contract_engine.configs.email import EmailSettings

logger = logging.getLogger(__name__)


class EmailService:
    """Email use cases."""

    def __init__(self, ses: SesEmailClient, settings: EmailSettings) -> None:
        """
        Initialize email service.

        Args:
            ses: SES client bound to the sender address
            settings: Branding and sender settings
        """
        self.ses = ses
        self.settings = settings

    async def _send(self, to: str, email: RenderedEmail, kind: str) -> str:
        message_id = await asyncio.to_thread(
            self.ses.send_email,
            to,
            email.subject,
            email.html,
            email.text,
            reply_to=[self.settings.support_email],
        )
        logger.info("Email delivered to SES", extra={"email_type": kind, "message_id": message_id})
        return message_id

    async def send_welcome_email(
        self,
        to: str,
        username: str,
        temporary_password: str,
        first_name: str | None = None,
    ) -> str:
        """
        Send the welcome email for a new account.

        Returns:
            str: SES message id

        Raises:
            AwsServiceError: If SES rejects the message
        """
        email = render_welcome_email(self.settings, username, temporary_password, first_name)
        return await self._send(to, email, "welcome")

    async def send_password_reset_email(
        self,
        to: str,
        username: str,
        temporary_password: str,
        first_name: str | None = None,
    ) -> str:
        """Send the new temporary password after an admin reset."""
        email = render_password_reset_email(self.settings, username, temporary_password, first_name)
        return await self._send(to, email, "password_reset")

    async def send_test_email(self, to: str) -> str:
        """Send a deliverability test message."""
        return await self._send(to, render_test_email(self.settings), "test")

    async def check_sending_status(self) -> dict:
        """
        Report SES quota and sender verification.

        Returns:
            dict: quota, from_email, verification_status, verified
        """
        quota = await asyncio.to_thread(self.ses.get_send_quota)
        statuses = await asyncio.to_thread(self.ses.get_identity_verification_status, [self.settings.from_email])
        status = statuses.get(self.settings.from_email, "NotStarted")
        return {
            "quota": quota,
            "from_email": self.settings.from_email,
            "verification_status": status,
            "verified": status == "Success",
        }
