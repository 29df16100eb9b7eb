"""
SES email client.

Dependencies: boto3
System role: Outbound email (welcome, password reset, test messages)
"""

import logging
from typing import Any

from contract_engine.boundary.aws.client_errors import translate_client_errors
from contract_engine.boundary.aws.session import get_boto3_session

logger = logging.getLogger(__name__)


class SesEmailClient:
    """Send email and inspect sending status through SES."""

    def __init__(self, from_email: str, region: str | None = None, client: Any = None) -> None:
        """
        Initialize SES client.

        Args:
            from_email: Verified sender address
            region: SES region
            client: Pre-built ses client (tests inject a mock here)
        """
        self.from_email = from_email
        self._client = client or get_boto3_session().client("ses", region_name=region)

    @translate_client_errors("ses")
    def send_email(
        self,
        to: list[str] | str,
        subject: str,
        html_body: str,
        text_body: str | None = None,
        reply_to: list[str] | None = None,
    ) -> str:
        """
        Send an HTML (plus optional text) email.

        Args:
            to: Recipient address(es)
            subject: Subject line
            html_body: HTML body
            text_body: Plain text alternative
            reply_to: Reply-To addresses

        Returns:
            str: SES MessageId
        """
        recipients = [to] if isinstance(to, str) else list(to)
        body: dict[str, Any] = {"Html": {"Data": html_body, "Charset": "UTF-8"}}
        if text_body:
            body["Text"] = {"Data": text_body, "Charset": "UTF-8"}

        kwargs: dict[str, Any] = {
            "Source": self.from_email,
            "Destination": {"ToAddresses": recipients},
            "Message": {
                "Subject": {"Data": subject, "Charset": "UTF-8"},
                "Body": body,
            },
        }
        if reply_to:
            kwargs["ReplyToAddresses"] = reply_to

        response = self._client.send_email(**kwargs)
        logger.info("Email sent", extra={"recipients": len(recipients), "message_id": response["MessageId"]})
        return response["MessageId"]

    @translate_client_errors("ses")
    def get_send_quota(self) -> dict[str, Any]:
        """Get Max24HourSend, MaxSendRate and SentLast24Hours."""
        response = self._client.get_send_quota()
        return {
            "max_24_hour_send": response.get("Max24HourSend"),
            "max_send_rate": response.get("MaxSendRate"),
            "sent_last_24_hours": response.get("SentLast24Hours"),
        }

    @translate_client_errors("ses")
    def get_identity_verification_status(self, identities: list[str]) -> dict[str, str]:
        """Map each identity to its verification status (Success, Pending, NotStarted...)."""
        response = self._client.get_identity_verification_attributes(Identities=identities)
        attributes = response.get("VerificationAttributes", {})
        return {
            identity: attributes.get(identity, {}).get("VerificationStatus", "NotStarted")
            for identity in identities
        }

    @translate_client_errors("ses")
    def verify_email_identity(self, email: str) -> None:
        """Start verification of a sender address."""
        self._client.verify_email_identity(EmailAddress=email)
