"""
Outbound email configuration.

Sender identity and branding used by the SES email templates.

Dependencies: pydantic_settings
System role: Email configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmailSettings(BaseSettings):
    """Settings for SES email delivery."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMAIL_",
        case_sensitive=False,
        extra="ignore",
    )

    from_email: str = Field(default="no-reply@example.com", description="Verified SES sender")
    support_email: str = Field(default="support@example.com", description="Support contact")
    app_name: str = Field(default="Contract Engine", description="Product name in emails")
    company_name: str = Field(default="Contract Engine", description="Company name in footers")
    app_url: str = Field(default="http://localhost:5173", description="Sign-in URL")
