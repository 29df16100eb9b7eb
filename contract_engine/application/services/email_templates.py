"""
Email templates for account lifecycle messages.

Each renderer returns (subject, html_body, text_body) built from the
branding in EmailSettings.

Dependencies: None (stdlib html escaping)
System role: Content of welcome, password reset and test emails
"""

from dataclasses import dataclass
from html import escape

from contract_engine.configs.email import EmailSettings

_STYLE = """
    body { font-family: Arial, sans-serif; margin: 0; padding: 20px; background-color: #f5f5f5; }
    .container { max-width: 600px; margin: 0 auto; background-color: #ffffff; padding: 30px; border-radius: 8px; }
    .header { background-color: #4f46e5; color: #ffffff; padding: 20px; border-radius: 8px; margin-bottom: 20px; }
    .credentials { background-color: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0; }
    .warning { background-color: #fff3cd; border: 1px solid #ffeaa7; padding: 15px; border-radius: 8px; margin: 20px 0; }
    .button { display: inline-block; background-color: #4f46e5; color: #ffffff; padding: 12px 30px; text-decoration: none; border-radius: 6px; }
    .footer { margin-top: 30px; color: #666666; font-size: 14px; }
"""


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str
    text: str


def greeting_name(username: str, first_name: str | None = None) -> str:
    """First name if known, else the part of the username before "." or "@"."""
    if first_name:
        return first_name
    local = username.split("@")[0].split(".")[0]
    return local or "there"


def _page(settings: EmailSettings, title: str, body: str) -> str:
    app_name = escape(settings.app_name)
    return (
        "<!DOCTYPE html><html><head><meta charset=\"UTF-8\">"
        f"<title>{escape(title)}</title><style>{_STYLE}</style></head><body>"
        f"<div class=\"container\"><div class=\"header\"><h1>{escape(title)}</h1></div>"
        f"{body}"
        f"<p class=\"footer\">This is an automated message from {app_name}. Please do not reply to this email. "
        f"Questions? Contact <a href=\"mailto:{escape(settings.support_email)}\">{escape(settings.support_email)}</a>."
        f"<br>&copy; {escape(settings.company_name)}</p>"
        "</div></body></html>"
    )


def _credentials_html(settings: EmailSettings, username: str, temporary_password: str) -> str:
    return (
        "<div class=\"credentials\"><h3>Your Login Credentials</h3>"
        f"<p><strong>Username:</strong> {escape(username)}</p>"
        f"<p><strong>Temporary Password:</strong> {escape(temporary_password)}</p>"
        f"<p><strong>Login URL:</strong> {escape(settings.app_url)}</p></div>"
    )


def render_welcome_email(
    settings: EmailSettings,
    username: str,
    temporary_password: str,
    first_name: str | None = None,
) -> RenderedEmail:
    """Welcome message with the temporary password for a new account."""
    name = greeting_name(username, first_name)
    subject = f"Welcome to {settings.app_name} - Your Account is Ready"

    body = (
        f"<h2>Hello {escape(name)},</h2>"
        f"<p>Welcome to {escape(settings.app_name)}! Your account has been successfully created.</p>"
        f"{_credentials_html(settings, username, temporary_password)}"
        "<div class=\"warning\"><p><strong>Important:</strong> You must change your password on your "
        "first login. The temporary password expires in 24 hours.</p></div>"
        f"<div style=\"text-align: center;\"><a href=\"{escape(settings.app_url)}\" class=\"button\">Sign In Now</a></div>"
    )
    html = _page(settings, f"Welcome to {settings.app_name}", body)

    text = "\n".join([
        f"Welcome to {settings.app_name}!",
        "",
        f"Hello {name},",
        "",
        f"Welcome to {settings.app_name}! Your account has been successfully created.",
        "",
        "YOUR LOGIN CREDENTIALS:",
        f"Username: {username}",
        f"Temporary Password: {temporary_password}",
        f"Login URL: {settings.app_url}",
        "",
        "IMPORTANT: You must change your password on your first login. "
        "The temporary password expires in 24 hours.",
        "",
        f"Questions? Contact {settings.support_email}.",
        f"This is an automated message from {settings.app_name}. Please do not reply to this email.",
    ])
    return RenderedEmail(subject=subject, html=html, text=text)


def render_password_reset_email(
    settings: EmailSettings,
    username: str,
    temporary_password: str,
    first_name: str | None = None,
) -> RenderedEmail:
    """Message carrying a new temporary password after an admin reset."""
    name = greeting_name(username, first_name)
    subject = f"{settings.app_name} - Your Password Has Been Reset"

    body = (
        f"<h2>Hello {escape(name)},</h2>"
        f"<p>An administrator has reset your {escape(settings.app_name)} password.</p>"
        f"{_credentials_html(settings, username, temporary_password)}"
        "<div class=\"warning\"><p><strong>Important:</strong> You will be asked to choose a new password "
        "when you sign in. The temporary password expires in 24 hours. If you did not expect this "
        f"reset, contact {escape(settings.support_email)} immediately.</p></div>"
        f"<div style=\"text-align: center;\"><a href=\"{escape(settings.app_url)}\" class=\"button\">Sign In</a></div>"
    )
    html = _page(settings, "Password Reset", body)

    text = "\n".join([
        f"{settings.app_name} - Password Reset",
        "",
        f"Hello {name},",
        "",
        f"An administrator has reset your {settings.app_name} password.",
        "",
        f"Username: {username}",
        f"Temporary Password: {temporary_password}",
        f"Login URL: {settings.app_url}",
        "",
        "You will be asked to choose a new password when you sign in. "
        "The temporary password expires in 24 hours.",
        f"If you did not expect this reset, contact {settings.support_email} immediately.",
    ])
    return RenderedEmail(subject=subject, html=html, text=text)


def render_test_email(settings: EmailSettings) -> RenderedEmail:
    """Deliverability check message."""
    subject = f"{settings.app_name} - Test Email"
    body = (
        "<p>This is a test email confirming that SES delivery is configured correctly.</p>"
        f"<p><strong>Sender:</strong> {escape(settings.from_email)}</p>"
    )
    text = (
        "This is a test email confirming that SES delivery is configured correctly.\n"
        f"Sender: {settings.from_email}"
    )
    return RenderedEmail(subject=subject, html=_page(settings, "Test Email", body), text=text)
