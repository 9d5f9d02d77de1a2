# app/core/email_client.py
from __future__ import annotations

"""
SMTP email client for the shop API.

Used for password-reset mails and newsletter confirmations. All settings
come from the environment:

    SMTP_HOST=smtp.gmail.com
    SMTP_PORT=465
    SMTP_USERNAME=shop@example.com
    SMTP_PASSWORD=<app password>
    SMTP_FROM_EMAIL=shop@example.com
    SMTP_FROM_NAME=Victoria Kids Shop
    SMTP_USE_TLS=false
    SMTP_USE_SSL=true
"""

import os
import smtplib
from email.message import EmailMessage


def _get_bool_env(name: str, default: bool = False) -> bool:
    """
    Read a boolean env var ("1", "true", "yes", "y" are truthy).
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y"}


class SMTPConfig:
    """Snapshot of the SMTP_* environment, read on each send."""

    def __init__(self) -> None:
        self.host: str | None = os.getenv("SMTP_HOST")
        self.port: int = int(os.getenv("SMTP_PORT", "587"))
        self.username: str | None = os.getenv("SMTP_USERNAME")
        self.password: str | None = os.getenv("SMTP_PASSWORD")
        self.from_email: str = os.getenv("SMTP_FROM_EMAIL", self.username or "")
        self.from_name: str = os.getenv("SMTP_FROM_NAME", "Victoria Kids Shop")
        self.use_tls: bool = _get_bool_env("SMTP_USE_TLS", default=True)
        self.use_ssl: bool = _get_bool_env("SMTP_USE_SSL", default=False)

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.username and self.password)


def _create_smtp_client(config: SMTPConfig) -> smtplib.SMTP:
    """
    SSL (usually port 465) when SMTP_USE_SSL is set, otherwise a plain
    connection upgraded with STARTTLS when SMTP_USE_TLS is set (port 587).
    """
    if config.use_ssl:
        return smtplib.SMTP_SSL(config.host, config.port, timeout=30)

    server = smtplib.SMTP(config.host, config.port, timeout=30)
    if config.use_tls:
        server.starttls()
    return server


def send_email(
    to_email: str,
    subject: str,
    text_body: str,
    html_body: str | None = None,
) -> None:
    """
    Send an email to a single recipient.

    Raises
    ------
    RuntimeError:
        If SMTP_HOST, SMTP_USERNAME or SMTP_PASSWORD is missing.
    smtplib.SMTPException:
        If the underlying SMTP connection or send fails.
    """
    config = SMTPConfig()
    if not config.is_configured:
        raise RuntimeError(
            "SMTP is not configured correctly. "
            "Please set SMTP_HOST, SMTP_USERNAME, and SMTP_PASSWORD in .env."
        )

    msg = EmailMessage()
    msg["From"] = (
        f"{config.from_name} <{config.from_email}>"
        if config.from_email
        else config.username
    )
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(text_body)
    if html_body:
        msg.add_alternative(html_body, subtype="html")

    server = _create_smtp_client(config)
    try:
        server.login(config.username, config.password)  # type: ignore[arg-type]
        server.send_message(msg)
    finally:
        try:
            server.quit()
        except smtplib.SMTPException:
            # Connection is being torn down anyway.
            pass


def send_password_reset_email(to_email: str, name: str, reset_url: str) -> None:
    send_email(
        to_email=to_email,
        subject="[Victoria Kids] Reset your password",
        text_body=(
            f"Hi {name},\n\n"
            "We received a request to reset your password.\n"
            f"Open this link to choose a new one:\n{reset_url}\n\n"
            "If you did not ask for this, you can ignore this email."
        ),
        html_body=(
            f"<p>Hi {name},</p>"
            "<p>We received a request to reset your password.</p>"
            f'<p><a href="{reset_url}">Choose a new password</a></p>'
            "<p>If you did not ask for this, you can ignore this email.</p>"
        ),
    )


def send_newsletter_welcome_email(to_email: str, unsubscribe_url: str) -> None:
    send_email(
        to_email=to_email,
        subject="[Victoria Kids] You're on the list",
        text_body=(
            "Thanks for subscribing to the Victoria Kids newsletter.\n"
            "We'll let you know about new arrivals and offers.\n\n"
            f"To stop receiving these emails, open:\n{unsubscribe_url}"
        ),
        html_body=(
            "<p>Thanks for subscribing to the Victoria Kids newsletter.</p>"
            "<p>We'll let you know about new arrivals and offers.</p>"
            f'<p><a href="{unsubscribe_url}">Unsubscribe</a></p>'
        ),
    )
