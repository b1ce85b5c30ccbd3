"""
Outgoing e-mail for the TagCard backend.

Delivery goes through SMTP with the credentials from Settings; port 465 uses
implicit TLS, any other port upgrades with STARTTLS.
"""

from email.message import EmailMessage
import smtplib
import ssl

from loguru import logger

from .config import Settings, get_settings

IMPLICIT_TLS_PORT = 465


def smtp_configured(settings: Settings) -> bool:
    return bool(
        settings.smtp_host
        and settings.smtp_user
        and settings.smtp_password
        and settings.smtp_from
        and settings.smtp_port
    )


def build_message(
    settings: Settings,
    subject: str,
    to_email: str,
    html_body: str,
    text_body: str | None = None,
    reply_to: str | None = None,
) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = settings.smtp_from
    msg["To"] = to_email
    if reply_to:
        msg["Reply-To"] = reply_to
    msg.set_content(text_body or html_body)
    msg.add_alternative(html_body, subtype="html")
    return msg


def _deliver(settings: Settings, msg: EmailMessage) -> None:
    context = ssl.create_default_context()
    if settings.smtp_port == IMPLICIT_TLS_PORT:
        with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, context=context) as server:
            server.login(settings.smtp_user, settings.smtp_password)
            server.send_message(msg)
        return
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
        server.ehlo()
        server.starttls(context=context)
        server.login(settings.smtp_user, settings.smtp_password)
        server.send_message(msg)


def send_email(
    subject: str,
    to_email: str,
    html_body: str,
    text_body: str | None = None,
    reply_to: str | None = None,
) -> bool:
    """Returns False, without raising, when SMTP is unconfigured or delivery fails."""
    settings = get_settings()
    if not smtp_configured(settings):
        logger.warning("SMTP not configured; skipping e-mail to {}", to_email)
        return False
    msg = build_message(settings, subject, to_email, html_body, text_body, reply_to)
    try:
        _deliver(settings, msg)
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("Failed to send e-mail to {}: {}", to_email, exc)
        return False
    logger.debug("E-mail '{}' sent to {}", subject, to_email)
    return True
