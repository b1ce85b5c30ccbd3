"""Relay help requests from users to the support inbox."""
from __future__ import annotations

import html
import re
from dataclasses import dataclass

from loguru import logger

from tagcard.core.config import get_settings
from tagcard.core.mailer import send_email

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MAX_SUBJECT = 200
MAX_MESSAGE = 5000


class SupportRequestError(ValueError):
    """Raised when a help request is missing or has malformed fields."""


@dataclass(frozen=True)
class HelpRequest:
    user_email: str
    subject: str
    message: str


def validate_help_request(user_email: str, subject: str, message: str) -> HelpRequest:
    email = (user_email or "").strip()
    subj = (subject or "").strip()
    body = (message or "").strip()
    if not EMAIL_RE.match(email):
        raise SupportRequestError("A valid e-mail is required.")
    if not subj or not body:
        raise SupportRequestError("Subject and message are required.")
    return HelpRequest(user_email=email, subject=subj[:MAX_SUBJECT], message=body[:MAX_MESSAGE])


def send_help_request(req: HelpRequest) -> bool:
    """Fire-and-forget: returns whether the mail went out, never raises."""
    inbox = get_settings().support_inbox
    if not inbox:
        logger.warning("SUPPORT_INBOX not configured; dropping help request from {}", req.user_email)
        return False
    html_body = (
        "<h2>New Help Request</h2>"
        f"<p><strong>From:</strong> {html.escape(req.user_email)}</p>"
        f"<p><strong>Subject:</strong> {html.escape(req.subject)}</p>"
        "<hr />"
        "<p><strong>Message:</strong></p>"
        f"<p>{html.escape(req.message).replace(chr(10), '<br>')}</p>"
    )
    text_body = f"From: {req.user_email}\nSubject: {req.subject}\n\n{req.message}"
    sent = send_email(
        f"TagCard Help: {req.subject}",
        inbox,
        html_body,
        text_body,
        reply_to=req.user_email,
    )
    if sent:
        logger.info("Help request from {} relayed", req.user_email)
    return sent
