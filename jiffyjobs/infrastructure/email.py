"""Utility helpers for sending notification emails via SendGrid."""

from __future__ import annotations

import html
import json
import logging
from typing import Any, Sequence

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from jiffyjobs.config import get_settings
from jiffyjobs.utils import format_app_datetime, utc_now

logger = logging.getLogger(__name__)


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages = [
                str(item["message"])
                for item in errors
                if isinstance(item, dict) and item.get("message")
            ]
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    return str(parsed)


def _log_sendgrid_failure(status_code: Any, body: Any) -> None:
    details = _extract_sendgrid_error_details(body)
    if details:
        logger.error("SendGrid API request failed with status %s: %s", status_code, details)
    else:
        logger.error("SendGrid API request failed with status %s", status_code)


def _sent_line() -> str:
    return f"<p><small>Sent {html.escape(format_app_datetime(utc_now()))}</small></p>"


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:  # pragma: no cover - network failures depend on environment
        status_code = getattr(exc, "status_code", None)
        if status_code is None:
            logger.exception("Error sending email via SendGrid: %s", exc)
        else:
            _log_sendgrid_failure(status_code, getattr(exc, "body", None))
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        _log_sendgrid_failure(status_code, getattr(response, "body", None))
        return False

    return True


def send_notification_email(
    recipient: str, name: str, title: str, message: str, link: str
) -> bool:
    """Email a single notification with a link back to the web client."""

    html_content = (
        f"<p>Hi {html.escape(name)},</p>"
        f"<p><strong>{html.escape(title)}</strong></p>"
        f"<p>{html.escape(message)}</p>"
        f'<p><a href="{html.escape(link, quote=True)}">Open JiffyJobs</a></p>'
        f"{_sent_line()}"
    )
    return send_email(title, html_content, recipient)


def send_notification_digest_email(
    recipient: str, name: str, items: Sequence[tuple[str, str]], link: str
) -> bool:
    """Email several queued notifications (``(title, message)`` pairs) at once."""

    count = len(items)
    subject = f"You have {count} new notification{'s' if count != 1 else ''} on JiffyJobs"
    rows = "".join(
        f"<li><strong>{html.escape(title)}</strong>: {html.escape(message)}</li>"
        for title, message in items
    )
    html_content = (
        f"<p>Hi {html.escape(name)},</p>"
        "<p>You have new updates:</p>"
        f"<ul>{rows}</ul>"
        f'<p><a href="{html.escape(link, quote=True)}">Open JiffyJobs</a></p>'
        f"{_sent_line()}"
    )
    return send_email(subject, html_content, recipient)


__all__ = [
    "send_email",
    "send_notification_digest_email",
    "send_notification_email",
]
