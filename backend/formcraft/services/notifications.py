"""Email notifications for new submissions."""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Any, Dict, List, Mapping, Optional

from formcraft.config import get_settings

logger = logging.getLogger(__name__)


def _format_value(value: Any) -> str:
    if isinstance(value, Mapping) and "name" in value:
        return f"{value['name']} ({value.get('size', 0)} bytes)"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def build_submission_email(form_title: str, data: Dict[str, Any], labels: Dict[str, str]) -> str:
    rows = "".join(
        f"<tr><td style=\"padding:4px 8px;font-weight:bold\">{escape(labels.get(key, key))}</td>"
        f"<td style=\"padding:4px 8px\">{escape(_format_value(value))}</td></tr>"
        for key, value in data.items()
    )
    return (
        "<div style=\"font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;\">"
        f"<h2>New submission: {escape(form_title)}</h2>"
        f"<table>{rows}</table>"
        "</div>"
    )


class NotificationService:
    """Sends submission notifications over SMTP."""

    @staticmethod
    def notify(
        recipients: List[str],
        form_title: str,
        data: Dict[str, Any],
        labels: Optional[Dict[str, str]] = None,
    ) -> bool:
        """Email a submission to the owner; returns False when not sent."""
        settings = get_settings()
        if not recipients:
            return False
        if not settings.smtp_configured:
            logger.warning("SMTP not configured, skipping submission notification",
                           extra={"form_title": form_title})
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = f"New submission for {form_title}"
        msg["From"] = settings.email_from
        msg["To"] = ", ".join(recipients)
        msg.attach(MIMEText(build_submission_email(form_title, data, labels or {}), "html"))

        try:
            with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
                server.starttls()
                server.login(settings.smtp_username, settings.smtp_password)
                server.sendmail(settings.email_from, recipients, msg.as_string())
        except (smtplib.SMTPException, OSError):
            logger.exception("Failed to send submission notification",
                             extra={"form_title": form_title})
            return False

        logger.info("Submission notification sent",
                    extra={"form_title": form_title, "recipients": len(recipients)})
        return True
