"""Submission service: validate, persist and notify."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from formcraft.errors import FormError, FormNotPublished
from formcraft.models.form import Form, Submission
from formcraft.schemas.submission import SubmissionAccepted
from formcraft.services.form import FormService
from formcraft.services.notifications import NotificationService
from formcraft.services.quota import QuotaService, Resource
from formcraft.services.validation import validate_submission

logger = logging.getLogger(__name__)


class SubmissionService:
    """Service for public form submissions."""

    @staticmethod
    def notification_recipients(form: Form) -> List[str]:
        settings = form.settings or {}
        recipients = list(settings.get("notification_emails") or [])
        if not recipients and form.owner is not None:
            recipients = [form.owner.email]
        return recipients

    @staticmethod
    def submit(
        db: Session,
        form_id: str,
        payload: Mapping[str, Any],
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        geo_location: Optional[Dict[str, Any]] = None,
        background_tasks: Optional[BackgroundTasks] = None,
        now: Optional[datetime] = None,
    ) -> SubmissionAccepted:
        """Validate a payload against its form and store it as one submission."""
        form = FormService.get_form(db, form_id)
        if not form:
            raise FormNotPublished()

        definition = FormService.to_definition(form)
        try:
            validated = validate_submission(
                definition,
                payload,
                now=now,
                is_over_limit=lambda: QuotaService.is_over_limit(db, form.owner, Resource.SUBMISSIONS, now),
            )
        except FormError as exc:
            logger.info("Submission rejected", extra={"form_id": form_id, "code": exc.code})
            raise

        submission = Submission(
            form_id=form.id,
            data=validated.data,
            ip_address=ip_address,
            user_agent=user_agent,
            geo_location=geo_location,
        )
        if now is not None:
            submission.created_at = now
        db.add(submission)
        db.commit()
        db.refresh(submission)

        logger.info("Submission accepted", extra={"form_id": form_id, "submission_id": submission.id})

        if definition.settings.email_notifications:
            recipients = SubmissionService.notification_recipients(form)
            labels = {f.get("id"): f.get("label") or f.get("id") for f in definition.fields}
            if background_tasks is not None:
                background_tasks.add_task(
                    NotificationService.notify, recipients, definition.title, validated.data, labels
                )
            else:
                NotificationService.notify(recipients, definition.title, validated.data, labels)

        return SubmissionAccepted(
            message=validated.message,
            redirect_url=validated.redirect_url,
            submission_id=submission.id,
        )
