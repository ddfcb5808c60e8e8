"""Form service for owner CRUD, public fetch and view recording."""

import logging
from typing import Optional, List, Dict, Any
from datetime import date, datetime

from sqlalchemy import func, update
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from formcraft.config import get_settings
from formcraft.errors import FormExpired, FormLimitExceeded, FormNotPublished
from formcraft.models.form import Form, FormStatus, Submission, ViewRecord
from formcraft.models.user import User
from formcraft.schemas.form import (
    FieldDefinition,
    FormCreate,
    FormDefinition,
    FormSettings,
    FormTheme,
    FormUpdate,
    PublicFormResponse,
)
from formcraft.services.field_types import parse_field, validate_fields
from formcraft.services.quota import QuotaService, Resource
from formcraft.services.templates import TemplateService

logger = logging.getLogger(__name__)


def _dump_fields(fields: List[FieldDefinition]) -> List[Dict[str, Any]]:
    return [f.model_dump(mode="json") for f in validate_fields(fields)]


class FormService:
    """Service for form operations."""

    @staticmethod
    def get_form(db: Session, form_id: str) -> Optional[Form]:
        """Get a form by ID."""
        return db.query(Form).filter(Form.id == form_id).first()

    @staticmethod
    def get_owned_form(db: Session, form_id: str, user: User) -> Form:
        """Get a form, enforcing ownership."""
        form = FormService.get_form(db, form_id)
        if not form:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Form not found"
            )
        if form.owner_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied"
            )
        return form

    @staticmethod
    def get_user_forms(
        db: Session,
        user_id: int,
        skip: int = 0,
        limit: int = 100,
        status_filter: Optional[FormStatus] = None
    ) -> List[Form]:
        """Get all forms for a user."""
        query = db.query(Form).filter(Form.owner_id == user_id)
        if status_filter:
            query = query.filter(Form.status == status_filter)
        return query.order_by(Form.created_at.desc()).offset(skip).limit(limit).all()

    @staticmethod
    def submission_counts(db: Session, form_ids: List[str]) -> Dict[str, int]:
        if not form_ids:
            return {}
        rows = db.query(
            Submission.form_id,
            func.count(Submission.id)
        ).filter(
            Submission.form_id.in_(form_ids)
        ).group_by(Submission.form_id).all()
        return {form_id: count for form_id, count in rows}

    @staticmethod
    def create_form(db: Session, user: User, form_data: FormCreate) -> Form:
        """Create a new draft form, optionally seeded from a starter template."""
        if QuotaService.is_over_limit(db, user, Resource.FORMS):
            raise FormLimitExceeded()

        if form_data.fields is not None:
            fields = _dump_fields(form_data.fields)
        elif form_data.template_id:
            template_fields = TemplateService.get_template_fields(form_data.template_id)
            fields = _dump_fields([parse_field(f) for f in template_fields])
        else:
            fields = []

        db_form = Form(
            owner_id=user.id,
            title=form_data.title,
            description=form_data.description,
            status=FormStatus.DRAFT,
            fields=fields,
            settings=(form_data.settings or FormSettings()).model_dump(mode="json"),
            theme=(form_data.theme or FormTheme()).model_dump(mode="json"),
            expires_at=form_data.expires_at,
            view_count=0,
        )
        db.add(db_form)
        db.commit()
        db.refresh(db_form)

        logger.info("Form created", extra={"form_id": db_form.id, "owner_id": user.id})
        return db_form

    @staticmethod
    def update_form(db: Session, form_id: str, user: User, update_data: FormUpdate) -> Form:
        """Apply a partial update; fields are re-validated as a whole."""
        db_form = FormService.get_owned_form(db, form_id, user)

        changes = update_data.model_dump(exclude_unset=True)
        if "fields" in changes and update_data.fields is not None:
            db_form.fields = _dump_fields(update_data.fields)
        if "settings" in changes and update_data.settings is not None:
            db_form.settings = update_data.settings.model_dump(mode="json")
        if "theme" in changes and update_data.theme is not None:
            db_form.theme = update_data.theme.model_dump(mode="json")
        for key in ("title", "status"):
            if changes.get(key) is not None:
                setattr(db_form, key, getattr(update_data, key))
        # Explicit nulls clear these
        for key in ("description", "expires_at"):
            if key in changes:
                setattr(db_form, key, getattr(update_data, key))

        db.commit()
        db.refresh(db_form)

        logger.info(
            "Form updated",
            extra={"form_id": db_form.id, "changed": sorted(changes), "status": db_form.status.value},
        )
        return db_form

    @staticmethod
    def set_status(db: Session, form_id: str, user: User, new_status: FormStatus) -> Form:
        """Publish or unpublish; history is kept either way."""
        return FormService.update_form(db, form_id, user, FormUpdate(status=new_status))

    @staticmethod
    def delete_form(db: Session, form_id: str, user: User) -> None:
        """Delete a form together with its submissions and view records."""
        db_form = FormService.get_owned_form(db, form_id, user)
        db.delete(db_form)
        db.commit()
        logger.info("Form deleted", extra={"form_id": form_id, "owner_id": user.id})

    @staticmethod
    def get_submissions(
        db: Session,
        form_id: str,
        user: User,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[Submission]:
        """Submissions for an owned form, optionally limited to a date range."""
        FormService.get_owned_form(db, form_id, user)
        query = db.query(Submission).filter(Submission.form_id == form_id)
        if start:
            query = query.filter(Submission.created_at >= datetime.combine(start, datetime.min.time()))
        if end:
            query = query.filter(Submission.created_at <= datetime.combine(end, datetime.max.time()))
        return query.order_by(Submission.created_at.desc()).all()

    @staticmethod
    def to_definition(form: Form) -> FormDefinition:
        return FormDefinition.model_validate(form)

    @staticmethod
    def share_url(form: Form) -> str:
        return f"{get_settings().public_base_url.rstrip('/')}/form/{form.id}"

    @staticmethod
    def get_public_form(db: Session, form_id: str, now: Optional[datetime] = None) -> Form:
        """
        Load a form for respondents.

        Unpublished and unknown forms are indistinguishable to the caller.
        """
        form = FormService.get_form(db, form_id)
        if not form or form.status != FormStatus.PUBLISHED:
            raise FormNotPublished()
        now = now or datetime.utcnow()
        if form.expires_at is not None and now > form.expires_at:
            raise FormExpired()
        return form

    @staticmethod
    def to_public(form: Form) -> PublicFormResponse:
        definition = FormService.to_definition(form)
        return PublicFormResponse(
            id=definition.id,
            title=definition.title,
            description=definition.description,
            fields=definition.fields,
            theme=definition.theme.model_dump(mode="json"),
        )

    @staticmethod
    def increment_views(db: Session, form_id: str) -> None:
        """Atomically bump the form's view counter in the database."""
        db.execute(
            update(Form)
            .where(Form.id == form_id)
            .values(view_count=Form.view_count + 1)
            .execution_options(synchronize_session=False)
        )

    @staticmethod
    def record_view(
        db: Session,
        form_id: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        referrer: Optional[str] = None,
        geo_location: Optional[Dict[str, Any]] = None,
    ) -> ViewRecord:
        """Count one impression and append its view record."""
        FormService.increment_views(db, form_id)
        view = ViewRecord(
            form_id=form_id,
            ip_address=ip_address,
            user_agent=user_agent,
            referrer=referrer,
            geo_location=geo_location,
        )
        db.add(view)
        db.commit()
        return view
