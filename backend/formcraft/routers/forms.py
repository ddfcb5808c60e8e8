"""Owner form management router."""

from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from formcraft.database import get_db
from formcraft.models.form import Form, FormStatus
from formcraft.models.user import User
from formcraft.schemas.analytics import AnalyticsResponse
from formcraft.schemas.form import (
    FormCreate,
    FormListResponse,
    FormResponse,
    FormUpdate,
)
from formcraft.schemas.submission import SubmissionResponse
from formcraft.services.analytics import AnalyticsService
from formcraft.services.auth import get_current_active_user
from formcraft.services.form import FormService
from formcraft.services.renderer import RenderedField, render_form

router = APIRouter()


def _form_response(form: Form) -> FormResponse:
    response = FormResponse.model_validate(form)
    response.share_url = FormService.share_url(form)
    return response


@router.get("", response_model=List[FormListResponse])
async def list_forms(
    skip: int = 0,
    limit: int = 100,
    status_filter: Optional[FormStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """List the current user's forms, newest first."""
    forms = FormService.get_user_forms(db, current_user.id, skip, limit, status_filter)
    counts = FormService.submission_counts(db, [f.id for f in forms])

    result = []
    for form in forms:
        result.append(FormListResponse(
            id=form.id,
            title=form.title,
            status=form.status,
            field_count=len(form.fields or []),
            view_count=form.view_count,
            submission_count=counts.get(form.id, 0),
            expires_at=form.expires_at,
            created_at=form.created_at,
            updated_at=form.updated_at,
        ))

    return result


@router.post("", response_model=FormResponse, status_code=status.HTTP_201_CREATED)
async def create_form(
    form_data: FormCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Create a new draft form."""
    form = FormService.create_form(db, current_user, form_data)
    return _form_response(form)


@router.get("/{form_id}", response_model=FormResponse)
async def get_form(
    form_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Get a form by ID."""
    form = FormService.get_owned_form(db, form_id, current_user)
    return _form_response(form)


@router.put("/{form_id}", response_model=FormResponse)
async def update_form(
    form_id: str,
    update_data: FormUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Update a form; omitted keys are left untouched."""
    form = FormService.update_form(db, form_id, current_user, update_data)
    return _form_response(form)


@router.post("/{form_id}/publish", response_model=FormResponse)
async def publish_form(
    form_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Open a form for submissions."""
    form = FormService.set_status(db, form_id, current_user, FormStatus.PUBLISHED)
    return _form_response(form)


@router.post("/{form_id}/unpublish", response_model=FormResponse)
async def unpublish_form(
    form_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Return a form to draft; existing submissions are kept."""
    form = FormService.set_status(db, form_id, current_user, FormStatus.DRAFT)
    return _form_response(form)


@router.delete("/{form_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_form(
    form_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Delete a form with its submissions and view history."""
    FormService.delete_form(db, form_id, current_user)


@router.post("/{form_id}/preview", response_model=List[RenderedField])
async def preview_form(
    form_id: str,
    values: Optional[Dict[str, Any]] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Render the form as a respondent would see it, with optional sample values."""
    form = FormService.get_owned_form(db, form_id, current_user)
    return render_form(form.fields or [], values or {})


@router.get("/{form_id}/submissions", response_model=List[SubmissionResponse])
async def list_submissions(
    form_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """List a form's submissions, newest first."""
    return FormService.get_submissions(db, form_id, current_user, start_date, end_date)


@router.get("/{form_id}/analytics", response_model=AnalyticsResponse)
async def form_analytics(
    form_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    estimate_views: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Summary and daily series for one form."""
    FormService.get_owned_form(db, form_id, current_user)
    return AnalyticsService.get_analytics(
        db, current_user, form_id, start_date, end_date, estimate_views=estimate_views
    )
