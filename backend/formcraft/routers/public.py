"""Public respondent router (no authentication)."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Request, status
from sqlalchemy.orm import Session

from formcraft.config import get_settings
from formcraft.database import get_db
from formcraft.schemas.form import PublicFormResponse
from formcraft.schemas.submission import SubmissionAccepted
from formcraft.services.form import FormService
from formcraft.services.rate_limit import client_ip, limit_public
from formcraft.services.submission import SubmissionService

settings = get_settings()
router = APIRouter()


def _geo_location(request: Request) -> Optional[Dict[str, Any]]:
    country = request.headers.get(settings.geo_country_header)
    if not country:
        return None
    return {"country": country}


@router.get("/forms/{form_id}", response_model=PublicFormResponse)
@limit_public
async def get_public_form(
    form_id: str,
    request: Request,
    db: Session = Depends(get_db)
):
    """Fetch a published form for filling out; each fetch counts as a view."""
    form = FormService.get_public_form(db, form_id)
    FormService.record_view(
        db,
        form.id,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
        referrer=request.headers.get("referer"),
        geo_location=_geo_location(request),
    )
    return FormService.to_public(form)


@router.post("/forms/{form_id}/submit", response_model=SubmissionAccepted, status_code=status.HTTP_201_CREATED)
@limit_public
async def submit_form(
    form_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db)
):
    """Submit answers keyed by field id."""
    return SubmissionService.submit(
        db,
        form_id,
        payload,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
        geo_location=_geo_location(request),
        background_tasks=background_tasks,
    )
