"""Starter template router."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from formcraft.models.user import User
from formcraft.schemas.form import FormTemplateResponse
from formcraft.services.auth import get_current_active_user
from formcraft.services.templates import TemplateService

router = APIRouter()


@router.get("", response_model=List[FormTemplateResponse])
async def list_templates(current_user: User = Depends(get_current_active_user)):
    """List the starter templates available for form creation."""
    return TemplateService.get_templates()


@router.get("/{template_id}", response_model=FormTemplateResponse)
async def get_template(
    template_id: str,
    current_user: User = Depends(get_current_active_user)
):
    """Get a starter template by ID."""
    template = TemplateService.get_template(template_id)
    if not template:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Template not found"
        )
    return template
