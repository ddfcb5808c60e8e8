"""Field palette router for the form builder."""

from typing import Dict, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from formcraft.models.user import User
from formcraft.schemas.form import FieldDefinition, FieldType
from formcraft.services.auth import get_current_active_user
from formcraft.services.field_types import create_default, grouped_field_types

router = APIRouter()


class FieldTypeEntry(BaseModel):
    type: FieldType
    label: str
    category: str


@router.get("", response_model=Dict[str, List[FieldTypeEntry]])
async def list_field_types(current_user: User = Depends(get_current_active_user)):
    """Palette entries grouped by category."""
    return {
        category: [FieldTypeEntry(type=spec.type, label=spec.label, category=spec.category) for spec in specs]
        for category, specs in grouped_field_types().items()
    }


@router.post("/{field_type}/default", response_model=FieldDefinition)
async def new_field(
    field_type: str,
    current_user: User = Depends(get_current_active_user)
):
    """Build a fresh field of the given type with default configuration."""
    return create_default(field_type)
