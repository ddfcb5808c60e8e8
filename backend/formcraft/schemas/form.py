"""Form definition Pydantic schemas."""

from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Optional, Dict, Any, List, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from formcraft.models.form import FormStatus


class FieldType(str, PyEnum):
    """The closed set of supported field types."""
    TEXT = "text"
    EMAIL = "email"
    PHONE = "phone"
    TEXTAREA = "textarea"
    DROPDOWN = "dropdown"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    FILE = "file"

    def __str__(self) -> str:
        return self.value


TEXT_LIKE_TYPES = frozenset({FieldType.TEXT, FieldType.EMAIL, FieldType.PHONE, FieldType.TEXTAREA})
SELECTION_TYPES = frozenset({FieldType.DROPDOWN, FieldType.RADIO})

DEFAULT_ACCEPTED_FILE_TYPES = ".pdf,.jpg,.jpeg,.png"
DEFAULT_MAX_FILE_SIZE_MB = 5


class FieldProperties(BaseModel):
    """Per-type configuration shared by every field type."""
    model_config = ConfigDict(extra="allow")

    help_text: str = ""


class TextareaProperties(FieldProperties):
    rows: int = Field(4, ge=1, le=50)


class FileProperties(FieldProperties):
    max_file_size: float = Field(DEFAULT_MAX_FILE_SIZE_MB, gt=0, description="Maximum size in MB")
    accepted_file_types: str = Field(
        "",
        description="Comma separated extensions (.pdf), MIME types (image/png, image/*) or keywords (pdf)"
    )


PROPERTIES_BY_TYPE = {
    FieldType.TEXTAREA: TextareaProperties,
    FieldType.FILE: FileProperties,
}


class FieldDefinition(BaseModel):
    """Schema for a single configurable input within a form."""
    id: str = Field(..., min_length=1, max_length=64)
    type: FieldType
    label: str = ""
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = Field(None, description="Choices for dropdown and radio fields")
    properties: Union[TextareaProperties, FileProperties, FieldProperties] = Field(default_factory=FieldProperties)

    @model_validator(mode="before")
    @classmethod
    def _typed_properties(cls, data: Any) -> Any:
        """Coerce the raw properties mapping into the record for this field type."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        try:
            field_type = FieldType(data.get("type"))
        except ValueError:
            return data
        props_cls = PROPERTIES_BY_TYPE.get(field_type, FieldProperties)
        props = data.get("properties") or {}
        if isinstance(props, BaseModel):
            props = props.model_dump()
        data["properties"] = props_cls.model_validate(props)
        return data


class FormSettings(BaseModel):
    """Owner-only settings; never exposed on public endpoints."""
    success_message: str = "Thank you for your submission!"
    redirect_url: Optional[str] = None
    captcha_enabled: bool = False
    email_notifications: bool = False
    notification_emails: List[EmailStr] = []

    @field_validator("redirect_url", mode="before")
    @classmethod
    def _blank_redirect(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class FormTheme(BaseModel):
    """Cosmetic theme carried as-is to the renderer."""
    model_config = ConfigDict(extra="allow")

    primary_color: str = "#6366f1"
    background_color: str = "#ffffff"
    text_color: str = "#000000"
    page_background_color: str = "#f8fafc"
    background_image: Optional[str] = None
    font_family: Optional[str] = None


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class FormDefinition(BaseModel):
    """
    The aggregate a respondent fills out.

    ``fields`` holds the stored field documents in render order; they are
    parsed per item by the registry so unknown types degrade gracefully.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: int
    title: str
    description: Optional[str] = None
    status: FormStatus = FormStatus.DRAFT
    fields: List[Dict[str, Any]] = []
    settings: FormSettings = Field(default_factory=FormSettings)
    theme: FormTheme = Field(default_factory=FormTheme)
    expires_at: Optional[datetime] = None
    view_count: int = 0
    created_at: Optional[datetime] = None

    @field_validator("settings", "theme", mode="before")
    @classmethod
    def _empty_document(cls, value: Any) -> Any:
        return value or {}

    @field_validator("expires_at", mode="after")
    @classmethod
    def _naive_expiry(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _to_naive_utc(value)


class FormCreate(BaseModel):
    """Schema for creating a new form."""
    title: str = Field(..., min_length=1, max_length=512)
    description: Optional[str] = None
    template_id: Optional[str] = Field(None, description="Starter template to copy fields from")
    fields: Optional[List[FieldDefinition]] = None
    settings: Optional[FormSettings] = None
    theme: Optional[FormTheme] = None
    expires_at: Optional[datetime] = None

    @field_validator("expires_at", mode="after")
    @classmethod
    def _naive_expiry(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _to_naive_utc(value)


class FormUpdate(BaseModel):
    """Schema for partially updating a form."""
    title: Optional[str] = Field(None, min_length=1, max_length=512)
    description: Optional[str] = None
    status: Optional[FormStatus] = None
    fields: Optional[List[FieldDefinition]] = None
    settings: Optional[FormSettings] = None
    theme: Optional[FormTheme] = None
    expires_at: Optional[datetime] = None

    @field_validator("expires_at", mode="after")
    @classmethod
    def _naive_expiry(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _to_naive_utc(value)


class FormResponse(BaseModel):
    """Schema for the owner's view of a form."""
    id: str
    owner_id: int
    title: str
    description: Optional[str]
    status: FormStatus
    fields: List[Dict[str, Any]]
    settings: Dict[str, Any]
    theme: Dict[str, Any]
    expires_at: Optional[datetime]
    view_count: int
    share_url: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class FormListResponse(BaseModel):
    """Schema for form list responses."""
    id: str
    title: str
    status: FormStatus
    field_count: int
    view_count: int
    submission_count: int
    expires_at: Optional[datetime]
    created_at: datetime
    updated_at: Optional[datetime]


class PublicFormResponse(BaseModel):
    """Public wire shape: no settings, no owner identity."""
    id: str
    title: str
    description: Optional[str]
    fields: List[Dict[str, Any]]
    theme: Dict[str, Any]


class FormTemplateResponse(BaseModel):
    """Starter template offered when creating a form."""
    id: str
    name: str
    description: str
    fields: List[Dict[str, Any]]
