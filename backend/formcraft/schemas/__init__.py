"""Pydantic schemas for request/response validation."""

from formcraft.schemas.user import (
    UserResponse,
    TokenData,
)
from formcraft.schemas.form import (
    FieldType,
    FieldProperties,
    TextareaProperties,
    FileProperties,
    FieldDefinition,
    FormSettings,
    FormTheme,
    FormDefinition,
    FormCreate,
    FormUpdate,
    FormResponse,
    FormListResponse,
    PublicFormResponse,
    FormTemplateResponse,
)
from formcraft.schemas.submission import (
    FileDescriptor,
    SubmissionAccepted,
    SubmissionResponse,
)
from formcraft.schemas.analytics import (
    DailyPoint,
    AnalyticsSummary,
    AnalyticsResponse,
    DashboardStats,
)

__all__ = [
    # User
    "UserResponse",
    "TokenData",
    # Form
    "FieldType",
    "FieldProperties",
    "TextareaProperties",
    "FileProperties",
    "FieldDefinition",
    "FormSettings",
    "FormTheme",
    "FormDefinition",
    "FormCreate",
    "FormUpdate",
    "FormResponse",
    "FormListResponse",
    "PublicFormResponse",
    "FormTemplateResponse",
    # Submission
    "FileDescriptor",
    "SubmissionAccepted",
    "SubmissionResponse",
    # Analytics
    "DailyPoint",
    "AnalyticsSummary",
    "AnalyticsResponse",
    "DashboardStats",
]
