"""Submission Pydantic schemas."""

from datetime import datetime
from typing import Optional, Dict, Any

from pydantic import BaseModel


class FileDescriptor(BaseModel):
    """Metadata stored in place of an uploaded file."""
    name: str
    size: int
    mime_type: str = ""
    last_modified: Optional[int] = None
    url: Optional[str] = None


class SubmissionAccepted(BaseModel):
    """Response returned to the respondent after a successful submit."""
    message: str
    redirect_url: Optional[str] = None
    submission_id: Optional[str] = None


class SubmissionResponse(BaseModel):
    """Schema for the owner's view of a submission."""
    id: str
    form_id: str
    data: Dict[str, Any]
    created_at: datetime
    ip_address: Optional[str]
    user_agent: Optional[str]

    class Config:
        from_attributes = True
