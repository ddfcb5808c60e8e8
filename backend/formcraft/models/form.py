"""Form, submission and view-record models."""

import uuid
from datetime import datetime
from typing import Optional, List, Dict, Any
from enum import Enum as PyEnum

from sqlalchemy import String, Text, DateTime, ForeignKey, JSON, Enum, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from formcraft.database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


def _clip_to_column(record: Any, key: str, value: Optional[str]) -> Optional[str]:
    # Request headers are client-controlled and may exceed the column width
    length = record.__table__.c[key].type.length
    if value is None or length is None:
        return value
    return value[:length]


class FormStatus(str, PyEnum):
    """Form lifecycle states."""
    DRAFT = "draft"
    PUBLISHED = "published"


class Form(Base):
    """
    Form is the definition an owner edits and respondents fill out.

    Fields, settings and theme are stored as JSON documents; their shape
    is enforced by the Pydantic schemas in ``formcraft.schemas.form``.
    """

    __tablename__ = "forms"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)

    # Owner
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )

    # Form metadata
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[FormStatus] = mapped_column(
        Enum(FormStatus, values_callable=lambda x: [e.value for e in x]),
        default=FormStatus.DRAFT,
        nullable=False,
        index=True
    )

    # Ordered field definitions, settings and theme
    fields: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    settings: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    theme: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Stops accepting submissions once passed (naive UTC)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Only incremented through FormService.record_view
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        onupdate=datetime.utcnow,
        nullable=True
    )

    # Relationships
    owner: Mapped["User"] = relationship("User", back_populates="forms")
    submissions: Mapped[List["Submission"]] = relationship(
        "Submission",
        back_populates="form",
        cascade="all, delete-orphan",
        order_by="Submission.created_at"
    )
    views: Mapped[List["ViewRecord"]] = relationship(
        "ViewRecord",
        back_populates="form",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Form(id={self.id}, title='{self.title}', status='{self.status}')>"


class Submission(Base):
    """
    Submission is one respondent's validated payload.

    ``data`` maps field ids to values; provenance columns are set once
    at creation and never updated.
    """

    __tablename__ = "submissions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)

    form_id: Mapped[str] = mapped_column(
        ForeignKey("forms.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    data: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    geo_location: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    form: Mapped["Form"] = relationship("Form", back_populates="submissions")

    @validates("ip_address", "user_agent")
    def _clip_request_metadata(self, key: str, value: Optional[str]) -> Optional[str]:
        return _clip_to_column(self, key, value)

    def __repr__(self) -> str:
        return f"<Submission(id={self.id}, form_id={self.form_id})>"


class ViewRecord(Base):
    """ViewRecord is an append-only impression of a published form."""

    __tablename__ = "view_records"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    form_id: Mapped[str] = mapped_column(
        ForeignKey("forms.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    timestamp: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    geo_location: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    referrer: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    form: Mapped["Form"] = relationship("Form", back_populates="views")

    @validates("ip_address", "user_agent", "referrer")
    def _clip_request_metadata(self, key: str, value: Optional[str]) -> Optional[str]:
        return _clip_to_column(self, key, value)

    def __repr__(self) -> str:
        return f"<ViewRecord(id={self.id}, form_id={self.form_id})>"
