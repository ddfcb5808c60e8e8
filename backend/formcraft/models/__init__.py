"""SQLAlchemy models for the FormCraft backend."""

from formcraft.models.user import User, PlanType
from formcraft.models.form import Form, FormStatus, Submission, ViewRecord

__all__ = [
    "User",
    "PlanType",
    "Form",
    "FormStatus",
    "Submission",
    "ViewRecord",
]
