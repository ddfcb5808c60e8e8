"""Service layer for business logic."""

from formcraft.services.auth import AuthService
from formcraft.services.templates import TemplateService
from formcraft.services.form import FormService
from formcraft.services.submission import SubmissionService
from formcraft.services.analytics import AnalyticsService
from formcraft.services.quota import QuotaService
from formcraft.services.notifications import NotificationService
from formcraft.services.storage import FileStorageService

__all__ = [
    "AuthService",
    "TemplateService",
    "FormService",
    "SubmissionService",
    "AnalyticsService",
    "QuotaService",
    "NotificationService",
    "FileStorageService",
]
