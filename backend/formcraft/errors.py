"""Domain errors raised by the form services.

Every error is an ``HTTPException`` so FastAPI turns it into a structured
JSON rejection of the form ``{"detail": {"code": ..., "message": ...}}``.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class FormError(HTTPException):
    """Base class for all form-domain rejections."""

    code: str = "FORM_ERROR"
    status_code_default: int = status.HTTP_400_BAD_REQUEST
    message_default: str = "Request rejected"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.message_default
        self.extra = extra
        detail: Dict[str, Any] = {"code": self.code, "message": self.message}
        detail.update(extra)
        super().__init__(status_code=self.status_code_default, detail=detail)

    def __str__(self) -> str:
        return self.message


class UnknownFieldType(FormError):
    code = "UNKNOWN_FIELD_TYPE"
    message_default = "Unknown field type"

    def __init__(self, field_type: Any):
        self.field_type = field_type
        super().__init__(f"Unknown field type: {field_type}", field_type=str(field_type))


class InvalidFieldDefinition(FormError):
    code = "INVALID_FIELD_DEFINITION"
    status_code_default = status.HTTP_422_UNPROCESSABLE_ENTITY
    message_default = "Invalid field definition"

    def __init__(self, message: str, field_id: Optional[str] = None):
        self.field_id = field_id
        super().__init__(message, field_id=field_id)


class FormNotPublished(FormError):
    code = "FORM_NOT_PUBLISHED"
    status_code_default = status.HTTP_404_NOT_FOUND
    message_default = "Form not available"


class FormExpired(FormError):
    code = "FORM_EXPIRED"
    status_code_default = status.HTTP_410_GONE
    message_default = "This form has expired"


class QuotaExceeded(FormError):
    code = "QUOTA_EXCEEDED"
    status_code_default = status.HTTP_403_FORBIDDEN
    message_default = "Plan limit reached"


class SubmissionLimitExceeded(QuotaExceeded):
    code = "SUBMISSION_LIMIT_EXCEEDED"
    message_default = "This form is not accepting more submissions"


class FormLimitExceeded(QuotaExceeded):
    code = "FORM_LIMIT_EXCEEDED"
    message_default = "Form limit reached for your plan. Upgrade to create more forms"


class RequiredFieldMissing(FormError):
    code = "REQUIRED_FIELD_MISSING"
    status_code_default = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, field_id: str, label: Optional[str] = None):
        self.field_id = field_id
        super().__init__(f"{label or field_id} is required", field_id=field_id)


class FileTooLarge(FormError):
    code = "FILE_TOO_LARGE"
    status_code_default = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE

    def __init__(self, max_file_size: float, field_id: Optional[str] = None):
        self.max_file_size = max_file_size
        super().__init__(
            f"File size must be less than {max_file_size:g}MB",
            max_file_size=max_file_size,
            field_id=field_id,
        )


class FileTypeNotAllowed(FormError):
    code = "FILE_TYPE_NOT_ALLOWED"
    status_code_default = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE

    def __init__(self, accepted_file_types: str, field_id: Optional[str] = None):
        self.accepted_file_types = accepted_file_types
        super().__init__(
            f"Please select a file of type: {accepted_file_types}",
            accepted_file_types=accepted_file_types,
            field_id=field_id,
        )


class InvalidSubmissionValue(FormError):
    code = "INVALID_SUBMISSION_VALUE"
    status_code_default = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, field_id: str, label: Optional[str] = None):
        self.field_id = field_id
        super().__init__(f"{label or field_id} has an invalid value", field_id=field_id)
