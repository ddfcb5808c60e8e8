"""
Submission validation.

The single authoritative gate before a submission is persisted. The
renderer's file pre-check is advisory; everything is checked again here.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional

from formcraft.errors import (
    FormExpired,
    FormNotPublished,
    InvalidSubmissionValue,
    RequiredFieldMissing,
    SubmissionLimitExceeded,
    UnknownFieldType,
)
from formcraft.models.form import FormStatus
from formcraft.schemas.form import (
    SELECTION_TYPES,
    TEXT_LIKE_TYPES,
    FieldDefinition,
    FieldType,
    FileProperties,
    FormDefinition,
)
from formcraft.services.field_types import parse_field
from formcraft.services.file_check import check_file

_TRUTHY = {"true", "on", "yes", "1", "checked"}


@dataclass
class ValidatedSubmission:
    data: Dict[str, Any]
    message: str
    redirect_url: Optional[str] = None


def coerce_checkbox(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    if isinstance(value, (int, float)):
        return value != 0
    # Lists (multi-select checkboxes) pass through
    return value


def normalize_file(value: Any, field_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Reduce a browser or storage file value to the stored descriptor."""
    if not isinstance(value, Mapping) or not value.get("name"):
        return None
    try:
        size = int(value.get("size") or 0)
    except (TypeError, ValueError):
        raise InvalidSubmissionValue(field_id) from None
    if size < 0:
        raise InvalidSubmissionValue(field_id)
    descriptor = {
        "name": str(value["name"]),
        "size": size,
        "mime_type": str(value.get("mime_type") or value.get("mimeType") or value.get("type") or ""),
        "last_modified": value.get("last_modified", value.get("lastModified")),
    }
    if value.get("url"):
        descriptor["url"] = str(value["url"])
    return descriptor


def coerce_value(field: FieldDefinition, value: Any) -> Any:
    if value is None:
        return None
    if field.type in TEXT_LIKE_TYPES:
        return value if isinstance(value, str) else str(value)
    if field.type == FieldType.CHECKBOX:
        return coerce_checkbox(value)
    if field.type in SELECTION_TYPES:
        # Only one of the configured options counts as a selection
        return value if value in (field.options or []) else None
    if field.type == FieldType.FILE:
        return normalize_file(value, field.id)
    return value


def is_present(field_type: Optional[FieldType], value: Any) -> bool:
    """Whether a value counts as answered for a required field of this type."""
    if value is None:
        return False
    if field_type in TEXT_LIKE_TYPES or field_type in SELECTION_TYPES:
        return isinstance(value, str) and bool(value.strip())
    if field_type == FieldType.CHECKBOX:
        return value is True or (isinstance(value, list) and len(value) > 0)
    if field_type == FieldType.FILE:
        return isinstance(value, Mapping) and bool(value.get("name"))
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, dict)):
        return len(value) > 0
    return True


def validate_submission(
    form: FormDefinition,
    payload: Mapping[str, Any],
    now: Optional[datetime] = None,
    is_over_limit: Optional[Callable[[], bool]] = None,
) -> ValidatedSubmission:
    """
    Check a candidate payload against the form and return the normalized data.

    Raises FormNotPublished, FormExpired, SubmissionLimitExceeded,
    RequiredFieldMissing, InvalidSubmissionValue, FileTooLarge or
    FileTypeNotAllowed.
    """
    if form.status != FormStatus.PUBLISHED:
        raise FormNotPublished()

    now = now or datetime.utcnow()
    if form.expires_at is not None and now > form.expires_at:
        raise FormExpired()

    if is_over_limit is not None and is_over_limit():
        raise SubmissionLimitExceeded()

    # Unknown keys are carried through unchanged
    data: Dict[str, Any] = dict(payload)

    for raw in form.fields:
        try:
            field = parse_field(raw)
        except UnknownFieldType:
            field_id = raw.get("id")
            if raw.get("required") and not is_present(None, payload.get(field_id)):
                raise RequiredFieldMissing(field_id, raw.get("label"))
            continue

        value = coerce_value(field, payload.get(field.id))
        if value is None:
            data.pop(field.id, None)
        elif field.id in data:
            data[field.id] = value

        if field.required and not is_present(field.type, value):
            raise RequiredFieldMissing(field.id, field.label)

        if field.type == FieldType.FILE and value is not None:
            props = field.properties
            if isinstance(props, FileProperties):
                check_file(
                    value["name"],
                    value["size"],
                    value["mime_type"],
                    props.accepted_file_types,
                    props.max_file_size,
                    field_id=field.id,
                )

    return ValidatedSubmission(
        data=data,
        message=form.settings.success_message,
        redirect_url=form.settings.redirect_url,
    )
