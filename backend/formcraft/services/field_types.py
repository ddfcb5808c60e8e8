"""Field-type registry: palette entries, default constructors and schema checks."""

import secrets
import string
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from formcraft.errors import InvalidFieldDefinition, UnknownFieldType
from formcraft.schemas.form import (
    DEFAULT_ACCEPTED_FILE_TYPES,
    DEFAULT_MAX_FILE_SIZE_MB,
    SELECTION_TYPES,
    FieldDefinition,
    FieldProperties,
    FieldType,
    FileProperties,
    TextareaProperties,
)

_ID_ALPHABET = string.ascii_letters + string.digits + "_-"
DEFAULT_OPTIONS = ["Option 1", "Option 2", "Option 3"]


def new_field_id(length: int = 8) -> str:
    """Generate a short URL-safe field id."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class FieldTypeSpec:
    """Palette entry for one field type."""
    type: FieldType
    label: str
    category: str
    build: Callable[[str], FieldDefinition]

    def create_default(self) -> FieldDefinition:
        return self.build(new_field_id())


def _text_like(field_type: FieldType, label: str, placeholder: str):
    def build(field_id: str) -> FieldDefinition:
        return FieldDefinition(
            id=field_id,
            type=field_type,
            label=label,
            placeholder=placeholder,
            required=False,
            properties=FieldProperties(help_text=""),
        )
    return build


def _textarea(field_id: str) -> FieldDefinition:
    return FieldDefinition(
        id=field_id,
        type=FieldType.TEXTAREA,
        label="Long Text",
        placeholder="Enter your message here",
        required=False,
        properties=TextareaProperties(help_text="", rows=4),
    )


def _selection(field_type: FieldType, label: str, placeholder: Optional[str]):
    def build(field_id: str) -> FieldDefinition:
        return FieldDefinition(
            id=field_id,
            type=field_type,
            label=label,
            placeholder=placeholder,
            required=False,
            options=list(DEFAULT_OPTIONS),
            properties=FieldProperties(help_text=""),
        )
    return build


def _checkbox(field_id: str) -> FieldDefinition:
    return FieldDefinition(
        id=field_id,
        type=FieldType.CHECKBOX,
        label="I agree to the terms and conditions",
        required=False,
        properties=FieldProperties(help_text=""),
    )


def _file(field_id: str) -> FieldDefinition:
    return FieldDefinition(
        id=field_id,
        type=FieldType.FILE,
        label="Upload a file",
        required=False,
        properties=FileProperties(
            help_text="Accepted file types: PDF, JPG, PNG",
            max_file_size=DEFAULT_MAX_FILE_SIZE_MB,
            accepted_file_types=DEFAULT_ACCEPTED_FILE_TYPES,
        ),
    )


# Registry order is palette order
FIELD_TYPES: Dict[FieldType, FieldTypeSpec] = {
    spec.type: spec
    for spec in (
        FieldTypeSpec(FieldType.TEXT, "Text Input", "basic",
                      _text_like(FieldType.TEXT, "Text Input", "Enter text here")),
        FieldTypeSpec(FieldType.EMAIL, "Email", "basic",
                      _text_like(FieldType.EMAIL, "Email Address", "email@example.com")),
        FieldTypeSpec(FieldType.PHONE, "Phone", "basic",
                      _text_like(FieldType.PHONE, "Phone Number", "+1 (555) 000-0000")),
        FieldTypeSpec(FieldType.TEXTAREA, "Text Area", "basic", _textarea),
        FieldTypeSpec(FieldType.DROPDOWN, "Dropdown", "selection",
                      _selection(FieldType.DROPDOWN, "Select an option", "Choose from the list")),
        FieldTypeSpec(FieldType.CHECKBOX, "Checkbox", "selection", _checkbox),
        FieldTypeSpec(FieldType.RADIO, "Radio", "selection",
                      _selection(FieldType.RADIO, "Choose one option", None)),
        FieldTypeSpec(FieldType.FILE, "File Upload", "advanced", _file),
    )
}


def resolve_type(field_type: Union[str, FieldType, None]) -> FieldType:
    """Map an external type tag onto the closed enum."""
    try:
        return FieldType(field_type)
    except ValueError:
        raise UnknownFieldType(field_type)


def get_field_type(field_type: Union[str, FieldType]) -> FieldTypeSpec:
    return FIELD_TYPES[resolve_type(field_type)]


def create_default(field_type: Union[str, FieldType]) -> FieldDefinition:
    """Build a new field of the given type with a fresh id and default config."""
    return get_field_type(field_type).create_default()


def grouped_field_types() -> Dict[str, List[FieldTypeSpec]]:
    """Palette entries grouped by category, preserving registry order."""
    grouped: Dict[str, List[FieldTypeSpec]] = {}
    for spec in FIELD_TYPES.values():
        grouped.setdefault(spec.category, []).append(spec)
    return grouped


def parse_field(raw: Union[FieldDefinition, Mapping[str, Any]]) -> FieldDefinition:
    """
    Parse a stored field document.

    Raises UnknownFieldType for unrecognized tags and InvalidFieldDefinition
    for documents that do not fit the schema of their type.
    """
    if isinstance(raw, FieldDefinition):
        return raw
    resolve_type(raw.get("type"))
    try:
        return FieldDefinition.model_validate(dict(raw))
    except ValidationError as exc:
        raise InvalidFieldDefinition(
            f"Malformed field definition: {exc.errors()[0]['msg']}",
            field_id=raw.get("id"),
        )


def validate_field(field: FieldDefinition) -> FieldDefinition:
    """Reject definitions with a blank label or a selection type without options."""
    if not field.label or not field.label.strip():
        raise InvalidFieldDefinition("Field label is required", field_id=field.id)
    if field.type in SELECTION_TYPES and not field.options:
        raise InvalidFieldDefinition(
            f"{field.type.value.capitalize()} fields need at least one option",
            field_id=field.id,
        )
    return field


def is_valid_field(field: FieldDefinition) -> bool:
    try:
        validate_field(field)
    except InvalidFieldDefinition:
        return False
    return True


def validate_fields(fields: Iterable[FieldDefinition]) -> List[FieldDefinition]:
    """Validate each field and enforce id uniqueness within the form."""
    seen = set()
    validated = []
    for field in fields:
        validate_field(field)
        if field.id in seen:
            raise InvalidFieldDefinition(f"Duplicate field id: {field.id}", field_id=field.id)
        seen.add(field.id)
        validated.append(field)
    return validated
