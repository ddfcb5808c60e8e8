"""
Schema-driven form rendering.

Maps each field definition and its current value to an input affordance,
applies value updates, and collects a submission candidate. Everything here
is pure except ``FormSession``, which tracks one respondent's session.
"""

import logging
from enum import Enum as PyEnum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel

from formcraft.config import get_settings
from formcraft.errors import FormError, InvalidFieldDefinition, UnknownFieldType
from formcraft.schemas.form import (
    DEFAULT_MAX_FILE_SIZE_MB,
    FieldDefinition,
    FieldType,
    FileProperties,
    TextareaProperties,
)
from formcraft.services.field_types import parse_field
from formcraft.services.file_check import FileHandle, check_file_handle

logger = logging.getLogger(__name__)

FieldLike = Union[FieldDefinition, Mapping[str, Any]]

SUBMIT_FAILED_MESSAGE = "Failed to submit form"


class Widget(str, PyEnum):
    TEXT = "text"
    EMAIL = "email"
    TEL = "tel"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    FILE = "file"


class Choice(BaseModel):
    value: str
    label: str
    selected: bool = False


class RenderedField(BaseModel):
    """A renderable input for one field."""
    field_id: str
    widget: Widget
    name: str
    label: str
    required: bool
    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    value: Any = None
    choices: List[Choice] = []
    rows: Optional[int] = None
    accept: Optional[str] = None
    max_file_size: Optional[float] = None


class SubmissionResult(BaseModel):
    """What the server answers after an accepted submission."""
    message: str
    redirect_url: Optional[str] = None


def _base(field: FieldDefinition, widget: Widget, value: Any) -> RenderedField:
    return RenderedField(
        field_id=field.id,
        widget=widget,
        name=field.id,
        label=field.label,
        required=field.required,
        placeholder=field.placeholder or None,
        help_text=field.properties.help_text or None,
        value=value,
    )


def _render_single_line(widget: Widget):
    def render(field: FieldDefinition, value: Any) -> RenderedField:
        return _base(field, widget, value if isinstance(value, str) else "")
    return render


def _render_textarea(field: FieldDefinition, value: Any) -> RenderedField:
    rendered = _base(field, Widget.TEXTAREA, value if isinstance(value, str) else "")
    props = field.properties
    rendered.rows = props.rows if isinstance(props, TextareaProperties) else 4
    return rendered


def _render_dropdown(field: FieldDefinition, value: Any) -> RenderedField:
    options = field.options or []
    current = value if value in options else ""
    rendered = _base(field, Widget.SELECT, current)
    # The empty placeholder choice always comes first
    rendered.choices = [Choice(value="", label=field.placeholder or "Select an option", selected=current == "")]
    rendered.choices.extend(Choice(value=o, label=o, selected=o == current) for o in options)
    return rendered


def _render_checkbox(field: FieldDefinition, value: Any) -> RenderedField:
    return _base(field, Widget.CHECKBOX, value is True)


def _render_radio(field: FieldDefinition, value: Any) -> RenderedField:
    options = field.options or []
    current = value if value in options else None
    rendered = _base(field, Widget.RADIO, current)
    rendered.choices = [Choice(value=o, label=o, selected=o == current) for o in options]
    return rendered


def _render_file(field: FieldDefinition, value: Any) -> RenderedField:
    props = field.properties
    if isinstance(props, FileProperties):
        accept, max_size = props.accepted_file_types, props.max_file_size
    else:
        accept, max_size = "", DEFAULT_MAX_FILE_SIZE_MB
    if isinstance(value, FileHandle):
        value = value.to_descriptor()
    rendered = _base(field, Widget.FILE, value if isinstance(value, dict) else None)
    rendered.accept = accept or None
    rendered.max_file_size = max_size
    return rendered


RENDERERS: Dict[FieldType, Callable[[FieldDefinition, Any], RenderedField]] = {
    FieldType.TEXT: _render_single_line(Widget.TEXT),
    FieldType.EMAIL: _render_single_line(Widget.EMAIL),
    FieldType.PHONE: _render_single_line(Widget.TEL),
    FieldType.TEXTAREA: _render_textarea,
    FieldType.DROPDOWN: _render_dropdown,
    FieldType.CHECKBOX: _render_checkbox,
    FieldType.RADIO: _render_radio,
    FieldType.FILE: _render_file,
}


def _as_field(field: FieldLike) -> Optional[FieldDefinition]:
    try:
        return parse_field(field)
    except (UnknownFieldType, InvalidFieldDefinition) as exc:
        logger.debug("Skipping unrenderable field: %s", exc.message)
        return None


def render_field(field: FieldLike, value: Any = None) -> Optional[RenderedField]:
    """Render one field; unknown or malformed fields render as nothing."""
    parsed = _as_field(field)
    if parsed is None:
        return None
    renderer = RENDERERS.get(parsed.type)
    if renderer is None:
        return None
    return renderer(parsed, value)


def render_form(fields: Sequence[FieldLike], values: Optional[Mapping[str, Any]] = None) -> List[RenderedField]:
    """Render every renderable field in order."""
    values = values or {}
    rendered = []
    for field in fields:
        parsed = _as_field(field)
        if parsed is None:
            continue
        item = render_field(parsed, values.get(parsed.id))
        if item is not None:
            rendered.append(item)
    return rendered


def coerce_value(field: FieldDefinition, raw: Any) -> Any:
    """Apply the type's update rule to a raw input value."""
    if field.type == FieldType.CHECKBOX:
        return bool(raw)
    if field.type in (FieldType.DROPDOWN, FieldType.RADIO):
        return raw if raw in (field.options or []) else None
    if field.type == FieldType.FILE:
        return raw if isinstance(raw, FileHandle) else None
    if raw is None:
        return ""
    return raw if isinstance(raw, str) else str(raw)


def update_values(values: Mapping[str, Any], field: FieldLike, raw: Any) -> Dict[str, Any]:
    """Return a new value mapping with the field's value replaced."""
    parsed = _as_field(field)
    updated = dict(values)
    if parsed is None:
        return updated
    value = coerce_value(parsed, raw)
    if value is None:
        updated.pop(parsed.id, None)
    else:
        updated[parsed.id] = value
    return updated


def collect_payload(fields: Sequence[FieldLike], values: Mapping[str, Any]) -> Dict[str, Any]:
    """Flatten current values into the submission candidate keyed by field id."""
    payload: Dict[str, Any] = {}
    for key, value in values.items():
        payload[key] = value.to_descriptor() if isinstance(value, FileHandle) else value
    for field in fields:
        parsed = _as_field(field)
        if parsed is not None and parsed.type == FieldType.CHECKBOX:
            payload.setdefault(parsed.id, False)
    return payload


class SessionState(str, PyEnum):
    EDITING = "editing"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    ERROR = "error"


class SessionClosed(RuntimeError):
    """Raised when a finished session is asked to change."""


class FormSession:
    """
    One respondent filling out one form.

    ``submit_fn`` sends the payload and returns a SubmissionResult or raises.
    A FormError message is shown as is; any other failure gets a generic
    message. A failed submit leaves the entered values untouched.
    """

    def __init__(
        self,
        fields: Sequence[FieldLike],
        submit_fn: Callable[[Dict[str, Any]], SubmissionResult],
        redirect_delay_seconds: Optional[float] = None,
    ):
        self.fields = list(fields)
        self.submit_fn = submit_fn
        if redirect_delay_seconds is None:
            redirect_delay_seconds = get_settings().redirect_delay_seconds
        self.redirect_delay_seconds = redirect_delay_seconds
        self.values: Dict[str, Any] = {}
        self.state = SessionState.EDITING
        self.error: Optional[str] = None
        self.result: Optional[SubmissionResult] = None

    def _field(self, field_id: str) -> Optional[FieldDefinition]:
        for field in self.fields:
            parsed = _as_field(field)
            if parsed is not None and parsed.id == field_id:
                return parsed
        return None

    def _ensure_open(self) -> None:
        if self.state == SessionState.SUBMITTED:
            raise SessionClosed("Form has already been submitted")
        if self.state == SessionState.ERROR:
            self.state = SessionState.EDITING

    def set_value(self, field_id: str, raw: Any) -> None:
        self._ensure_open()
        field = self._field(field_id)
        if field is None:
            return
        self.values = update_values(self.values, field, raw)

    def select_file(self, field_id: str, file: FileHandle) -> Optional[str]:
        """
        Run the local pre-check on a selected file.

        Returns None when accepted, otherwise a message for the respondent.
        A rejected selection is discarded and any earlier file is kept.
        """
        self._ensure_open()
        field = self._field(field_id)
        if field is None or field.type != FieldType.FILE:
            return None
        props = field.properties
        accepted = props.accepted_file_types if isinstance(props, FileProperties) else ""
        max_size = props.max_file_size if isinstance(props, FileProperties) else None
        try:
            check_file_handle(file, accepted, max_size, field_id=field.id)
        except FormError as exc:
            return exc.message
        self.values = update_values(self.values, field, file)
        return None

    def render(self) -> List[RenderedField]:
        return render_form(self.fields, self.values)

    def payload(self) -> Dict[str, Any]:
        return collect_payload(self.fields, self.values)

    def submit(self) -> SessionState:
        self._ensure_open()
        self.state = SessionState.SUBMITTING
        try:
            self.result = self.submit_fn(self.payload())
        except FormError as exc:
            self.state = SessionState.ERROR
            self.error = exc.message
            return self.state
        except Exception:
            logger.exception("Form submission failed")
            self.state = SessionState.ERROR
            self.error = SUBMIT_FAILED_MESSAGE
            return self.state
        self.state = SessionState.SUBMITTED
        self.error = None
        return self.state

    @property
    def success_message(self) -> Optional[str]:
        return self.result.message if self.result else None

    @property
    def redirect_after(self) -> Optional[float]:
        """Seconds to wait before navigating to the redirect url, if any."""
        if self.state == SessionState.SUBMITTED and self.result and self.result.redirect_url:
            return self.redirect_delay_seconds
        return None
