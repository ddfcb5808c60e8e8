import pytest

from formcraft.errors import RequiredFieldMissing
from formcraft.services.file_check import FileHandle
from formcraft.services.renderer import (
    FormSession,
    SessionClosed,
    SessionState,
    SubmissionResult,
    Widget,
    collect_payload,
    render_field,
    render_form,
    update_values,
)

FIELDS = [
    {"id": "name", "type": "text", "label": "Name", "required": True, "placeholder": "Jane"},
    {"id": "phone", "type": "phone", "label": "Phone"},
    {"id": "bio", "type": "textarea", "label": "Bio", "properties": {"rows": 6}},
    {"id": "ticket", "type": "dropdown", "label": "Ticket", "options": ["GA", "VIP"]},
    {"id": "agree", "type": "checkbox", "label": "I agree"},
    {"id": "rating", "type": "radio", "label": "Rating", "options": ["Good", "Bad"]},
    {"id": "cv", "type": "file", "label": "CV",
     "properties": {"max_file_size": 1, "accepted_file_types": ".pdf"}},
]


def test_rendering_is_idempotent():
    values = {"name": "Ada", "ticket": "VIP", "agree": True}
    assert render_form(FIELDS, values) == render_form(FIELDS, values)


def test_widgets_follow_field_types():
    widgets = [r.widget for r in render_form(FIELDS)]
    assert widgets == [
        Widget.TEXT, Widget.TEL, Widget.TEXTAREA, Widget.SELECT,
        Widget.CHECKBOX, Widget.RADIO, Widget.FILE,
    ]


def test_dropdown_starts_with_empty_placeholder_choice():
    rendered = render_field(FIELDS[3])
    assert rendered.choices[0].value == ""
    assert rendered.choices[0].label == "Select an option"
    assert rendered.choices[0].selected
    assert [c.value for c in rendered.choices[1:]] == ["GA", "VIP"]


def test_radio_choices_share_the_field_name():
    rendered = render_field(FIELDS[5], "Bad")
    assert rendered.name == "rating"
    assert [c.selected for c in rendered.choices] == [False, True]


def test_checkbox_defaults_to_unchecked():
    assert render_field(FIELDS[4]).value is False
    assert render_field(FIELDS[4], True).value is True


def test_textarea_rows_and_file_constraints():
    assert render_field(FIELDS[2]).rows == 6
    file_field = render_field(FIELDS[6])
    assert file_field.accept == ".pdf"
    assert file_field.max_file_size == 1


def test_unknown_type_renders_nothing():
    assert render_field({"id": "x", "type": "signature", "label": "Sign"}) is None
    rendered = render_form(FIELDS + [{"id": "x", "type": "signature", "label": "Sign"}])
    assert len(rendered) == len(FIELDS)


def test_update_values_returns_new_mapping():
    values = {}
    updated = update_values(values, FIELDS[3], "VIP")
    assert values == {}
    assert updated == {"ticket": "VIP"}
    assert update_values(updated, FIELDS[3], "Backstage") == {}
    assert update_values({}, FIELDS[4], 1) == {"agree": True}


def test_collect_payload_turns_files_into_descriptors():
    handle = FileHandle(name="cv.pdf", size=10, mime_type="application/pdf", last_modified=5)
    payload = collect_payload(FIELDS, {"name": "Ada", "cv": handle})
    assert payload["cv"] == {"name": "cv.pdf", "size": 10, "mime_type": "application/pdf", "last_modified": 5}
    assert payload["agree"] is False


def _accepting(payload):
    return SubmissionResult(message="Thanks!", redirect_url="https://example.com/done")


def test_session_success_with_redirect_delay():
    session = FormSession(FIELDS, _accepting)
    session.set_value("name", "Ada")
    assert session.submit() == SessionState.SUBMITTED
    assert session.success_message == "Thanks!"
    assert session.redirect_after == 2.0
    with pytest.raises(SessionClosed):
        session.set_value("name", "Bob")


def test_session_error_keeps_values_and_returns_to_editing():
    def rejecting(payload):
        raise RequiredFieldMissing("name", "Name")

    session = FormSession(FIELDS, rejecting)
    session.set_value("phone", "555")
    assert session.submit() == SessionState.ERROR
    assert session.error == "Name is required"
    assert session.values == {"phone": "555"}

    session.set_value("name", "Ada")
    assert session.state == SessionState.EDITING
    assert session.values == {"phone": "555", "name": "Ada"}


def test_session_rejects_bad_file_locally():
    session = FormSession(FIELDS, _accepting)
    too_big = FileHandle(name="cv.pdf", size=2 * 1024 * 1024, mime_type="application/pdf")
    assert session.select_file("cv", too_big) == "File size must be less than 1MB"
    assert "cv" not in session.values

    wrong_type = FileHandle(name="cv.docx", size=100, mime_type="application/msword")
    assert session.select_file("cv", wrong_type) == "Please select a file of type: .pdf"

    good = FileHandle(name="cv.pdf", size=100, mime_type="application/pdf")
    assert session.select_file("cv", good) is None
    assert session.values["cv"] == good


def test_rejected_file_keeps_earlier_selection():
    session = FormSession(FIELDS, _accepting)
    good = FileHandle(name="cv.pdf", size=100, mime_type="application/pdf")
    assert session.select_file("cv", good) is None

    wrong_type = FileHandle(name="cv.docx", size=100, mime_type="application/msword")
    assert session.select_file("cv", wrong_type) == "Please select a file of type: .pdf"
    assert session.values["cv"] == good
    assert session.payload()["cv"]["name"] == "cv.pdf"


def test_unexpected_submit_failure_moves_to_error():
    def broken(payload):
        raise ConnectionError("network down")

    session = FormSession(FIELDS, broken)
    session.set_value("name", "Ada")
    assert session.submit() == SessionState.ERROR
    assert session.error == "Failed to submit form"
    assert session.values == {"name": "Ada"}

    session.set_value("name", "Ada L")
    assert session.state == SessionState.EDITING


def test_no_redirect_without_url():
    session = FormSession(FIELDS, lambda payload: SubmissionResult(message="Done"))
    session.submit()
    assert session.redirect_after is None
