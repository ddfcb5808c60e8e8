import pytest

from formcraft.errors import InvalidFieldDefinition, UnknownFieldType
from formcraft.schemas.form import (
    FieldDefinition,
    FieldType,
    FileProperties,
    TextareaProperties,
)
from formcraft.services.field_types import (
    FIELD_TYPES,
    create_default,
    get_field_type,
    grouped_field_types,
    is_valid_field,
    parse_field,
    validate_field,
    validate_fields,
)


@pytest.mark.parametrize("field_type", list(FieldType))
def test_every_default_validates(field_type):
    field = create_default(field_type)
    assert field.type == field_type
    assert field.required is False
    assert is_valid_field(field)


def test_defaults_get_fresh_ids():
    ids = {create_default("text").id for _ in range(50)}
    assert len(ids) == 50
    assert all(len(i) == 8 for i in ids)


def test_unknown_type_is_rejected():
    with pytest.raises(UnknownFieldType) as exc:
        create_default("signature")
    assert exc.value.status_code == 400
    assert exc.value.detail["code"] == "UNKNOWN_FIELD_TYPE"


def test_file_default_properties():
    field = create_default(FieldType.FILE)
    assert isinstance(field.properties, FileProperties)
    assert field.properties.max_file_size == 5
    assert field.properties.accepted_file_types == ".pdf,.jpg,.jpeg,.png"
    assert field.properties.help_text == "Accepted file types: PDF, JPG, PNG"


def test_textarea_default_rows():
    field = create_default("textarea")
    assert isinstance(field.properties, TextareaProperties)
    assert field.properties.rows == 4
    assert field.placeholder == "Enter your message here"


def test_selection_defaults_have_three_options():
    for field_type in ("dropdown", "radio"):
        assert create_default(field_type).options == ["Option 1", "Option 2", "Option 3"]


def test_grouped_palette_preserves_registry_order():
    grouped = grouped_field_types()
    assert list(grouped) == ["basic", "selection", "advanced"]
    flattened = [spec.type for specs in grouped.values() for spec in specs]
    assert flattened == list(FIELD_TYPES)
    assert get_field_type("phone").label == "Phone"


@pytest.mark.parametrize("field_type", list(FieldType))
@pytest.mark.parametrize("options", [None, [], ["A"], ["A", "B"]])
def test_validity_depends_only_on_options_for_selection_types(field_type, options):
    field = FieldDefinition(id="f1", type=field_type, label="Question", options=options)
    expected = field_type not in (FieldType.DROPDOWN, FieldType.RADIO) or bool(options)
    assert is_valid_field(field) == expected


def test_blank_label_is_invalid():
    field = FieldDefinition(id="f1", type="text", label="   ")
    with pytest.raises(InvalidFieldDefinition):
        validate_field(field)


def test_duplicate_ids_are_rejected():
    fields = [
        FieldDefinition(id="same", type="text", label="One"),
        FieldDefinition(id="same", type="email", label="Two"),
    ]
    with pytest.raises(InvalidFieldDefinition) as exc:
        validate_fields(fields)
    assert exc.value.detail["field_id"] == "same"


def test_parse_field_coerces_properties_by_type():
    field = parse_field({
        "id": "cv",
        "type": "file",
        "label": "CV",
        "properties": {"max_file_size": 2, "accepted_file_types": ".pdf"},
    })
    assert isinstance(field.properties, FileProperties)
    assert field.properties.max_file_size == 2


def test_parse_field_unknown_and_malformed():
    with pytest.raises(UnknownFieldType):
        parse_field({"id": "x", "type": "rating", "label": "Stars"})
    with pytest.raises(InvalidFieldDefinition):
        parse_field({"type": "text", "label": "No id"})
