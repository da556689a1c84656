import pytest

from app.core.form_validation import (
    INVALID_EMAIL_MESSAGE,
    INVALID_NUMBER_MESSAGE,
    REQUIRED_MESSAGE,
    preview_warnings,
    validate_field,
    validate_form,
)
from app.schemas.forms import FieldDefinition, FieldType, coerce_field_definitions


def _field(**kw) -> FieldDefinition:
    kw.setdefault("id", "f1")
    return FieldDefinition(**kw)


def test_required_email_field_messages():
    field = _field(type="email", required=True)
    assert validate_field(field, "") == REQUIRED_MESSAGE
    assert validate_field(field, None) == REQUIRED_MESSAGE
    assert validate_field(field, "not-an-email") == INVALID_EMAIL_MESSAGE
    assert validate_field(field, "a@b.com") is None


@pytest.mark.parametrize("value", ["a@b", "a b@c.com", "a@@b.com", "@b.com", "a@b."])
def test_email_shape_rejected(value):
    assert validate_field(_field(type="email"), value) == INVALID_EMAIL_MESSAGE


def test_optional_email_left_blank_is_valid():
    field = _field(type="email")
    assert validate_field(field, "") is None
    assert validate_field(field, None) is None


def test_email_checked_as_typed_without_trimming():
    field = _field(type="email")
    assert validate_field(field, " a@b.com ") == INVALID_EMAIL_MESSAGE
    assert validate_field(field, "   ") == INVALID_EMAIL_MESSAGE
    assert validate_field(_field(type="email", required=True), "   ") == REQUIRED_MESSAGE


def test_number_bounds():
    field = _field(type="number", validation={"min": 0, "max": 100})
    assert validate_field(field, "150") == "Maximum value is 100"
    assert validate_field(field, "-1") == "Minimum value is 0"
    assert validate_field(field, "50") is None
    assert validate_field(field, 0) is None
    assert validate_field(field, "100") is None
    assert validate_field(field, 100.5) == "Maximum value is 100"


def test_number_not_numeric():
    field = _field(type="number")
    assert validate_field(field, "abc") == INVALID_NUMBER_MESSAGE
    assert validate_field(field, "1_000") == INVALID_NUMBER_MESSAGE
    assert validate_field(field, "nan") == INVALID_NUMBER_MESSAGE
    assert validate_field(field, "Infinity") == INVALID_NUMBER_MESSAGE
    assert validate_field(field, "0x1A") == INVALID_NUMBER_MESSAGE
    assert validate_field(field, "   ") == INVALID_NUMBER_MESSAGE
    assert validate_field(field, float("inf")) == INVALID_NUMBER_MESSAGE
    assert validate_field(field, True) == INVALID_NUMBER_MESSAGE
    assert validate_field(field, " 12.5 ") is None
    assert validate_field(field, "1e3") is None


def test_fractional_bound_message_keeps_decimals():
    field = _field(type="number", validation={"min": 2.5})
    assert validate_field(field, "2") == "Minimum value is 2.5"


def test_non_numeric_bound_is_ignored():
    field = _field(type="number", validation={"min": "abc", "max": "10"})
    assert field.validation.min is None
    assert field.validation.max == 10
    assert validate_field(field, "-500") is None
    assert validate_field(field, "11") == "Maximum value is 10"


def test_zero_counts_as_an_answer_for_required_number():
    field = _field(type="number", required=True)
    assert validate_field(field, 0) is None
    assert validate_field(field, "0") is None


def test_required_checkbox_group_needs_a_selection():
    field = _field(type="checkbox", required=True, options=["A", "B"])
    assert validate_field(field, []) == REQUIRED_MESSAGE
    assert validate_field(field, None) == REQUIRED_MESSAGE
    assert validate_field(field, "A") == REQUIRED_MESSAGE
    assert validate_field(field, ["A"]) is None


def test_required_single_checkbox():
    field = _field(type="checkbox", required=True)
    assert validate_field(field, False) == REQUIRED_MESSAGE
    assert validate_field(field, None) == REQUIRED_MESSAGE
    assert validate_field(field, True) is None


@pytest.mark.parametrize("ftype", ["text", "textarea", "select", "radio", "date"])
def test_plain_types_only_check_required(ftype):
    field = _field(type=ftype, required=True)
    assert validate_field(field, "") == REQUIRED_MESSAGE
    assert validate_field(field, "   ") == REQUIRED_MESSAGE
    assert validate_field(field, "anything at all") is None


def test_validate_form_reports_every_failure():
    fields = [
        _field(id="name", type="text", required=True),
        _field(id="email", type="email", required=True),
        _field(id="age", type="number", validation={"max": 120}),
        _field(id="note", type="textarea"),
    ]
    errors = validate_form(fields, {"email": "nope", "age": "200"})
    assert errors == {
        "name": REQUIRED_MESSAGE,
        "email": INVALID_EMAIL_MESSAGE,
        "age": "Maximum value is 120",
    }

    assert validate_form(fields, {"name": "Ann", "email": "ann@example.com", "age": 33}) == {}


def test_validate_form_is_repeatable():
    fields = [_field(id="email", type="email", required=True)]
    values = {"email": "x"}
    assert validate_form(fields, values) == validate_form(fields, values)


def test_validate_form_empty_schema_always_valid():
    assert validate_form([], {"anything": 1}) == {}
    assert validate_form([], None) == {}
    assert validate_form(None, "garbage") == {}


def test_validate_form_accepts_raw_dicts_and_skips_unknown_types():
    fields = [
        {"id": "a", "type": "text", "required": True},
        {"id": "b", "type": "signature", "required": True},
        "not a field",
    ]
    assert validate_form(fields, {}) == {"a": REQUIRED_MESSAGE}


def test_validate_form_non_mapping_values_treated_as_empty():
    fields = [_field(id="a", type="text", required=True)]
    assert validate_form(fields, ["a"]) == {"a": REQUIRED_MESSAGE}


def test_duplicate_ids_any_failure_blocks():
    fields = [
        _field(id="dup", type="text", required=True),
        _field(id="dup", type="text"),
    ]
    assert validate_form(fields, {}) == {"dup": REQUIRED_MESSAGE}


def test_preview_warnings():
    fields = coerce_field_definitions([
        {"id": "a", "type": "text"},
        {"id": "a", "type": "email"},
    ])
    warnings = preview_warnings(fields, {"a": "x", "zzz": 1})
    assert "Duplicate field id: a" in warnings
    assert "Unknown field: zzz" in warnings


def test_field_definition_tolerates_loose_input():
    f = FieldDefinition.model_validate(
        {"id": "x", "type": "select", "label": None, "options": ["A", 3, None, "B"], "extra": True}
    )
    assert f.type is FieldType.SELECT
    assert f.options == ["A", "B"]
    assert f.display_label == "New Field"

    g = FieldDefinition.model_validate({"id": "y", "type": "radio", "options": "A,B"})
    assert g.options is None
