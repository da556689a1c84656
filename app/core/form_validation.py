from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from app.core.form_builder import duplicate_field_ids
from app.core.numbers import coerce_number, format_number
from app.schemas.forms import FieldDefinition, FieldType, coerce_field_definitions

REQUIRED_MESSAGE = "This field is required"
INVALID_EMAIL_MESSAGE = "Please enter a valid email address"
INVALID_NUMBER_MESSAGE = "Please enter a valid number"

_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def _is_blank(value: Any) -> bool:
    """
    None, False, empty collections and whitespace-only text count as "no answer".
    0 is an answer.
    """
    if value is None or value is False:
        return True
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return str(value).strip() == ""


def _is_empty(value: Any) -> bool:
    # format rules only run on a present value; whitespace is present
    if value is None or value is False or value == "":
        return True
    return isinstance(value, (list, tuple, set, dict)) and len(value) == 0


def _is_checkbox_group(field: FieldDefinition, value: Any) -> bool:
    return bool(field.options) or isinstance(value, (list, tuple))


def _check_required(field: FieldDefinition, value: Any) -> str | None:
    if not field.required:
        return None

    if field.type == FieldType.CHECKBOX and _is_checkbox_group(field, value):
        if not isinstance(value, (list, tuple)) or len(value) == 0:
            return REQUIRED_MESSAGE
        return None

    if _is_blank(value):
        return REQUIRED_MESSAGE
    return None


def _check_email(value: Any) -> str | None:
    if not _EMAIL_RE.fullmatch(str(value)):
        return INVALID_EMAIL_MESSAGE
    return None


def _check_number(field: FieldDefinition, value: Any) -> str | None:
    x = coerce_number(value)
    if x is None:
        return INVALID_NUMBER_MESSAGE

    rules = field.validation
    if rules is None:
        return None
    if rules.min is not None and x < rules.min:
        return f"Minimum value is {format_number(rules.min)}"
    if rules.max is not None and x > rules.max:
        return f"Maximum value is {format_number(rules.max)}"
    return None


def validate_field(field: FieldDefinition, value: Any) -> str | None:
    """
    Returns the first error for this field's value, or None when it passes.
    Required-ness is checked first, then the type-specific format rules.
    """
    error = _check_required(field, value)
    if error:
        return error

    if _is_empty(value):
        return None

    ftype = field.type

    if ftype == FieldType.EMAIL:
        return _check_email(value)

    elif ftype == FieldType.NUMBER:
        return _check_number(field, value)

    elif ftype in (
        FieldType.TEXT,
        FieldType.TEXTAREA,
        FieldType.SELECT,
        FieldType.CHECKBOX,
        FieldType.RADIO,
        FieldType.DATE,
    ):
        # no intrinsic format beyond required-ness
        return None

    else:
        raise ValueError(f"Unhandled field type: {ftype}")


def validate_form(fields: Any, values: Any) -> dict[str, str]:
    """
    Validate every field against values[field.id].
    Returns {field_id: message} for each failing field; empty dict means valid.
    Duplicate field ids: any failing copy blocks, the last failing message is kept.
    """
    answers = values if isinstance(values, Mapping) else {}

    errors: dict[str, str] = {}
    for field in coerce_field_definitions(fields):
        error = validate_field(field, answers.get(field.id))
        if error:
            errors[field.id] = error
    return errors


def preview_warnings(fields: list[FieldDefinition], values: Any) -> list[str]:
    """Non-blocking notes for the builder preview."""
    warnings: list[str] = []

    for field_id in duplicate_field_ids(fields):
        warnings.append(f"Duplicate field id: {field_id}")

    seen = {f.id for f in fields}

    if isinstance(values, Mapping):
        for key in values.keys():
            if key not in seen:
                warnings.append(f"Unknown field: {key}")
    return warnings
