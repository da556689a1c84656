from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.core.numbers import coerce_number
from app.schemas.submissions import SubmissionOut

UNLABELED_FIELD = "New Field"


class FieldType(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    NUMBER = "number"
    DATE = "date"


class FieldValidation(BaseModel):
    """Numeric bounds; only read for number fields."""
    model_config = ConfigDict(extra="ignore")

    min: int | float | None = None
    max: int | float | None = None

    @field_validator("min", "max", mode="before")
    @classmethod
    def _coerce_bound(cls, v: Any):
        # a bound that is not a number is treated as absent
        return coerce_number(v)


class FieldDefinition(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    type: FieldType
    label: str = ""
    placeholder: str | None = None
    required: bool = False
    options: list[str] | None = None
    validation: FieldValidation | None = None

    @field_validator("options", mode="before")
    @classmethod
    def _keep_string_options(cls, v: Any):
        if not isinstance(v, (list, tuple)):
            return None
        return [o for o in v if isinstance(o, str)]

    @field_validator("label", mode="before")
    @classmethod
    def _label_none_is_blank(cls, v: Any):
        return "" if v is None else v

    @property
    def display_label(self) -> str:
        return self.label.strip() or UNLABELED_FIELD


def coerce_field_definitions(raw: Any) -> list[FieldDefinition]:
    """
    Parse an untrusted field list (stored JSON, request bodies, None) keeping order.
    Entries that do not describe a known field type are skipped.
    """
    if not isinstance(raw, (list, tuple)):
        return []

    out: list[FieldDefinition] = []
    for item in raw:
        if isinstance(item, FieldDefinition):
            out.append(item)
            continue
        try:
            out.append(FieldDefinition.model_validate(item))
        except ValidationError:
            continue
    return out


class FormCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    fields: list[FieldDefinition] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v


class FormUpdate(FormCreate):
    """Builder save: fields replace the stored list wholesale."""


class FormStatusUpdate(BaseModel):
    is_active: bool


class FieldAdd(BaseModel):
    type: FieldType


class FieldMove(BaseModel):
    direction: str = Field(pattern="^(up|down)$")


class FormOut(BaseModel):
    id: str
    user_id: str
    title: str
    description: str | None
    fields: list[FieldDefinition]
    is_active: bool
    submission_count: int = 0
    created_at: datetime
    updated_at: datetime


class FormSummaryOut(BaseModel):
    id: str
    title: str
    description: str | None
    is_active: bool
    submission_count: int
    field_count: int
    required_count: int
    created_at: datetime


class FormWithSubmissionsOut(FormOut):
    submissions: list[SubmissionOut]
