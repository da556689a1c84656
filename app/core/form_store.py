from __future__ import annotations

import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from app.models.form import Form
from app.models.submission import Submission
from app.schemas.forms import FieldDefinition, coerce_field_definitions


def serialize_fields(fields: list[FieldDefinition]) -> list[dict]:
    return [f.model_dump(mode="json", exclude_none=True) for f in fields]


def load_fields(form: Form) -> list[FieldDefinition]:
    # stored JSON is trusted only as far as it parses
    return coerce_field_definitions(form.fields)


def list_submissions(db: Session, form_id: uuid.UUID) -> list[Submission]:
    return (
        db.query(Submission)
        .filter(Submission.form_id == form_id)
        .order_by(Submission.created_at.desc())
        .all()
    )


def submission_counts(db: Session, form_ids: list[uuid.UUID]) -> dict[uuid.UUID, int]:
    if not form_ids:
        return {}
    rows = db.execute(
        select(Submission.form_id, func.count(Submission.id))
        .where(Submission.form_id.in_(form_ids))
        .group_by(Submission.form_id)
    ).all()
    return {form_id: count for form_id, count in rows}


def delete_form_with_submissions(db: Session, form: Form) -> int:
    """
    Removes the form's submissions first, then the form, in the caller's
    transaction. Returns how many submissions went with it.
    """
    result = db.execute(delete(Submission).where(Submission.form_id == form.id))
    db.expire(form, ["submissions"])
    db.delete(form)
    db.flush()
    return result.rowcount or 0


def list_user_submissions(db: Session, user_id: uuid.UUID) -> list[Submission]:
    return (
        db.query(Submission)
        .join(Form, Submission.form_id == Form.id)
        .filter(Form.user_id == user_id)
        .order_by(Submission.created_at.desc())
        .all()
    )
