import uuid

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.form import Form
from app.models.user import User


def parse_id_or_404(raw: str, detail: str = "Not found") -> uuid.UUID:
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def get_form_or_404(db: Session, form_id: str) -> Form:
    form = db.get(Form, parse_id_or_404(form_id, "Form not found"))
    if not form:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Form not found")
    return form


def is_form_owner(form: Form, user: User | None) -> bool:
    return user is not None and form.user_id == user.id


def get_owned_form_or_404(db: Session, form_id: str, user: User) -> Form:
    form = get_form_or_404(db, form_id)
    if not is_form_owner(form, user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return form
