from datetime import datetime, timezone

from app.models.form import Form
from app.models.submission import Submission
from app.models.user import User


def create_user(db, email: str, full_name="User", is_active=True) -> User:
    u = User(email=email, full_name=full_name, is_active=is_active)
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def create_form(
    db,
    owner: User,
    title="Customer Feedback Survey",
    description: str | None = None,
    fields: list[dict] | None = None,
    is_active=True,
) -> Form:
    f = Form(
        user_id=owner.id,
        title=title,
        description=description,
        fields=fields or [],
        is_active=is_active,
    )
    db.add(f)
    db.commit()
    db.refresh(f)
    return f


def create_submission(db, form: Form, data: dict | None = None, created_at: datetime | None = None) -> Submission:
    s = Submission(
        form_id=form.id,
        data=data if data is not None else {},
        created_at=created_at or datetime.now(timezone.utc),
    )
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


def feedback_fields() -> list[dict]:
    return [
        {"id": "name", "type": "text", "label": "Name", "required": True},
        {"id": "email", "type": "email", "label": "Email", "required": True},
        {"id": "age", "type": "number", "label": "Age", "validation": {"min": 18, "max": 120}},
        {"id": "plan", "type": "select", "label": "Plan", "options": ["Free", "Pro", "Team"]},
        {"id": "channels", "type": "checkbox", "label": "Channels", "options": ["Email", "SMS", "Phone"]},
        {"id": "comments", "type": "textarea", "label": ""},
    ]


def auth(email: str) -> dict:
    return {"X-User-Email": email}
