import uuid
from typing import Any

from sqlalchemy.orm import Session

from app.models.audit_event import AuditEvent
from app.models.user import User

FORM_CREATED = "FORM_CREATED"
FORM_UPDATED = "FORM_UPDATED"
FORM_STATUS_CHANGED = "FORM_STATUS_CHANGED"
FORM_DELETED = "FORM_DELETED"
SUBMISSION_CREATED = "SUBMISSION_CREATED"


def log_event(
    *,
    db: Session,
    actor: User | None,
    action: str,
    entity_type: str,
    entity_id: uuid.UUID,
    metadata: dict[str, Any] | None = None,
) -> AuditEvent:
    event = AuditEvent(
        actor_user_id=actor.id if actor else None,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        event_metadata=metadata,
    )
    db.add(event)
    return event
