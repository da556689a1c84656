from app.models.audit_event import AuditEvent
from app.models.form import Form
from app.models.submission import Submission
from app.models.user import User

__all__ = ["AuditEvent", "Form", "Submission", "User"]
