import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, JSONType, utcnow


class Submission(Base):
    __tablename__ = "submissions"
    __table_args__ = (
        Index("ix_submissions_form_created", "form_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    form_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("forms.id", ondelete="CASCADE"),
        nullable=False,
    )

    # {field_id: value}; shape is whatever the respondent sent
    data: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    form = relationship("Form", back_populates="submissions", lazy="select")
