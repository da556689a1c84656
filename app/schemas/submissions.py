from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class SubmissionCreate(BaseModel):
    form_id: str
    data: dict[str, Any] = Field(default_factory=dict)


class SubmissionOut(BaseModel):
    id: str
    form_id: str
    data: dict[str, Any]
    created_at: datetime
