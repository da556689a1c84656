import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.api.forms import submission_out
from app.core import audit
from app.core.access import get_form_or_404, get_owned_form_or_404
from app.core.audit import log_event
from app.core.form_store import list_submissions, load_fields
from app.core.form_validation import validate_form
from app.core.security import get_current_user
from app.core.submissions_table import (
    SORTABLE_META_FIELD,
    export_csv,
    export_filename,
    search_submissions,
    sort_submissions,
)
from app.db.base import utcnow
from app.db.session import get_db
from app.models.submission import Submission
from app.models.user import User
from app.schemas.submissions import SubmissionCreate, SubmissionOut

logger = logging.getLogger(__name__)

router = APIRouter(tags=["submissions"])


@router.post("/submissions", response_model=SubmissionOut, status_code=status.HTTP_201_CREATED)
def create_submission(
    payload: SubmissionCreate,
    db: Session = Depends(get_db),
):
    """
    Public endpoint: respondents post answers keyed by field id.
    """
    form = get_form_or_404(db, payload.form_id)
    if not form.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Form not available")

    errors = validate_form(load_fields(form), payload.data)
    if errors:
        logger.info("submission rejected for form %s: %d field errors", form.id, len(errors))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Submission validation failed", "errors": errors},
        )

    submission = Submission(form_id=form.id, data=payload.data, created_at=utcnow())
    db.add(submission)
    db.flush()

    log_event(
        db=db,
        actor=None,
        action=audit.SUBMISSION_CREATED,
        entity_type="submission",
        entity_id=submission.id,
        metadata={"form_id": str(form.id), "answered": len(payload.data)},
    )

    db.commit()
    db.refresh(submission)
    return submission_out(submission)


@router.get("/submissions", response_model=list[SubmissionOut])
def get_submissions(
    form_id: str = Query(..., description="Form ID"),
    search: str | None = Query(default=None, description="Case-insensitive search over answers and dates"),
    sort_field: str = Query(default=SORTABLE_META_FIELD, description="created_at or a field id"),
    sort_direction: str = Query(default="desc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    form = get_owned_form_or_404(db, form_id, current_user)

    items = [submission_out(s) for s in list_submissions(db, form.id)]
    items = search_submissions(items, search)
    return sort_submissions(items, sort_field, sort_direction)


@router.get("/forms/{form_id}/submissions/export")
def export_submissions(
    form_id: str,
    search: str | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """CSV download of the (optionally filtered) responses, newest first."""
    form = get_owned_form_or_404(db, form_id, current_user)

    items = [submission_out(s) for s in list_submissions(db, form.id)]
    items = search_submissions(items, search)

    body = export_csv(load_fields(form), items)
    filename = export_filename(form.title, utcnow().date())
    return Response(
        content=body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
