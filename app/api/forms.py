import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core import audit
from app.core.access import get_form_or_404, get_owned_form_or_404, is_form_owner
from app.core.audit import log_event
from app.core.form_builder import add_field, field_stats, move_field, remove_field
from app.core.form_store import (
    delete_form_with_submissions,
    list_submissions,
    load_fields,
    serialize_fields,
    submission_counts,
)
from app.core.form_validation import preview_warnings, validate_form
from app.core.security import get_current_user, get_optional_user
from app.db.base import as_utc, utcnow
from app.db.session import get_db
from app.models.form import Form
from app.models.submission import Submission
from app.models.user import User
from app.schemas.forms import (
    FieldAdd,
    FieldMove,
    FormCreate,
    FormOut,
    FormStatusUpdate,
    FormSummaryOut,
    FormUpdate,
    FormWithSubmissionsOut,
)
from app.schemas.pagination import PaginatedResponse, PaginationMeta
from app.schemas.submissions import SubmissionOut
from app.schemas.validation import ValidationPreviewResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/forms", tags=["forms"])


def submission_out(s: Submission) -> SubmissionOut:
    return SubmissionOut(
        id=str(s.id),
        form_id=str(s.form_id),
        data=s.data if isinstance(s.data, dict) else {},
        created_at=as_utc(s.created_at),
    )


def form_out(form: Form, submission_count: int = 0) -> FormOut:
    return FormOut(
        id=str(form.id),
        user_id=str(form.user_id),
        title=form.title,
        description=form.description,
        fields=load_fields(form),
        is_active=form.is_active,
        submission_count=submission_count,
        created_at=as_utc(form.created_at),
        updated_at=as_utc(form.updated_at),
    )


def _form_with_submissions_out(db: Session, form: Form) -> FormWithSubmissionsOut:
    subs = list_submissions(db, form.id)
    return FormWithSubmissionsOut(
        **form_out(form, submission_count=len(subs)).model_dump(),
        submissions=[submission_out(s) for s in subs],
    )


def _summary_out(form: Form, submission_count: int) -> FormSummaryOut:
    stats = field_stats(load_fields(form))
    return FormSummaryOut(
        id=str(form.id),
        title=form.title,
        description=form.description,
        is_active=form.is_active,
        submission_count=submission_count,
        field_count=stats["total"],
        required_count=stats["required"],
        created_at=as_utc(form.created_at),
    )


@router.post("", response_model=FormOut, status_code=status.HTTP_201_CREATED)
def create_form(
    payload: FormCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    now = utcnow()
    form = Form(
        user_id=current_user.id,
        title=payload.title,
        description=payload.description,
        fields=serialize_fields(payload.fields),
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(form)
    db.flush()

    log_event(
        db=db,
        actor=current_user,
        action=audit.FORM_CREATED,
        entity_type="form",
        entity_id=form.id,
        metadata={"title": form.title, "field_count": len(payload.fields)},
    )

    db.commit()
    db.refresh(form)
    return form_out(form)


@router.get("")
def list_forms(
    search: str | None = Query(default=None, description="Search by title or description"),
    is_active: bool | None = Query(default=None, description="Filter by active flag"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    include_pagination: bool = Query(default=False, description="Include pagination metadata"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    The current user's forms, newest first, with response counts.

    Use ?include_pagination=true to get pagination metadata.
    """
    query = db.query(Form).filter(Form.user_id == current_user.id)

    if search:
        search_term = f"%{search.lower()}%"
        query = query.filter(Form.title.ilike(search_term) | Form.description.ilike(search_term))

    if is_active is not None:
        query = query.filter(Form.is_active == is_active)

    total = query.count()
    forms = query.order_by(Form.created_at.desc()).offset(offset).limit(limit).all()

    counts = submission_counts(db, [f.id for f in forms])
    items = [_summary_out(f, counts.get(f.id, 0)) for f in forms]

    if include_pagination:
        return PaginatedResponse(
            items=items,
            pagination=PaginationMeta.for_window(
                total=total, limit=limit, offset=offset, returned=len(items)
            ),
        )
    return items


@router.get("/{form_id}")
def get_form(
    form_id: str,
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
):
    """
    Owners get the form with its submissions. Everyone else only sees
    active forms, without submissions.
    """
    form = get_form_or_404(db, form_id)

    if is_form_owner(form, current_user):
        return _form_with_submissions_out(db, form)

    if not form.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Form not available")

    return form_out(form)


@router.put("/{form_id}", response_model=FormWithSubmissionsOut)
def update_form(
    form_id: str,
    payload: FormUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    form = get_owned_form_or_404(db, form_id, current_user)

    form.title = payload.title
    form.description = payload.description
    form.fields = serialize_fields(payload.fields)
    form.updated_at = utcnow()
    db.flush()

    log_event(
        db=db,
        actor=current_user,
        action=audit.FORM_UPDATED,
        entity_type="form",
        entity_id=form.id,
        metadata={"title": form.title, "field_count": len(payload.fields)},
    )

    db.commit()
    db.refresh(form)
    return _form_with_submissions_out(db, form)


@router.patch("/{form_id}", response_model=FormSummaryOut)
def set_form_status(
    form_id: str,
    payload: FormStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    form = get_owned_form_or_404(db, form_id, current_user)

    previous = form.is_active
    form.is_active = payload.is_active
    form.updated_at = utcnow()
    db.flush()

    log_event(
        db=db,
        actor=current_user,
        action=audit.FORM_STATUS_CHANGED,
        entity_type="form",
        entity_id=form.id,
        metadata={"from": previous, "to": form.is_active},
    )

    db.commit()
    db.refresh(form)
    counts = submission_counts(db, [form.id])
    return _summary_out(form, counts.get(form.id, 0))


@router.delete("/{form_id}")
def delete_form(
    form_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    form = get_owned_form_or_404(db, form_id, current_user)
    form_pk = form.id
    title = form.title

    removed = delete_form_with_submissions(db, form)

    log_event(
        db=db,
        actor=current_user,
        action=audit.FORM_DELETED,
        entity_type="form",
        entity_id=form_pk,
        metadata={"title": title, "submissions_deleted": removed},
    )
    db.commit()

    logger.info("form %s deleted with %d submissions", form_pk, removed)
    return {"message": "Form deleted successfully"}


def _save_fields(db: Session, form: Form, fields, actor: User) -> Form:
    form.fields = serialize_fields(fields)
    form.updated_at = utcnow()
    db.flush()

    log_event(
        db=db,
        actor=actor,
        action=audit.FORM_UPDATED,
        entity_type="form",
        entity_id=form.id,
        metadata={"field_count": len(fields)},
    )

    db.commit()
    db.refresh(form)
    return form


@router.post("/{form_id}/fields", response_model=FormOut, status_code=status.HTTP_201_CREATED)
def add_form_field(
    form_id: str,
    payload: FieldAdd,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Builder: append a new field of the given type with default settings."""
    form = get_owned_form_or_404(db, form_id, current_user)
    form = _save_fields(db, form, add_field(load_fields(form), payload.type), current_user)
    return form_out(form)


@router.delete("/{form_id}/fields/{field_id}", response_model=FormOut)
def remove_form_field(
    form_id: str,
    field_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    form = get_owned_form_or_404(db, form_id, current_user)
    fields = load_fields(form)
    if not any(f.id == field_id for f in fields):
        raise HTTPException(status_code=404, detail="Field not found")

    form = _save_fields(db, form, remove_field(fields, field_id), current_user)
    return form_out(form)


@router.post("/{form_id}/fields/{field_id}/move", response_model=FormOut)
def move_form_field(
    form_id: str,
    field_id: str,
    payload: FieldMove,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    form = get_owned_form_or_404(db, form_id, current_user)
    fields = load_fields(form)
    if not any(f.id == field_id for f in fields):
        raise HTTPException(status_code=404, detail="Field not found")

    form = _save_fields(db, form, move_field(fields, field_id, payload.direction), current_user)
    return form_out(form)


@router.post("/{form_id}/validate", response_model=ValidationPreviewResponse)
def preview_validation(
    form_id: str,
    payload: dict,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Dry-run a submission payload against the form without storing it.
    """
    form = get_owned_form_or_404(db, form_id, current_user)
    fields = load_fields(form)

    errors = validate_form(fields, payload)
    return ValidationPreviewResponse(
        valid=not errors,
        errors=errors,
        warnings=preview_warnings(fields, payload),
    )
