from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.forms import submission_out
from app.core.access import get_owned_form_or_404
from app.core.config import settings
from app.core.embed import build_embed_codes
from app.core.form_analytics import compute_form_analytics, compute_summary, compute_time_series
from app.core.form_store import list_submissions, list_user_submissions, load_fields, submission_counts
from app.core.security import get_current_user
from app.db.session import get_db
from app.models.form import Form
from app.models.user import User
from app.schemas.analytics import AnalyticsOverviewOut, FormAnalyticsOut, TopFormOut

router = APIRouter(tags=["analytics"])

TOP_FORMS_LIMIT = 10


@router.get("/analytics", response_model=AnalyticsOverviewOut)
def analytics_overview(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Totals and responses per day over every form the user owns,
    plus the forms with the most responses.
    """
    forms = (
        db.query(Form)
        .filter(Form.user_id == current_user.id)
        .order_by(Form.created_at.desc())
        .all()
    )
    subs = [submission_out(s) for s in list_user_submissions(db, current_user.id)]
    counts = submission_counts(db, [f.id for f in forms])

    # stable sort: ties keep newest-first order
    ranked = sorted(forms, key=lambda f: counts.get(f.id, 0), reverse=True)[:TOP_FORMS_LIMIT]

    return AnalyticsOverviewOut(
        total_forms=len(forms),
        summary=compute_summary(subs, tz=settings.analytics_tz),
        time_series=compute_time_series(subs, tz=settings.analytics_tz),
        top_forms=[
            TopFormOut(
                id=str(f.id),
                title=f.title,
                description=f.description,
                submission_count=counts.get(f.id, 0),
            )
            for f in ranked
        ],
    )


@router.get("/forms/{form_id}/analytics", response_model=FormAnalyticsOut)
def form_analytics(
    form_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Summary counters, responses per day and option distributions
    for choice fields.
    """
    form = get_owned_form_or_404(db, form_id, current_user)
    subs = [submission_out(s) for s in list_submissions(db, form.id)]

    return compute_form_analytics(
        str(form.id),
        load_fields(form),
        subs,
        tz=settings.analytics_tz,
    )


@router.get("/forms/{form_id}/embed")
def form_embed_codes(
    form_id: str,
    width: str = Query(default="100%", max_length=20),
    height: str = Query(default="600px", max_length=20),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    form = get_owned_form_or_404(db, form_id, current_user)
    return build_embed_codes(
        settings.PUBLIC_BASE_URL,
        str(form.id),
        form.title,
        width=width,
        height=height,
    )
