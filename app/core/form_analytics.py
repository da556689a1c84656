from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any

from app.core.numbers import round_half_up
from app.schemas.analytics import (
    FieldDistribution,
    FormAnalyticsOut,
    OptionBucket,
    SummaryStats,
    TimeSeriesPoint,
)
from app.schemas.forms import FieldDefinition, FieldType, coerce_field_definitions

# Submissions arrive from storage or from JSON; nothing about their `data` is trusted.
# Every reader below narrows the type first and treats anything unexpected as
# "no response" instead of raising.


def _as_list(submissions: Any) -> list:
    if submissions is None or isinstance(submissions, (str, bytes, Mapping)):
        return []
    if isinstance(submissions, list):
        return submissions
    if isinstance(submissions, Iterable):
        return list(submissions)
    return []


def _read(record: Any, *names: str) -> Any:
    """Attribute or key lookup, first name present wins."""
    for name in names:
        if isinstance(record, Mapping):
            if name in record:
                return record[name]
        elif hasattr(record, name):
            return getattr(record, name)
    return None


def _submission_data(record: Any) -> Mapping:
    data = _read(record, "data")
    return data if isinstance(data, Mapping) else {}


def _parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        s = value.strip()
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(s)
        except ValueError:
            return None
    return None


def _to_zone(dt: datetime, tz: tzinfo | None) -> datetime:
    """
    Moves dt into the reporting zone. Naive values are taken as already local.
    With no zone given, each instant gets the host zone's offset for that instant.
    """
    if tz is None:
        return dt.astimezone()
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def _local_created_at(record: Any, tz: tzinfo | None) -> datetime | None:
    dt = _parse_timestamp(_read(record, "created_at", "createdAt"))
    if dt is None:
        return None
    return _to_zone(dt, tz)


def _is_choice_type(ftype: FieldType) -> bool:
    if ftype in (FieldType.SELECT, FieldType.RADIO, FieldType.CHECKBOX):
        return True
    elif ftype in (
        FieldType.TEXT,
        FieldType.EMAIL,
        FieldType.TEXTAREA,
        FieldType.NUMBER,
        FieldType.DATE,
    ):
        return False
    else:
        raise ValueError(f"Unhandled field type: {ftype}")


def compute_summary(
    submissions: Any,
    *,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> SummaryStats:
    records = _as_list(submissions)
    if now is None:
        current = datetime.now(tz) if tz is not None else datetime.now().astimezone()
    else:
        current = _to_zone(now, tz)

    week_ago = current - timedelta(days=7)
    today = current.date()

    today_count = 0
    week_count = 0
    days: set[date] = set()
    for record in records:
        created = _local_created_at(record, tz)
        if created is None:
            continue
        days.add(created.date())
        if created.date() == today:
            today_count += 1
        if created >= week_ago:
            week_count += 1

    total = len(records)
    average = round_half_up(total / max(1, len(days)), 1) if total else 0.0

    return SummaryStats(
        total=total,
        today=today_count,
        this_week=week_count,
        average_per_day=average,
    )


def compute_time_series(submissions: Any, *, tz: tzinfo | None = None) -> list[TimeSeriesPoint]:
    """
    Per-day counts, oldest first. Days without responses are not filled in.
    """
    counts: dict[date, int] = {}
    for record in _as_list(submissions):
        created = _local_created_at(record, tz)
        if created is None:
            continue
        day = created.date()
        counts[day] = counts.get(day, 0) + 1

    return [TimeSeriesPoint(date=d, count=counts[d]) for d in sorted(counts)]


def _count_options(field: FieldDefinition, records: list) -> dict[str, int]:
    counts: dict[str, int] = {}
    for option in field.options or []:
        counts.setdefault(option, 0)

    for record in records:
        value = _submission_data(record).get(field.id)

        if isinstance(value, (list, tuple)):
            for item in value:
                if isinstance(item, str) and item in counts:
                    counts[item] += 1
        elif isinstance(value, str) and value in counts:
            counts[value] += 1

    return counts


def compute_field_distributions(fields: Any, submissions: Any) -> list[FieldDistribution]:
    """
    Option counts for select/radio/checkbox fields that declare options,
    in form order. Percentages are of all submissions, so a field's buckets
    can sum to less than 100.
    """
    records = _as_list(submissions)
    total = len(records)

    out: list[FieldDistribution] = []
    for field in coerce_field_definitions(fields):
        if not _is_choice_type(field.type) or not field.options:
            continue

        counts = _count_options(field, records)
        buckets = [
            OptionBucket(
                option=option,
                count=count,
                percentage=int(round_half_up(count / total * 100)) if total else 0,
            )
            for option, count in counts.items()
        ]
        out.append(FieldDistribution(field=field, buckets=buckets, total_responses=total))
    return out


def compute_form_analytics(
    form_id: str,
    fields: Any,
    submissions: Any,
    *,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> FormAnalyticsOut:
    records = _as_list(submissions)
    return FormAnalyticsOut(
        form_id=form_id,
        summary=compute_summary(records, now=now, tz=tz),
        time_series=compute_time_series(records, tz=tz),
        distributions=compute_field_distributions(fields, records),
    )
