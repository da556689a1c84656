from __future__ import annotations

import csv
import io
import json
import re
from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any

from app.schemas.forms import FieldDefinition

CSV_FIXED_HEADERS = ["Date", "Response ID"]
SORTABLE_META_FIELD = "created_at"


def _csv_cell(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if value is None or value is False or value == "":
        return ""
    return str(value)


def _data(submission: Any) -> Mapping:
    data = submission.get("data") if isinstance(submission, Mapping) else getattr(submission, "data", None)
    return data if isinstance(data, Mapping) else {}


def _created_at(submission: Any) -> datetime | None:
    value = submission.get("created_at") if isinstance(submission, Mapping) else getattr(submission, "created_at", None)
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _id(submission: Any) -> str:
    value = submission.get("id") if isinstance(submission, Mapping) else getattr(submission, "id", None)
    return "" if value is None else str(value)


def _searchable_text(submission: Any) -> str:
    data = _data(submission)
    try:
        blob = json.dumps(data, default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        # circular references
        blob = repr(data)
    created = _created_at(submission)
    stamp = created.isoformat() if created else ""
    return f"{blob} {stamp}".lower()


def search_submissions(submissions: list, term: str | None) -> list:
    if not term or not term.strip():
        return list(submissions)
    needle = term.strip().lower()
    return [s for s in submissions if needle in _searchable_text(s)]


def _sort_timestamp(submission: Any) -> float:
    created = _created_at(submission)
    if created is None:
        return float("-inf")
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created.timestamp()


def sort_submissions(
    submissions: list,
    sort_field: str = SORTABLE_META_FIELD,
    direction: str = "desc",
) -> list:
    reverse = direction != "asc"
    if sort_field == SORTABLE_META_FIELD:
        return sorted(submissions, key=_sort_timestamp, reverse=reverse)

    def _key(s: Any) -> str:
        value = _data(s).get(sort_field)
        return str(value).lower() if value not in (None, "") else ""

    return sorted(submissions, key=_key, reverse=reverse)


def export_csv(fields: list[FieldDefinition], submissions: list) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_FIXED_HEADERS + [f.display_label for f in fields])

    for s in submissions:
        created = _created_at(s)
        data = _data(s)
        writer.writerow(
            [created.isoformat() if created else "", _id(s)]
            + [_csv_cell(data.get(f.id)) for f in fields]
        )
    return buf.getvalue()


_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|\r\n]+')


def export_filename(title: str, today: date) -> str:
    safe = _UNSAFE_FILENAME_RE.sub("_", title).strip() or "form"
    return f"{safe}_responses_{today.isoformat()}.csv"
