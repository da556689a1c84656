from __future__ import annotations

import time
from collections.abc import Iterable

from app.schemas.forms import FieldDefinition, FieldType

DEFAULT_CHOICE_OPTIONS = ["Option 1", "Option 2"]


def new_field_id(existing_ids: Iterable[str] = (), now_ms: int | None = None) -> str:
    """field_<epoch ms>, bumped until it does not collide with existing ids."""
    taken = set(existing_ids)
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    candidate = f"field_{stamp}"
    while candidate in taken:
        stamp += 1
        candidate = f"field_{stamp}"
    return candidate


def make_field(
    field_type: FieldType,
    existing_ids: Iterable[str] = (),
    now_ms: int | None = None,
) -> FieldDefinition:
    field_type = FieldType(field_type)
    options = None
    if field_type in (FieldType.SELECT, FieldType.RADIO):
        options = list(DEFAULT_CHOICE_OPTIONS)

    return FieldDefinition(
        id=new_field_id(existing_ids, now_ms),
        type=field_type,
        label=f"New {field_type.value}",
        required=False,
        options=options,
    )


def add_field(fields: list[FieldDefinition], field_type: FieldType) -> list[FieldDefinition]:
    return [*fields, make_field(field_type, (f.id for f in fields))]


def remove_field(fields: list[FieldDefinition], field_id: str) -> list[FieldDefinition]:
    # removes the first match only; duplicates are left for the user to sort out
    for i, f in enumerate(fields):
        if f.id == field_id:
            return fields[:i] + fields[i + 1:]
    return list(fields)


def move_field(fields: list[FieldDefinition], field_id: str, direction: str) -> list[FieldDefinition]:
    out = list(fields)
    idx = next((i for i, f in enumerate(out) if f.id == field_id), None)
    if idx is None:
        return out

    target = idx - 1 if direction == "up" else idx + 1
    if target < 0 or target >= len(out):
        return out

    out[idx], out[target] = out[target], out[idx]
    return out


def field_stats(fields: list[FieldDefinition]) -> dict[str, int]:
    return {
        "total": len(fields),
        "required": sum(1 for f in fields if f.required),
    }


def duplicate_field_ids(fields: Iterable[FieldDefinition]) -> list[str]:
    seen: set[str] = set()
    dupes: list[str] = []
    for f in fields:
        if f.id in seen and f.id not in dupes:
            dupes.append(f.id)
        seen.add(f.id)
    return dupes
