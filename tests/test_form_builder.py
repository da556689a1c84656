from app.core.embed import build_embed_codes
from app.core.form_builder import (
    DEFAULT_CHOICE_OPTIONS,
    add_field,
    duplicate_field_ids,
    field_stats,
    make_field,
    move_field,
    new_field_id,
    remove_field,
)
from app.schemas.forms import FieldDefinition, FieldType


def _ids(fields):
    return [f.id for f in fields]


def test_make_field_defaults():
    f = make_field(FieldType.SELECT, now_ms=1700000000000)
    assert f.id == "field_1700000000000"
    assert f.label == "New select"
    assert f.required is False
    assert f.options == DEFAULT_CHOICE_OPTIONS

    assert make_field(FieldType.RADIO).options == ["Option 1", "Option 2"]
    assert make_field(FieldType.CHECKBOX).options is None
    assert make_field("email").type is FieldType.EMAIL


def test_new_field_id_avoids_collisions():
    taken = ["field_5", "field_6"]
    assert new_field_id(taken, now_ms=5) == "field_7"
    assert new_field_id([], now_ms=5) == "field_5"


def test_add_field_keeps_existing_and_appends():
    fields = [FieldDefinition(id="a", type="text")]
    out = add_field(fields, FieldType.NUMBER)
    assert len(out) == 2
    assert out[0].id == "a"
    assert out[1].type is FieldType.NUMBER
    assert out[1].id != "a"
    # original list untouched
    assert len(fields) == 1


def test_remove_and_move():
    fields = [FieldDefinition(id=x, type="text") for x in ("a", "b", "c")]

    assert _ids(remove_field(fields, "b")) == ["a", "c"]
    assert _ids(remove_field(fields, "missing")) == ["a", "b", "c"]

    assert _ids(move_field(fields, "b", "up")) == ["b", "a", "c"]
    assert _ids(move_field(fields, "b", "down")) == ["a", "c", "b"]
    assert _ids(move_field(fields, "a", "up")) == ["a", "b", "c"]
    assert _ids(move_field(fields, "c", "down")) == ["a", "b", "c"]
    assert _ids(move_field(fields, "zzz", "up")) == ["a", "b", "c"]


def test_field_stats_and_duplicates():
    fields = [
        FieldDefinition(id="a", type="text", required=True),
        FieldDefinition(id="b", type="email"),
        FieldDefinition(id="a", type="number", required=True),
    ]
    assert field_stats(fields) == {"total": 3, "required": 2}
    assert duplicate_field_ids(fields) == ["a"]
    assert duplicate_field_ids([]) == []


def test_embed_codes_escape_title():
    codes = build_embed_codes("https://forms.example.com/", "abc", 'Q&A "night"', height="400px")
    assert codes["form_url"] == "https://forms.example.com/form/abc"
    assert 'src="https://forms.example.com/form/abc"' in codes["iframe_code"]
    assert 'height="400px"' in codes["iframe_code"]
    assert 'title="Q&amp;A &quot;night&quot;"' in codes["iframe_code"]
    assert codes["link_code"].startswith('<a href="https://forms.example.com/form/abc"')
