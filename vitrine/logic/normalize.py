"""Normalization of raw catalog records into entities.

Raw records come from a relational store with joined sub-entities and may
have any field missing or null. Every entity field is described once in a
rule table below: where to read it, how to coerce it and what to use when
the value is absent or unusable. Normalization never raises for a mapping
input; a field that cannot be read simply takes its default.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from vitrine.ingest.models import (
    NOTE_TYPES,
    Brand,
    FragranceNote,
    Perfume,
    PerfumeDetails,
    Projection,
    Ratings,
    Review,
    SizeOption,
)
from vitrine.logic.slugs import derive_slug

UNNAMED_PERFUME = "Unnamed Perfume"
UNKNOWN_BRAND = "Unknown Brand"
UNKNOWN_NOTE = "Unknown Note"
UNNAMED_BRAND = "Unnamed Brand"
DEFAULT_NOTE_TYPE = "base"
SYNTHETIC_ID_PREFIX = "unknown-"

_MISSING = object()


@dataclass(frozen=True, slots=True)
class FieldRule:
    target: str
    source: str
    extract: Callable[[Any], Any]
    default: Any = None
    detail_default: Any = _MISSING

    def default_for(self, projection: Projection) -> Any:
        if projection is Projection.DETAIL and self.detail_default is not _MISSING:
            return self.detail_default
        return self.default


def _relation(value: Any) -> Mapping[str, Any] | None:
    """Unwrap a joined relation that may arrive as an object or a one-row list."""
    if isinstance(value, Mapping):
        return value
    if isinstance(value, (list, tuple)) and len(value) == 1 and isinstance(value[0], Mapping):
        return value[0]
    return None


def _lookup(raw: Mapping[str, Any], path: str) -> Any:
    current: Any = raw
    for key in path.split("."):
        current = _relation(current)
        if current is None:
            return None
        current = current.get(key)
    return current


def _text(value: Any) -> Any:
    return value if isinstance(value, str) else _MISSING


def _optional_text(value: Any) -> Any:
    if isinstance(value, str) and value.strip():
        return value
    return _MISSING


def _identifier(value: Any) -> Any:
    if isinstance(value, bool):
        return _MISSING
    if isinstance(value, (int, uuid.UUID)):
        return str(value)
    return _optional_text(value)


def _number(value: Any) -> Any:
    if isinstance(value, bool):
        return _MISSING
    if isinstance(value, (int, float, str)):
        try:
            return float(value)
        except (OverflowError, ValueError):
            return _MISSING
    return _MISSING


def _integer(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    number = _number(value)
    if number is _MISSING or not math.isfinite(number):
        return _MISSING
    return int(number)


def _year(value: Any) -> Any:
    year = _integer(value)
    if year is _MISSING or year <= 0:
        return _MISSING
    return year


def _flag(value: Any) -> bool:
    return bool(value)


def _strings(value: Any) -> Any:
    if not isinstance(value, (list, tuple)):
        return _MISSING
    return tuple(item for item in value if isinstance(item, str))


def _identifiers(value: Any) -> Any:
    if not isinstance(value, (list, tuple)):
        return _MISSING
    items = (_identifier(item) for item in value)
    return tuple(item for item in items if item is not _MISSING)


def _note_type(value: Any) -> str:
    if isinstance(value, str) and value.strip().lower() in NOTE_TYPES:
        return value.strip().lower()
    return DEFAULT_NOTE_TYPE


def _note(row: Any) -> FragranceNote:
    row = _relation(row) or {}
    name = _text(_lookup(row, "note.name"))
    description = _text(_lookup(row, "note.description"))
    return FragranceNote(
        name=UNKNOWN_NOTE if name is _MISSING else name,
        type=_note_type(row.get("note_type")),
        description="" if description is _MISSING else description,
    )


def _notes(value: Any) -> Any:
    if not isinstance(value, (list, tuple)):
        return _MISSING
    return tuple(_note(row) for row in value)


def _ratings(value: Any) -> Any:
    value = _relation(value)
    if value is None:
        return _MISSING
    average = _number(value.get("average"))
    count = _integer(value.get("count"))
    return Ratings(
        average=0.0 if average is _MISSING else average,
        count=0 if count is _MISSING else max(count, 0),
    )


def _size(row: Mapping[str, Any]) -> Any:
    value = _text(row.get("value"))
    price = _number(row.get("price"))
    if value is _MISSING or price is _MISSING:
        return _MISSING
    return SizeOption(value=value, price=price, is_available=bool(row.get("is_available", True)))


def _sizes(value: Any) -> Any:
    if not isinstance(value, (list, tuple)):
        return _MISSING
    sizes = (_size(row) for row in value if isinstance(row, Mapping))
    return tuple(size for size in sizes if size is not _MISSING)


def _review(row: Mapping[str, Any]) -> Any:
    review_id = _identifier(row.get("id"))
    if review_id is _MISSING:
        return _MISSING
    rating = _number(row.get("rating"))
    helpful = _integer(row.get("helpful"))
    return Review(
        id=review_id,
        user_name=row.get("user_name") if isinstance(row.get("user_name"), str) else "",
        rating=0.0 if rating is _MISSING else rating,
        date=row.get("date") if isinstance(row.get("date"), str) else "",
        comment=row.get("comment") if isinstance(row.get("comment"), str) else "",
        helpful=0 if helpful is _MISSING else helpful,
    )


def _reviews(value: Any) -> Any:
    if not isinstance(value, (list, tuple)):
        return _MISSING
    reviews = (_review(row) for row in value if isinstance(row, Mapping))
    return tuple(review for review in reviews if review is not _MISSING)


PERFUME_RULES: tuple[FieldRule, ...] = (
    FieldRule("id", "id", _identifier),
    FieldRule("name", "name", _text, UNNAMED_PERFUME),
    FieldRule("slug", "slug", _optional_text),
    FieldRule("brand", "brand.name", _text, UNKNOWN_BRAND),
    FieldRule("description", "description", _text, ""),
    FieldRule("long_description", "long_description", _text, ""),
    FieldRule("images", "images", _strings, ()),
    FieldRule("fragrance_notes", "fragranceNotes", _notes, ()),
    FieldRule("price", "price", _number),
    FieldRule("discount_price", "discount_price", _number),
    FieldRule("ratings", "ratings", _ratings, None, Ratings(average=0.0, count=0)),
    FieldRule("sizes", "sizes", _sizes, None, ()),
    FieldRule("reviews", "reviews", _reviews, None, ()),
    FieldRule("related_products", "related_products", _identifiers, None, ()),
)

PERFUME_DETAIL_RULES: tuple[FieldRule, ...] = (
    FieldRule("gender", "details_gender", _optional_text),
    FieldRule("family", "details_family", _optional_text),
    FieldRule("concentration", "details_concentration", _optional_text),
    FieldRule("release_year", "details_release_year", _year),
    FieldRule("longevity", "details_longevity", _optional_text),
    FieldRule("sillage", "details_sillage", _optional_text),
    FieldRule("recommended_use", "details_recommended_use", _strings, ()),
)

BRAND_RULES: tuple[FieldRule, ...] = (
    FieldRule("id", "id", _identifier),
    FieldRule("name", "name", _optional_text, UNNAMED_BRAND),
    FieldRule("slug", "slug", _optional_text),
    FieldRule("description", "description", _text, ""),
    FieldRule("long_description", "long_description", _text, ""),
    FieldRule("logo", "logo_url", _optional_text),
    FieldRule("banner", "banner_url", _optional_text),
    FieldRule("founded_year", "founded_year", _year),
    FieldRule("headquarters", "headquarters", _optional_text),
    FieldRule("category", "category", _optional_text),
    FieldRule("featured", "is_featured", _flag, False),
)


def apply_rules(raw: Mapping[str, Any], rules: Iterable[FieldRule], projection: Projection) -> dict[str, Any]:
    """Resolve every rule against ``raw`` in one pass."""
    fields: dict[str, Any] = {}
    for rule in rules:
        value = _lookup(raw, rule.source)
        if value is not None:
            value = rule.extract(value)
        if value is None or value is _MISSING:
            value = rule.default_for(projection)
        fields[rule.target] = value
    return fields


def extract_count(value: Any) -> int:
    """Decode a count aggregate into a non-negative integer.

    Two shapes are accepted: an embedded aggregate ``[{"count": N}]`` and a
    bare scalar ``N``. Anything else counts as zero.
    """
    if isinstance(value, (list, tuple)):
        head = value[0] if value else None
        count = head.get("count") if isinstance(head, Mapping) else None
    else:
        count = value
    if count is None:
        return 0
    number = _integer(count)
    if number is _MISSING:
        return 0
    return max(number, 0)


def synthetic_id(requested_slug: str | None = None) -> str:
    """Identifier for a record without one; unique within a load, never persisted."""
    if requested_slug:
        return f"{SYNTHETIC_ID_PREFIX}id-{requested_slug}"
    return f"{SYNTHETIC_ID_PREFIX}{uuid.uuid4().hex}"


def _resolve_slug(
    slug: str | None, raw_name: Any, entity_id: str, requested_slug: str | None = None
) -> str:
    if slug:
        return slug
    derived = derive_slug(raw_name if isinstance(raw_name, str) else "")
    return derived or requested_slug or derive_slug(entity_id) or entity_id


def normalize_perfume(
    raw: Mapping[str, Any],
    projection: Projection = Projection.LIST,
    *,
    requested_slug: str | None = None,
) -> Perfume:
    """Build a :class:`Perfume` from a raw list or detail record.

    ``requested_slug`` is the slug a detail lookup was made with; it is only
    used as a fallback identity when the record carries none of its own.
    """
    if not isinstance(raw, Mapping):
        raw = {}
    fields = apply_rules(raw, PERFUME_RULES, projection)
    fields["details"] = PerfumeDetails(**apply_rules(raw, PERFUME_DETAIL_RULES, projection))
    fields["id"] = fields["id"] or synthetic_id(requested_slug)
    fields["slug"] = _resolve_slug(fields["slug"], raw.get("name"), fields["id"], requested_slug)
    return Perfume(**fields)


def normalize_brand(raw: Mapping[str, Any], projection: Projection = Projection.LIST) -> Brand:
    if not isinstance(raw, Mapping):
        raw = {}
    fields = apply_rules(raw, BRAND_RULES, projection)
    fields["id"] = fields["id"] or synthetic_id()
    fields["slug"] = _resolve_slug(fields["slug"], raw.get("name"), fields["id"])
    fields["perfume_count"] = extract_count(raw.get("perfumes_count"))
    return Brand(**fields)


def normalize_perfumes(
    records: Iterable[Mapping[str, Any] | None] | None, projection: Projection = Projection.LIST
) -> list[Perfume]:
    return [normalize_perfume(record, projection) for record in records or () if record is not None]


def normalize_brands(
    records: Iterable[Mapping[str, Any] | None] | None, projection: Projection = Projection.LIST
) -> list[Brand]:
    return [normalize_brand(record, projection) for record in records or () if record is not None]
