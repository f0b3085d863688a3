import pytest

from vitrine.ingest.models import FragranceNote, Projection, Ratings
from vitrine.logic import normalize
from vitrine.logic.normalize import (
    UNKNOWN_BRAND,
    UNKNOWN_NOTE,
    UNNAMED_BRAND,
    UNNAMED_PERFUME,
    extract_count,
    normalize_brand,
    normalize_brands,
    normalize_perfume,
    normalize_perfumes,
)

LIST_RECORD = {
    "id": 12,
    "name": "Aqua Marine",
    "slug": "aqua-marine",
    "description": "A breezy marine fragrance.",
    "images": ["/img/a.jpg", "/img/b.jpg"],
    "details_family": "Aquatic",
    "brand": {"name": "Coastline"},
    "fragranceNotes": [
        {"note_type": "top", "note": {"name": "Bergamot"}},
        {"note_type": "heart", "note": {"name": "Sea Salt"}},
        {"note_type": "base", "note": {"name": "Amber"}},
    ],
}


def test_normalize_list_record():
    perfume = normalize_perfume(LIST_RECORD)
    assert perfume.id == "12"
    assert perfume.slug == "aqua-marine"
    assert perfume.brand == "Coastline"
    assert perfume.images == ("/img/a.jpg", "/img/b.jpg")
    assert [n.name for n in perfume.fragrance_notes] == ["Bergamot", "Sea Salt", "Amber"]
    assert [n.type for n in perfume.fragrance_notes] == ["top", "heart", "base"]
    assert perfume.details.family == "Aquatic"
    assert perfume.details.gender is None
    assert perfume.long_description == ""
    assert perfume.ratings is None
    assert perfume.sizes is None


def test_normalize_empty_record_uses_defaults():
    perfume = normalize_perfume({})
    assert perfume.name == UNNAMED_PERFUME
    assert perfume.brand == UNKNOWN_BRAND
    assert perfume.id.startswith("unknown-")
    assert perfume.slug
    assert perfume.description == ""
    assert perfume.images == ()
    assert perfume.fragrance_notes == ()


def test_normalize_all_null_fields():
    raw = {key: None for key in LIST_RECORD}
    perfume = normalize_perfume(raw, Projection.DETAIL)
    assert perfume.name == UNNAMED_PERFUME
    assert perfume.slug
    assert perfume.images == ()
    assert perfume.ratings == Ratings(average=0.0, count=0)
    assert perfume.sizes == ()
    assert perfume.reviews == ()
    assert perfume.related_products == ()


def test_synthetic_ids_are_unique_within_a_load():
    perfumes = normalize_perfumes([{"name": "A"}, {"name": "A"}, {}])
    ids = {p.id for p in perfumes}
    assert len(ids) == 3


def test_slug_derived_from_name_when_absent():
    assert normalize_perfume({"id": 1, "name": "Gül Şafak"}).slug == "gul-safak"
    assert normalize_perfume({"id": 1, "name": "Gül Şafak", "slug": ""}).slug == "gul-safak"


def test_slug_falls_back_to_identifier_when_name_folds_to_nothing():
    assert normalize_perfume({"id": 77, "name": "!!!"}).slug == "77"


def test_detail_lookup_uses_requested_slug_as_fallback():
    perfume = normalize_perfume({"name": "***"}, Projection.DETAIL, requested_slug="asked-for")
    assert perfume.id == "unknown-id-asked-for"
    assert perfume.slug == "asked-for"


def test_note_rows_degrade_independently():
    raw = {
        "id": 1,
        "name": "Partial",
        "fragranceNotes": [
            {"note_type": None, "note": {"name": "Amber"}},
            {"note_type": "top", "note": None},
            {"note_type": "HEART ", "note": {"name": "Rose", "description": None}},
            {"note_type": "middle", "note": {"name": "Iris"}},
            None,
        ],
    }
    notes = normalize_perfume(raw).fragrance_notes
    assert notes == (
        FragranceNote(name="Amber", type="base"),
        FragranceNote(name=UNKNOWN_NOTE, type="top"),
        FragranceNote(name="Rose", type="heart"),
        FragranceNote(name="Iris", type="base"),
        FragranceNote(name=UNKNOWN_NOTE, type="base"),
    )


def test_relation_as_single_row_list_is_unwrapped():
    perfume = normalize_perfume({"id": 1, "name": "X", "brand": [{"name": "Listed"}]})
    assert perfume.brand == "Listed"


@pytest.mark.parametrize("brand", [None, "oops", [], 42])
def test_unusable_brand_relation_falls_back(brand):
    assert normalize_perfume({"id": 1, "name": "X", "brand": brand}).brand == UNKNOWN_BRAND


def test_malformed_scalars_do_not_raise():
    raw = {
        "id": True,
        "name": 5,
        "images": "not-a-list",
        "details_release_year": "soon",
        "price": "12.5",
        "ratings": {"average": "4.5", "count": "nan"},
        "sizes": [{"value": "50ml", "price": 90}, {"value": "100ml"}, "junk"],
        "reviews": [{"id": 3, "rating": 5, "comment": "Lovely"}, {"comment": "no id"}],
        "related_products": [1, None, "x"],
    }
    perfume = normalize_perfume(raw)
    assert perfume.id.startswith("unknown-")
    assert perfume.name == UNNAMED_PERFUME
    assert perfume.images == ()
    assert perfume.details.release_year is None
    assert perfume.price == 12.5
    assert perfume.ratings == Ratings(average=4.5, count=0)
    assert [s.value for s in perfume.sizes] == ["50ml"]
    assert [r.id for r in perfume.reviews] == ["3"]
    assert perfume.related_products == ("1", "x")


def test_oversized_integers_do_not_raise():
    perfume = normalize_perfume(
        {"details_release_year": 10**400, "price": 10**400, "ratings": {"average": 10**400, "count": 10**400}},
        Projection.DETAIL,
    )
    assert perfume.details.release_year == 10**400
    assert perfume.price is None
    assert perfume.ratings == Ratings(average=0.0, count=10**400)

    brand = normalize_brand({"name": "X", "perfumes_count": [{"count": 10**400}]})
    assert brand.perfume_count == 10**400


def test_detail_projection_fields():
    raw = {
        **LIST_RECORD,
        "long_description": "Long text",
        "details_gender": "Unisex",
        "details_release_year": 2019,
        "details_sillage": "",
        "brand": {"id": 2, "name": "Coastline", "slug": "coastline"},
        "fragranceNotes": [
            {"note_type": "top", "note": {"id": 1, "name": "Bergamot", "description": "Citrus"}},
        ],
    }
    perfume = normalize_perfume(raw, Projection.DETAIL)
    assert perfume.long_description == "Long text"
    assert perfume.details.gender == "Unisex"
    assert perfume.details.release_year == 2019
    assert perfume.details.sillage is None
    assert perfume.fragrance_notes[0].description == "Citrus"


def test_non_mapping_input_is_normalized_to_defaults():
    assert normalize_perfume(None).name == UNNAMED_PERFUME
    assert normalize_brand("junk").name == UNNAMED_BRAND


def test_batch_skips_absent_records():
    assert normalize_perfumes(None) == []
    assert len(normalize_perfumes([None, LIST_RECORD])) == 1
    assert normalize_brands([]) == []


@pytest.mark.parametrize(
    "value, expected",
    [
        ([{"count": 7}], 7),
        (7, 7),
        (None, 0),
        ([], 0),
        ([{"count": None}], 0),
        ([{}], 0),
        ("7", 7),
        (-3, 0),
        (True, 0),
        ({"count": 7}, 0),
        (float("inf"), 0),
        (10**400, 10**400),
        ([{"count": 2**53 + 1}], 2**53 + 1),
    ],
)
def test_extract_count(value, expected):
    assert extract_count(value) == expected


def test_normalize_brand():
    raw = {
        "id": 1,
        "name": "Nar Atelier",
        "slug": None,
        "description": None,
        "long_description": "Story",
        "logo_url": "/logo.png",
        "banner_url": "",
        "founded_year": 0,
        "headquarters": None,
        "category": "Luxury",
        "is_featured": None,
        "perfumes_count": [{"count": 4}],
    }
    brand = normalize_brand(raw)
    assert brand.id == "1"
    assert brand.slug == "nar-atelier"
    assert brand.description == ""
    assert brand.long_description == "Story"
    assert brand.logo == "/logo.png"
    assert brand.banner is None
    assert brand.founded_year is None
    assert brand.featured is False
    assert brand.perfume_count == 4


def test_normalize_brand_without_name():
    brand = normalize_brand({"id": "b-9", "perfumes_count": 2})
    assert brand.name == UNNAMED_BRAND
    assert brand.slug == "b-9"
    assert brand.perfume_count == 2


def test_rule_table_covers_every_perfume_field():
    targets = {rule.target for rule in normalize.PERFUME_RULES}
    assert targets == set(normalize.Perfume.__dataclass_fields__) - {"details"}
