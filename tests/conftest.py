import pytest
from sqlalchemy import Boolean, Column, ForeignKey, Integer, JSON, MetaData, Table, Text, create_engine
from sqlalchemy.pool import StaticPool

from vitrine.ingest.models import FragranceNote, Perfume, PerfumeDetails
from vitrine.ingest.store import SqlCatalogStore
from vitrine.logic.catalog import CatalogService

metadata = MetaData()

brands = Table(
    "brands",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("slug", Text, unique=True),
    Column("description", Text),
    Column("long_description", Text),
    Column("logo_url", Text),
    Column("banner_url", Text),
    Column("founded_year", Integer),
    Column("headquarters", Text),
    Column("category", Text),
    Column("is_featured", Boolean, default=False),
)

notes = Table(
    "notes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False, unique=True),
    Column("description", Text),
)

perfumes = Table(
    "perfumes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("brand_id", Integer, ForeignKey("brands.id")),
    Column("name", Text),
    Column("slug", Text, unique=True),
    Column("description", Text),
    Column("long_description", Text),
    Column("images", JSON),
    Column("details_gender", Text),
    Column("details_family", Text),
    Column("details_concentration", Text),
    Column("details_release_year", Integer),
    Column("details_longevity", Text),
    Column("details_sillage", Text),
)

perfume_notes = Table(
    "perfume_notes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("perfume_id", Integer, ForeignKey("perfumes.id"), nullable=False),
    Column("note_id", Integer, ForeignKey("notes.id")),
    Column("note_type", Text),
)


@pytest.fixture()
def engine():
    # One shared connection so queries run from executor threads see the same database.
    engine = create_engine(
        "sqlite://",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def seeded_engine(engine):
    with engine.begin() as conn:
        for row in [
            {
                "name": "Maison Lumière",
                "slug": "maison-lumiere",
                "description": "Parisian house known for luminous florals.",
                "long_description": "Founded in a small atelier.",
                "logo_url": "/logos/lumiere.png",
                "banner_url": "",
                "founded_year": 1998,
                "headquarters": "Paris",
                "category": "Luxury",
                "is_featured": True,
            },
            {"name": "Coastline", "slug": None, "description": None, "category": "Contemporary"},
            {"name": "Empty House", "slug": "empty-house", "description": "No perfumes yet."},
        ]:
            conn.execute(brands.insert(), row)
        conn.execute(notes.insert(), [
            {"name": "Bergamot", "description": "Bright citrus."},
            {"name": "Sea Salt", "description": None},
            {"name": "Jasmine", "description": "White flower."},
            {"name": "Amber", "description": "Warm resin."},
        ])
        for row in [
            {
                "brand_id": 2,
                "name": "Aqua Marine",
                "slug": "aqua-marine",
                "description": "A breezy marine fragrance.",
                "long_description": "Sea spray over warm stones.",
                "images": ["/img/aqua-1.jpg", "/img/aqua-2.jpg"],
                "details_gender": "Unisex",
                "details_family": "Aquatic",
                "details_concentration": "Eau de Toilette",
                "details_release_year": 2019,
                "details_longevity": "Moderate",
                "details_sillage": None,
            },
            {
                "brand_id": 1,
                "name": "Jasmin de Nuit",
                "slug": "jasmin-de-nuit",
                "description": "Night-blooming jasmine.",
                "images": ["/img/jasmin.jpg"],
                "details_family": "Floral",
            },
            {
                "brand_id": 1,
                "name": "Gül Şafak",
                "slug": None,
                "description": None,
                "images": None,
                "details_family": "Oriental",
            },
            {"brand_id": None, "name": None, "slug": None},
        ]:
            conn.execute(perfumes.insert(), row)
        conn.execute(perfume_notes.insert(), [
            {"perfume_id": 1, "note_id": 1, "note_type": "top"},
            {"perfume_id": 1, "note_id": 2, "note_type": "heart"},
            {"perfume_id": 1, "note_id": 4, "note_type": "base"},
            {"perfume_id": 2, "note_id": 1, "note_type": "top"},
            {"perfume_id": 2, "note_id": 3, "note_type": "heart"},
            {"perfume_id": 3, "note_id": 4, "note_type": None},
            {"perfume_id": 3, "note_id": None, "note_type": "top"},
        ])
    return engine


@pytest.fixture()
def store(seeded_engine):
    return SqlCatalogStore(seeded_engine)


@pytest.fixture()
def service(store):
    return CatalogService(store)


def make_perfume(
    name: str,
    brand: str,
    *,
    family: str | None = None,
    notes: tuple[str, ...] = (),
    slug: str | None = None,
) -> Perfume:
    return Perfume(
        id=slug or name.lower().replace(" ", "-"),
        name=name,
        slug=slug or name.lower().replace(" ", "-"),
        brand=brand,
        fragrance_notes=tuple(FragranceNote(name=note) for note in notes),
        details=PerfumeDetails(family=family),
    )


@pytest.fixture()
def perfume_factory():
    return make_perfume
