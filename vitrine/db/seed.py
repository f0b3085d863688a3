"""Load the bundled seed catalog into the database."""

from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.sql import text

from vitrine.ingest import SeedCatalog
from vitrine.logic.slugs import derive_slug

logger = logging.getLogger(__name__)


def seed_catalog(engine: Engine, catalog: SeedCatalog) -> None:
    """Insert or update every brand, note and perfume of ``catalog``."""
    with engine.begin() as conn:
        brand_ids = {}
        for brand in catalog.brands:
            slug = brand.get("slug") or derive_slug(brand["name"])
            brand_ids[slug] = _ensure_brand(conn, slug, brand)
        note_ids = {note["name"]: _ensure_note(conn, note) for note in catalog.notes}
        for perfume in catalog.perfumes:
            brand_id = brand_ids.get(perfume.get("brand") or "")
            if brand_id is None:
                logger.warning("Perfume %s references unknown brand %s", perfume.get("name"), perfume.get("brand"))
            perfume_id = _ensure_perfume(conn, brand_id, perfume)
            _replace_notes(conn, perfume_id, perfume.get("notes") or [], note_ids)
    logger.info(
        "Seeded %s brands, %s notes, %s perfumes",
        len(catalog.brands),
        len(catalog.notes),
        len(catalog.perfumes),
    )


def _ensure_brand(conn: Connection, slug: str, brand: dict[str, Any]) -> int:
    params = {
        "name": brand["name"],
        "slug": slug,
        "description": brand.get("description"),
        "long_description": brand.get("long_description"),
        "logo_url": brand.get("logo_url"),
        "banner_url": brand.get("banner_url"),
        "founded_year": brand.get("founded_year"),
        "headquarters": brand.get("headquarters"),
        "category": brand.get("category"),
        "is_featured": bool(brand.get("is_featured", False)),
    }
    existing = conn.execute(
        text("SELECT id FROM brands WHERE slug = :slug"), {"slug": slug}
    ).scalar_one_or_none()
    if existing:
        conn.execute(
            text(
                """
                UPDATE brands SET name = :name, description = :description,
                  long_description = :long_description, logo_url = :logo_url,
                  banner_url = :banner_url, founded_year = :founded_year,
                  headquarters = :headquarters, category = :category,
                  is_featured = :is_featured
                WHERE id = :id
                """
            ),
            {**params, "id": existing},
        )
        return existing
    result = conn.execute(
        text(
            """
            INSERT INTO brands (name, slug, description, long_description, logo_url,
              banner_url, founded_year, headquarters, category, is_featured)
            VALUES (:name, :slug, :description, :long_description, :logo_url,
              :banner_url, :founded_year, :headquarters, :category, :is_featured)
            RETURNING id
            """
        ),
        params,
    )
    return int(result.scalar_one())


def _ensure_note(conn: Connection, note: dict[str, Any]) -> int:
    existing = conn.execute(
        text("SELECT id FROM notes WHERE name = :name"), {"name": note["name"]}
    ).scalar_one_or_none()
    if existing:
        conn.execute(
            text("UPDATE notes SET description = :description WHERE id = :id"),
            {"description": note.get("description"), "id": existing},
        )
        return existing
    result = conn.execute(
        text("INSERT INTO notes (name, description) VALUES (:name, :description) RETURNING id"),
        {"name": note["name"], "description": note.get("description")},
    )
    return int(result.scalar_one())


def _ensure_perfume(conn: Connection, brand_id: int | None, perfume: dict[str, Any]) -> int:
    details = perfume.get("details") or {}
    slug = perfume.get("slug") or derive_slug(perfume["name"])
    params = {
        "brand_id": brand_id,
        "name": perfume["name"],
        "slug": slug,
        "description": perfume.get("description"),
        "long_description": perfume.get("long_description"),
        "images": json.dumps(perfume.get("images") or []),
        "gender": details.get("gender"),
        "family": details.get("family"),
        "concentration": details.get("concentration"),
        "release_year": details.get("release_year"),
        "longevity": details.get("longevity"),
        "sillage": details.get("sillage"),
    }
    images = ":images" if conn.dialect.name == "sqlite" else "CAST(:images AS JSONB)"
    existing = conn.execute(
        text("SELECT id FROM perfumes WHERE slug = :slug"), {"slug": slug}
    ).scalar_one_or_none()
    if existing:
        conn.execute(
            text(
                f"""
                UPDATE perfumes SET brand_id = :brand_id, name = :name,
                  description = :description, long_description = :long_description,
                  images = {images}, details_gender = :gender, details_family = :family,
                  details_concentration = :concentration, details_release_year = :release_year,
                  details_longevity = :longevity, details_sillage = :sillage
                WHERE id = :id
                """
            ),
            {**params, "id": existing},
        )
        return existing
    result = conn.execute(
        text(
            f"""
            INSERT INTO perfumes (brand_id, name, slug, description, long_description, images,
              details_gender, details_family, details_concentration, details_release_year,
              details_longevity, details_sillage)
            VALUES (:brand_id, :name, :slug, :description, :long_description, {images},
              :gender, :family, :concentration, :release_year, :longevity, :sillage)
            RETURNING id
            """
        ),
        params,
    )
    return int(result.scalar_one())


def _replace_notes(
    conn: Connection, perfume_id: int, notes: list[dict[str, Any]], note_ids: dict[str, int]
) -> None:
    conn.execute(text("DELETE FROM perfume_notes WHERE perfume_id = :perfume_id"), {"perfume_id": perfume_id})
    for note in notes:
        note_id = note_ids.get(note.get("name"))
        if note_id is None:
            note_id = _ensure_note(conn, {"name": note["name"]})
            note_ids[note["name"]] = note_id
        conn.execute(
            text(
                """
                INSERT INTO perfume_notes (perfume_id, note_id, note_type)
                VALUES (:perfume_id, :note_id, :note_type)
                """
            ),
            {"perfume_id": perfume_id, "note_id": note_id, "note_type": note.get("type")},
        )
