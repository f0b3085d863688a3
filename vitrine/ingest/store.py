"""Relational catalog source.

Queries the perfumes/brands/notes tables and returns raw records in the same
nested shape the hosted data API produces: joined relations as embedded
objects, note rows as ``{"note_type", "note": {...}}`` and the brand perfume
count as an aggregate. Store failures never escape; they become an empty
result.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from collections import defaultdict
from typing import Any, Callable

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import text

logger = logging.getLogger(__name__)

BRAND_PERFUME_LIMIT = int(os.environ.get("BRAND_PERFUME_LIMIT", 20))

PERFUME_LIST_SQL = """
    SELECT p.id, p.name, p.slug, p.description, p.images, p.details_family,
           b.id AS joined_brand_id, b.name AS brand_name
    FROM perfumes p
    LEFT JOIN brands b ON b.id = p.brand_id
"""

PERFUME_DETAIL_SQL = """
    SELECT p.id, p.name, p.slug, p.description, p.long_description, p.images,
           p.details_gender, p.details_family, p.details_concentration,
           p.details_release_year, p.details_longevity, p.details_sillage,
           b.id AS joined_brand_id, b.name AS brand_name, b.slug AS brand_slug
    FROM perfumes p
    LEFT JOIN brands b ON b.id = p.brand_id
    WHERE p.slug = :slug
    LIMIT 1
"""

PERFUME_NOTES_SQL = """
    SELECT pn.perfume_id, pn.note_type, n.id AS note_id, n.name AS note_name,
           n.description AS note_description
    FROM perfume_notes pn
    LEFT JOIN notes n ON n.id = pn.note_id
"""

BRAND_SQL = """
    SELECT b.id, b.name, b.slug, b.description, b.long_description, b.logo_url,
           b.banner_url, b.founded_year, b.headquarters, b.category, b.is_featured,
           (SELECT COUNT(*) FROM perfumes p WHERE p.brand_id = b.id) AS perfumes_count
    FROM brands b
"""


def decode_images(value: Any) -> Any:
    """JSON columns come back as text on drivers without native JSON support."""
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        logger.warning("Invalid images payload; ignoring")
        return None


def _brand_relation(row: dict[str, Any], *, detail: bool) -> dict[str, Any] | None:
    if row.get("joined_brand_id") is None:
        return None
    relation = {"name": row["brand_name"]}
    if detail:
        relation.update(id=row["joined_brand_id"], slug=row["brand_slug"])
    return relation


def _note_row(row: dict[str, Any], *, detail: bool) -> dict[str, Any]:
    note = None
    if row.get("note_id") is not None:
        note = {"name": row["note_name"]}
        if detail:
            note.update(id=row["note_id"], description=row["note_description"])
    return {"note_type": row["note_type"], "note": note}


def _perfume_record(row: dict[str, Any], *, detail: bool = False) -> dict[str, Any]:
    record = {
        key: value
        for key, value in row.items()
        if key not in {"joined_brand_id", "brand_name", "brand_slug"}
    }
    record["images"] = decode_images(record.get("images"))
    record["brand"] = _brand_relation(row, detail=detail)
    return record


def _query_key(value: str) -> Any:
    return int(value) if value.isdigit() else value


class SqlCatalogStore:
    """Fetch raw catalog records through a SQLAlchemy engine."""

    def __init__(self, engine: Engine, *, page_size: int = BRAND_PERFUME_LIMIT) -> None:
        self.engine = engine
        self.page_size = page_size

    async def close(self) -> None:
        self.engine.dispose()

    async def fetch_perfume_list(self) -> list[dict[str, Any]]:
        return await self._run(self._perfume_list, default=[])

    async def fetch_perfume_detail(self, slug: str) -> dict[str, Any] | None:
        return await self._run(self._perfume_detail, slug, default=None)

    async def fetch_brand_list(self) -> list[dict[str, Any]]:
        return await self._run(self._brand_list, default=[])

    async def fetch_brand_detail(self, slug: str) -> dict[str, Any] | None:
        return await self._run(self._brand_detail, slug, default=None)

    async def fetch_perfumes_by_brand(self, brand_id: str) -> list[dict[str, Any]]:
        return await self._run(self._perfumes_by_brand, brand_id, default=[])

    async def _run(self, query: Callable[..., Any], *args: Any, default: Any) -> Any:
        try:
            return await asyncio.get_running_loop().run_in_executor(None, query, *args)
        except SQLAlchemyError as exc:
            logger.warning("Catalog query %s failed: %s", query.__name__, exc)
            return default

    def _perfume_list(self) -> list[dict[str, Any]]:
        with self.engine.connect() as conn:
            rows = conn.execute(text(PERFUME_LIST_SQL + " ORDER BY p.name ASC")).mappings().all()
            notes = self._notes(conn)
        records = []
        for row in rows:
            record = _perfume_record(dict(row))
            record["fragranceNotes"] = notes.get(row["id"], [])
            records.append(record)
        logger.info("Fetched %s perfumes", len(records))
        return records

    def _perfume_detail(self, slug: str) -> dict[str, Any] | None:
        with self.engine.connect() as conn:
            row = conn.execute(text(PERFUME_DETAIL_SQL), {"slug": slug}).mappings().first()
            if row is None:
                logger.info("No perfume found for slug %s", slug)
                return None
            notes = self._notes(conn, perfume_id=row["id"], detail=True)
        record = _perfume_record(dict(row), detail=True)
        record["fragranceNotes"] = notes.get(row["id"], [])
        return record

    def _perfumes_by_brand(self, brand_id: str) -> list[dict[str, Any]]:
        query = PERFUME_LIST_SQL + " WHERE p.brand_id = :brand_id ORDER BY p.name ASC LIMIT :limit"
        with self.engine.connect() as conn:
            rows = conn.execute(
                text(query), {"brand_id": _query_key(brand_id), "limit": self.page_size}
            ).mappings().all()
        logger.info("Fetched %s perfumes for brand %s", len(rows), brand_id)
        return [_perfume_record(dict(row)) for row in rows]

    def _brand_list(self) -> list[dict[str, Any]]:
        with self.engine.connect() as conn:
            rows = conn.execute(text(BRAND_SQL + " ORDER BY b.name ASC")).mappings().all()
        logger.info("Fetched %s brands", len(rows))
        return [dict(row) for row in rows]

    def _brand_detail(self, slug: str) -> dict[str, Any] | None:
        with self.engine.connect() as conn:
            row = conn.execute(text(BRAND_SQL + " WHERE b.slug = :slug LIMIT 1"), {"slug": slug}).mappings().first()
        if row is None:
            logger.info("No brand found for slug %s", slug)
            return None
        return dict(row)

    def _notes(
        self, conn: Connection, *, perfume_id: Any = None, detail: bool = False
    ) -> dict[Any, list[dict[str, Any]]]:
        query = PERFUME_NOTES_SQL
        params: dict[str, Any] = {}
        if perfume_id is not None:
            query += " WHERE pn.perfume_id = :perfume_id"
            params["perfume_id"] = perfume_id
        query += " ORDER BY pn.perfume_id, pn.id"
        grouped: dict[Any, list[dict[str, Any]]] = defaultdict(list)
        for row in conn.execute(text(query), params).mappings():
            grouped[row["perfume_id"]].append(_note_row(dict(row), detail=detail))
        return grouped
