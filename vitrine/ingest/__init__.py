"""Catalog sources and seed data."""

from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, field
from typing import Any

import yaml

SEED_PATH = pathlib.Path(__file__).with_name("seed.yml")


@dataclass(slots=True)
class SeedCatalog:
    brands: list[dict[str, Any]] = field(default_factory=list)
    notes: list[dict[str, Any]] = field(default_factory=list)
    perfumes: list[dict[str, Any]] = field(default_factory=list)


def load_seed_catalog(path: pathlib.Path = SEED_PATH, limit: int | None = None) -> SeedCatalog:
    data = yaml.safe_load(path.read_text()) or {}
    catalog = SeedCatalog(
        brands=list(data.get("brands") or []),
        notes=list(data.get("notes") or []),
        perfumes=list(data.get("perfumes") or []),
    )
    if limit:
        catalog.perfumes = catalog.perfumes[:limit]
    return catalog


def create_source_from_env():
    """Build the catalog source selected by CATALOG_SOURCE (``sql`` or ``rest``)."""
    kind = os.environ.get("CATALOG_SOURCE", "sql").lower()
    if kind == "rest":
        from vitrine.ingest.rest import CatalogApiClient

        base_url = os.environ.get("CATALOG_API_URL")
        if not base_url:
            raise KeyError("CATALOG_API_URL")
        return CatalogApiClient(base_url, os.environ.get("CATALOG_API_KEY"))
    if kind != "sql":
        raise ValueError(f"Unknown CATALOG_SOURCE: {kind}")
    from vitrine.db.session import create_engine_from_env
    from vitrine.ingest.store import SqlCatalogStore

    return SqlCatalogStore(create_engine_from_env())
