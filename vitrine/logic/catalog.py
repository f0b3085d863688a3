"""Catalog orchestration: fetch raw records, hand back entities."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from vitrine.ingest.models import Brand, Perfume, Projection
from vitrine.logic.normalize import (
    SYNTHETIC_ID_PREFIX,
    normalize_brand,
    normalize_brands,
    normalize_perfume,
    normalize_perfumes,
)

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    async def fetch_perfume_list(self) -> list[dict[str, Any]]: ...

    async def fetch_perfume_detail(self, slug: str) -> dict[str, Any] | None: ...

    async def fetch_brand_list(self) -> list[dict[str, Any]]: ...

    async def fetch_brand_detail(self, slug: str) -> dict[str, Any] | None: ...

    async def fetch_perfumes_by_brand(self, brand_id: str) -> list[dict[str, Any]]: ...

    async def close(self) -> None: ...


class CatalogService:
    """Turns fetch results into entity snapshots.

    Detail lookups return ``None`` when the source has no record for the
    slug; callers present that as "not found" instead of a partial entity.
    """

    def __init__(self, source: CatalogSource) -> None:
        self.source = source

    async def close(self) -> None:
        await self.source.close()

    async def list_perfumes(self) -> list[Perfume]:
        return normalize_perfumes(await self.source.fetch_perfume_list(), Projection.LIST)

    async def get_perfume(self, slug: str) -> Perfume | None:
        raw = await self.source.fetch_perfume_detail(slug)
        if not raw:
            logger.info("Perfume %s not found", slug)
            return None
        return normalize_perfume(raw, Projection.DETAIL, requested_slug=slug)

    async def list_brands(self) -> list[Brand]:
        return normalize_brands(await self.source.fetch_brand_list(), Projection.LIST)

    async def get_brand(self, slug: str) -> Brand | None:
        raw = await self.source.fetch_brand_detail(slug)
        if not raw:
            logger.info("Brand %s not found", slug)
            return None
        return normalize_brand(raw, Projection.DETAIL)

    async def perfumes_for_brand(self, brand: Brand) -> list[Perfume]:
        if brand.id.startswith(SYNTHETIC_ID_PREFIX):
            return []
        return normalize_perfumes(await self.source.fetch_perfumes_by_brand(brand.id), Projection.LIST)
