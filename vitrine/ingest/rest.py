"""Hosted catalog data API client.

Talks to a PostgREST-compatible endpoint (``/rest/v1/<table>``) and embeds
joined relations with the ``select`` parameter, so records arrive already
nested. Request failures are logged and reported as an empty result.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from vitrine.utils.retry import retry_async

logger = logging.getLogger(__name__)

BRAND_PERFUME_LIMIT = int(os.environ.get("BRAND_PERFUME_LIMIT", 20))

PERFUME_LIST_SELECT = (
    "id,name,slug,description,images,details_family,"
    "brand:brands(name),"
    "fragranceNotes:perfume_notes(note_type,note:notes(name))"
)
PERFUME_DETAIL_SELECT = (
    "id,name,slug,description,images,long_description,"
    "details_gender,details_family,details_concentration,details_release_year,"
    "details_longevity,details_sillage,"
    "brand:brands(id,name,slug),"
    "fragranceNotes:perfume_notes(note_type,note:notes(id,name,description))"
)
PERFUME_BY_BRAND_SELECT = "id,name,slug,description,images,details_family,brand:brands(name)"
BRAND_SELECT = (
    "id,name,slug,description,long_description,logo_url,banner_url,"
    "founded_year,headquarters,category,is_featured,"
    "perfumes_count:perfumes(count)"
)


class CatalogApiClient:
    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        *,
        session: httpx.AsyncClient | None = None,
        page_size: int = BRAND_PERFUME_LIMIT,
        retry_delay: float = 1.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.page_size = page_size
        self.retry_delay = retry_delay
        self._session = session or httpx.AsyncClient(timeout=30.0)

    async def close(self) -> None:
        await self._session.aclose()

    async def fetch_perfume_list(self) -> list[dict[str, Any]]:
        return await self._select("perfumes", {"select": PERFUME_LIST_SELECT, "order": "name.asc"})

    async def fetch_perfume_detail(self, slug: str) -> dict[str, Any] | None:
        rows = await self._select(
            "perfumes", {"select": PERFUME_DETAIL_SELECT, "slug": f"eq.{slug}", "limit": 1}
        )
        return rows[0] if rows else None

    async def fetch_brand_list(self) -> list[dict[str, Any]]:
        return await self._select("brands", {"select": BRAND_SELECT, "order": "name.asc"})

    async def fetch_brand_detail(self, slug: str) -> dict[str, Any] | None:
        rows = await self._select("brands", {"select": BRAND_SELECT, "slug": f"eq.{slug}", "limit": 1})
        return rows[0] if rows else None

    async def fetch_perfumes_by_brand(self, brand_id: str) -> list[dict[str, Any]]:
        params = {
            "select": PERFUME_BY_BRAND_SELECT,
            "brand_id": f"eq.{brand_id}",
            "order": "name.asc",
            "limit": self.page_size,
        }
        return await self._select("perfumes", params)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _select(self, table: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        url = f"{self.base_url}/{table}"
        try:
            response = await retry_async(self._session.get, base_delay=self.retry_delay)(
                url, params=params, headers=self._headers()
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Catalog API request for %s failed: %s", table, exc)
            return []
        if not isinstance(data, list):
            logger.warning("Unexpected catalog API payload for %s: %s", table, type(data).__name__)
            return []
        if not data:
            logger.info("Catalog API returned no %s", table)
        else:
            logger.info("Fetched %s %s from catalog API", len(data), table)
        return [row for row in data if isinstance(row, dict)]
