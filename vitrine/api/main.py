"""FastAPI application serving normalized catalog snapshots."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import asdict
from functools import lru_cache
from typing import Any, AsyncIterator

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from vitrine.ingest import create_source_from_env
from vitrine.logic.catalog import CatalogService
from vitrine.logic.facets import build_facets
from vitrine.logic.notes import group_notes


class PerfumeListResponse(BaseModel):
    perfumes: list[dict[str, Any]]
    facets: dict[str, list[str]]


class PerfumeDetailResponse(BaseModel):
    perfume: dict[str, Any]
    notes_by_type: dict[str, list[str]]


class BrandListResponse(BaseModel):
    brands: list[dict[str, Any]]


class BrandDetailResponse(BaseModel):
    brand: dict[str, Any]
    perfumes: list[dict[str, Any]]


@lru_cache(maxsize=1)
def get_service() -> CatalogService:
    load_dotenv()
    return CatalogService(create_source_from_env())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    # Only close a service that was actually built.
    if get_service.cache_info().currsize:
        await get_service().close()
        get_service.cache_clear()


app = FastAPI(title="Vitrine Catalog API", lifespan=lifespan)


@app.get("/perfumes", response_model=PerfumeListResponse)
async def list_perfumes(service: CatalogService = Depends(get_service)) -> PerfumeListResponse:
    perfumes = await service.list_perfumes()
    return PerfumeListResponse(
        perfumes=[asdict(perfume) for perfume in perfumes],
        facets=build_facets(perfumes).as_dict(),
    )


@app.get("/perfumes/{slug}", response_model=PerfumeDetailResponse)
async def get_perfume(slug: str, service: CatalogService = Depends(get_service)) -> PerfumeDetailResponse:
    perfume = await service.get_perfume(slug)
    if perfume is None:
        raise HTTPException(status_code=404, detail="Perfume not found")
    return PerfumeDetailResponse(perfume=asdict(perfume), notes_by_type=group_notes(perfume.fragrance_notes))


@app.get("/brands", response_model=BrandListResponse)
async def list_brands(service: CatalogService = Depends(get_service)) -> BrandListResponse:
    brands = await service.list_brands()
    return BrandListResponse(brands=[asdict(brand) for brand in brands])


@app.get("/brands/{slug}", response_model=BrandDetailResponse)
async def get_brand(slug: str, service: CatalogService = Depends(get_service)) -> BrandDetailResponse:
    brand = await service.get_brand(slug)
    if brand is None:
        raise HTTPException(status_code=404, detail="Brand not found")
    perfumes = await service.perfumes_for_brand(brand)
    return BrandDetailResponse(brand=asdict(brand), perfumes=[asdict(perfume) for perfume in perfumes])
