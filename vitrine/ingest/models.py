"""Catalog entity models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Projection(str, Enum):
    """Which fetch projection a raw record came from."""

    LIST = "list"
    DETAIL = "detail"


NOTE_TYPES = ("top", "heart", "base")


@dataclass(frozen=True, slots=True)
class FragranceNote:
    name: str
    type: str = "base"
    description: str = ""


@dataclass(frozen=True, slots=True)
class PerfumeDetails:
    gender: str | None = None
    family: str | None = None
    concentration: str | None = None
    release_year: int | None = None
    longevity: str | None = None
    sillage: str | None = None
    recommended_use: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Ratings:
    average: float
    count: int


@dataclass(frozen=True, slots=True)
class SizeOption:
    value: str
    price: float
    is_available: bool


@dataclass(frozen=True, slots=True)
class Review:
    id: str
    user_name: str
    rating: float
    date: str
    comment: str
    helpful: int = 0


@dataclass(frozen=True, slots=True)
class Perfume:
    id: str
    name: str
    slug: str
    brand: str
    description: str = ""
    long_description: str = ""
    images: tuple[str, ...] = ()
    fragrance_notes: tuple[FragranceNote, ...] = ()
    details: PerfumeDetails = PerfumeDetails()
    price: float | None = None
    discount_price: float | None = None
    ratings: Ratings | None = None
    sizes: tuple[SizeOption, ...] | None = None
    reviews: tuple[Review, ...] | None = None
    related_products: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True)
class Brand:
    id: str
    name: str
    slug: str
    description: str = ""
    long_description: str = ""
    logo: str | None = None
    banner: str | None = None
    founded_year: int | None = None
    headquarters: str | None = None
    category: str | None = None
    featured: bool = False
    perfume_count: int = 0
