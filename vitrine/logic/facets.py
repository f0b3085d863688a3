"""Facet values available in a loaded perfume collection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from vitrine.ingest.models import Perfume


@dataclass(frozen=True, slots=True)
class FacetIndex:
    brands: tuple[str, ...] = ()
    notes: tuple[str, ...] = ()
    families: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, list[str]]:
        return {"brands": list(self.brands), "notes": list(self.notes), "families": list(self.families)}


def build_facets(perfumes: Iterable[Perfume]) -> FacetIndex:
    """Collect the distinct brand, note and family values, each sorted.

    Recomputed from scratch for every snapshot; the result does not depend on
    the order of ``perfumes``.
    """
    brands: set[str] = set()
    notes: set[str] = set()
    families: set[str] = set()
    for perfume in perfumes:
        if perfume.brand:
            brands.add(perfume.brand)
        notes.update(note.name for note in perfume.fragrance_notes if note.name)
        if perfume.details.family:
            families.add(perfume.details.family)
    return FacetIndex(brands=tuple(sorted(brands)), notes=tuple(sorted(notes)), families=tuple(sorted(families)))
