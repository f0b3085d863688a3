"""Multi-facet filtering over a loaded catalog snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from vitrine.ingest.models import Brand, Perfume


@dataclass(frozen=True, slots=True)
class FilterSelection:
    search_text: str = ""
    brands: frozenset[str] = frozenset()
    notes: frozenset[str] = frozenset()
    families: frozenset[str] = frozenset()

    @property
    def search_term(self) -> str:
        return self.search_text.strip().casefold()

    @property
    def is_empty(self) -> bool:
        return not (self.search_term or self.brands or self.notes or self.families)


def _matches_search(perfume: Perfume, term: str) -> bool:
    if term in perfume.name.casefold() or term in perfume.brand.casefold():
        return True
    return any(term in note.name.casefold() for note in perfume.fragrance_notes)


def filter_perfumes(perfumes: Sequence[Perfume], selection: FilterSelection) -> list[Perfume]:
    """Return the perfumes matching ``selection``, in their original order.

    Facets combine with AND; the values selected inside one facet combine
    with OR. A facet with nothing selected does not filter.
    """
    result = list(perfumes)
    if selection.brands:
        result = [p for p in result if p.brand in selection.brands]
    if selection.notes:
        result = [p for p in result if any(note.name in selection.notes for note in p.fragrance_notes)]
    if selection.families:
        result = [p for p in result if p.details.family in selection.families]
    term = selection.search_term
    if term:
        result = [p for p in result if _matches_search(p, term)]
    return result


def filter_brands(brands: Iterable[Brand], search_text: str) -> list[Brand]:
    """Brands whose name or description contains ``search_text``."""
    term = (search_text or "").strip().casefold()
    if not term:
        return list(brands)
    return [b for b in brands if term in b.name.casefold() or term in b.description.casefold()]
