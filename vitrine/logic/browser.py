"""Browsing controller for a loaded perfume snapshot."""

from __future__ import annotations

from typing import Iterable

from vitrine.ingest.models import Perfume
from vitrine.logic.facets import FacetIndex, build_facets
from vitrine.logic.filters import filter_perfumes
from vitrine.logic.selection import Facet, SelectionState


class CatalogBrowser:
    """Couples one immutable perfume snapshot with the user's selection.

    Facets are rebuilt only when a new snapshot is loaded; the selection
    survives reloads.
    """

    def __init__(self, perfumes: Iterable[Perfume] = ()) -> None:
        self.state = SelectionState()
        self.perfumes: tuple[Perfume, ...] = ()
        self.facets = FacetIndex()
        self.load(perfumes)

    def load(self, perfumes: Iterable[Perfume]) -> None:
        self.perfumes = tuple(perfumes)
        self.facets = build_facets(self.perfumes)

    def visible(self) -> list[Perfume]:
        return filter_perfumes(self.perfumes, self.state.selection)

    def toggle(self, facet: Facet | str, value: str) -> list[Perfume]:
        self.state.toggle(facet, value)
        return self.visible()

    def remove(self, facet: Facet | str, value: str) -> list[Perfume]:
        self.state.remove(facet, value)
        return self.visible()

    def apply_batch(self, brands: Iterable[str], notes: Iterable[str], families: Iterable[str]) -> list[Perfume]:
        self.state.apply_batch(brands, notes, families)
        return self.visible()

    def search(self, text: str | None) -> list[Perfume]:
        self.state.set_search_text(text)
        return self.visible()

    def clear_all(self) -> list[Perfume]:
        self.state.clear_all()
        return self.visible()
