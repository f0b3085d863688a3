"""User-driven filter selection state."""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from vitrine.logic.filters import FilterSelection


class Facet(str, Enum):
    BRAND = "brands"
    NOTE = "notes"
    FAMILY = "families"


class SelectionState:
    """Mutable holder of the current search text and selected facet values.

    Every mutator is a complete transition; :attr:`selection` returns an
    immutable snapshot to hand to :func:`vitrine.logic.filters.filter_perfumes`.
    """

    def __init__(self) -> None:
        self.search_text = ""
        self._values: dict[Facet, set[str]] = {facet: set() for facet in Facet}

    @property
    def selection(self) -> FilterSelection:
        return FilterSelection(
            search_text=self.search_text,
            brands=frozenset(self._values[Facet.BRAND]),
            notes=frozenset(self._values[Facet.NOTE]),
            families=frozenset(self._values[Facet.FAMILY]),
        )

    @property
    def active_filter_count(self) -> int:
        count = sum(len(values) for values in self._values.values())
        return count + (1 if self.search_text.strip() else 0)

    @property
    def is_active(self) -> bool:
        return self.active_filter_count > 0

    def selected(self, facet: Facet | str) -> frozenset[str]:
        return frozenset(self._values[Facet(facet)])

    def toggle(self, facet: Facet | str, value: str) -> None:
        values = self._values[Facet(facet)]
        if value in values:
            values.remove(value)
        else:
            values.add(value)

    def remove(self, facet: Facet | str, value: str) -> None:
        self._values[Facet(facet)].discard(value)

    def apply_batch(self, brands: Iterable[str], notes: Iterable[str], families: Iterable[str]) -> None:
        """Replace every facet at once. Each argument is a collection of values, not a single string."""
        for values in (brands, notes, families):
            if isinstance(values, str):
                raise TypeError("apply_batch expects collections of values, got a string")
        self._values = {
            Facet.BRAND: set(brands),
            Facet.NOTE: set(notes),
            Facet.FAMILY: set(families),
        }

    def set_search_text(self, text: str | None) -> None:
        self.search_text = text or ""

    def clear_all(self) -> None:
        self.search_text = ""
        self._values = {facet: set() for facet in Facet}
