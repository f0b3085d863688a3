"""Fragrance pyramid helpers."""

from __future__ import annotations

from typing import Iterable

from vitrine.ingest.models import NOTE_TYPES, FragranceNote


def group_notes(notes: Iterable[FragranceNote]) -> dict[str, list[str]]:
    """Group note names by pyramid level, keeping source order within each level."""
    grouped: dict[str, list[str]] = {note_type: [] for note_type in NOTE_TYPES}
    for note in notes:
        grouped.setdefault(note.type, []).append(note.name)
    return grouped
