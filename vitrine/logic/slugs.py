"""URL slug derivation for catalog names."""

from __future__ import annotations

import re

# Turkish letters folded to their base Latin form after lowercasing.
LOCALE_FOLDS = str.maketrans({"ğ": "g", "ü": "u", "ş": "s", "ı": "i", "ö": "o", "ç": "c"})

WHITESPACE_RE = re.compile(r"\s+")
NON_WORD_RE = re.compile(r"[^\w-]+", re.ASCII)


def derive_slug(name: str | None) -> str:
    """Map a display name to a URL-safe identifier.

    Returns an empty string when nothing survives folding; callers fall back
    to the raw identifier in that case.
    """
    if not name:
        return ""
    slug = name.lower().translate(LOCALE_FOLDS)
    slug = WHITESPACE_RE.sub("-", slug)
    return NON_WORD_RE.sub("", slug)
